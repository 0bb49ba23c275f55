# autodiff/vector/dense.py
from __future__ import annotations

from typing import List, Sequence

from ..core.const import ConstScalar, as_const
from ..core.scalar import Scalar
from ..core.types import ScalarType
from ..errors import DimensionError, check_index
from .base import Vector


class DenseVector(Vector):
    """
    Vector with one Scalar per position.

    The element list may be shared with other vectors and matrices: `slice`,
    `as_matrix` and matrix `row`/`as_vector` views reference the same Scalar
    objects, so writes through any of them are visible in all. Reordering
    methods (`sort`, `swap`, `permute`, `reverse_order`) move values between
    the existing scalars rather than rebinding list slots, which keeps those
    views consistent.
    """
    __slots__ = ("_elements", "_stype")

    def __init__(self, elements: List[Scalar], stype: ScalarType):
        self._elements = elements
        self._stype = stype

    @property
    def stype(self) -> ScalarType:
        return self._stype

    def dim(self) -> int:
        return len(self._elements)

    def at(self, i: int) -> Scalar:
        check_index(i, len(self._elements))
        return self._elements[i]

    def const_at(self, i: int) -> ConstScalar:
        check_index(i, len(self._elements))
        return self._elements[i]

    def support(self):
        return range(len(self._elements))

    def _scalars(self):
        return self._elements

    def __repr__(self):
        return f"DenseVector({self}, {self._stype.name})"

    # ---------------- copies and views ---------------- #
    def clone(self) -> "DenseVector":
        return DenseVector([s.clone() for s in self._elements], self._stype)

    def slice(self, i: int, j: int) -> "DenseVector":
        """View on elements i..j-1."""
        if i < 0 or j > self.dim() or i > j:
            raise IndexError(f"slice [{i}:{j}] out of bounds for vector of dimension {self.dim()}")
        return DenseVector(self._elements[i:j], self._stype)

    def append_scalar(self, *scalars) -> "DenseVector":
        """New vector sharing this vector's elements, followed by copies of `scalars`."""
        tail = [Scalar(0, self._stype).set(as_const(s)) for s in scalars]
        return DenseVector(self._elements + tail, self._stype)

    def append_vector(self, w: Vector) -> "DenseVector":
        return self.append_scalar(*[w.const_at(i) for i in range(w.dim())])

    def as_matrix(self, n: int, m: int):
        """n x m row-major matrix sharing this vector's elements."""
        from ..matrix.dense import DenseMatrix
        if n * m != self.dim():
            raise DimensionError(f"matrix dimension {n}x{m} does not fit vector of dimension {self.dim()}")
        return DenseMatrix(self._elements, n, m, self._stype)

    # ---------------- reordering ---------------- #
    def _assign(self, order: Sequence[int]):
        snapshot = [self._elements[k].clone() for k in order]
        for s, t in zip(self._elements, snapshot):
            s.set(t)
        return self

    def swap(self, i: int, j: int):
        check_index(i, self.dim())
        check_index(j, self.dim())
        t = self._elements[i].clone()
        self._elements[i].set(self._elements[j])
        self._elements[j].set(t)
        return self

    def permute(self, pi: Sequence[int]):
        """Reorder so that the new element i is the old element pi[i]."""
        _check_permutation(pi, self.dim())
        return self._assign(pi)

    def reverse_order(self):
        return self._assign(range(self.dim() - 1, -1, -1))

    def sort(self, reverse: bool = False):
        """Sort by value; derivatives travel with their values."""
        order = sorted(range(self.dim()), key=lambda k: self._elements[k].val, reverse=reverse)
        return self._assign(order)


def _check_permutation(pi: Sequence[int], n: int):
    if len(pi) != n:
        raise ValueError(f"permutation of length {len(pi)} for dimension {n}")
    if sorted(pi) != list(range(n)):
        raise ValueError("invalid permutation")


def new_dense_vector(values: Sequence, stype=None) -> DenseVector:
    """Dense vector of constants (order 0) holding `values`."""
    from ..config import ADConfig
    stype = ADConfig.resolve(stype)
    return DenseVector([Scalar(v, stype) for v in values], stype)


def null_dense_vector(n: int, stype=None) -> DenseVector:
    from ..config import ADConfig
    stype = ADConfig.resolve(stype)
    return DenseVector([Scalar(0, stype) for _ in range(n)], stype)


def as_dense_vector(v: Vector, stype=None) -> DenseVector:
    """
    Dense copy of any vector. Implicit zeros of sparse vectors become exact
    zeros without derivatives.
    """
    if stype is None:
        stype = v.stype
    r = null_dense_vector(v.dim(), stype)
    for i in v.support():
        r.at(i).set(v.const_at(i))
    return r
