# autodiff/vector/sparse.py
from __future__ import annotations

import bisect
from typing import Dict, List, Sequence

from ..core.const import Constant, ConstScalar, as_const
from ..core.scalar import Scalar
from ..core.types import ScalarType
from ..errors import DimensionError, check_index
from ..logging import getLogger
from .base import Vector
from .dense import _check_permutation

logger = getLogger(__name__)


class SparseVector(Vector):
    """
    Vector storing only explicitly set elements.

    Elements live in a dict index -> Scalar, with a sorted list of the stored
    indices for ordered traversal. Missing positions read as exact zeros
    without derivatives. `at(i)` materializes a missing element; elements
    that become zero stay stored until `compact()` removes them, and
    `items()` skips them without deleting.
    """
    __slots__ = ("_values", "_index", "_n", "_stype")

    def __init__(self, n: int, stype: ScalarType):
        self._values: Dict[int, Scalar] = {}
        self._index: List[int] = []
        self._n = n
        self._stype = stype

    @property
    def stype(self) -> ScalarType:
        return self._stype

    def dim(self) -> int:
        return self._n

    def at(self, i: int) -> Scalar:
        check_index(i, self._n)
        s = self._values.get(i)
        if s is None:
            s = Scalar(0, self._stype)
            self._insert(i, s)
        return s

    def const_at(self, i: int) -> ConstScalar:
        check_index(i, self._n)
        s = self._values.get(i)
        if s is None:
            return Constant(0, self._stype)
        return s

    def support(self):
        return list(self._index)

    def _scalars(self):
        return [self._values[i] for i in self._index]

    def _insert(self, i: int, s: Scalar):
        if i not in self._values:
            bisect.insort(self._index, i)
        self._values[i] = s

    def _rebuild(self, values: Dict[int, Scalar]):
        self._values = values
        self._index = sorted(values)

    def __str__(self):
        body = ", ".join(f"{i}:{s}" for i, s in self.items())
        return f"{self._n}:[{body}]"

    def __repr__(self):
        return f"SparseVector({self}, {self._stype.name})"

    # ---------------- sparsity ---------------- #
    def nnz(self) -> int:
        """Number of stored elements that are not logically zero."""
        return sum(1 for _ in self.items())

    def compact(self):
        """Drop stored elements whose value and derivatives are all zero."""
        drop = [i for i in self._index if self._values[i].is_null()]
        if drop:
            for i in drop:
                del self._values[i]
            self._index = sorted(self._values)
            logger.debug("compacted sparse vector: removed %d of %d entries",
                         len(drop), len(drop) + len(self._index))
        return self

    # ---------------- copies and views ---------------- #
    def clone(self) -> "SparseVector":
        r = SparseVector(self._n, self._stype)
        r._values = {i: s.clone() for i, s in self._values.items()}
        r._index = list(self._index)
        return r

    def slice(self, i: int, j: int) -> "SparseVector":
        """Vector of dimension j-i sharing the stored elements in [i, j)."""
        if i < 0 or j > self._n or i > j:
            raise IndexError(f"slice [{i}:{j}] out of bounds for vector of dimension {self._n}")
        r = SparseVector(j - i, self._stype)
        lo = bisect.bisect_left(self._index, i)
        hi = bisect.bisect_left(self._index, j)
        for k in self._index[lo:hi]:
            r._values[k - i] = self._values[k]
            r._index.append(k - i)
        return r

    def append_scalar(self, *scalars) -> "SparseVector":
        r = self.clone()
        r._n = self._n + len(scalars)
        for k, s in enumerate(scalars):
            r._insert(self._n + k, Scalar(0, self._stype).set(as_const(s)))
        return r

    def append_vector(self, w: Vector) -> "SparseVector":
        r = self.clone()
        r._n = self._n + w.dim()
        for k in w.support():
            r._insert(self._n + k, Scalar(0, self._stype).set(w.const_at(k)))
        return r

    def as_matrix(self, n: int, m: int):
        """n x m sparse matrix over a copy of this vector."""
        from ..matrix.sparse import SparseMatrix
        if n * m != self._n:
            raise DimensionError(f"matrix dimension {n}x{m} does not fit vector of dimension {self._n}")
        return SparseMatrix(self.clone(), n, m)

    # ---------------- reordering ---------------- #
    def swap(self, i: int, j: int):
        check_index(i, self._n)
        check_index(j, self._n)
        si = self._values.pop(i, None)
        sj = self._values.pop(j, None)
        if sj is not None:
            self._values[i] = sj
        if si is not None:
            self._values[j] = si
        if (si is None) != (sj is None):
            # exactly one position is stored; move its key in the index
            src, dst = (i, j) if si is not None else (j, i)
            del self._index[bisect.bisect_left(self._index, src)]
            bisect.insort(self._index, dst)
        return self

    def permute(self, pi: Sequence[int]):
        """Reorder so that the new element i is the old element pi[i]."""
        _check_permutation(pi, self._n)
        self._rebuild({i: self._values[k] for i, k in enumerate(pi) if k in self._values})
        return self

    def reverse_order(self):
        n = self._n
        self._rebuild({n - i - 1: s for i, s in self._values.items()})
        return self

    def sort(self, reverse: bool = False):
        """
        Sort by value. Implicit zeros are placed between the negative and
        the positive elements: ascending order puts positives at the end,
        descending order puts them at the front.
        """
        elements = sorted((s for _, s in self.items()), key=lambda s: s.val, reverse=reverse)
        gap = self._n - len(elements)
        ip, ineg = (0, gap) if reverse else (gap, 0)
        values = {}
        for i, s in enumerate(elements):
            values[i + (ip if s.val > 0 else ineg)] = s
        self._rebuild(values)
        return self


def new_sparse_vector(indices: Sequence[int], values: Sequence, n: int, stype=None) -> SparseVector:
    """
    Sparse vector of dimension n with values[k] at position indices[k].
    Zero values are not stored.
    """
    from ..config import ADConfig
    if len(indices) != len(values):
        raise DimensionError("number of indices does not match number of values")
    r = SparseVector(n, ADConfig.resolve(stype))
    for k, v in zip(indices, values):
        check_index(k, n)
        if k in r._values:
            raise ValueError(f"index {k} appeared multiple times")
        if v != 0:
            r._insert(k, Scalar(v, r.stype))
    return r


def null_sparse_vector(n: int, stype=None) -> SparseVector:
    from ..config import ADConfig
    return SparseVector(n, ADConfig.resolve(stype))


def as_sparse_vector(v: Vector, stype=None) -> SparseVector:
    """Sparse copy of any vector; logically zero elements are not stored."""
    if stype is None:
        stype = v.stype
    r = SparseVector(v.dim(), stype)
    for i in v.support():
        s = v.const_at(i)
        if not s.is_null():
            r._insert(i, Scalar(0, stype).set(s))
    return r
