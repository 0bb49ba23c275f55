# autodiff/vector/base.py
"""
Vector of differentiable scalars.

Concrete storage classes implement element access (`dim`, `at`, `const_at`),
`support()` (the indices that may hold non-zero values) and `_scalars()` (the
Scalar objects actually stored). Arithmetic below is written against that
interface only, so dense and sparse vectors mix freely as operands.

Every arithmetic method writes into the receiver and returns it:
    r.vaddv(a, b)       # r_i = a_i + b_i
Receivers may alias operands element by element, since scalar operations
are alias-safe. Matrix products additionally refuse a receiver that shares
storage with the vector operand.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Iterable, Iterator, List, Tuple

import numpy as np

from ..core.const import ConstScalar
from ..core.scalar import Scalar
from ..core.types import ScalarType
from ..core.variables import VariableContext, variables
from ..errors import AliasingError, DimensionError


class Vector(ABC):

    @property
    @abstractmethod
    def stype(self) -> ScalarType:
        ...

    @abstractmethod
    def dim(self) -> int:
        ...

    @abstractmethod
    def at(self, i: int) -> Scalar:
        """Mutable element i."""

    @abstractmethod
    def const_at(self, i: int) -> ConstScalar:
        """Element i for reading; implicit zeros are returned as constants."""

    @abstractmethod
    def support(self) -> Iterable[int]:
        """Indices of stored elements, in increasing order."""

    @abstractmethod
    def _scalars(self) -> Iterable[Scalar]:
        ...

    @abstractmethod
    def clone(self) -> "Vector":
        ...

    @abstractmethod
    def slice(self, i: int, j: int) -> "Vector":
        ...

    # ---------------- container protocol ---------------- #
    def __len__(self):
        return self.dim()

    def __getitem__(self, i: int) -> Scalar:
        return self.at(i)

    def __iter__(self) -> Iterator[ConstScalar]:
        for i in range(self.dim()):
            yield self.const_at(i)

    def items(self) -> Iterator[Tuple[int, Scalar]]:
        """(index, scalar) for stored elements that are not logically zero."""
        for i in list(self.support()):
            s = self.const_at(i)
            if not s.is_null():
                yield i, s

    def values(self) -> np.ndarray:
        """Element values as a float64 array."""
        return np.array([self.const_at(i).get_float64() for i in range(self.dim())])

    def __str__(self):
        return "[" + ", ".join(str(self.const_at(i)) for i in range(self.dim())) + "]"

    # ---------------- state ---------------- #
    def set(self, x: "Vector"):
        """Copy values and derivatives of x."""
        if x is self:
            return self
        self._check_dims(x)
        for i in self._visit(x):
            s = x.const_at(i)
            if s.is_null() and self.const_at(i).is_null():
                continue
            self.at(i).set(s)
        return self

    def reset(self):
        for s in self._scalars():
            s.reset()
        return self

    def variables(self, order: int) -> VariableContext:
        """Declare all elements as variables x_0..x_{n-1}."""
        return variables(order, *[self.at(i) for i in range(self.dim())])

    def equals(self, b: "Vector", epsilon: float = None) -> bool:
        self._check_dims(b)
        return all(self.const_at(i).equals(b.const_at(i), epsilon) for i in range(self.dim()))

    # ---------------- traversal ---------------- #
    def map(self, f: Callable[[Scalar], None]):
        """Apply f to every stored element."""
        for s in list(self._scalars()):
            f(s)
        return self

    def map_set(self, f: Callable[[ConstScalar], ConstScalar]):
        """Replace every stored element s by f(s)."""
        for s in list(self._scalars()):
            s.set(f(s))
        return self

    def reduce(self, f: Callable[[Scalar, ConstScalar], Scalar], r: Scalar) -> Scalar:
        """Fold f over the stored elements, starting from r."""
        for s in list(self._scalars()):
            r = f(r, s)
        return r

    # ---------------- element-wise arithmetic ---------------- #
    def vaddv(self, a: "Vector", b: "Vector"):
        self._check_dims(a, b)
        for i in self._visit(a, b):
            self.at(i).add(a.const_at(i), b.const_at(i))
        return self

    def vsubv(self, a: "Vector", b: "Vector"):
        self._check_dims(a, b)
        for i in self._visit(a, b):
            self.at(i).sub(a.const_at(i), b.const_at(i))
        return self

    def vmulv(self, a: "Vector", b: "Vector"):
        self._check_dims(a, b)
        for i in self._visit(a, b):
            self.at(i).mul(a.const_at(i), b.const_at(i))
        return self

    def vdivv(self, a: "Vector", b: "Vector"):
        # implicit zeros divide too (0/0 is NaN)
        self._check_dims(a, b)
        for i in range(self.dim()):
            self.at(i).div(a.const_at(i), b.const_at(i))
        return self

    def vadds(self, a: "Vector", s):
        self._check_dims(a)
        for i in range(self.dim()):
            self.at(i).add(a.const_at(i), s)
        return self

    def vsubs(self, a: "Vector", s):
        self._check_dims(a)
        for i in range(self.dim()):
            self.at(i).sub(a.const_at(i), s)
        return self

    def vmuls(self, a: "Vector", s):
        self._check_dims(a)
        for i in self._visit(a):
            self.at(i).mul(a.const_at(i), s)
        return self

    def vdivs(self, a: "Vector", s):
        self._check_dims(a)
        for i in self._visit(a):
            self.at(i).div(a.const_at(i), s)
        return self

    # ---------------- matrix products ---------------- #
    def mdotv(self, a, b: "Vector"):
        """r = A b"""
        n, m = a.dims()
        if self.dim() != n or b.dim() != m:
            raise DimensionError(
                f"matrix/vector dimensions do not match: {n}x{m} matrix, vector of dimension {b.dim()}, "
                f"result of dimension {self.dim()}")
        if self._shares_storage(b):
            raise AliasingError("result and argument must be different vectors")
        t = Scalar(0, self.stype)
        for i in range(n):
            s = Scalar(0, self.stype)
            for j in range(m):
                t.mul(a.const_at(i, j), b.const_at(j))
                s.add(s, t)
            self.at(i).set(s)
        return self

    def vdotm(self, a: "Vector", b):
        """r = a^T B"""
        n, m = b.dims()
        if self.dim() != m or a.dim() != n:
            raise DimensionError(
                f"matrix/vector dimensions do not match: vector of dimension {a.dim()}, {n}x{m} matrix, "
                f"result of dimension {self.dim()}")
        if self._shares_storage(a):
            raise AliasingError("result and argument must be different vectors")
        t = Scalar(0, self.stype)
        for i in range(m):
            s = Scalar(0, self.stype)
            for j in range(n):
                t.mul(a.const_at(j), b.const_at(j, i))
                s.add(s, t)
            self.at(i).set(s)
        return self

    # ---------------- helpers ---------------- #
    def _check_dims(self, *operands):
        n = self.dim()
        for v in operands:
            if v.dim() != n:
                raise DimensionError(f"vector dimensions do not match: {n} and {v.dim()}")

    def _visit(self, *operands) -> List[int]:
        """Indices an element-wise operation must write: the union of supports."""
        idx = set(self.support())
        for v in operands:
            idx.update(v.support())
        return sorted(idx)

    def _shares_storage(self, other) -> bool:
        ids = {id(s) for s in self._scalars()}
        return any(id(s) in ids for s in other._scalars())

