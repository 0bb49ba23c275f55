# autodiff/matrix/base.py
"""
Matrix of differentiable scalars.

A matrix is a 2-D view on a flat backing store laid out in row-major order.
The view is described by

    rows, cols              logical dimensions
    row_offset, col_offset  origin of the view in the backing layout
    row_max, col_max        dimensions of the backing layout
    transposed              whether logical rows run along backing columns

so that `t()` and `slice()` return new views on the same store in O(1).
Element (i, j) lives at

    (row_offset + i) * col_max + (col_offset + j)    if not transposed
    (col_offset + j) * row_max + (row_offset + i)    if transposed

Concrete classes supply the backing store through `_element(k)`,
`_const_element(k)`, `_swap_storage(k1, k2)` and `_stored_keys()`.
"""
from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Sequence, Tuple

import numpy as np

from ..core.const import Constant, ConstScalar
from ..core.scalar import Scalar
from ..core.types import ScalarType
from ..core.variables import VariableContext, variables
from ..errors import DimensionError, NonSquareMatrixError
from ..logging import getLogger

logger = getLogger(__name__)


class Matrix(ABC):

    def __init__(self, rows: int, cols: int, stype: ScalarType):
        self.rows = rows
        self.cols = cols
        self.row_offset = 0
        self.row_max = rows
        self.col_offset = 0
        self.col_max = cols
        self.transposed = False
        self._stype = stype

    # ---------------- backing store ---------------- #
    @abstractmethod
    def _element(self, k: int) -> Scalar:
        ...

    @abstractmethod
    def _const_element(self, k: int) -> ConstScalar:
        ...

    @abstractmethod
    def _swap_storage(self, k1: int, k2: int):
        ...

    @abstractmethod
    def _stored_keys(self) -> Iterable[int]:
        ...

    @abstractmethod
    def _storage(self):
        """The backing store object; views of one matrix share it."""

    @abstractmethod
    def _reallocate(self, rows: int, cols: int):
        """Replace this matrix by a fresh zero matrix of the given size."""

    @abstractmethod
    def clone(self) -> "Matrix":
        ...

    @abstractmethod
    def as_vector(self):
        ...

    @abstractmethod
    def row(self, i: int):
        ...

    @abstractmethod
    def col(self, j: int):
        ...

    @abstractmethod
    def diag(self):
        ...

    # ---------------- indexing ---------------- #
    @property
    def stype(self) -> ScalarType:
        return self._stype

    def dims(self) -> Tuple[int, int]:
        return self.rows, self.cols

    def _index(self, i: int, j: int) -> int:
        if i < 0 or j < 0 or i >= self.rows or j >= self.cols:
            raise IndexError(
                f"index ({i},{j}) out of bounds for matrix of dimension {self.rows}x{self.cols}")
        if self.transposed:
            return (self.col_offset + j) * self.row_max + (self.row_offset + i)
        return (self.row_offset + i) * self.col_max + (self.col_offset + j)

    def _ij(self, k: int) -> Tuple[int, int]:
        """Inverse of _index; may fall outside the view for sliced matrices."""
        if self.transposed:
            return k % self.row_max - self.row_offset, k // self.row_max - self.col_offset
        return k // self.col_max - self.row_offset, k % self.col_max - self.col_offset

    def at(self, i: int, j: int) -> Scalar:
        return self._element(self._index(i, j))

    def const_at(self, i: int, j: int) -> ConstScalar:
        return self._const_element(self._index(i, j))

    def __getitem__(self, ij) -> Scalar:
        return self.at(*ij)

    def support(self) -> List[Tuple[int, int]]:
        """(i, j) of the stored elements inside this view, in row-major order."""
        r = []
        for k in self._stored_keys():
            i, j = self._ij(k)
            if 0 <= i < self.rows and 0 <= j < self.cols:
                r.append((i, j))
        return sorted(r)

    def _scalars(self) -> List[Scalar]:
        return [self.at(i, j) for i, j in self.support()]

    def _is_sliced(self) -> bool:
        return (self.row_offset, self.col_offset, self.rows, self.cols) != (0, 0, self.row_max, self.col_max)

    # ---------------- views ---------------- #
    def slice(self, rfrom: int, rto: int, cfrom: int, cto: int) -> "Matrix":
        """View on rows rfrom..rto-1 and columns cfrom..cto-1."""
        if not (0 <= rfrom <= rto <= self.rows and 0 <= cfrom <= cto <= self.cols):
            raise IndexError(
                f"slice [{rfrom}:{rto}, {cfrom}:{cto}] out of bounds for matrix of dimension "
                f"{self.rows}x{self.cols}")
        m = copy.copy(self)
        m.row_offset += rfrom
        m.rows = rto - rfrom
        m.col_offset += cfrom
        m.cols = cto - cfrom
        return m

    def t(self) -> "Matrix":
        """Transposed view; no data is moved."""
        m = copy.copy(self)
        m._transpose_fields()
        return m

    def _transpose_fields(self):
        self.rows, self.cols = self.cols, self.rows
        self.transposed = not self.transposed
        self.row_offset, self.col_offset = self.col_offset, self.row_offset
        self.row_max, self.col_max = self.col_max, self.row_max

    def tip(self):
        """
        Transpose in place.

        The backing store is permuted by following the cycles of the map
        k -> rows*k mod (rows*cols - 1), so every element moves exactly once
        and only a visited mask is allocated. A transposed view is tipped by
        undoing its transposition, which leaves the store untouched. Sliced
        views cannot be tipped.
        """
        if self._is_sliced():
            raise ValueError("in-place transpose of a sliced matrix view")
        if self.transposed:
            self._transpose_fields()
            return self
        mn = self.rows * self.cols
        visited = np.zeros(mn, dtype=bool)
        for cycle in range(1, mn):
            if visited[cycle]:
                continue
            k = cycle
            while True:
                if k != mn - 1:
                    k = self.rows * k % (mn - 1)
                visited[k] = True
                self._swap_storage(k, cycle)
                if k == cycle:
                    break
        self.rows, self.cols = self.cols, self.rows
        self.row_offset, self.col_offset = self.col_offset, self.row_offset
        self.row_max, self.col_max = self.col_max, self.row_max
        logger.debug("transposed %dx%d matrix in place", self.cols, self.rows)
        return self

    # ---------------- state ---------------- #
    def set(self, b: "Matrix"):
        if b is self:
            return self
        self._check_dims(b)
        for i, j in self._visit(b):
            self.at(i, j).set(b.const_at(i, j))
        return self

    def reset(self):
        for s in self._scalars():
            s.reset()
        return self

    def set_identity(self):
        one = Constant(1, self._stype)
        for i in range(self.rows):
            for j in range(self.cols):
                self._assign(i, j, one if i == j else Constant(0, self._stype))
        return self

    def variables(self, order: int) -> VariableContext:
        """Declare all elements, in row-major order, as variables."""
        return variables(order, *[self.at(i, j) for i in range(self.rows) for j in range(self.cols)])

    def equals(self, b: "Matrix", epsilon: float = None) -> bool:
        self._check_dims(b)
        return all(self.const_at(i, j).equals(b.const_at(i, j), epsilon)
                   for i in range(self.rows) for j in range(self.cols))

    def is_symmetric(self, epsilon: float = None) -> bool:
        if self.rows != self.cols:
            return False
        if epsilon is None:
            from ..config import ADConfig
            epsilon = ADConfig.SYMMETRY_EPSILON
        for i in range(self.rows):
            for j in range(i + 1, self.cols):
                if not self.const_at(i, j).equals(self.const_at(j, i), epsilon):
                    return False
        return True

    def values(self) -> np.ndarray:
        """Element values as a float64 array of shape (rows, cols)."""
        r = np.zeros((self.rows, self.cols))
        for i, j in self.support():
            r[i, j] = self.const_at(i, j).get_float64()
        return r

    def __str__(self):
        rows = (", ".join(str(self.const_at(i, j)) for j in range(self.cols)) for i in range(self.rows))
        return "[" + ", ".join(f"[{r}]" for r in rows) + "]"

    # ---------------- traversal ---------------- #
    def map(self, f: Callable[[Scalar], None]):
        for s in self._scalars():
            f(s)
        return self

    def map_set(self, f: Callable[[ConstScalar], ConstScalar]):
        for s in self._scalars():
            s.set(f(s))
        return self

    def reduce(self, f: Callable[[Scalar, ConstScalar], Scalar], r: Scalar) -> Scalar:
        for s in self._scalars():
            r = f(r, s)
        return r

    # ---------------- permutations ---------------- #
    def swap(self, i1: int, j1: int, i2: int, j2: int):
        """Exchange elements (i1, j1) and (i2, j2)."""
        a, b = self.at(i1, j1), self.at(i2, j2)
        t = a.clone()
        a.set(b)
        b.set(t)
        return self

    def swap_rows(self, i: int, j: int):
        self._check_square("swap_rows")
        for k in range(self.cols):
            self.swap(i, k, j, k)
        return self

    def swap_columns(self, i: int, j: int):
        self._check_square("swap_columns")
        for k in range(self.rows):
            self.swap(k, i, k, j)
        return self

    def permute_rows(self, pi: Sequence[int]):
        """New row i is the old row pi[i]."""
        self._check_square("permute_rows")
        return self._permute(pi, range(self.rows))

    def permute_columns(self, pi: Sequence[int]):
        """New column j is the old column pi[j]."""
        self._check_square("permute_columns")
        return self._permute(range(self.rows), pi)

    def symmetric_permutation(self, pi: Sequence[int]):
        """Permute rows and columns alike: new (i, j) is old (pi[i], pi[j])."""
        self._check_square("symmetric_permutation")
        return self._permute(pi, pi)

    def _permute(self, rp: Sequence[int], cp: Sequence[int]):
        for p in (rp, cp):
            if sorted(p) != list(range(self.rows)):
                raise ValueError("invalid permutation")
        snapshot = [[Scalar(0, self._stype).set(self.const_at(i, j)) for j in cp] for i in rp]
        for i in range(self.rows):
            for j in range(self.cols):
                self._assign(i, j, snapshot[i][j])
        return self

    # ---------------- element-wise arithmetic ---------------- #
    def maddm(self, a: "Matrix", b: "Matrix"):
        self._check_dims(a, b)
        for i, j in self._visit(a, b):
            self.at(i, j).add(a.const_at(i, j), b.const_at(i, j))
        return self

    def msubm(self, a: "Matrix", b: "Matrix"):
        self._check_dims(a, b)
        for i, j in self._visit(a, b):
            self.at(i, j).sub(a.const_at(i, j), b.const_at(i, j))
        return self

    def mmulm(self, a: "Matrix", b: "Matrix"):
        self._check_dims(a, b)
        for i, j in self._visit(a, b):
            self.at(i, j).mul(a.const_at(i, j), b.const_at(i, j))
        return self

    def mdivm(self, a: "Matrix", b: "Matrix"):
        self._check_dims(a, b)
        for i in range(self.rows):
            for j in range(self.cols):
                self.at(i, j).div(a.const_at(i, j), b.const_at(i, j))
        return self

    def madds(self, a: "Matrix", s):
        self._check_dims(a)
        for i in range(self.rows):
            for j in range(self.cols):
                self.at(i, j).add(a.const_at(i, j), s)
        return self

    def msubs(self, a: "Matrix", s):
        self._check_dims(a)
        for i in range(self.rows):
            for j in range(self.cols):
                self.at(i, j).sub(a.const_at(i, j), s)
        return self

    def mmuls(self, a: "Matrix", s):
        self._check_dims(a)
        for i, j in self._visit(a):
            self.at(i, j).mul(a.const_at(i, j), s)
        return self

    def mdivs(self, a: "Matrix", s):
        self._check_dims(a)
        for i, j in self._visit(a):
            self.at(i, j).div(a.const_at(i, j), s)
        return self

    # ---------------- products ---------------- #
    def mdotm(self, a: "Matrix", b: "Matrix"):
        """
        r = A B

        If the result shares storage with an operand, all products are
        accumulated in temporaries before any element of r is written.
        """
        n, m = self.dims()
        n1, m1 = a.dims()
        n2, m2 = b.dims()
        if n1 != n or m2 != m or m1 != n2:
            raise DimensionError(f"matrix dimensions do not match: {n1}x{m1} times {n2}x{m2} into {n}x{m}")
        aliased = self._shares_storage(a) or self._shares_storage(b)
        if aliased:
            logger.debug("mdotm result shares storage with an operand, using temporaries")
        t = Scalar(0, self._stype)
        result = []
        for i in range(n):
            for j in range(m):
                s = Scalar(0, self._stype)
                for k in range(m1):
                    t.mul(a.const_at(i, k), b.const_at(k, j))
                    s.add(s, t)
                if aliased:
                    result.append((i, j, s))
                else:
                    self.at(i, j).set(s)
        for i, j, s in result:
            self.at(i, j).set(s)
        return self

    def outer(self, a, b):
        """r = a b^T"""
        if a.dim() != self.rows or b.dim() != self.cols:
            raise DimensionError(
                f"matrix/vector dimensions do not match: {self.rows}x{self.cols} matrix, "
                f"vectors of dimension {a.dim()} and {b.dim()}")
        for i in range(self.rows):
            for j in range(self.cols):
                self.at(i, j).mul(a.const_at(i), b.const_at(j))
        return self

    # ---------------- calculus ---------------- #
    def jacobian(self, f: Callable, x):
        """
        Jacobian of the vector function f at x: r[i, j] = ∂f_i/∂x_j.

        x is cloned and declared as first order variables. The matrix is
        reallocated if its dimensions do not fit.
        """
        x = x.clone()
        x.variables(1)
        y = f(x)
        if self.dims() != (y.dim(), x.dim()):
            logger.debug("reallocating jacobian result from %dx%d to %dx%d",
                         self.rows, self.cols, y.dim(), x.dim())
            self._reallocate(y.dim(), x.dim())
        for i in range(self.rows):
            yi = y.const_at(i)
            for j in range(self.cols):
                self.at(i, j).set_value(yi.get_derivative(j))
        return self

    def hessian(self, f: Callable, x):
        """Hessian of the scalar function f at x: r[i, j] = ∂²f/∂x_i∂x_j."""
        n = x.dim()
        if self.dims() != (n, n):
            logger.debug("reallocating hessian result from %dx%d to %dx%d",
                         self.rows, self.cols, n, n)
            self._reallocate(n, n)
        x = x.clone()
        x.variables(2)
        y = f(x)
        for i in range(n):
            for j in range(n):
                self.at(i, j).set_value(y.get_hessian(i, j))
        return self

    # ---------------- helpers ---------------- #
    def _check_dims(self, *operands):
        for b in operands:
            if b.dims() != self.dims():
                n, m = b.dims()
                raise DimensionError(
                    f"matrix dimensions do not match: {self.rows}x{self.cols} and {n}x{m}")

    def _check_square(self, what: str):
        if self.rows != self.cols:
            raise NonSquareMatrixError(f"{what}(): {self.rows}x{self.cols} matrix is not square")

    def _visit(self, *operands) -> List[Tuple[int, int]]:
        idx = set(self.support())
        for b in operands:
            idx.update(b.support())
        return sorted(idx)

    def _shares_storage(self, other) -> bool:
        if other._storage() is self._storage():
            return True
        ids = {id(s) for s in self._scalars()}
        return any(id(s) in ids for s in other._scalars())

    def _assign(self, i: int, j: int, s: ConstScalar):
        # zeros are not written into positions that are already zero
        if s.is_null() and self.const_at(i, j).is_null():
            return
        self.at(i, j).set(s)
