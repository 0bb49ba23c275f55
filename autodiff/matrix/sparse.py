# autodiff/matrix/sparse.py
from __future__ import annotations

from typing import Sequence

from ..core.const import ConstScalar
from ..core.scalar import Scalar
from ..errors import DimensionError, NonSquareMatrixError
from ..vector.sparse import SparseVector, new_sparse_vector
from .base import Matrix


class SparseMatrix(Matrix):
    """
    Matrix over a SparseVector of dimension rows*cols.

    Missing elements read as exact zeros. `at(i, j)` materializes them in
    the backing vector; `compact()` drops stored zeros again. The vectors
    returned by `row`, `col` and `diag` reference the stored scalars of the
    matrix but not its missing positions.
    """

    def __init__(self, values: SparseVector, rows: int, cols: int):
        if values.dim() != rows * cols:
            raise DimensionError(f"vector of dimension {values.dim()} does not fit a {rows}x{cols} matrix")
        super().__init__(rows, cols, values.stype)
        self._values = values

    def _element(self, k: int) -> Scalar:
        return self._values.at(k)

    def _const_element(self, k: int) -> ConstScalar:
        return self._values.const_at(k)

    def _swap_storage(self, k1: int, k2: int):
        if k1 != k2:
            self._values.swap(k1, k2)

    def _stored_keys(self):
        return self._values.support()

    def _storage(self):
        return self._values

    def _reallocate(self, rows: int, cols: int):
        Matrix.__init__(self, rows, cols, self._stype)
        self._values = SparseVector(rows * cols, self._stype)

    def __repr__(self):
        return f"SparseMatrix({self}, {self._stype.name})"

    def compact(self):
        self._values.compact()
        return self

    def nnz(self) -> int:
        return sum(1 for i, j in self.support() if not self.const_at(i, j).is_null())

    # ---------------- copies and views ---------------- #
    def clone(self) -> "SparseMatrix":
        r = SparseMatrix(SparseVector(self.rows * self.cols, self._stype), self.rows, self.cols)
        for i, j in self.support():
            r.at(i, j).set(self.const_at(i, j))
        return r

    def _gather(self, positions, n: int) -> SparseVector:
        r = SparseVector(n, self._stype)
        for k, (i, j) in enumerate(positions):
            s = self.const_at(i, j)
            if isinstance(s, Scalar):
                r._insert(k, s)
        return r

    def row(self, i: int) -> SparseVector:
        return self._gather([(i, j) for j in range(self.cols)], self.cols)

    def col(self, j: int) -> SparseVector:
        return self._gather([(i, j) for i in range(self.rows)], self.rows)

    def diag(self) -> SparseVector:
        if self.rows != self.cols:
            raise NonSquareMatrixError(f"diag(): {self.rows}x{self.cols} matrix is not square")
        return self._gather([(i, i) for i in range(self.rows)], self.rows)

    def as_vector(self) -> SparseVector:
        if not self.transposed and not self._is_sliced():
            return self._values
        return self._gather([(i, j) for i in range(self.rows) for j in range(self.cols)],
                            self.rows * self.cols)


def new_sparse_matrix(rowidx: Sequence[int], colidx: Sequence[int], values: Sequence,
                      rows: int, cols: int, stype=None) -> SparseMatrix:
    """rows x cols matrix with values[k] at (rowidx[k], colidx[k])."""
    if not len(rowidx) == len(colidx) == len(values):
        raise DimensionError("number of indices does not match number of values")
    for i, j in zip(rowidx, colidx):
        if not (0 <= i < rows and 0 <= j < cols):
            raise IndexError(f"index ({i},{j}) out of bounds for matrix of dimension {rows}x{cols}")
    indices = [i * cols + j for i, j in zip(rowidx, colidx)]
    return SparseMatrix(new_sparse_vector(indices, values, rows * cols, stype), rows, cols)


def null_sparse_matrix(rows: int, cols: int, stype=None) -> SparseMatrix:
    from ..config import ADConfig
    return SparseMatrix(SparseVector(rows * cols, ADConfig.resolve(stype)), rows, cols)


def as_sparse_matrix(m: Matrix, stype=None) -> SparseMatrix:
    if stype is None:
        stype = m.stype
    rows, cols = m.dims()
    r = null_sparse_matrix(rows, cols, stype)
    for i, j in m.support():
        s = m.const_at(i, j)
        if not s.is_null():
            r.at(i, j).set(s)
    return r
