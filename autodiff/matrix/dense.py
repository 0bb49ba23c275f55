# autodiff/matrix/dense.py
from __future__ import annotations

from typing import List, Sequence

import numpy as np

from ..core.const import ConstScalar
from ..core.scalar import Scalar
from ..core.types import ScalarType
from ..errors import DimensionError, NonSquareMatrixError
from ..vector.dense import DenseVector
from .base import Matrix


class DenseMatrix(Matrix):
    """
    Matrix over a flat list of Scalars.

    Views (`t`, `slice`) and the vectors returned by `row`, `col`, `diag`
    and `as_vector` reference the same Scalar objects as the matrix, so
    writes through them are visible in the matrix.
    """

    def __init__(self, values: List[Scalar], rows: int, cols: int, stype: ScalarType):
        if len(values) != rows * cols:
            raise DimensionError(f"{len(values)} values do not fit a {rows}x{cols} matrix")
        super().__init__(rows, cols, stype)
        self._values = values

    def _element(self, k: int) -> Scalar:
        return self._values[k]

    def _const_element(self, k: int) -> ConstScalar:
        return self._values[k]

    def _swap_storage(self, k1: int, k2: int):
        v = self._values
        v[k1], v[k2] = v[k2], v[k1]

    def _stored_keys(self):
        return range(len(self._values))

    def _storage(self):
        return self._values

    def support(self):
        return [(i, j) for i in range(self.rows) for j in range(self.cols)]

    def _reallocate(self, rows: int, cols: int):
        Matrix.__init__(self, rows, cols, self._stype)
        self._values = [Scalar(0, self._stype) for _ in range(rows * cols)]

    def __repr__(self):
        return f"DenseMatrix({self}, {self._stype.name})"

    # ---------------- copies and views ---------------- #
    def clone(self) -> "DenseMatrix":
        """Deep copy, laid out as a plain row-major matrix."""
        values = [self.const_at(i, j).clone() for i in range(self.rows) for j in range(self.cols)]
        return DenseMatrix(values, self.rows, self.cols, self._stype)

    def row(self, i: int) -> DenseVector:
        if not self.transposed:
            k = self._index(i, 0) if self.cols > 0 else 0
            return DenseVector(self._values[k:k + self.cols], self._stype)
        return DenseVector([self.at(i, j) for j in range(self.cols)], self._stype)

    def col(self, j: int) -> DenseVector:
        if self.transposed:
            k = self._index(0, j) if self.rows > 0 else 0
            return DenseVector(self._values[k:k + self.rows], self._stype)
        return DenseVector([self.at(i, j) for i in range(self.rows)], self._stype)

    def diag(self) -> DenseVector:
        if self.rows != self.cols:
            raise NonSquareMatrixError(f"diag(): {self.rows}x{self.cols} matrix is not square")
        return DenseVector([self.at(i, i) for i in range(self.rows)], self._stype)

    def as_vector(self) -> DenseVector:
        """Elements in row-major order; the backing list itself for unsliced, untransposed matrices."""
        if not self.transposed and not self._is_sliced():
            return DenseVector(self._values, self._stype)
        return DenseVector([self.at(i, j) for i in range(self.rows) for j in range(self.cols)], self._stype)


def new_dense_matrix(values: Sequence, rows: int, cols: int, stype=None) -> DenseMatrix:
    """rows x cols matrix of constants; `values` is flat row-major or nested."""
    from ..config import ADConfig
    stype = ADConfig.resolve(stype)
    flat = np.ravel(np.asarray(values, dtype=object))
    return DenseMatrix([Scalar(v, stype) for v in flat], rows, cols, stype)


def null_dense_matrix(rows: int, cols: int, stype=None) -> DenseMatrix:
    from ..config import ADConfig
    stype = ADConfig.resolve(stype)
    return DenseMatrix([Scalar(0, stype) for _ in range(rows * cols)], rows, cols, stype)


def as_dense_matrix(m: Matrix, stype=None) -> DenseMatrix:
    if stype is None:
        stype = m.stype
    rows, cols = m.dims()
    r = null_dense_matrix(rows, cols, stype)
    for i, j in m.support():
        r.at(i, j).set(m.const_at(i, j))
    return r
