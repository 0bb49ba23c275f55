# autodiff/matrix/__init__.py

from .base import Matrix
from .dense import DenseMatrix, new_dense_matrix, null_dense_matrix, as_dense_matrix
from .sparse import SparseMatrix, new_sparse_matrix, null_sparse_matrix, as_sparse_matrix
from .calculus import jacobian, hessian

__all__ = [
    "Matrix",
    "DenseMatrix", "new_dense_matrix", "null_dense_matrix", "as_dense_matrix",
    "SparseMatrix", "new_sparse_matrix", "null_sparse_matrix", "as_sparse_matrix",
    "jacobian", "hessian",
]
