# autodiff/vector/__init__.py

from .base import Vector
from .dense import DenseVector, new_dense_vector, null_dense_vector, as_dense_vector
from .sparse import SparseVector, new_sparse_vector, null_sparse_vector, as_sparse_vector

__all__ = [
    "Vector",
    "DenseVector", "new_dense_vector", "null_dense_vector", "as_dense_vector",
    "SparseVector", "new_sparse_vector", "null_sparse_vector", "as_sparse_vector",
]
