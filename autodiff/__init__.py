# autodiff/__init__.py
# Forward-mode automatic differentiation with gradients and Hessians

from .core import (
    ScalarType, register_scalar_type, scalar_type,
    INT8, INT16, INT32, INT64, INT, FLOAT32, FLOAT64, BARE_REAL, REAL32, REAL64,
    ConstScalar, Constant, ScalarView, as_const,
    Scalar, new_scalar, null_scalar,
    VariableContext, variables, declare,
    value, gradient, hessian_of, grad, grad_hessian,
)

# Operation set (binds methods on Scalar)
from . import ops

from .vector import (
    Vector, DenseVector, SparseVector,
    new_dense_vector, null_dense_vector, as_dense_vector,
    new_sparse_vector, null_sparse_vector, as_sparse_vector,
)
from .matrix import (
    Matrix, DenseMatrix, SparseMatrix,
    new_dense_matrix, null_dense_matrix, as_dense_matrix,
    new_sparse_matrix, null_sparse_matrix, as_sparse_matrix,
    jacobian, hessian,
)
from .config import ADConfig
from .errors import AutodiffError, DimensionError, NonSquareMatrixError, AliasingError
from . import serialize

__all__ = [
    # Scalar types
    'ScalarType', 'register_scalar_type', 'scalar_type',
    'INT8', 'INT16', 'INT32', 'INT64', 'INT', 'FLOAT32', 'FLOAT64',
    'BARE_REAL', 'REAL32', 'REAL64',
    # Scalars
    'ConstScalar', 'Constant', 'ScalarView', 'as_const',
    'Scalar', 'new_scalar', 'null_scalar',
    # Variables and extraction
    'VariableContext', 'variables', 'declare',
    'value', 'gradient', 'hessian_of', 'grad', 'grad_hessian',
    'ops',
    # Vectors
    'Vector', 'DenseVector', 'SparseVector',
    'new_dense_vector', 'null_dense_vector', 'as_dense_vector',
    'new_sparse_vector', 'null_sparse_vector', 'as_sparse_vector',
    # Matrices
    'Matrix', 'DenseMatrix', 'SparseMatrix',
    'new_dense_matrix', 'null_dense_matrix', 'as_dense_matrix',
    'new_sparse_matrix', 'null_sparse_matrix', 'as_sparse_matrix',
    'jacobian', 'hessian',
    # Config and errors
    'ADConfig',
    'AutodiffError', 'DimensionError', 'NonSquareMatrixError', 'AliasingError',
    'serialize',
]
