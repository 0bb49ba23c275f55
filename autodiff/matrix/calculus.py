# autodiff/matrix/calculus.py

#-----------------------------------------------------------------------------
# Jacobian and Hessian of functions of a vector, as new dense matrices.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Callable

from ..vector.base import Vector
from .dense import DenseMatrix, null_dense_matrix


def jacobian(f: Callable[[Vector], Vector], x: Vector) -> DenseMatrix:
    """
    Jacobian J[i, j] = ∂f_i/∂x_j of a vector function at x.

    Example
    -------
    x = new_dense_vector([1.0, 2.0])
    jacobian(lambda v: DenseVector([v[0]*v[1], v[0]+v[1]], v.stype), x)
    -> [[2, 1], [1, 1]]
    """
    return null_dense_matrix(0, 0, x.stype).jacobian(f, x)


def hessian(f: Callable, x: Vector) -> DenseMatrix:
    """Hessian H[i, j] = ∂²f/∂x_i∂x_j of a scalar function at x."""
    return null_dense_matrix(0, 0, x.stype).hessian(f, x)
