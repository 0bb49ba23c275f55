# autodiff/core/__init__.py

"""
Core public API of the autodiff package.

Exports:
    ScalarType      : Backing representation of a scalar (dtype, max derivative order).
    ConstScalar     : Read-only scalar interface; Constant and ScalarView implement it.
    Scalar          : Mutable differentiable scalar (value, gradient, Hessian).
    VariableContext : Numbers independent variables and allocates their buffers.
    variables       : Declare scalars as variables in one call.
    grad            : Convenience: gradient of f at a point.
    grad_hessian    : Convenience: value, gradient and Hessian of f at a point.
"""

# import order matters: config and the scalar modules depend on types
from .types import (ScalarType, register_scalar_type, scalar_type, registered_types,
                    INT8, INT16, INT32, INT64, INT, FLOAT32, FLOAT64,
                    BARE_REAL, REAL32, REAL64)
from .const import ConstScalar, Constant, ScalarView, as_const
from .scalar import Scalar, new_scalar, null_scalar
from .chain import apply_unary, apply_binary
from .variables import VariableContext, variables, declare
from .derivatives import value, gradient, hessian_of, grad, grad_hessian

__all__ = [
    "ScalarType", "register_scalar_type", "scalar_type", "registered_types",
    "INT8", "INT16", "INT32", "INT64", "INT", "FLOAT32", "FLOAT64",
    "BARE_REAL", "REAL32", "REAL64",
    "ConstScalar", "Constant", "ScalarView", "as_const",
    "Scalar", "new_scalar", "null_scalar",
    "apply_unary", "apply_binary",
    "VariableContext", "variables", "declare",
    "value", "gradient", "hessian_of", "grad", "grad_hessian",
]
