# autodiff/core/derivatives.py

#-----------------------------------------------------------------------------
# Functional helpers: declare the inputs as variables, evaluate f once and read
# gradient / Hessian off the result scalar.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, List, Sequence, Tuple, Union
import numpy as np

from .const import ConstScalar
from .scalar import Scalar
from .variables import variables


def value(x: Any) -> Any:
    """Return the numeric value of a scalar; pass through plain numbers unchanged."""
    return x.val if isinstance(x, ConstScalar) else x


def gradient(y: ConstScalar, n: int = None) -> np.ndarray:
    """Gradient of a result scalar as a float64 array (zeros if none was propagated)."""
    return y.get_gradient(n)


def hessian_of(y: ConstScalar, n: int = None) -> np.ndarray:
    return y.get_hessian_matrix(n)


def _declare(x0, order: int, stype) -> Tuple[bool, List[Scalar]]:
    single = np.ndim(x0) == 0
    xs = [Scalar(v, stype) for v in ([x0] if single else np.ravel(x0))]
    variables(order, *xs)
    return single, xs


def _evaluate(f, single: bool, xs: List[Scalar]) -> ConstScalar:
    y = f(xs[0] if single else xs)
    if not isinstance(y, ConstScalar):
        raise TypeError(f"f must return a scalar, but returned {type(y)}")
    return y


def grad(f: Callable, x0: Union[float, Sequence[float]], stype=None) -> Union[float, np.ndarray]:
    """
    Gradient of a scalar-output function at x0.

    Parameters
    ----------
    f  : function of a single Scalar (x0 a number) or of a list of Scalars
         (x0 a sequence), returning a Scalar
    x0 : evaluation point

    Returns
    -------
    float for a number x0, otherwise an array of partials in input order.

    Example
    -------
    grad(lambda xs: xs[0]*xs[0] + 3*xs[1], [2.0, 4.0]) -> array([4., 3.])
    """
    single, xs = _declare(x0, 1, stype)
    y = _evaluate(f, single, xs)
    g = y.get_gradient(len(xs))
    return float(g[0]) if single else g


def grad_hessian(f: Callable, x0: Union[float, Sequence[float]], stype=None):
    """
    Value, gradient and Hessian of a scalar-output function at x0, from one
    second-order forward evaluation.

    Returns
    -------
    (value, gradient, hessian) with gradient of shape (n,) and hessian of
    shape (n, n); n = 1 for a number x0.
    """
    single, xs = _declare(x0, 2, stype)
    y = _evaluate(f, single, xs)
    n = len(xs)
    return float(y.val), y.get_gradient(n), y.get_hessian_matrix(n)
