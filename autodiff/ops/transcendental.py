# autodiff/ops/transcendental.py
import numpy as np

from ..core.scalar import Scalar
from ..core.const import as_const
from ..core.chain import apply_unary


def _unary(r, a, f):
    """Evaluate f(x) -> (value, f', f'') at a and propagate into r."""
    a = as_const(a)
    with np.errstate(all="ignore"):
        v, d1, d2 = f(np.float64(a.val))
    return apply_unary(r, a, v, d1, d2)


def exp(r, a):
    def f(x):
        e = np.exp(x)
        return e, e, e
    return _unary(r, a, f)


def log(r, a):
    def f(x):
        return np.log(x), 1.0 / x, -1.0 / (x * x)
    return _unary(r, a, f)


def log1p(r, a):
    def f(x):
        y = 1.0 + x
        return np.log1p(x), 1.0 / y, -1.0 / (y * y)
    return _unary(r, a, f)


def sin(r, a):
    def f(x):
        s, c = np.sin(x), np.cos(x)
        return s, c, -s
    return _unary(r, a, f)


def cos(r, a):
    def f(x):
        s, c = np.sin(x), np.cos(x)
        return c, -s, -c
    return _unary(r, a, f)


def tan(r, a):
    # d/dx tan = 1 + tan², d²/dx² tan = 2 tan (1 + tan²)
    def f(x):
        t = np.tan(x)
        d = 1.0 + t * t
        return t, d, 2.0 * t * d
    return _unary(r, a, f)


def sinh(r, a):
    def f(x):
        s, c = np.sinh(x), np.cosh(x)
        return s, c, s
    return _unary(r, a, f)


def cosh(r, a):
    def f(x):
        s, c = np.sinh(x), np.cosh(x)
        return c, s, c
    return _unary(r, a, f)


def tanh(r, a):
    # d/dx tanh = 1 - tanh², d²/dx² tanh = -2 tanh (1 - tanh²)
    def f(x):
        t = np.tanh(x)
        d = 1.0 - t * t
        return t, d, -2.0 * t * d
    return _unary(r, a, f)


Scalar.exp = exp
Scalar.log = log
Scalar.log1p = log1p
Scalar.sin = sin
Scalar.cos = cos
Scalar.tan = tan
Scalar.sinh = sinh
Scalar.cosh = cosh
Scalar.tanh = tanh
