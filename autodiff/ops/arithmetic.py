# autodiff/ops/arithmetic.py
import numpy as np

from ..core.scalar import Scalar
from ..core.const import as_const
from ..core.chain import apply_unary, apply_binary


def _operands(r, a, b):
    a = as_const(a)
    b = as_const(b)
    return a, b, r.stype.operand(a.val), r.stype.operand(b.val)


def neg(r, a):
    """r = -a"""
    a = as_const(a)
    x = r.stype.operand(a.val)
    with np.errstate(all="ignore"):
        v = -x
    return apply_unary(r, a, v, -1.0)


def add(r, a, b):
    """r = a + b"""
    a, b, x, y = _operands(r, a, b)
    with np.errstate(all="ignore"):
        v = x + y
    return apply_binary(r, a, b, v, 1.0, 1.0)


def sub(r, a, b):
    """r = a - b"""
    a, b, x, y = _operands(r, a, b)
    with np.errstate(all="ignore"):
        v = x - y
    return apply_binary(r, a, b, v, 1.0, -1.0)


def mul(r, a, b):
    """
    r = a * b
      ∂r/∂a = b, ∂r/∂b = a, ∂²r/∂a∂b = 1
    """
    a, b, x, y = _operands(r, a, b)
    with np.errstate(all="ignore"):
        v = x * y
    return apply_binary(r, a, b, v, y, x, fab=1.0)


def div(r, a, b):
    """
    r = a / b   (truncating division for integer types, IEEE otherwise)
      ∂r/∂a = 1/b, ∂r/∂b = -a/b², ∂²r/∂b² = 2a/b³, ∂²r/∂a∂b = -1/b²
    """
    a, b, x, y = _operands(r, a, b)
    v = r.stype.divide(x, y)
    if r.stype.max_order == 0:
        return apply_binary(r, a, b, v, 0.0, 0.0)
    with np.errstate(all="ignore"):
        x, y = np.float64(x), np.float64(y)
        return apply_binary(r, a, b, v,
                            1.0 / y, -x / (y * y),
                            fbb=2.0 * x / (y * y * y),
                            fab=-1.0 / (y * y))


def pow(r, a, k):
    """
    r = a^k

    Local partials:
      ∂r/∂a   = k a^(k-1)             ∂²r/∂a²  = k (k-1) a^(k-2)
      ∂r/∂k   = a^k log(a)            ∂²r/∂k²  = a^k log(a)²
      ∂²r/∂a∂k = a^(k-1) (1 + k log(a))

    For a negative base the partials with respect to k are NaN; they only
    reach the result through variables on which k actually depends.
    """
    a = as_const(a)
    k = as_const(k)
    with np.errstate(all="ignore"):
        x = np.float64(a.val)
        p = np.float64(k.val)
        v = np.power(x, p)
        # a vanishing constant factor gives an exact zero, also at x = 0
        dx = 0.0 if p == 0 else p * np.power(x, p - 1.0)
        c = p * (p - 1.0)
        dxx = 0.0 if c == 0 else c * np.power(x, p - 2.0)
        if k.grad is None:
            return apply_unary(r, a, v, dx, dxx)
        logx = np.log(x)
        dk = v * logx
        dkk = v * logx * logx
        dxk = np.power(x, p - 1.0) * (1.0 + p * logx)
    return apply_binary(r, a, k, v, dx, dk, faa=dxx, fbb=dkk, fab=dxk)


def sqrt(r, a):
    """r = √a"""
    a = as_const(a)
    with np.errstate(all="ignore"):
        x = np.float64(a.val)
        s = np.sqrt(x)
        return apply_unary(r, a, s, 0.5 / s, -0.25 / (s * x))


def abs(r, a):
    """r = |a|, with derivative 0 at a = 0."""
    a = as_const(a)
    sgn = a.sign()
    if sgn < 0:
        return neg(r, a)
    if sgn > 0:
        return r.set(a)
    return apply_unary(r, a, 0, 0.0, 0.0)


def min(r, a, b):
    """r = a if a < b else b, derivatives included."""
    a, b = as_const(a), as_const(b)
    return r.set(a if a.val < b.val else b)


def max(r, a, b):
    a, b = as_const(a), as_const(b)
    return r.set(a if a.val > b.val else b)


# Bind the operation set to Scalar: c.add(a, b) stores a+b in c
Scalar.neg = neg
Scalar.add = add
Scalar.sub = sub
Scalar.mul = mul
Scalar.div = div
Scalar.pow = pow
Scalar.sqrt = sqrt
Scalar.abs = abs
Scalar.min = min
Scalar.max = max
