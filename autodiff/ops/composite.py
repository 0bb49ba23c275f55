# autodiff/ops/composite.py

#-----------------------------------------------------------------------------
# Numerically stable identities built from the primitive operations. Each one
# is evaluated in temporaries of the result type, so derivatives follow from
# the primitives and `r` may alias an operand.
#-----------------------------------------------------------------------------
import math

from ..core.scalar import Scalar
from ..core.const import as_const


def _tmp(r):
    return Scalar(0, r.stype)


def log_add(r, a, b):
    """
    r = log(exp(a) + exp(b)), evaluated as b + log1p(exp(a - b)) with a <= b.
    """
    a, b = as_const(a), as_const(b)
    if a.val > b.val:
        a, b = b, a
    if math.isinf(a.val):
        # a = -inf contributes nothing; a = +inf implies b = +inf
        return r.set(b)
    t = _tmp(r)
    t.sub(a, b)
    t.exp(t)
    t.log1p(t)
    t.add(b, t)
    return r.set(t)


def log_sub(r, a, b):
    """r = log(exp(a) - exp(b)) = a + log1p(-exp(b - a))"""
    a, b = as_const(a), as_const(b)
    if b.val == -math.inf:
        return r.set(a)
    t = _tmp(r)
    t.sub(b, a)
    t.exp(t)
    t.neg(t)
    t.log1p(t)
    t.add(a, t)
    return r.set(t)


def log1p_exp(r, a):
    """
    r = log(1 + exp(a))

    Regimes (boundaries from ADConfig.LOG1PEXP_BOUNDS):
        a <= -37    exp(a)
        a <= 18     log1p(exp(a))
        a <= 33.3   a + exp(-a)
        otherwise   a
    """
    from ..config import ADConfig
    lo, mid, hi = ADConfig.LOG1PEXP_BOUNDS
    a = as_const(a)
    x = a.val
    if x <= lo:
        return r.exp(a)
    t = _tmp(r)
    if x <= mid:
        t.exp(a)
        return r.log1p(t)
    if x <= hi:
        t.neg(a)
        t.exp(t)
        return r.add(a, t)
    return r.set(a)


def sigmoid(r, a):
    """
    r = 1 / (1 + exp(-a)), always exponentiating a non-positive argument:
        a >= 0:  1 / (1 + exp(-a))
        a < 0:   exp(a) / (1 + exp(a))
    """
    a = as_const(a)
    t = _tmp(r)
    if a.val >= 0:
        t.neg(a)
        t.exp(t)
        t.add(1, t)
        return r.div(1, t)
    t.exp(a)
    u = _tmp(r)
    u.add(1, t)
    return r.div(t, u)


def logistic(r, a):
    """r = 1 / (1 + exp(-a)) without range reduction."""
    t = _tmp(r)
    t.neg(a)
    t.exp(t)
    t.add(1, t)
    return r.div(1, t)


Scalar.log_add = log_add
Scalar.log_sub = log_sub
Scalar.log1p_exp = log1p_exp
Scalar.sigmoid = sigmoid
Scalar.logistic = logistic
