# autodiff/ops/reductions.py
"""
Reductions of vectors and matrices into a scalar.

Vectors are accessed through `dim()` / `const_at(i)` and matrices through
`dims()` / `const_at(i, j)`, so dense and sparse storage reduce identically.
Accumulation happens in temporaries; `r` is written once at the end.
"""
import math

from ..core.scalar import Scalar
from ..errors import DimensionError, NonSquareMatrixError


def _elements(x):
    return [x.const_at(i) for i in range(x.dim())]


def _sum_of_squares(r, elements):
    s = Scalar(0, r.stype)
    t = Scalar(0, r.stype)
    for e in elements:
        t.mul(e, e)
        s.add(s, t)
    return s


def vdotv(r, a, b):
    """r = Σ a_i b_i"""
    if a.dim() != b.dim():
        raise DimensionError(f"vector dimensions do not match: {a.dim()} and {b.dim()}")
    s = Scalar(0, r.stype)
    t = Scalar(0, r.stype)
    for i in range(a.dim()):
        t.mul(a.const_at(i), b.const_at(i))
        s.add(s, t)
    return r.set(s)


def vnorm(r, a):
    """Euclidean norm: sqrt of the sum of squares."""
    return r.sqrt(_sum_of_squares(r, _elements(a)))


def vmean(r, a):
    s = Scalar(0, r.stype)
    for e in _elements(a):
        s.add(s, e)
    return r.div(s, a.dim())


def smooth_max(r, x, alpha):
    """
    Softmax-weighted average, converging to max(x) as alpha grows:
        r = Σ x_i exp(α x_i) / Σ exp(α x_i)
    """
    num = Scalar(0, r.stype)
    den = Scalar(0, r.stype)
    t = Scalar(0, r.stype)
    w = Scalar(0, r.stype)
    for e in _elements(x):
        w.mul(e, alpha)
        w.exp(w)
        t.mul(e, w)
        num.add(num, t)
        den.add(den, w)
    return r.div(num, den)


def log_smooth_max(r, x, alpha):
    """
    smooth_max evaluated in log-space, which stays finite for large α x_i:
        r = exp(logsumexp(α x_i + log x_i) - logsumexp(α x_i))
    """
    num = Scalar(-math.inf, r.stype)
    den = Scalar(-math.inf, r.stype)
    t = Scalar(0, r.stype)
    u = Scalar(0, r.stype)
    for e in _elements(x):
        t.mul(e, alpha)
        den.log_add(den, t)
        u.log(e)
        u.add(u, t)
        num.log_add(num, u)
    t.sub(num, den)
    return r.exp(t)


def mtrace(r, m):
    n, k = m.dims()
    if n != k:
        raise NonSquareMatrixError(f"trace of non-square {n}x{k} matrix")
    s = Scalar(0, r.stype)
    for i in range(n):
        s.add(s, m.const_at(i, i))
    return r.set(s)


def mnorm(r, m):
    """Frobenius norm."""
    n, k = m.dims()
    return r.sqrt(_sum_of_squares(r, (m.const_at(i, j) for i in range(n) for j in range(k))))


Scalar.vdotv = vdotv
Scalar.vnorm = vnorm
Scalar.vmean = vmean
Scalar.smooth_max = smooth_max
Scalar.log_smooth_max = log_smooth_max
Scalar.mtrace = mtrace
Scalar.mnorm = mnorm
