# autodiff/core/chain.py
"""
Forward propagation of gradient and Hessian through one primitive.

For a unary primitive r = f(a):
    ∂r/∂x_i      = f'(a) ∂a/∂x_i
    ∂²r/∂x_i∂x_j = f'(a) ∂²a/∂x_i∂x_j + f''(a) ∂a/∂x_i ∂a/∂x_j

For a binary primitive r = f(a, b), with f_a, f_b, f_aa, f_bb, f_ab the
partials of f at (a, b):
    ∂r/∂x_i      = f_a ∂a/∂x_i + f_b ∂b/∂x_i
    ∂²r/∂x_i∂x_j = f_a ∂²a/∂x_i∂x_j + f_b ∂²b/∂x_i∂x_j
                 + f_aa ∂a/∂x_i ∂a/∂x_j + f_bb ∂b/∂x_i ∂b/∂x_j
                 + f_ab (∂a/∂x_i ∂b/∂x_j + ∂a/∂x_j ∂b/∂x_i)

Terms of an operand without derivative buffers are skipped, and a second
order coefficient passed as None is treated as structurally zero. A term
whose derivative factor is exactly zero contributes zero even if its
coefficient is NaN or Inf (e.g. ∂(x^k)/∂k for x < 0 while k is constant
with respect to x_i).

All new buffers are computed before the result is written, so `r` may be
the same object as `a` or `b`.
"""
from __future__ import annotations

import math
from typing import Optional

import numpy as np


def _scale(c, v: np.ndarray) -> np.ndarray:
    c = float(c)
    if math.isfinite(c):
        return c * v
    with np.errstate(all="ignore"):
        return np.where(v != 0, c * v, 0.0)


def _padded_grad(a, n: int) -> Optional[np.ndarray]:
    g = a.grad
    if g is None:
        return None
    g = np.asarray(g, dtype=np.float64)
    if len(g) < n:
        g = np.concatenate([g, np.zeros(n - len(g))])
    return g


def _padded_hess(a, n: int) -> Optional[np.ndarray]:
    h = a.hess
    if h is None:
        return None
    h = np.asarray(h, dtype=np.float64)
    if h.shape[0] < n:
        p = np.zeros((n, n))
        p[:h.shape[0], :h.shape[1]] = h
        h = p
    return h


def _target(r, *operands):
    """Buffer size and order the result takes from its operands."""
    n = 0
    order = 0
    for a in operands:
        g = a.grad
        if g is None:
            continue
        n = max(n, len(g))
        order = max(order, 1 if a.hess is None else 2)
    return n, min(order, r.stype.max_order)


def apply_unary(r, a, v0, d1, d2=None):
    """Write f(a) into r given f(a)=v0, f'(a)=d1, f''(a)=d2."""
    n, order = _target(r, a)
    if order == 0:
        r._write_value_only(v0)
        return r
    with np.errstate(all="ignore"):
        ga = _padded_grad(a, n)
        g = _scale(d1, ga)
        h = None
        if order >= 2:
            h = np.zeros((n, n))
            ha = _padded_hess(a, n)
            if ha is not None:
                h += _scale(d1, ha)
            if d2 is not None:
                h += _scale(d2, np.outer(ga, ga))
    r._write(v0, g, h)
    return r


def apply_binary(r, a, b, v0, fa, fb, faa=None, fbb=None, fab=None):
    """Write f(a, b) into r given the value and partials of f at (a, b)."""
    n, order = _target(r, a, b)
    if order == 0:
        r._write_value_only(v0)
        return r
    with np.errstate(all="ignore"):
        ga = _padded_grad(a, n)
        gb = _padded_grad(b, n)
        g = np.zeros(n)
        if ga is not None:
            g += _scale(fa, ga)
        if gb is not None:
            g += _scale(fb, gb)
        h = None
        if order >= 2:
            h = np.zeros((n, n))
            if ga is not None:
                ha = _padded_hess(a, n)
                if ha is not None:
                    h += _scale(fa, ha)
                if faa is not None:
                    h += _scale(faa, np.outer(ga, ga))
            if gb is not None:
                hb = _padded_hess(b, n)
                if hb is not None:
                    h += _scale(fb, hb)
                if fbb is not None:
                    h += _scale(fbb, np.outer(gb, gb))
            if fab is not None and ga is not None and gb is not None:
                cross = np.outer(ga, gb)
                h += _scale(fab, cross + cross.T)
    r._write(v0, g, h)
    return r
