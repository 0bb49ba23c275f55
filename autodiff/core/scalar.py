# autodiff/core/scalar.py
from __future__ import annotations

from typing import Optional

import numpy as np

from .const import ConstScalar, ScalarView, as_const
from .types import ScalarType


class Scalar(ConstScalar):
    """
    Differentiable scalar with forward-propagated gradient and Hessian.

    Attributes
    ----------
    val : int | float
        Value, stored in the representation of `stype`.
    grad : np.ndarray | None
        ∂val/∂x_i for each declared variable x_i; None while unallocated
        (the scalar then behaves as a constant).
    hess : np.ndarray | None
        Symmetric matrix of ∂²val/∂x_i∂x_j; None unless allocated with order 2.
    stype : ScalarType
        Backing numeric type. Types with max_order 0 never allocate buffers.

    Operations write into the receiver and return it, e.g. `c.add(a, b)`
    stores a+b in c. The receiver may be one of the operands. The operation
    set itself is bound by the `autodiff.ops` modules.
    """
    __slots__ = ("val", "grad", "hess", "stype")

    def __init__(self, value=0.0, stype: Optional[ScalarType] = None):
        if stype is None:
            from ..config import ADConfig
            stype = ADConfig.default_scalar_type()
        self.stype = stype
        self.val = stype.coerce(value)
        self.grad = None
        self.hess = None

    def __repr__(self):
        if self.grad is None:
            return f"Scalar({self.val!r}, {self.stype.name})"
        return f"Scalar({self.val!r}, {self.stype.name}, order={self.order}, n={self.n})"

    # ---------------- buffers ---------------- #
    def alloc(self, n: int, order: int):
        """
        Allocate zeroed derivative buffers for `n` variables up to `order`.
        Requests above the type's max_order are capped; order 0 frees the buffers.
        """
        order = min(order, self.stype.max_order)
        if order <= 0 or n <= 0:
            self.grad = None
            self.hess = None
            return self
        self.grad = np.zeros(n, dtype=self.stype.dtype)
        self.hess = np.zeros((n, n), dtype=self.stype.dtype) if order >= 2 else None
        return self

    def _write(self, v, g: np.ndarray, h: Optional[np.ndarray]):
        self.val = self.stype.coerce(v)
        self.grad = g.astype(self.stype.dtype, copy=False)
        self.hess = None if h is None else h.astype(self.stype.dtype, copy=False)

    def _write_value_only(self, v):
        self.val = self.stype.coerce(v)
        self.reset_derivatives()

    def reset_derivatives(self):
        if self.grad is not None:
            self.grad = np.zeros_like(self.grad)
        if self.hess is not None:
            self.hess = np.zeros_like(self.hess)
        return self

    # ---------------- setters ---------------- #
    def set(self, a):
        """Copy value and derivatives of `a`."""
        a = as_const(a)
        if a.grad is None or self.stype.max_order == 0:
            self._write_value_only(a.val)
            return self
        self.val = self.stype.coerce(a.val)
        self.grad = np.array(a.grad, dtype=self.stype.dtype)
        if a.hess is not None and self.stype.max_order >= 2:
            self.hess = np.array(a.hess, dtype=self.stype.dtype)
        else:
            self.hess = None
        return self

    def set_value(self, v):
        """Set the value, leaving derivative buffers untouched."""
        self.val = self.stype.coerce(float(v) if isinstance(v, ConstScalar) else v)
        return self

    def reset(self):
        """Zero value and derivatives, keeping the allocation."""
        self.val = self.stype.coerce(0)
        return self.reset_derivatives()

    def set_derivative(self, i: int, v: float):
        self.grad[i] = v
        return self

    def set_hessian(self, i: int, j: int, v: float):
        self.hess[i, j] = v
        return self

    def set_variable(self, i: int, n: int, order: int):
        """Make this scalar variable x_i out of n: ∂x_i/∂x_i = 1, all second partials 0."""
        self.alloc(n, order)
        if self.grad is not None:
            self.grad[i] = 1
        return self

    # ---------------- copies ---------------- #
    def clone(self) -> "Scalar":
        r = Scalar.__new__(Scalar)
        r.stype = self.stype
        r.val = self.val
        r.grad = None if self.grad is None else self.grad.copy()
        r.hess = None if self.hess is None else self.hess.copy()
        return r

    def convert(self, stype: ScalarType) -> "Scalar":
        """Copy of this scalar in another representation."""
        return Scalar(0, stype).set(self)

    def view(self) -> ScalarView:
        return ScalarView(self)

    # ---------------- Python operators (new scalars) ---------------- #
    def _new(self):
        return Scalar(0, self.stype)

    def __add__(self, other):
        return self._new().add(self, other)

    def __radd__(self, other):
        return self._new().add(other, self)

    def __sub__(self, other):
        return self._new().sub(self, other)

    def __rsub__(self, other):
        return self._new().sub(other, self)

    def __mul__(self, other):
        return self._new().mul(self, other)

    def __rmul__(self, other):
        return self._new().mul(other, self)

    def __truediv__(self, other):
        return self._new().div(self, other)

    def __rtruediv__(self, other):
        return self._new().div(other, self)

    def __pow__(self, other):
        return self._new().pow(self, other)

    def __rpow__(self, other):
        return self._new().pow(other, self)

    def __neg__(self):
        return self._new().neg(self)

    def __abs__(self):
        return self._new().abs(self)


def new_scalar(value=0.0, stype=None) -> Scalar:
    """Scalar holding `value` without derivatives (order 0)."""
    from ..config import ADConfig
    return Scalar(value, ADConfig.resolve(stype))


def null_scalar(stype=None) -> Scalar:
    """Zero-valued scalar."""
    return new_scalar(0.0, stype)
