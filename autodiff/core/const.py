# autodiff/core/const.py
"""
Read-only scalar interface.

Every scalar the operations accept exposes the same small capability set:
    val   : the numeric value
    grad  : first-order partials (1-D ndarray) or None when unallocated
    hess  : second-order partials (2-D ndarray) or None when unallocated
    stype : the backing ScalarType
Accessors below are defined purely in terms of these four fields, so a
mutable `Scalar`, a `ScalarView` on one, and a `Constant` can be used
interchangeably wherever a read-only scalar is expected.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from numbers import Real

import numpy as np

from .types import ScalarType, FLOAT64


class ConstScalar(ABC):
    __slots__ = ()

    @property
    @abstractmethod
    def val(self):
        ...

    @property
    @abstractmethod
    def grad(self):
        ...

    @property
    @abstractmethod
    def hess(self):
        ...

    @property
    @abstractmethod
    def stype(self) -> ScalarType:
        ...

    # ---------------- allocation state ---------------- #
    @property
    def n(self) -> int:
        """Number of variables the derivative buffers are sized for."""
        g = self.grad
        return 0 if g is None else len(g)

    @property
    def order(self) -> int:
        if self.grad is None:
            return 0
        if self.hess is None:
            return 1
        return 2

    # ---------------- value access ---------------- #
    def get_float64(self) -> float:
        return float(self.val)

    def get_float32(self) -> float:
        return float(np.float32(self.val))

    def get_int(self) -> int:
        return int(self.val)

    def get_derivative(self, i: int) -> float:
        """∂value/∂x_i, 0 if no gradient is allocated."""
        g = self.grad
        if g is None:
            return 0.0
        return float(g[i])

    def get_hessian(self, i: int, j: int) -> float:
        """∂²value/∂x_i∂x_j, 0 if no Hessian is allocated."""
        h = self.hess
        if h is None:
            return 0.0
        return float(h[i, j])

    def get_gradient(self, n: int = None) -> np.ndarray:
        """Copy of the gradient as float64, zero-filled to length `n`."""
        n = self.n if n is None else n
        r = np.zeros(n)
        if self.grad is not None:
            m = min(n, self.n)
            r[:m] = self.grad[:m]
        return r

    def get_hessian_matrix(self, n: int = None) -> np.ndarray:
        n = self.n if n is None else n
        r = np.zeros((n, n))
        if self.hess is not None:
            m = min(n, self.n)
            r[:m, :m] = self.hess[:m, :m]
        return r

    # ---------------- value-only comparisons ---------------- #
    def sign(self) -> int:
        v = self.val
        if v < 0:
            return -1
        if v > 0:
            return 1
        return 0

    def greater(self, b) -> bool:
        return self.val > as_const(b).val

    def smaller(self, b) -> bool:
        return self.val < as_const(b).val

    def equals(self, b, epsilon: float = None) -> bool:
        """
        Epsilon-tolerant value comparison. NaN equals NaN and infinities
        equal infinities of the same sign. Derivatives are not compared.
        """
        if epsilon is None:
            from ..config import ADConfig
            epsilon = ADConfig.EQUALS_EPSILON
        v1 = float(self.val)
        v2 = float(as_const(b).val)
        return (abs(v1 - v2) < epsilon or
                (math.isnan(v1) and math.isnan(v2)) or
                (v1 == math.inf and v2 == math.inf) or
                (v1 == -math.inf and v2 == -math.inf))

    def is_null(self) -> bool:
        """True if value and all allocated derivatives are zero."""
        if self.val != 0:
            return False
        if self.grad is not None and np.any(self.grad):
            return False
        if self.hess is not None and np.any(self.hess):
            return False
        return True

    def __lt__(self, other):
        return self.smaller(other)

    def __gt__(self, other):
        return self.greater(other)

    def __le__(self, other):
        return not self.greater(other)

    def __ge__(self, other):
        return not self.smaller(other)

    def __float__(self):
        return float(self.val)

    def __int__(self):
        return int(self.val)

    def __str__(self):
        return str(self.val)


class Constant(ConstScalar):
    """Immutable value without derivatives (order 0)."""
    __slots__ = ("_val", "_stype")

    def __init__(self, val, stype: ScalarType = FLOAT64):
        self._stype = stype
        self._val = stype.coerce(val)

    @property
    def val(self):
        return self._val

    @property
    def grad(self):
        return None

    @property
    def hess(self):
        return None

    @property
    def stype(self):
        return self._stype

    def __repr__(self):
        return f"Constant({self._val!r})"


class ScalarView(ConstScalar):
    """Read-only window on a mutable scalar; derivative arrays are returned non-writeable."""
    __slots__ = ("_s",)

    def __init__(self, s):
        self._s = s

    @property
    def val(self):
        return self._s.val

    @property
    def grad(self):
        return _readonly(self._s.grad)

    @property
    def hess(self):
        return _readonly(self._s.hess)

    @property
    def stype(self):
        return self._s.stype

    def clone(self):
        return self._s.clone()

    def __repr__(self):
        return f"ScalarView({self._s!r})"


def _readonly(a):
    if a is None:
        return None
    v = a.view()
    v.flags.writeable = False
    return v


def as_const(x) -> ConstScalar:
    """Wrap plain numbers as Constant; scalars pass through unchanged."""
    if isinstance(x, ConstScalar):
        return x
    if isinstance(x, (Real, np.number)):
        return Constant(x)
    raise TypeError(f"expected a scalar or a real number, but got {type(x)}")
