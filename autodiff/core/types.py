# autodiff/core/types.py
"""
Scalar type registry.

A ScalarType describes the backing numeric representation of a scalar and the
highest derivative order it can carry. All concrete scalars share one
implementation (`Scalar`); the type object supplies the few primitives whose
semantics differ between representations (value coercion, integer division).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Union

import numpy as np


@dataclass(frozen=True)
class ScalarType:
    """
    Attributes
    ----------
    name : str
        Registry key, e.g. "real64".
    dtype : np.dtype
        Storage type of the value and of the derivative buffers.
    max_order : int
        0 for plain values, 2 for types that propagate gradient and Hessian.
    """
    name: str
    dtype: np.dtype
    max_order: int = 0

    @property
    def integer(self) -> bool:
        return np.issubdtype(self.dtype, np.integer)

    def coerce(self, x) -> Union[int, float]:
        """Convert a numeric value into this type's representation."""
        if self.integer:
            # truncate toward zero, then wrap like fixed-width machine integers
            v = int(x) if isinstance(x, (int, np.integer)) else math.trunc(float(x))
            bits = 8 * self.dtype.itemsize
            half = 1 << (bits - 1)
            return ((v + half) % (1 << bits)) - half
        if self.dtype == np.float32:
            return float(np.float32(x))
        return float(x)

    def operand(self, x):
        """Value of an operand as seen by this type's arithmetic."""
        if self.integer:
            return self.coerce(x)
        return np.float64(x)

    def divide(self, x, y):
        if self.integer:
            x, y = self.coerce(x), self.coerce(y)
            q = abs(x) // abs(y)
            return q if (x >= 0) == (y >= 0) else -q
        with np.errstate(all="ignore"):
            return np.float64(x) / np.float64(y)

    def __repr__(self):
        return f"ScalarType({self.name})"


_REGISTRY: Dict[str, ScalarType] = {}


def register_scalar_type(stype: ScalarType) -> ScalarType:
    if stype.max_order not in (0, 1, 2):
        raise ValueError(f"invalid derivative order {stype.max_order} for type {stype.name}")
    _REGISTRY[stype.name] = stype
    return stype


def scalar_type(name: Union[str, ScalarType]) -> ScalarType:
    """Look up a registered type by name (types pass through unchanged)."""
    if isinstance(name, ScalarType):
        return name
    try:
        return _REGISTRY[name.lower()]
    except KeyError:
        raise ValueError(f"unknown scalar type {name!r}, expected one of {sorted(_REGISTRY)}") from None


def registered_types():
    return dict(_REGISTRY)


INT8 = register_scalar_type(ScalarType("int8", np.dtype(np.int8)))
INT16 = register_scalar_type(ScalarType("int16", np.dtype(np.int16)))
INT32 = register_scalar_type(ScalarType("int32", np.dtype(np.int32)))
INT64 = register_scalar_type(ScalarType("int64", np.dtype(np.int64)))
INT = register_scalar_type(ScalarType("int", np.dtype(np.int64)))
FLOAT32 = register_scalar_type(ScalarType("float32", np.dtype(np.float32)))
FLOAT64 = register_scalar_type(ScalarType("float64", np.dtype(np.float64)))
BARE_REAL = register_scalar_type(ScalarType("bare_real", np.dtype(np.float64)))
REAL32 = register_scalar_type(ScalarType("real32", np.dtype(np.float32), max_order=2))
REAL64 = register_scalar_type(ScalarType("real64", np.dtype(np.float64), max_order=2))
