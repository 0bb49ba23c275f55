"""
Autodiff Configuration

Shared defaults for scalar construction, comparisons and numerically
stable composite functions.
"""

import os
from typing import Tuple

from .core.types import ScalarType, scalar_type


class ADConfig:
    """Shared configuration for scalars, vectors and matrices"""

    DEFAULT_SCALAR_TYPE: str = os.environ.get("AUTODIFF_SCALAR_TYPE", "real64")

    # tolerance used by equals() when no epsilon is given
    EQUALS_EPSILON: float = 1e-12

    # tolerance used by Matrix.is_symmetric()
    SYMMETRY_EPSILON: float = 1e-12

    # regime boundaries of log1p_exp
    LOG1PEXP_BOUNDS: Tuple[float, float, float] = (-37.0, 18.0, 33.3)

    @staticmethod
    def default_scalar_type() -> ScalarType:
        """
        Resolve the default scalar type through the registry

        Returns:
            The ScalarType used by constructors that are not given a type
            explicitly. Unknown names raise ValueError.
        """
        return scalar_type(ADConfig.DEFAULT_SCALAR_TYPE)

    @staticmethod
    def set_default_scalar_type(name) -> ScalarType:
        """
        Change the default scalar type at runtime

        Args:
            name: Registered type name or ScalarType

        Returns:
            The resolved ScalarType
        """
        stype = scalar_type(name)
        ADConfig.DEFAULT_SCALAR_TYPE = stype.name
        return stype

    @staticmethod
    def resolve(stype=None) -> ScalarType:
        """Return `stype` resolved through the registry, or the default."""
        if stype is None:
            return ADConfig.default_scalar_type()
        return scalar_type(stype)
