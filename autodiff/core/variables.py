# autodiff/core/variables.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, List

from ..logging import getLogger
from .scalar import Scalar

logger = getLogger(__name__)


class VariableContext:
    """
    Numbers independent variables for one computation.

    Scalars are registered in declaration order and receive indices
    0..k-1; `allocate()` then gives each of them derivative buffers sized
    for k variables with the one-hot seed ∂x_i/∂x_i = 1. Intermediate
    scalars are not registered: they inherit their buffer size from the
    operands of the first operation that writes them.
    """
    def __init__(self, order: int = 1):
        if order not in (1, 2):
            raise ValueError(f"derivative order must be 1 or 2, got {order}")
        self.order = order
        self.scalars: List[Scalar] = []

    def add(self, *scalars: Scalar) -> List[int]:
        """Register scalars as variables; returns their indices."""
        indices = []
        for s in scalars:
            if not isinstance(s, Scalar):
                raise TypeError(f"variables must be mutable scalars, but got {type(s)}")
            if any(s is t for t in self.scalars):
                raise ValueError("scalar declared twice as a variable")
            self.scalars.append(s)
            indices.append(len(self.scalars) - 1)
        return indices

    def extend(self, scalars: Iterable[Scalar]) -> List[int]:
        return self.add(*scalars)

    def index(self, s: Scalar) -> int:
        for i, t in enumerate(self.scalars):
            if t is s:
                return i
        raise KeyError("scalar is not a declared variable")

    def allocate(self):
        n = len(self.scalars)
        for i, s in enumerate(self.scalars):
            s.set_variable(i, n, self.order)
        logger.debug("declared %d variables of order %d", n, self.order)
        return self

    def __len__(self):
        return len(self.scalars)


def variables(order: int, *scalars: Scalar) -> VariableContext:
    """
    Declare `scalars` as independent variables x_0..x_{k-1}:
        x = new_scalar(9.0)
        variables(2, x)
        y = 2*x**3 + 4      # y.get_derivative(0) == 486, y.get_hessian(0, 0) == 108
    """
    ctx = VariableContext(order)
    ctx.add(*scalars)
    return ctx.allocate()


@contextmanager
def declare(order: int = 1):
    """
    Collect variables inside a with-block and allocate them on exit:
        with declare(2) as ctx:
            ctx.add(x, y)
    """
    ctx = VariableContext(order)
    yield ctx
    ctx.allocate()
