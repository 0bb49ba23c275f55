# autodiff/errors.py
"""Exception types raised by vectors and matrices."""


class AutodiffError(Exception):
    pass


class DimensionError(AutodiffError, ValueError):
    """Operand dimensions do not agree."""


class NonSquareMatrixError(DimensionError):
    pass


class AliasingError(AutodiffError, ValueError):
    """Result storage overlaps an operand that must stay unchanged."""


def check_index(i: int, n: int):
    if i < 0 or i >= n:
        raise IndexError(f"index {i} out of bounds for vector of dimension {n}")
