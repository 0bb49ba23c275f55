"""Small helpers shared by the test modules."""

from autodiff import Scalar, new_scalar


def call(op, *args):
    """Apply a bound scalar operation into a fresh result: call("exp", x)."""
    return getattr(new_scalar(), op)(*args)


def finite_difference(f, x, h=1e-5):
    """Central differences of a scalar function of one float: (f', f'')."""
    def v(t):
        return f(Scalar(t)).get_float64()
    d1 = (v(x + h) - v(x - h)) / (2 * h)
    d2 = (v(x + h) - 2 * v(x) + v(x - h)) / (h * h)
    return d1, d2
