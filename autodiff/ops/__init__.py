# autodiff/ops/__init__.py

# Importing the modules binds the operation set to Scalar
from . import arithmetic
from . import transcendental
from . import special
from . import composite
from . import reductions

# Function forms: add(r, a, b) is the same as r.add(a, b)
from .arithmetic import neg, add, sub, mul, div, pow, sqrt, abs, min, max
from .transcendental import exp, log, log1p, sin, cos, tan, sinh, cosh, tanh
from .special import (erf, erfc, log_erfc, gamma, lgamma, mlgamma,
                      gamma_p, bessel_i, log_bessel_i)
from .composite import log_add, log_sub, log1p_exp, sigmoid, logistic
from .reductions import vdotv, vnorm, vmean, smooth_max, log_smooth_max, mtrace, mnorm

__all__ = [
    "neg", "add", "sub", "mul", "div", "pow", "sqrt", "abs", "min", "max",
    "exp", "log", "log1p", "sin", "cos", "tan", "sinh", "cosh", "tanh",
    "erf", "erfc", "log_erfc", "gamma", "lgamma", "mlgamma",
    "gamma_p", "bessel_i", "log_bessel_i",
    "log_add", "log_sub", "log1p_exp", "sigmoid", "logistic",
    "vdotv", "vnorm", "vmean", "smooth_max", "log_smooth_max", "mtrace", "mnorm",
]
