# autodiff/ops/__init__.py

# Convenience re-exports so users can do: from autodiff.ops import mul, exp, ...
from .arithmetic import add, add_n, sub, mul, div, neg, reciprocal, square, int_pow
from .transcendental import exp, log, sqrt, pow, erf
from .special import abs, minimum, maximum, norm_cdf

__all__ = [
    "add", "add_n", "sub", "mul", "div", "neg", "reciprocal", "square", "int_pow",
    "exp", "log", "sqrt", "pow", "erf",
    "abs", "minimum", "maximum", "norm_cdf",
]
