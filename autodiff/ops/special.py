# autodiff/ops/special.py
import numpy as np
from scipy.special import ndtr

from ..core.node import Composite, as_node
from .arithmetic import _scaled, quiet_fp

SQRT_TWO_PI = np.sqrt(2.0 * np.pi)


def abs(x):
    """
    |x|, with gradient x.grad * sign(x). sign(0) is 0, so the gradient at
    x == 0 is zero.
    """
    x = as_node(x)

    def value_fn(ctx):
        return np.abs(x.value(ctx))

    def grad_fn(ctx):
        return _scaled(x.gradient(ctx), np.sign(x.value(ctx)))

    return Composite(value_fn, grad_fn, op_tag="abs", operands=(x,))


def _select(a_grads, b_grads, a_wins):
    """
    Gradient of a two-way selection. Parameters reached only through the
    losing operand get 0. A parameter shared by both takes the winner's
    partial (a's is kept only when a wins).
    """
    grads = {key: (g if a_wins else 0.0) for key, g in a_grads.items()}
    for key, g in b_grads.items():
        if key in grads:
            if not a_wins:
                grads[key] = g
        else:
            grads[key] = 0.0 if a_wins else g
    return grads


def minimum(a, b):
    """
    min(a, b). The gradient follows `a` only when a < b strictly; on a tie
    it follows `b`.
    """
    a = as_node(a)
    b = as_node(b)

    def value_fn(ctx):
        return np.minimum(a.value(ctx), b.value(ctx))

    def grad_fn(ctx):
        a_wins = bool(a.value(ctx) < b.value(ctx))
        return _select(a.gradient(ctx), b.gradient(ctx), a_wins)

    return Composite(value_fn, grad_fn, op_tag="min", operands=(a, b))


def maximum(a, b):
    """
    max(a, b). The gradient follows `a` only when a > b strictly; on a tie
    it follows `b`.
    """
    a = as_node(a)
    b = as_node(b)

    def value_fn(ctx):
        return np.maximum(a.value(ctx), b.value(ctx))

    def grad_fn(ctx):
        a_wins = bool(a.value(ctx) > b.value(ctx))
        return _select(a.gradient(ctx), b.gradient(ctx), a_wins)

    return Composite(value_fn, grad_fn, op_tag="max", operands=(a, b))


def norm_pdf(x):
    return np.exp(-0.5 * x * x) / SQRT_TWO_PI


def norm_cdf(x):
    """Standard normal CDF N(x), with dN/dx = phi(x)."""
    x = as_node(x)

    def value_fn(ctx):
        return np.float64(ndtr(x.value(ctx)))

    def grad_fn(ctx):
        with quiet_fp():
            pdf = norm_pdf(x.value(ctx))
        return _scaled(x.gradient(ctx), pdf)

    return Composite(value_fn, grad_fn, op_tag="norm_cdf", operands=(x,))
