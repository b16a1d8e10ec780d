# autodiff/ops/transcendental.py
import numpy as np
from scipy.special import erf as scipy_erf

from ..core.node import Composite, as_node
from .arithmetic import _scaled, mul, quiet_fp

TWO_OVER_SQRT_PI = 2.0 / np.sqrt(np.pi)


def exp(x):
    x = as_node(x)

    def value_fn(ctx):
        with quiet_fp():
            return np.exp(x.value(ctx))

    def grad_fn(ctx):
        with quiet_fp():
            ex = np.exp(x.value(ctx))
        return _scaled(x.gradient(ctx), ex)

    return Composite(value_fn, grad_fn, op_tag="exp", operands=(x,))


def log(x):
    """Natural log. x <= 0 propagates nan / -inf."""
    x = as_node(x)

    def value_fn(ctx):
        with quiet_fp():
            return np.log(x.value(ctx))

    def grad_fn(ctx):
        xv = x.value(ctx)
        with quiet_fp():
            return {key: g / xv for key, g in x.gradient(ctx).items()}

    return Composite(value_fn, grad_fn, op_tag="log", operands=(x,))


def sqrt(x):
    x = as_node(x)

    def value_fn(ctx):
        with quiet_fp():
            return np.sqrt(x.value(ctx))

    def grad_fn(ctx):
        with quiet_fp():
            two_sqrt_x = 2.0 * np.sqrt(x.value(ctx))
            return {key: g / two_sqrt_x for key, g in x.gradient(ctx).items()}

    return Composite(value_fn, grad_fn, op_tag="sqrt", operands=(x,))


def pow(x, p):
    """
    x ** p, built as exp(log(x) * p).

    Only valid for x > 0; other inputs are not guarded and give nan.
    """
    return exp(mul(log(x), p))


def erf(x):
    """
    Gauss error function node. Values come from scipy.special.erf; each
    partial is scaled by the closed-form slope 2/sqrt(pi) * exp(-x**2).
    """
    x = as_node(x)

    def value_fn(ctx):
        return np.float64(scipy_erf(x.value(ctx)))

    def grad_fn(ctx):
        xv = x.value(ctx)
        with quiet_fp():
            deriv = TWO_OVER_SQRT_PI * np.exp(-xv * xv)
        return _scaled(x.gradient(ctx), deriv)

    return Composite(value_fn, grad_fn, op_tag="erf", operands=(x,))
