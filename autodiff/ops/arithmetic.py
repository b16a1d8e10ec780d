# autodiff/ops/arithmetic.py
import numpy as np
from ..core.node import Composite, as_node


def quiet_fp():
    """Floating-point domain errors become inf/nan without RuntimeWarnings."""
    return np.errstate(divide="ignore", invalid="ignore", over="ignore")


def _accumulate(grads, other, factor=None):
    """
    grads[k] += other[k] * factor for every k in `other`, in place.
    Keys missing from `grads` are inserted.
    """
    for key, g in other.items():
        if factor is not None:
            g = g * factor
        if key in grads:
            grads[key] = grads[key] + g
        else:
            grads[key] = g
    return grads


def _scaled(grads, factor):
    """New mapping {k: g * factor}."""
    return {key: g * factor for key, g in grads.items()}


def add(a, b):
    """
    Sum node:
      value    = a + b
      gradient = union of both mappings, summed on shared parameters
    """
    a = as_node(a)
    b = as_node(b)

    def value_fn(ctx):
        with quiet_fp():
            return a.value(ctx) + b.value(ctx)

    def grad_fn(ctx):
        # Copy: a's mapping may be cached in ctx
        with quiet_fp():
            return _accumulate(dict(a.gradient(ctx)), b.gradient(ctx))

    return Composite(value_fn, grad_fn, op_tag="add", operands=(a, b))


def add_n(*nodes):
    """
    Left fold of `add` over `nodes` as a single node.

    Same value and gradient as add(add(add(n0, n1), n2), ...), summed in the
    same order, but one level deep, so long sums do not hit the recursion
    limit during evaluation.
    """
    if not nodes:
        raise ValueError("add_n() needs at least one node")
    nodes = tuple(as_node(n) for n in nodes)

    def value_fn(ctx):
        with quiet_fp():
            total = nodes[0].value(ctx)
            for node in nodes[1:]:
                total = total + node.value(ctx)
            return total

    def grad_fn(ctx):
        with quiet_fp():
            grads = dict(nodes[0].gradient(ctx))
            for node in nodes[1:]:
                _accumulate(grads, node.gradient(ctx))
            return grads

    return Composite(value_fn, grad_fn, op_tag="add_n", operands=nodes)


def neg(x):
    x = as_node(x)

    def value_fn(ctx):
        return -x.value(ctx)

    def grad_fn(ctx):
        return {key: -g for key, g in x.gradient(ctx).items()}

    return Composite(value_fn, grad_fn, op_tag="neg", operands=(x,))


def sub(a, b):
    return add(a, neg(b))


def mul(a, b):
    """
    Product rule:
      value       = a * b
      gradient[k] = a.grad[k] * b + b.grad[k] * a
    """
    a = as_node(a)
    b = as_node(b)

    def value_fn(ctx):
        with quiet_fp():
            return a.value(ctx) * b.value(ctx)

    def grad_fn(ctx):
        with quiet_fp():
            grads = _scaled(a.gradient(ctx), b.value(ctx))
            return _accumulate(grads, b.gradient(ctx), a.value(ctx))

    return Composite(value_fn, grad_fn, op_tag="mul", operands=(a, b))


def reciprocal(x):
    """
    1 / x. x == 0 yields inf (and inf/nan gradients), never an exception.
    """
    x = as_node(x)

    def value_fn(ctx):
        with quiet_fp():
            return 1.0 / x.value(ctx)

    def grad_fn(ctx):
        xv = x.value(ctx)
        with quiet_fp():
            neg_inv_sq = -1.0 / (xv * xv)
            return _scaled(x.gradient(ctx), neg_inv_sq)

    return Composite(value_fn, grad_fn, op_tag="reciprocal", operands=(x,))


def div(a, b):
    return mul(a, reciprocal(b))


def square(x):
    x = as_node(x)
    return mul(x, x)


def int_pow(x, n):
    """
    x ** n for an integer n, by repeated squaring with mul.

    Defined for every base (unlike pow(), which goes through log). n == 0
    gives the constant 1.0; negative n is the reciprocal of x ** -n.
    """
    x = as_node(x)
    if n == 0:
        return as_node(1.0)
    if n < 0:
        return reciprocal(int_pow(x, -n))

    result = None
    base = x
    while True:
        if n & 1:
            result = base if result is None else mul(result, base)
        n >>= 1
        if not n:
            return result
        base = mul(base, base)
