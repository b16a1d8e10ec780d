# autodiff/core/__init__.py

"""
Core public API for the autodiff package.

Exports:
    Node, Parameter, Constant, Composite : expression node types.
    as_node, constant                    : numeric -> node conversion.
    Context, use_context                 : per-pass memoization cache.
    AutodiffError, RankMismatchError,
    EmptyReductionError                  : error types.
    value, gradient, grad, grads,
    grads_list                           : one-shot convenience helpers.
"""

from .node import Node, Parameter, Constant, Composite, as_node, constant
from .context import Context, use_context
from .errors import AutodiffError, RankMismatchError, EmptyReductionError
from .seeds import value, gradient, grad, grads, grads_list

__all__ = [
    "Node", "Parameter", "Constant", "Composite", "as_node", "constant",
    "Context", "use_context",
    "AutodiffError", "RankMismatchError", "EmptyReductionError",
    "value", "gradient", "grad", "grads", "grads_list",
]
