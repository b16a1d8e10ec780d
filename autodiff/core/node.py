# autodiff/core/node.py
from __future__ import annotations
import itertools
import numbers
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

import numpy as np

# Process-wide counter giving every node a stable, readable id
_uids = itertools.count()

Gradient = Dict["Parameter", float]


def _is_number(x: Any) -> bool:
    return isinstance(x, numbers.Real) and not isinstance(x, bool)


def _check_number(val: Any, kind: str) -> np.float64:
    if not _is_number(val):
        raise TypeError(f"{kind} only accepts real numbers, but got {type(val)}")
    return np.float64(val)


class Node(ABC):
    """
    Base class for every expression node.

    Nodes are compared and hashed by identity: two structurally equal
    expressions built separately never share a cache entry.

    Attributes
    ----------
    uid  : int
        Creation-order id (debug / graph summaries only).
    name : Optional[str]
        Optional debug name.
    """

    # numpy scalars defer to our reflected operators (np.float64(2) * node)
    __array_ufunc__ = None

    def __init__(self, name: Optional[str] = None):
        self.uid = next(_uids)
        self.name = name

    @abstractmethod
    def value(self, ctx) -> float:
        ...

    @abstractmethod
    def gradient(self, ctx) -> Gradient:
        ...

    def square(self) -> "Composite":
        from ..ops.arithmetic import square
        return square(self)

    # Operator overloading for arithmetic operations. Unknown operand types
    # return NotImplemented so that Vector can handle `node <op> vector`.
    def __add__(self, other):
        if not _is_operand(other):
            return NotImplemented
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        if not _is_operand(other):
            return NotImplemented
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        if not _is_operand(other):
            return NotImplemented
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        if not _is_operand(other):
            return NotImplemented
        from ..ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pow__(self, other):
        if not _is_operand(other):
            return NotImplemented
        if isinstance(other, numbers.Integral):
            # Integer powers by repeated multiplication, valid for any base
            from ..ops.arithmetic import int_pow
            return int_pow(self, int(other))
        from ..ops.transcendental import pow
        return pow(self, other)

    def __rpow__(self, other):
        if not _is_operand(other):
            return NotImplemented
        from ..ops.transcendental import pow
        return pow(other, self)


class Parameter(Node):
    """
    Mutable leaf: the free variables gradients are taken with respect to.

    `val` is changed in place between passes (usually by an optimizer).
    """

    def __init__(self, val: Any, *, name: Optional[str] = None):
        super().__init__(name)
        self.val = _check_number(val, "Parameter")

    def __repr__(self):
        return f"Parameter({float(self.val)!r}, name={self.name!r}, uid={self.uid})"

    def value(self, ctx) -> float:
        return np.float64(self.val)

    def gradient(self, ctx) -> Gradient:
        return {self: 1.0}


class Constant(Node):
    """Immutable leaf with an empty gradient."""

    def __init__(self, val: Any, *, name: Optional[str] = None):
        super().__init__(name)
        self._val = _check_number(val, "Constant")

    @property
    def val(self) -> np.float64:
        return self._val

    def __repr__(self):
        return f"Constant({float(self._val)!r}, uid={self.uid})"

    def value(self, ctx) -> float:
        return self._val

    def gradient(self, ctx) -> Gradient:
        return {}


class Composite(Node):
    """
    Node defined by a value function and a gradient function of its operands.

    Both functions take the context and are evaluated lazily through it, so
    each runs at most once per context. The node itself holds no results.

    Attributes
    ----------
    op_tag   : str
        Debug tag (e.g., "add", "mul").
    operands : Tuple[Node, ...]
        Operand nodes, used for graph inspection only.
    """

    def __init__(self,
                 value_fn: Callable[[Any], float],
                 grad_fn: Callable[[Any], Gradient],
                 *,
                 op_tag: str = "composite",
                 operands: Tuple[Node, ...] = (),
                 name: Optional[str] = None):
        super().__init__(name)
        self._value_fn = value_fn
        self._grad_fn = grad_fn
        self.op_tag = op_tag
        self.operands = tuple(operands)

    def __repr__(self):
        args = ", ".join(f"#{op.uid}" for op in self.operands)
        return f"Composite({self.op_tag}({args}), uid={self.uid})"

    def value(self, ctx) -> float:
        return ctx.value_of(self, self._value_fn)

    def gradient(self, ctx) -> Gradient:
        return ctx.gradient_of(self, self._grad_fn)


def _is_operand(x: Any) -> bool:
    return isinstance(x, Node) or _is_number(x)


def constant(val: Any, *, name: Optional[str] = None) -> Constant:
    """Explicit numeric -> node constructor."""
    return Constant(val, name=name)


def as_node(x: Any) -> Node:
    """Ensure x is a Node; otherwise wrap a real number as a Constant."""
    if isinstance(x, Node):
        return x
    if _is_number(x):
        return Constant(x)
    raise TypeError(f"cannot use {type(x).__name__} as an expression node")
