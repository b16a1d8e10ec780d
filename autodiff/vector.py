"""
Fixed-rank vectors of expression nodes.

A vector is an ordered tuple of nodes. Element-wise operations build a new
ComputedVector whose elements are composite nodes; rank mismatches are
rejected when the new vector is built, never at evaluation time.

    xs = ParameterVector.from_values([1.0, 2.0, 3.0])
    ys = ConstantVector.from_values([1.5, 1.5, 3.5])
    loss = (xs - ys).square().reduce_mean()

ComputedVector can evaluate its elements in parallel on a fixed-size thread
pool (see ParallelConfig). All elements share one Context, whose per-node
locks keep shared subexpressions evaluated once.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .config import ParallelConfig
from .core.errors import EmptyReductionError, RankMismatchError
from .core.node import Composite, Constant, Node, Parameter, _is_operand, as_node
from .ops.arithmetic import add, add_n, div, mul, neg, sub
from .ops.arithmetic import square as _square

logger = logging.getLogger(__name__)


class Vector(ABC):
    """Base class for fixed-rank vectors of nodes."""

    __array_ufunc__ = None

    @property
    @abstractmethod
    def elements(self) -> Tuple[Node, ...]:
        ...

    @property
    def rank(self) -> int:
        return len(self.elements)

    def __len__(self):
        return self.rank

    def __iter__(self):
        return iter(self.elements)

    def __getitem__(self, index):
        return self.elements[index]

    def __repr__(self):
        return f"{type(self).__name__}(rank={self.rank})"

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def prepare_values(self, ctx) -> np.ndarray:
        """Values of every element, in order."""
        return np.array([e.value(ctx) for e in self.elements], dtype=float)

    def prepare_gradients(self, ctx) -> List[Dict[Parameter, float]]:
        """Gradient mapping of every element, in order."""
        return [e.gradient(ctx) for e in self.elements]

    def values(self, ctx) -> np.ndarray:
        return self.prepare_values(ctx)

    # ------------------------------------------------------------------
    # Element-wise construction
    # ------------------------------------------------------------------
    def map(self, func: Callable[[Node], Node]) -> "ComputedVector":
        """Apply a node builder to every element."""
        return ComputedVector(*(func(e) for e in self.elements))

    @staticmethod
    def map2(func: Callable[[Node, Node], Node], a: "Vector", b: "Vector") -> "ComputedVector":
        """Apply a binary node builder pairwise; ranks must match."""
        if a.rank != b.rank:
            raise RankMismatchError(a.rank, b.rank)
        return ComputedVector(*(func(x, y) for x, y in zip(a.elements, b.elements)))

    def square(self) -> "ComputedVector":
        return self.map(_square)

    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------
    def reduce_sum(self) -> Composite:
        """Sum of all elements (left fold of add)."""
        if self.rank == 0:
            raise EmptyReductionError("sum")
        total = add_n(*self.elements)
        return Composite(total.value, total.gradient, op_tag="reduce_sum", operands=(total,))

    def reduce_mean(self) -> Composite:
        """reduce_sum() / rank."""
        if self.rank == 0:
            raise EmptyReductionError("get mean of")
        return div(self.reduce_sum(), self.rank)

    def dot(self, other: "Vector") -> Composite:
        return (self * other).reduce_sum()

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------
    def _broadcast(self, func, scalar) -> "ComputedVector":
        # One shared node for the scalar across all elements
        scalar = as_node(scalar)
        return self.map(lambda e: func(e, scalar))

    def __add__(self, other):
        if isinstance(other, Vector):
            return Vector.map2(add, self, other)
        if _is_operand(other):
            return self._broadcast(add, other)
        return NotImplemented

    def __radd__(self, other):
        if _is_operand(other):
            return self._broadcast(add, other)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Vector):
            if self.rank != other.rank:
                raise RankMismatchError(self.rank, other.rank)
            return self + (-other)
        if _is_operand(other):
            return self._broadcast(sub, other)
        return NotImplemented

    def __rsub__(self, other):
        if _is_operand(other):
            scalar = as_node(other)
            return self.map(lambda e: sub(scalar, e))
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Vector):
            return Vector.map2(mul, self, other)
        if _is_operand(other):
            return self._broadcast(mul, other)
        return NotImplemented

    def __rmul__(self, other):
        if _is_operand(other):
            return self._broadcast(mul, other)
        return NotImplemented

    def __truediv__(self, other):
        if _is_operand(other):
            return self._broadcast(div, other)
        return NotImplemented

    def __neg__(self):
        return self.map(neg)


class ParameterVector(Vector):
    """Vector of Parameter leaves."""

    def __init__(self, *params: Parameter):
        for p in params:
            if not isinstance(p, Parameter):
                raise TypeError(f"ParameterVector expects Parameter elements, got {type(p).__name__}")
        self._params = tuple(params)

    @property
    def elements(self) -> Tuple[Parameter, ...]:
        return self._params

    @property
    def params(self) -> Tuple[Parameter, ...]:
        return self._params

    @classmethod
    def from_values(cls, values: Iterable[float], name: Optional[str] = None) -> "ParameterVector":
        return cls(*(
            Parameter(v, name=None if name is None else f"{name}[{i}]")
            for i, v in enumerate(values)
        ))

    @classmethod
    def from_initializer(cls, size: int, initializer: Callable[[], float],
                         name: Optional[str] = None) -> "ParameterVector":
        """`size` parameters, each set to a fresh `initializer()` call."""
        return cls.from_values((initializer() for _ in range(size)), name=name)

    def assign(self, values: Sequence[float]):
        """Set every parameter's value in place."""
        if len(values) != self.rank:
            raise RankMismatchError(self.rank, len(values))
        for p, v in zip(self._params, values):
            p.val = np.float64(v)


class ConstantVector(Vector):
    """Vector of Constant leaves. Plain numbers are wrapped as constants."""

    def __init__(self, *consts):
        self._consts = tuple(c if isinstance(c, Constant) else Constant(c) for c in consts)

    @property
    def elements(self) -> Tuple[Constant, ...]:
        return self._consts

    @classmethod
    def from_values(cls, values: Iterable[float]) -> "ConstantVector":
        return cls(*values)


class ComputedVector(Vector):
    """
    Vector whose elements are computed nodes.

    prepare_values / prepare_gradients evaluate the elements independently on
    a bounded thread pool and return only after every element is done.
    """

    def __init__(self, *elements: Node, config: Optional[ParallelConfig] = None):
        self._elements = tuple(as_node(e) for e in elements)
        self.config = config or ParallelConfig()

    @property
    def elements(self) -> Tuple[Node, ...]:
        return self._elements

    def _run(self, func):
        n_workers = min(self.config.n_workers, self.rank)
        if not self.config.enabled or n_workers < 2:
            return [func(e) for e in self._elements]

        logger.debug("batch evaluation: rank=%d, workers=%d", self.rank, n_workers)
        with ThreadPoolExecutor(max_workers=n_workers) as executor:
            return list(executor.map(func, self._elements))

    def prepare_values(self, ctx) -> np.ndarray:
        return np.array(self._run(lambda e: e.value(ctx)), dtype=float)

    def prepare_gradients(self, ctx) -> List[Dict[Parameter, float]]:
        return self._run(lambda e: e.gradient(ctx))


def dot(a: Vector, b: Vector) -> Composite:
    return a.dot(b)


def reduce_sum(vector: Vector) -> Composite:
    return vector.reduce_sum()


def reduce_mean(vector: Vector) -> Composite:
    return vector.reduce_mean()
