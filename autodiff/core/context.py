# autodiff/core/context.py
from __future__ import annotations
import logging
import threading
from contextlib import contextmanager
from functools import partialmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class Context:
    """
    Per-pass memoization cache for node values and gradient mappings.

    Both caches are keyed by node identity. For one context instance the
    value function and the gradient function of every composite node run at
    most once, even when several threads ask for the same node first.

    A context is never invalidated implicitly: after mutating a parameter,
    call ``clear()`` or create a new context.

    Evaluation recurses through operands: each level of a composite chain
    costs three Python frames (node.value, _compute_once, the value
    function), so chains deeper than about sys.getrecursionlimit() / 3
    nested nodes raise RecursionError. Use add_n() or Vector.reduce_sum()
    for long sums instead of folding with `+`.

    Attributes
    ----------
    values : dict
        node -> cached float value.
    grads  : dict
        node -> cached gradient mapping {Parameter: float}.
    """

    def __init__(self):
        self.values: Dict[Any, float] = {}
        self.grads: Dict[Any, Dict[Any, float]] = {}
        # One lock per (cache, node); created lazily under the guard lock
        self._value_locks: Dict[Any, threading.Lock] = {}
        self._grad_locks: Dict[Any, threading.Lock] = {}
        self._guard = threading.Lock()
        self._hits = 0
        self._misses = 0

    def __len__(self):
        return len(self.values)

    def __repr__(self):
        return f"Context(values={len(self.values)}, grads={len(self.grads)})"

    def contains_value(self, node) -> bool:
        return node in self.values

    def contains_gradient(self, node) -> bool:
        return node in self.grads

    def clear(self):
        with self._guard:
            n_values, n_grads = len(self.values), len(self.grads)
            self.values.clear()
            self.grads.clear()
            self._value_locks.clear()
            self._grad_locks.clear()
        logger.debug("cleared context: %d values, %d gradient mappings", n_values, n_grads)

    def stats(self) -> Dict[str, int]:
        """Cache sizes and hit/miss counters since construction."""
        with self._guard:
            return {
                "values": len(self.values),
                "gradients": len(self.grads),
                "hits": self._hits,
                "misses": self._misses,
            }

    def _compute_once(self, kind, node, compute):
        if kind == "value":
            cache, locks = self.values, self._value_locks
        else:
            cache, locks = self.grads, self._grad_locks

        # Fast path: no locking once the entry exists
        try:
            result = cache[node]
        except KeyError:
            pass
        else:
            self._count(hit=True)
            return result

        with self._guard:
            lock = locks.get(node)
            if lock is None:
                lock = locks[node] = threading.Lock()

        # Node locks are taken parent before operand, so a DAG cannot deadlock
        with lock:
            try:
                result = cache[node]
            except KeyError:
                result = compute(self)
                cache[node] = result
                self._count(hit=False)
            else:
                self._count(hit=True)
        return result

    # value_of(node, compute) / gradient_of(node, compute): cached result for
    # `node`, computed with `compute(self)` at most once. Bound through
    # partialmethod so a lookup adds no Python frame of its own.
    value_of = partialmethod(_compute_once, "value")
    gradient_of = partialmethod(_compute_once, "gradient")

    def _count(self, hit: bool):
        with self._guard:
            if hit:
                self._hits += 1
            else:
                self._misses += 1


@contextmanager
def use_context(context: Optional[Context] = None):
    """
    Context manager for one evaluation pass:
        with use_context() as ctx:
            loss.value(ctx), loss.gradient(ctx)
    The context is cleared on exit.
    """
    ctx = context if context is not None else Context()
    try:
        yield ctx
    finally:
        ctx.clear()
