"""Optimizer base class."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from ..config import OptimizerConfig
from ..core.context import Context
from ..core.node import Node, Parameter, as_node

logger = logging.getLogger(__name__)


def update_parameters(loss: Node,
                      updater: Callable[[Parameter, float], None],
                      ctx: Context) -> Dict[Parameter, float]:
    """
    Apply `updater(param, partial)` to every parameter the loss depends on.

    The full gradient is read into a snapshot before the first update, so
    every update in one step sees the same gradient. Returns the snapshot.
    """
    snapshot = dict(loss.gradient(ctx))
    for param, partial in snapshot.items():
        updater(param, partial)
    return snapshot


class Optimizer(ABC):
    """
    Base class for all optimizers.

    Usage:
        >>> x = Parameter(0.0)
        >>> opt = GradientDescent((x - 3.0).square(), learn_rate=0.1)
        >>> history = opt.fit(50)
    """

    def __init__(self, loss, config: Optional[OptimizerConfig] = None):
        self.loss = as_node(loss)
        self.config = config or OptimizerConfig()
        self.loss_history: List[float] = []

    @abstractmethod
    def minimize(self, ctx: Context) -> Dict[Parameter, float]:
        """One update step using gradients read from `ctx`."""

    def fit(self, steps: int) -> List[float]:
        """
        Run `steps` minimize() calls, each on a fresh context.

        Records the loss value seen before each step in `loss_history` and
        returns the values of this run.
        """
        start = len(self.loss_history)
        for step in range(1, steps + 1):
            ctx = Context()
            loss_value = float(self.loss.value(ctx))
            self.loss_history.append(loss_value)
            self.minimize(ctx)

            log_every = self.config.log_every
            if log_every and step % log_every == 0:
                logger.info("step %d/%d: loss = %.6e", step, steps, loss_value)
        return self.loss_history[start:]
