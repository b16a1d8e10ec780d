"""Plain gradient descent."""

from __future__ import annotations

from typing import Dict, Optional

from ..config import OptimizerConfig
from ..core.context import Context
from ..core.node import Parameter
from .base import Optimizer, update_parameters


class GradientDescent(Optimizer):
    """param.val -= learn_rate * d(loss)/d(param) for every parameter in the loss."""

    def __init__(self, loss, learn_rate: Optional[float] = None,
                 config: Optional[OptimizerConfig] = None):
        super().__init__(loss, config)
        self.learn_rate = self.config.learn_rate if learn_rate is None else learn_rate

    def minimize(self, ctx: Context) -> Dict[Parameter, float]:
        def step(param: Parameter, partial: float):
            param.val = param.val - self.learn_rate * partial

        return update_parameters(self.loss, step, ctx)
