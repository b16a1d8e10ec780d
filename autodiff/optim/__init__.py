from .base import Optimizer, update_parameters
from .gradient_descent import GradientDescent

__all__ = ["Optimizer", "update_parameters", "GradientDescent"]
