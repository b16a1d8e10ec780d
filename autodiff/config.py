"""
Configuration objects for evaluation and optimization.

Plain dataclasses; every component accepts ``config=None`` and falls back to
the defaults below.
"""

from dataclasses import dataclass


@dataclass
class ParallelConfig:
    """Batch evaluation settings for computed vectors."""
    # Evaluation
    enabled: bool = True   # False: evaluate elements sequentially on the caller thread
    n_workers: int = 4     # Fixed size of the worker pool (capped at the vector rank)

    def __post_init__(self):
        if self.n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {self.n_workers}")


@dataclass
class OptimizerConfig:
    """Settings shared by all optimizers."""
    # Update rule
    learn_rate: float = 0.001

    # Logging
    log_every: int = 0  # Log the loss every N steps in fit(); 0 disables
