"""Error types raised by the autodiff package."""

from __future__ import annotations


class AutodiffError(Exception):
    """Base class for autodiff programmer errors."""


class RankMismatchError(AutodiffError, ValueError):
    """Element-wise vector operation on vectors of different rank."""

    def __init__(self, left_rank: int, right_rank: int, message: str = None):
        self.left_rank = left_rank
        self.right_rank = right_rank
        if message is None:
            message = f"vector ranks do not match: {left_rank} != {right_rank}"
        super().__init__(message)


class EmptyReductionError(AutodiffError, ValueError):
    """Reduction requested over a vector of rank 0."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"can't {operation} vector with rank of 0")
