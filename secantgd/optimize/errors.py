"""Exceptions raised by the optimizer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .core import OptimizeResult


class OptimizationError(RuntimeError):
    """Base class for every error raised by secantgd."""


class ConfigurationError(OptimizationError, ValueError):
    """Invalid setting, out-of-bounds point, or mismatched callable signature."""


class LineSearchFailure(OptimizationError):
    """Backtracking ran out of attempts without finding a non-worse point."""


class ConvergenceFailure(OptimizationError):
    """Iteration budget exhausted before the tolerance was met.

    The last known state is available as :attr:`result`.
    """

    def __init__(self, message: str, result: Optional["OptimizeResult"] = None):
        super().__init__(message)
        self.result = result


class ConstraintEvaluationError(OptimizationError):
    """A constraint function raised or returned an unusable value."""


__all__ = [
    "ConfigurationError",
    "ConstraintEvaluationError",
    "ConvergenceFailure",
    "LineSearchFailure",
    "OptimizationError",
]
