"""Run configuration for :class:`~secantgd.optimize.gradient.SecantGradientDescent`."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import ConfigurationError


def _require_positive(name: str, value: float) -> None:
    if not (math.isfinite(value) and value > 0):
        raise ConfigurationError(f"{name} must be a positive finite number, got {value!r}")


@dataclass(frozen=True)
class DescentConfig:
    """
    Settings of one optimizer instance.

    Args:
        max_eval: Maximum number of outer iterations.
        tolerance: Terminal tolerance. Also the floor of every step scale.
        learning_rate: Initial learning rate. Every new per-dimension
            derivative peak, the first nonzero derivative included, resets
            the rate to 1.0.
        finite_difference_step: Relative perturbation used for derivatives.
        classic: Use backtracking instead of the secant mirror-point search.
        derivative_scaling: Shrink per-dimension steps as derivatives decay.
        secant_tol: Convergence threshold of the secant root finder.
        secant_max_iter: Iteration cap of the secant root finder.
        backtrack_shrink: Learning-rate factor applied per rejected candidate.
        backtrack_max_attempts: Candidates tried before backtracking fails.
    """

    max_eval: int = 1000
    tolerance: float = 1e-5
    learning_rate: float = 1.0
    finite_difference_step: float = 1e-3
    classic: bool = False
    derivative_scaling: bool = False
    secant_tol: float = 1e-3
    secant_max_iter: int = 100
    backtrack_shrink: float = 0.99
    backtrack_max_attempts: int = 1000

    def __post_init__(self) -> None:
        if int(self.max_eval) != self.max_eval or self.max_eval < 1:
            raise ConfigurationError(f"max_eval must be a positive integer, got {self.max_eval!r}")
        _require_positive("tolerance", self.tolerance)
        _require_positive("learning_rate", self.learning_rate)
        _require_positive("finite_difference_step", self.finite_difference_step)
        _require_positive("secant_tol", self.secant_tol)
        if self.secant_max_iter < 1:
            raise ConfigurationError("secant_max_iter must be at least 1")
        if not (0 < self.backtrack_shrink < 1):
            raise ConfigurationError("backtrack_shrink must lie in (0, 1)")
        if self.backtrack_max_attempts < 1:
            raise ConfigurationError("backtrack_max_attempts must be at least 1")


__all__ = ["DescentConfig"]
