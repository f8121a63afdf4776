"""Per-dimension step scaling driven by derivative decay."""

from __future__ import annotations

import numpy as np

from .core import Array


class StepScaleController:
    """
    Track per-dimension derivative peaks and shrink step scales.

    Each iteration starts from scales of 1.0. A dimension whose derivative
    has decayed relative to its largest observed value gets its scale
    multiplied by ``sqrt(|d_i / peak_i|)``, floored at ``tolerance``.
    """

    def __init__(self, dim: int, tolerance: float, enabled: bool = False):
        self.dim = dim
        self.tolerance = tolerance
        self.enabled = enabled
        self.scales = np.ones(dim)
        self.derivative_high = np.zeros(dim)

    def reset(self) -> None:
        self.scales = np.ones(self.dim)

    def update(self, derivative: Array, first_iteration: bool = False) -> bool:
        """Record new peaks and rescale.

        Returns:
            True when any dimension reached a new derivative peak, meaning the
            learning rate should be restored.
        """
        derivative = np.asarray(derivative, dtype=float)
        new_peak = np.abs(derivative) > np.abs(self.derivative_high)
        self.derivative_high = np.where(new_peak, derivative, self.derivative_high)

        if self.enabled and not first_iteration:
            nonzero = self.derivative_high != 0.0
            ratio = np.ones(self.dim)
            ratio[nonzero] = np.abs(derivative[nonzero] / self.derivative_high[nonzero])
            self.scales = np.clip(self.scales * np.sqrt(ratio), self.tolerance, 1.0)
        return bool(np.any(new_peak))


__all__ = ["StepScaleController"]
