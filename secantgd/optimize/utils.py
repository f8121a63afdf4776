"""Finite-difference helpers.

Derivatives are estimated with relative (multiplicative) perturbations, so the
probe size follows the magnitude of each coordinate. Zero coordinates and
undefined forward probes are handled explicitly.
"""

from __future__ import annotations

import math
from typing import Callable

import numpy as np

from ..logging import get_logger
from .core import Array

logger = get_logger(__name__)


def _difference(
    fun: Callable[[Array], float], x: Array, fx: float, index: int, factor: float
) -> tuple[float, int]:
    """One-sided quotient for ``x[index] * (1 + factor)``; NaN when undefined."""
    denominator = x[index] * factor
    if denominator == 0.0 or not math.isfinite(denominator):
        return math.nan, 0
    probe = x.copy()
    probe[index] = x[index] * (1.0 + factor)
    f_probe = fun(probe)
    if not math.isfinite(f_probe):
        return math.nan, 1
    return (f_probe - fx) / denominator, 1


def finite_difference_derivative(
    fun: Callable[[Array], float],
    x: Array,
    fx: float,
    step: float,
    scales: Array,
) -> tuple[Array, int]:
    """Estimate the derivative of ``fun`` at ``x``.

    Parameters
    ----------
    fun:
        Objective; every call is one evaluation.
    x:
        Point where the derivative is estimated.
    fx:
        Objective value at ``x`` (not re-evaluated).
    step:
        Relative finite-difference step.
    scales:
        Per-dimension multipliers of ``step``.

    Returns
    -------
    The derivative vector and the number of evaluations spent.

    A zero coordinate is probed additively at ``x_i + h``. Otherwise the
    forward probe ``x_i * (1 + h)`` is used, falling back to the backward
    probe ``x_i * (1 - h)`` when the forward quotient cannot be formed.
    """
    if step <= 0:
        raise ValueError("step must be positive")
    x = np.asarray(x, dtype=float)
    derivative = np.zeros_like(x)
    nfev = 0
    for i in range(x.size):
        h = step * float(scales[i])
        if x[i] == 0.0:
            probe = x.copy()
            probe[i] = h
            f_probe = fun(probe)
            nfev += 1
            if math.isfinite(f_probe):
                derivative[i] = (f_probe - fx) / h
                continue
            logger.warning("additive probe undefined along dimension %d; derivative set to 0", i)
            continue

        value, evals = _difference(fun, x, fx, i, h)
        nfev += evals
        if math.isfinite(value):
            derivative[i] = value
            continue

        logger.warning("using backward finite difference along dimension %d", i)
        value, evals = _difference(fun, x, fx, i, -h)
        nfev += evals
        if math.isfinite(value):
            derivative[i] = value
        else:
            logger.warning("backward probe undefined along dimension %d; derivative set to 0", i)
    return derivative, nfev


def euclidean_distance(a: Array, b: Array) -> float:
    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))


__all__ = ["euclidean_distance", "finite_difference_derivative"]
