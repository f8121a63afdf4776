"""Step-length selection: secant mirror-point search and classic backtracking."""

from __future__ import annotations

import math
from typing import Callable

from ..logging import get_logger
from .core import Array, Projection
from .errors import LineSearchFailure

logger = get_logger(__name__)

SECANT_SEED = -0.5


def secant_root(
    g: Callable[[float], float],
    a0: float,
    a1: float,
    g0: float,
    tol: float = 1e-3,
    max_iter: int = 100,
) -> tuple[float, int]:
    """Find a root of ``g`` with the secant method.

    ``g0`` is the already known value ``g(a0)``. Iteration stops once two
    successive iterates are within ``tol``, after ``max_iter`` updates, when
    the secant slope vanishes, or when ``g`` stops returning finite values.
    The last usable iterate is returned in every case.

    Returns:
        ``(root, nfev)`` where ``nfev`` counts calls to ``g``.
    """
    a_prev, g_prev = a0, g0
    a_curr = a1
    g_curr = g(a_curr)
    nfev = 1
    if not math.isfinite(g_curr):
        return a_prev, nfev

    for _ in range(max_iter):
        denom = g_curr - g_prev
        if denom == 0.0:
            break
        a_next = a_curr - g_curr * (a_curr - a_prev) / denom
        if not math.isfinite(a_next):
            break
        if abs(a_next - a_curr) <= tol:
            return a_next, nfev
        g_next = g(a_next)
        nfev += 1
        if not math.isfinite(g_next):
            break
        a_prev, g_prev = a_curr, g_curr
        a_curr, g_curr = a_next, g_next
    return a_curr, nfev


def secant_mirror_step(
    fun: Callable[[Array], float],
    fx: float,
    candidate: Array,
    f_candidate: float,
    direction: Array,
    learning_rate: float,
    tol: float = 1e-3,
    max_iter: int = 100,
) -> tuple[float, int]:
    """Rescale the learning rate after ``candidate`` overshot the minimum.

    ``candidate`` is ``x - learning_rate * direction`` and is worse than
    ``fx``. Along ``candidate - alpha * direction`` the function
    ``g(alpha) = f(candidate - alpha * direction) - fx`` vanishes at
    ``alpha = -learning_rate`` (the start) and at the mirror point on the far
    side of the minimum. Seeded at ``alpha = 0`` and ``alpha = -0.5`` the
    secant iteration lands on the mirror point, and the new rate
    ``(learning_rate + alpha) / 2`` targets the midpoint between the start and
    the mirror point.

    Returns:
        ``(new_learning_rate, nfev)``. The rate is always positive; if the
        root found does not give a positive rate the old rate is halved.
    """

    def g(alpha: float) -> float:
        return fun(candidate - alpha * direction) - fx

    root, nfev = secant_root(g, 0.0, SECANT_SEED, f_candidate - fx, tol=tol, max_iter=max_iter)
    new_rate = (learning_rate + root) * 0.5
    if not (math.isfinite(new_rate) and new_rate > 0.0):
        logger.debug(
            "secant root %g gives rate %g; halving learning rate instead", root, new_rate
        )
        new_rate = learning_rate * 0.5
    return new_rate, nfev


def backtracking_step(
    fun: Callable[[Array], float],
    x: Array,
    fx: float,
    direction: Array,
    learning_rate: float,
    project: Projection,
    shrink: float = 0.99,
    max_attempts: int = 1000,
) -> tuple[Array, float, float, int]:
    """Shrink the learning rate until a projected step is not worse than ``fx``.

    Returns:
        ``(point, value, learning_rate, nfev)`` for the accepted step.

    Raises:
        LineSearchFailure: If ``max_attempts`` candidates were all worse.
    """
    if not (0 < shrink < 1):
        raise ValueError("shrink must lie in (0, 1)")
    nfev = 0
    for _ in range(max_attempts):
        candidate = project(x - learning_rate * direction)
        value = fun(candidate)
        nfev += 1
        if value <= fx:
            return candidate, value, learning_rate, nfev
        learning_rate *= shrink
    raise LineSearchFailure(
        f"no improvement on {fx:g} after {max_attempts} backtracking steps "
        f"(learning rate shrunk to {learning_rate:g})"
    )


__all__ = ["backtracking_step", "secant_mirror_step", "secant_root"]
