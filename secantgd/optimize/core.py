"""Core types shared by the secant gradient-descent components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional

import numpy as np

Array = np.ndarray
Objective = Callable[..., Any]
Projection = Callable[[Array], Array]

PENALTY_SLOPE = 1e9
DEFAULT_CONSTRAINT_TOLERANCE = 1e-5
FALLBACK_CONSTRAINT_TOLERANCE = 1e-3
DEFAULT_OPERATOR = "<="
PEAK_LEARNING_RATE = 1.0


class Status(Enum):
    """Lifecycle of an optimizer run."""

    INITIALIZED = "initialized"
    ITERATING = "iterating"
    CONVERGED = "converged"
    FAILED = "failed"


@dataclass(frozen=True)
class Problem:
    """Objective plus the dimension it is defined over."""

    fun: Objective
    dim: Optional[int] = None


@dataclass
class OptimizeResult:
    """Outcome of a run.

    ``nfev`` counts every objective evaluation, including finite-difference
    probes and secant probes. ``history`` holds the accepted points in order,
    starting with the initial guess.
    """

    x: Array
    fun: float
    nit: int
    success: bool
    status: Status
    message: str
    nfev: int
    learning_rate: float
    tolerance: float
    history: List[Array] = field(default_factory=list)


__all__ = [
    "Array",
    "DEFAULT_CONSTRAINT_TOLERANCE",
    "DEFAULT_OPERATOR",
    "FALLBACK_CONSTRAINT_TOLERANCE",
    "Objective",
    "OptimizeResult",
    "PEAK_LEARNING_RATE",
    "PENALTY_SLOPE",
    "Problem",
    "Projection",
    "Status",
]
