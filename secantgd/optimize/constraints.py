"""
Hard-penalty constraint handling.

Each constraint compares ``func(x)`` against a target with one of the
operators ``<``, ``<=``, ``>``, ``>=``, ``=`` or ``!=``. Violations larger than
the constraint's tolerance are summed and multiplied by
:data:`~secantgd.optimize.core.PENALTY_SLOPE`, so any violation dominates the
raw objective. A constraint that cannot be evaluated disables the penalty for
that one evaluation instead of aborting the run.
"""

from __future__ import annotations

import math
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from ..logging import get_logger
from .core import (
    DEFAULT_CONSTRAINT_TOLERANCE,
    DEFAULT_OPERATOR,
    FALLBACK_CONSTRAINT_TOLERANCE,
    PENALTY_SLOPE,
    Array,
)
from .errors import ConfigurationError, ConstraintEvaluationError
from .objective import call_style, call_with_point, to_scalar

logger = get_logger(__name__)

OPERATORS = ("<", "<=", ">", ">=", "=", "!=")
_MAX_FLOAT = sys.float_info.max


class ConstraintState(Enum):
    UNINITIALIZED = "uninitialized"
    CONFIGURED = "configured"
    ACTIVE = "active"


@dataclass(frozen=True)
class Constraint:
    """``func(x) <operator> target``, ignoring violations within ``tolerance``."""

    func: Callable[..., Any]
    operator: str = DEFAULT_OPERATOR
    target: float = 0.0
    tolerance: float = DEFAULT_CONSTRAINT_TOLERANCE

    def __post_init__(self) -> None:
        if self.operator not in OPERATORS:
            raise ConfigurationError(
                f"unknown constraint operator {self.operator!r}; expected one of {OPERATORS}"
            )
        if not math.isfinite(self.target):
            raise ConfigurationError(f"constraint target must be finite, got {self.target!r}")
        if not (math.isfinite(self.tolerance) and self.tolerance >= 0):
            raise ConfigurationError(
                f"constraint tolerance must be a non-negative number, got {self.tolerance!r}"
            )


ConstraintLike = Union[Constraint, Mapping[str, Any], Sequence[Any]]


def as_constraint(item: ConstraintLike) -> Constraint:
    """Build a :class:`Constraint` from an instance, a mapping or a tuple."""
    if isinstance(item, Constraint):
        return item
    if isinstance(item, Mapping):
        return Constraint(**item)
    if isinstance(item, Sequence) and not isinstance(item, str):
        return Constraint(*item)
    raise ConfigurationError(f"cannot interpret {item!r} as a constraint")


def violation(observed: float, target: float, operator: str, tolerance: float) -> float:
    """Amount by which ``observed <operator> target`` is violated (0.0 if satisfied)."""
    diff = observed - target
    magnitude = abs(diff)
    if operator == "!=":
        return _MAX_FLOAT if magnitude < tolerance else 0.0
    if magnitude <= tolerance:
        return 0.0
    violated = {
        "<": diff >= 0,
        "<=": diff > 0,
        ">": diff <= 0,
        ">=": diff < 0,
        "=": True,
    }[operator]
    return magnitude if violated else 0.0


class ConstraintEvaluator(ABC):
    """Anything that turns a point into an additive penalty."""

    state: ConstraintState = ConstraintState.UNINITIALIZED

    def activate(self) -> None:
        self.state = ConstraintState.ACTIVE

    @abstractmethod
    def evaluate(self, point: Array) -> tuple[float, bool]:
        """Return ``(penalty, ok)``; ``ok`` is False when evaluation failed."""


class PenaltyConstraintSet(ConstraintEvaluator):
    """A fixed collection of constraints evaluated jointly."""

    def __init__(self, constraints: Iterable[ConstraintLike], dim: int):
        self.dim = dim
        self.constraints: list[Constraint] = [as_constraint(c) for c in constraints]
        self._styles = [
            call_style(c.func, dim, name=f"constraint {i}")
            for i, c in enumerate(self.constraints)
        ]
        self.penalty = 0.0
        self.state = ConstraintState.CONFIGURED

    @classmethod
    def from_parts(
        cls,
        funcs: Sequence[Callable[..., Any]],
        targets: Sequence[float],
        dim: int,
        operators: Optional[Sequence[str]] = None,
        tolerances: Optional[Sequence[float]] = None,
    ) -> "PenaltyConstraintSet":
        """Build a set from parallel lists.

        Operator and tolerance lists whose length differs from ``funcs`` are
        replaced by ``"<="`` and ``0.001`` for every constraint.
        """
        count = len(funcs)
        if len(targets) != count:
            raise ConfigurationError(
                f"got {len(targets)} constraint targets for {count} constraint functions"
            )
        if operators is None or len(operators) != count:
            if operators is not None:
                logger.warning(
                    "%d operators given for %d constraints; using '%s' for all",
                    len(operators), count, DEFAULT_OPERATOR,
                )
            operators = [DEFAULT_OPERATOR] * count
        if tolerances is None or len(tolerances) != count:
            if tolerances is not None:
                logger.warning(
                    "%d tolerances given for %d constraints; using %g for all",
                    len(tolerances), count, FALLBACK_CONSTRAINT_TOLERANCE,
                )
            tolerances = [FALLBACK_CONSTRAINT_TOLERANCE] * count
        return cls(
            [
                Constraint(func, op, float(target), float(tol))
                for func, op, target, tol in zip(funcs, operators, targets, tolerances)
            ],
            dim,
        )

    def __len__(self) -> int:
        return len(self.constraints)

    def extend(self, constraints: Iterable[ConstraintLike]) -> None:
        added = [as_constraint(c) for c in constraints]
        styles = [
            call_style(c.func, self.dim, name=f"constraint {len(self.constraints) + i}")
            for i, c in enumerate(added)
        ]
        self.constraints.extend(added)
        self._styles.extend(styles)

    def observe(self, point: Array) -> list[float]:
        """Run every constraint function at ``point``."""
        values = []
        for index, (constraint, style) in enumerate(zip(self.constraints, self._styles)):
            try:
                value = to_scalar(call_with_point(constraint.func, style, point))
            except Exception as exc:
                raise ConstraintEvaluationError(
                    f"constraint {index} failed at {point.tolist()}: {exc}"
                ) from exc
            if not math.isfinite(value):
                raise ConstraintEvaluationError(
                    f"constraint {index} returned {value} at {point.tolist()}"
                )
            values.append(value)
        return values

    def evaluate(self, point: Array) -> tuple[float, bool]:
        try:
            observed = self.observe(point)
        except ConstraintEvaluationError as exc:
            logger.warning("%s; ignoring constraints for this evaluation", exc)
            self.penalty = 0.0
            return self.penalty, False

        total = sum(
            violation(value, c.target, c.operator, c.tolerance)
            for value, c in zip(observed, self.constraints)
        )
        self.penalty = min(PENALTY_SLOPE * total, _MAX_FLOAT)
        return self.penalty, True


__all__ = [
    "Constraint",
    "ConstraintEvaluator",
    "ConstraintState",
    "OPERATORS",
    "PenaltyConstraintSet",
    "as_constraint",
    "violation",
]
