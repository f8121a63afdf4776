"""Box bounds: projection of candidate points and validation of the incumbent."""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from .core import Array
from .errors import ConfigurationError
from .objective import as_point


def _side(values: Optional[Any], dim: int, fill: float, name: str) -> Array:
    if values is None:
        return np.full(dim, fill)
    return as_point(values, dim, name, allow_infinite=True)


class BoxBounds:
    """
    Element-wise ``lower <= x <= upper`` box.

    Either side may be absent, in which case it is stored as ``-inf`` or
    ``+inf`` and projection along it is the identity.
    """

    def __init__(
        self,
        dim: int,
        lower: Optional[Any] = None,
        upper: Optional[Any] = None,
    ):
        self.dim = dim
        self.lower = _side(lower, dim, -np.inf, "lower bounds")
        self.upper = _side(upper, dim, np.inf, "upper bounds")
        crossed = self.lower > self.upper
        if np.any(crossed):
            raise ConfigurationError(
                f"lower bounds exceed upper bounds at indices {np.flatnonzero(crossed).tolist()}"
            )

    @property
    def is_set(self) -> bool:
        return bool(np.any(np.isfinite(self.lower)) or np.any(np.isfinite(self.upper)))

    def with_lower(self, lower: Any) -> "BoxBounds":
        return BoxBounds(self.dim, lower, self.upper)

    def with_upper(self, upper: Any) -> "BoxBounds":
        return BoxBounds(self.dim, self.lower, upper)

    def project(self, point: Array) -> Array:
        """Clamp ``point`` into the box. Idempotent."""
        return np.clip(np.asarray(point, dtype=float), self.lower, self.upper)

    def violations(self, point: Array) -> Array:
        """Indices where ``point`` is below its lower OR above its upper bound."""
        point = np.asarray(point, dtype=float)
        return np.flatnonzero((point < self.lower) | (point > self.upper))

    def contains(self, point: Array) -> bool:
        return self.violations(point).size == 0

    def validate(self, point: Array) -> None:
        """Raise if any single coordinate of ``point`` lies outside the box."""
        bad = self.violations(point)
        if bad.size:
            raise ConfigurationError(
                f"point {np.asarray(point).tolist()} is out of bounds at indices {bad.tolist()}; "
                "use change_initial_guess() to move it inside"
            )


__all__ = ["BoxBounds"]
