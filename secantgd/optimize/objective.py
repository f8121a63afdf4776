"""Objective adapter: signature checks, scalar coercion and call counting."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Callable, Optional

import numpy as np
import torch

from .core import Array
from .errors import ConfigurationError

if TYPE_CHECKING:
    from .constraints import ConstraintEvaluator

VECTOR = "vector"
UNPACKED = "unpacked"


def as_point(
    values: Any,
    dim: Optional[int] = None,
    name: str = "point",
    allow_infinite: bool = False,
) -> Array:
    """Convert ``values`` into a finite 1-D float64 array.

    Accepts sequences, NumPy arrays and ``torch.Tensor`` objects. With
    ``allow_infinite`` only NaN entries are rejected.

    Raises:
        ConfigurationError: If the shape does not match ``dim`` or an entry is
            not finite.
    """
    if isinstance(values, torch.Tensor):
        values = values.detach().cpu().numpy()
    try:
        point = np.array(values, dtype=float).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} is not a real vector: {values!r}") from exc
    if dim is not None and point.size != dim:
        raise ConfigurationError(f"{name} has {point.size} components, expected {dim}")
    finite = ~np.isnan(point) if allow_infinite else np.isfinite(point)
    if not np.all(finite):
        raise ConfigurationError(f"{name} contains non-finite entries: {point}")
    return point


def to_scalar(value: Any) -> float:
    """Coerce a function value (Python, NumPy or torch scalar) to ``float``."""
    if isinstance(value, torch.Tensor):
        if value.numel() != 1:
            raise TypeError(f"expected a scalar tensor, got shape {tuple(value.shape)}")
        return float(value.detach().cpu().item())
    arr = np.asarray(value)
    if arr.size != 1 or not np.issubdtype(arr.dtype, np.number) or np.iscomplexobj(arr):
        raise TypeError(f"expected a real scalar, got {value!r}")
    return float(arr.reshape(-1)[0])


def call_style(func: Callable[..., Any], dim: int, name: str = "objective") -> str:
    """Decide how ``func`` takes a point of dimension ``dim``.

    ``dim`` required positional parameters (or only ``*args``) receive the
    coordinates unpacked; a single required positional parameter receives the
    whole vector.

    Raises:
        ConfigurationError: If ``func`` is not callable or its arity fits
            neither style.
    """
    if not callable(func):
        raise ConfigurationError(f"{name} must be callable")
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return VECTOR

    params = list(sig.parameters.values())
    positional = [
        p for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    required = [p for p in positional if p.default is p.empty]
    has_varargs = any(p.kind == p.VAR_POSITIONAL for p in params)
    required_kw = [
        p.name for p in params if p.kind == p.KEYWORD_ONLY and p.default is p.empty
    ]

    if required_kw:
        raise ConfigurationError(f"{name} has required keyword-only parameters: {required_kw}")
    if dim > 1 and len(required) == dim:
        return UNPACKED
    if len(required) == 1 or (not required and positional):
        return VECTOR
    if not positional and has_varargs:
        return UNPACKED
    raise ConfigurationError(
        f"{name} takes {len(required)} required positional argument(s); "
        f"expected 1 (a vector) or {dim} (one per coordinate)"
    )


def call_with_point(func: Callable[..., Any], style: str, point: Array) -> Any:
    if style == UNPACKED:
        return func(*(float(v) for v in point))
    return func(np.array(point, dtype=float))


class ObjectiveAdapter:
    """Evaluate a user objective at a point.

    Every call counts as one evaluation. When a constraint evaluator is
    attached its penalty is added to the raw value; this is the only place
    where penalties enter the fitness. Nothing is cached.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        dim: int,
        constraints: Optional["ConstraintEvaluator"] = None,
    ):
        self.func = func
        self.dim = dim
        self.style = call_style(func, dim)
        self.constraints: Optional["ConstraintEvaluator"] = None
        self.call_count = 0
        if constraints is not None:
            self.attach_constraints(constraints)

    def attach_constraints(self, constraints: "ConstraintEvaluator") -> None:
        constraints.activate()
        self.constraints = constraints

    def __call__(self, point: Array) -> float:
        self.call_count += 1
        value = to_scalar(call_with_point(self.func, self.style, point))
        if self.constraints is not None:
            penalty, _ = self.constraints.evaluate(point)
            value += penalty
        return value


__all__ = [
    "ObjectiveAdapter",
    "UNPACKED",
    "VECTOR",
    "as_point",
    "call_style",
    "call_with_point",
    "to_scalar",
]
