"""Secant-scaled gradient descent for box-constrained black-box objectives.

Example
-------
>>> import numpy as np
>>> from secantgd.optimize import SecantGradientDescent
>>> def bump(x, y):
...     return 10 * x * y * np.exp(-(x**2 + y**2)) + 5 / np.e
>>> opt = SecantGradientDescent(bump, [1.6, -1.2])
>>> _ = opt.set_lower_bounds([-2.0, -2.0]).set_upper_bounds([2.0, 2.0]).set_tolerance(1e-3)
>>> value, point = opt.run()
>>> bool(abs(value) < 1e-3)
True
"""

from .bounds import BoxBounds
from .config import DescentConfig
from .constraints import (
    OPERATORS,
    Constraint,
    ConstraintEvaluator,
    ConstraintState,
    PenaltyConstraintSet,
    violation,
)
from .core import PENALTY_SLOPE, OptimizeResult, Problem, Status
from .errors import (
    ConfigurationError,
    ConstraintEvaluationError,
    ConvergenceFailure,
    LineSearchFailure,
    OptimizationError,
)
from .gradient import SecantGradientDescent, secant_gradient_descent
from .line_search import backtracking_step, secant_mirror_step, secant_root
from .objective import ObjectiveAdapter, as_point
from .scaling import StepScaleController
from .utils import euclidean_distance, finite_difference_derivative

__all__ = [
    "BoxBounds",
    "ConfigurationError",
    "Constraint",
    "ConstraintEvaluationError",
    "ConstraintEvaluator",
    "ConstraintState",
    "ConvergenceFailure",
    "DescentConfig",
    "LineSearchFailure",
    "OPERATORS",
    "ObjectiveAdapter",
    "OptimizationError",
    "OptimizeResult",
    "PENALTY_SLOPE",
    "PenaltyConstraintSet",
    "Problem",
    "SecantGradientDescent",
    "Status",
    "StepScaleController",
    "as_point",
    "backtracking_step",
    "euclidean_distance",
    "finite_difference_derivative",
    "secant_gradient_descent",
    "secant_mirror_step",
    "secant_root",
    "violation",
]
