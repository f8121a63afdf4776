"""secantgd - gradient descent with secant-method learning-rate scaling."""

__version__ = "0.1.0"

from .logging import configure_logging, get_logger, set_log_level
from .optimize import (
    BoxBounds,
    ConfigurationError,
    Constraint,
    ConstraintEvaluationError,
    ConvergenceFailure,
    DescentConfig,
    LineSearchFailure,
    OptimizationError,
    OptimizeResult,
    PenaltyConstraintSet,
    Problem,
    SecantGradientDescent,
    Status,
    secant_gradient_descent,
)

__all__ = [
    "__version__",
    "BoxBounds",
    "ConfigurationError",
    "Constraint",
    "ConstraintEvaluationError",
    "ConvergenceFailure",
    "DescentConfig",
    "LineSearchFailure",
    "OptimizationError",
    "OptimizeResult",
    "PenaltyConstraintSet",
    "Problem",
    "SecantGradientDescent",
    "Status",
    "configure_logging",
    "get_logger",
    "secant_gradient_descent",
    "set_log_level",
]
