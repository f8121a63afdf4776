"""Gradient descent with secant-method learning-rate scaling.

Each iteration estimates the derivative by finite differences, steps along
``-scales * derivative`` and, when that step overshoots, locates the mirror
point of the start across the minimum with the secant method and moves to the
midpoint. The classic mode backtracks geometrically instead.

Example
-------
>>> import numpy as np
>>> from secantgd.optimize import SecantGradientDescent
>>> def bowl(x, y):
...     return (x - 1.5) ** 2 + (y + 0.5) ** 2
>>> opt = SecantGradientDescent(bowl, [0.5, 0.5]).set_finite_difference_step(1e-6)
>>> value, point = opt.run()
>>> bool(value < 1e-5)
True
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Any, Callable, Iterable, Optional

import numpy as np

from ..logging import get_logger
from .bounds import BoxBounds
from .config import DescentConfig
from .constraints import ConstraintLike, PenaltyConstraintSet
from .core import PEAK_LEARNING_RATE, Array, OptimizeResult, Problem, Status
from .errors import ConfigurationError, ConvergenceFailure, LineSearchFailure
from .line_search import backtracking_step, secant_mirror_step
from .objective import ObjectiveAdapter, as_point
from .scaling import StepScaleController
from .utils import euclidean_distance, finite_difference_derivative


class SecantGradientDescent:
    """
    Box-constrained minimizer for black-box functions.

    Args:
        objective: Callable taking either the whole point as one array or one
            float per coordinate, returning a scalar.
        initial_guess: Starting point; fixes the dimension.
        config: Run settings. Setters derive updated copies.
        logger: Logger for configuration messages and the iteration trace.
        verbose: Emit the iteration trace at INFO instead of DEBUG.

    Raises:
        ConfigurationError: If the objective's arity fits neither call style,
            or the objective is not finite at the initial guess.
    """

    def __init__(
        self,
        objective: Callable[..., Any],
        initial_guess: Any,
        config: Optional[DescentConfig] = None,
        logger: Optional[logging.Logger] = None,
        verbose: bool = False,
    ):
        x0 = as_point(initial_guess, name="initial guess")
        if x0.size == 0:
            raise ConfigurationError("initial guess must have at least one coordinate")
        self.dim = x0.size
        self.config = config if config is not None else DescentConfig()
        self.logger = logger if logger is not None else get_logger(__name__)
        self.verbose = verbose

        self._adapter = ObjectiveAdapter(objective, self.dim)
        self._bounds = BoxBounds(self.dim)
        self._constraints: Optional[PenaltyConstraintSet] = None
        self._scaler = StepScaleController(
            self.dim, self.config.tolerance, self.config.derivative_scaling
        )
        self._derivative = np.zeros(self.dim)
        self._learning_rate = self.config.learning_rate
        self._current_tolerance = math.inf
        self._first_iteration = True
        self._nit = 0
        self._state = Status.INITIALIZED
        self._result: Optional[OptimizeResult] = None
        self._reset_point(x0)
        self.logger.debug("optimizer created for %d-dimensional objective", self.dim)

    # ------------------------------------------------------------------
    # configuration

    def set_max_evaluations(self, max_eval: int) -> "SecantGradientDescent":
        self.config = replace(self.config, max_eval=max_eval)
        self.logger.debug("max_eval set to %d", max_eval)
        return self

    def set_tolerance(self, tolerance: float) -> "SecantGradientDescent":
        self.config = replace(self.config, tolerance=tolerance)
        self._scaler.tolerance = tolerance
        self.logger.debug("tolerance set to %g", tolerance)
        return self

    def set_initial_learning_rate(self, rate: float) -> "SecantGradientDescent":
        """Rate used until a new derivative peak resets it to 1.0."""
        self.config = replace(self.config, learning_rate=rate)
        self._learning_rate = rate
        self.logger.debug("initial learning rate set to %g", rate)
        return self

    def set_finite_difference_step(self, step: float) -> "SecantGradientDescent":
        self.config = replace(self.config, finite_difference_step=step)
        self.logger.debug("finite difference step set to %g", step)
        return self

    def set_lower_bounds(self, lower: Any) -> "SecantGradientDescent":
        """Set lower bounds; the current optimal point must satisfy them."""
        bounds = self._bounds.with_lower(lower)
        bounds.validate(self._optimal_point)
        self._bounds = bounds
        self.logger.debug("lower bounds set to %s", bounds.lower.tolist())
        return self

    def set_upper_bounds(self, upper: Any) -> "SecantGradientDescent":
        """Set upper bounds; the current optimal point must satisfy them."""
        bounds = self._bounds.with_upper(upper)
        bounds.validate(self._optimal_point)
        self._bounds = bounds
        self.logger.debug("upper bounds set to %s", bounds.upper.tolist())
        return self

    def toggle_classic_mode(self) -> "SecantGradientDescent":
        self.config = replace(self.config, classic=not self.config.classic)
        if self.config.classic:
            self.logger.info("using classic backtracking gradient descent")
        else:
            self.logger.info("using secant learning-rate scaling")
        return self

    def toggle_derivative_scaling(self) -> "SecantGradientDescent":
        self.config = replace(self.config, derivative_scaling=not self.config.derivative_scaling)
        self._scaler.enabled = self.config.derivative_scaling
        if self.config.derivative_scaling:
            self.logger.info("using derivative-based step scaling")
        else:
            self.logger.info("not using derivative-based step scaling")
        return self

    def add_constraints(self, constraints: Iterable[ConstraintLike]) -> "SecantGradientDescent":
        """Fold penalty constraints into the objective.

        Accepts :class:`~secantgd.optimize.constraints.Constraint` objects,
        mappings with the same fields, or ``(func, operator, target,
        tolerance)`` tuples. Repeated calls add to the existing set. The
        current optimal value is re-evaluated with the penalty included.
        """
        if self._constraints is None:
            self._constraints = PenaltyConstraintSet(constraints, self.dim)
            self._adapter.attach_constraints(self._constraints)
        else:
            self._constraints.extend(constraints)
        self._optimal_value = self._evaluate_incumbent(self._optimal_point)
        self.logger.info("constraints on: %d constraint(s)", len(self._constraints))
        return self

    def change_initial_guess(self, guess: Any) -> "SecantGradientDescent":
        """Restart from ``guess``, which must lie inside the configured bounds."""
        point = as_point(guess, self.dim, "initial guess")
        self._bounds.validate(point)
        self._reset_point(point)
        return self

    # ------------------------------------------------------------------
    # state

    @property
    def optimal_point(self) -> Array:
        return self._optimal_point.copy()

    @property
    def optimal_value(self) -> float:
        return self._optimal_value

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    @property
    def call_count(self) -> int:
        return self._adapter.call_count

    @property
    def iterations(self) -> int:
        return self._nit

    @property
    def state(self) -> Status:
        return self._state

    @property
    def bounds(self) -> BoxBounds:
        return self._bounds

    @property
    def derivative(self) -> Array:
        return self._derivative.copy()

    @property
    def step_scales(self) -> Array:
        return self._scaler.scales.copy()

    @property
    def derivative_high(self) -> Array:
        return self._scaler.derivative_high.copy()

    @property
    def result(self) -> Optional[OptimizeResult]:
        return self._result

    def combined_tolerance(self) -> float:
        """Value change of the last iteration plus the distance moved."""
        return self._current_tolerance + euclidean_distance(
            self._optimal_point, self._old_optimal_point
        )

    def snapshot(self, success: bool, message: str) -> OptimizeResult:
        return OptimizeResult(
            x=self._optimal_point.copy(),
            fun=float(self._optimal_value),
            nit=self._nit,
            success=success,
            status=self._state,
            message=message,
            nfev=self.call_count,
            learning_rate=self._learning_rate,
            tolerance=self.combined_tolerance(),
            history=[p.copy() for p in self._history],
        )

    # ------------------------------------------------------------------
    # execution

    def run(self) -> tuple[float, Array]:
        """Iterate until converged.

        Returns:
            ``(optimal_value, optimal_point)``.

        Raises:
            LineSearchFailure: Classic mode could not find a non-worse step,
                or the objective stayed non-finite along the descent direction.
            ConvergenceFailure: ``max_eval`` iterations passed while the value
                change still exceeded the tolerance. The last state is in
                ``exc.result``.
        """
        cfg = self.config
        trace = self.logger.info if self.verbose else self.logger.debug
        self._state = Status.ITERATING
        iteration = 0
        try:
            while True:
                trace(
                    "iteration @%d with optimal value %.10g at %s",
                    iteration, self._optimal_value, self._optimal_point.tolist(),
                )
                self._iterate()
                iteration += 1
                if not (iteration < cfg.max_eval and self.combined_tolerance() > cfg.tolerance):
                    break
        except LineSearchFailure as exc:
            self._state = Status.FAILED
            self._result = self.snapshot(False, str(exc))
            raise

        if iteration >= cfg.max_eval and self._current_tolerance > cfg.tolerance:
            self._state = Status.FAILED
            message = (
                f"failed to converge within {cfg.max_eval} iterations "
                f"(last value change {self._current_tolerance:g})"
            )
            self._result = self.snapshot(False, message)
            raise ConvergenceFailure(message, self._result)

        self._state = Status.CONVERGED
        self._result = self.snapshot(True, "tolerance satisfied")
        self.logger.info(
            "converged at %s with value %.10g after %d iterations and %d function calls",
            self._optimal_point.tolist(), self._optimal_value, self._nit, self.call_count,
        )
        return self._optimal_value, self._optimal_point.copy()

    perform_optimization = run

    def _iterate(self) -> None:
        self._old_optimal_point = self._optimal_point.copy()
        old_value = self._optimal_value
        self._scaler.reset()
        derivative_nfev = self._estimate_derivative()
        if self.config.classic:
            step_nfev = self._step_with_backtracking()
        else:
            step_nfev = self._step_with_secant()
        self._first_iteration = False
        self._current_tolerance = abs(old_value - self._optimal_value)
        self._nit += 1
        self._history.append(self._optimal_point.copy())
        self.logger.debug(
            "evaluations in iteration %d: %d derivative, %d step",
            self._nit, derivative_nfev, step_nfev,
        )

    def _estimate_derivative(self) -> int:
        self._derivative, nfev = finite_difference_derivative(
            self._adapter,
            self._optimal_point,
            self._optimal_value,
            self.config.finite_difference_step,
            self._scaler.scales,
        )
        if self._scaler.update(self._derivative, first_iteration=self._first_iteration):
            self._learning_rate = PEAK_LEARNING_RATE
        return nfev

    def _direction(self) -> Array:
        return self._scaler.scales * self._derivative

    def _step_with_secant(self) -> int:
        x = self._optimal_point
        fx = self._optimal_value
        direction = self._direction()
        candidate = self._bounds.project(x - self._learning_rate * direction)
        value = self._adapter(candidate)
        nfev = 1
        if math.isfinite(value) and value > fx:
            self._learning_rate, secant_nfev = secant_mirror_step(
                self._adapter,
                fx,
                candidate,
                value,
                direction,
                self._learning_rate,
                tol=self.config.secant_tol,
                max_iter=self.config.secant_max_iter,
            )
            candidate = self._bounds.project(x - self._learning_rate * direction)
            value = self._adapter(candidate)
            nfev += secant_nfev + 1

        # only finite values may become the incumbent
        attempts = 0
        while not math.isfinite(value):
            if attempts == self.config.backtrack_max_attempts:
                raise LineSearchFailure(
                    f"objective stayed non-finite along the descent direction from "
                    f"{x.tolist()} after {attempts} halvings of the learning rate"
                )
            self.logger.debug(
                "non-finite value %s at %s; halving learning rate %g",
                value, candidate.tolist(), self._learning_rate,
            )
            self._learning_rate *= 0.5
            candidate = self._bounds.project(x - self._learning_rate * direction)
            value = self._adapter(candidate)
            nfev += 1
            attempts += 1

        self._optimal_point = candidate
        self._optimal_value = value
        return nfev

    def _step_with_backtracking(self) -> int:
        point, value, rate, nfev = backtracking_step(
            self._adapter,
            self._optimal_point,
            self._optimal_value,
            self._direction(),
            self._learning_rate,
            self._bounds.project,
            shrink=self.config.backtrack_shrink,
            max_attempts=self.config.backtrack_max_attempts,
        )
        self._optimal_point = point
        self._optimal_value = value
        self._learning_rate = rate
        return nfev

    def _evaluate_incumbent(self, point: Array) -> float:
        value = self._adapter(point)
        if not math.isfinite(value):
            raise ConfigurationError(f"objective is not finite at {point.tolist()}: {value}")
        return value

    def _reset_point(self, point: Array) -> None:
        self._optimal_value = self._evaluate_incumbent(point)
        self._optimal_point = point.copy()
        self._old_optimal_point = point.copy()
        self._history = [point.copy()]


def secant_gradient_descent(
    problem: Problem,
    x0: Any,
    lower: Optional[Any] = None,
    upper: Optional[Any] = None,
    constraints: Iterable[ConstraintLike] = (),
    config: Optional[DescentConfig] = None,
    verbose: bool = False,
    **options: Any,
) -> OptimizeResult:
    """Minimize ``problem.fun`` from ``x0`` and return an :class:`OptimizeResult`.

    ``options`` override fields of ``config`` (for example ``classic=True`` or
    ``tolerance=1e-3``). Failures to converge are reported through
    ``result.success`` instead of being raised.
    """
    config = replace(config, **options) if config is not None else DescentConfig(**options)
    x0 = as_point(x0, problem.dim, "initial guess")
    optimizer = SecantGradientDescent(problem.fun, x0, config=config, verbose=verbose)
    if lower is not None:
        optimizer.set_lower_bounds(lower)
    if upper is not None:
        optimizer.set_upper_bounds(upper)
    constraints = list(constraints)
    if constraints:
        optimizer.add_constraints(constraints)
    try:
        optimizer.run()
    except ConvergenceFailure as exc:
        return exc.result
    except LineSearchFailure:
        return optimizer.result
    return optimizer.result


__all__ = ["SecantGradientDescent", "secant_gradient_descent"]
