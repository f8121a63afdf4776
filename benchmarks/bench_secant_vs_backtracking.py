"""Benchmark secant learning-rate scaling against classic backtracking."""

import time
from typing import Callable, Dict, Sequence

import numpy as np

from secantgd import DescentConfig, Problem, secant_gradient_descent


def bump(x: float, y: float) -> float:
    return 10 * x * y * np.exp(-(x**2 + y**2)) + 5 / np.e


def shifted_bowl(x: np.ndarray) -> float:
    return float(np.sum((x - np.arange(1.0, x.size + 1.0)) ** 2))


def rosenbrock(x: float, y: float) -> float:
    return (1.0 - x) ** 2 + 100.0 * (y - x**2) ** 2


def benchmark_problem(
    fun: Callable[..., float],
    x0: Sequence[float],
    classic: bool,
    tolerance: float = 1e-3,
    finite_difference_step: float = 1e-3,
    lower: Sequence[float] = None,
    upper: Sequence[float] = None,
    repeats: int = 10,
) -> Dict[str, float]:
    """Benchmark one optimizer mode on one problem.

    Args:
        fun: Objective.
        x0: Initial guess.
        classic: Use backtracking instead of the secant search.
        tolerance: Terminal tolerance.
        finite_difference_step: Relative finite-difference step.
        lower: Optional lower bounds.
        upper: Optional upper bounds.
        repeats: Number of timed runs.

    Returns:
        Dictionary with timing and evaluation counts.
    """
    config = DescentConfig(
        tolerance=tolerance, finite_difference_step=finite_difference_step, classic=classic
    )
    problem = Problem(fun=fun, dim=len(x0))

    # Warmup
    result = secant_gradient_descent(problem, x0, lower=lower, upper=upper, config=config)

    start = time.perf_counter()
    for _ in range(repeats):
        secant_gradient_descent(problem, x0, lower=lower, upper=upper, config=config)
    end = time.perf_counter()

    return {
        "success": result.success,
        "fun": result.fun,
        "nit": result.nit,
        "nfev": result.nfev,
        "time_per_run_sec": (end - start) / repeats,
    }


if __name__ == "__main__":
    cases = {
        "bump (2D, boxed)": dict(
            fun=bump, x0=[1.6, -1.2], lower=[-2.0, -2.0], upper=[2.0, 2.0]
        ),
        "shifted bowl (5D)": dict(fun=shifted_bowl, x0=[0.5] * 5, finite_difference_step=1e-6),
        "rosenbrock (2D)": dict(fun=rosenbrock, x0=[-1.2, 1.0]),
    }
    for name, kwargs in cases.items():
        print(f"Benchmarking {name}...")
        for classic in (False, True):
            results = benchmark_problem(classic=classic, **kwargs)
            label = "backtracking" if classic else "secant"
            print(f"  {label}:")
            print(f"    Converged: {results['success']}  value: {results['fun']:.3e}")
            print(f"    Iterations: {results['nit']}  function calls: {results['nfev']}")
            print(f"    Time per run: {results['time_per_run_sec']*1e3:.2f} ms")
