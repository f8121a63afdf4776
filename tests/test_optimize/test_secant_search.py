import math

import numpy as np
import pytest

from secantgd.optimize import LineSearchFailure
from secantgd.optimize.line_search import backtracking_step, secant_mirror_step, secant_root


def square(x: np.ndarray) -> float:
    return float(x @ x)


def test_secant_root_finds_sqrt_two():
    root, nfev = secant_root(lambda a: a * a - 2.0, 1.0, 2.0, -1.0, tol=1e-10)
    assert root == pytest.approx(math.sqrt(2.0), abs=1e-9)
    assert nfev >= 2


def test_secant_root_soft_cap_returns_last_iterate():
    calls = []

    def g(a):
        calls.append(a)
        return math.atan(a)

    root, nfev = secant_root(g, 0.5, 3.0, math.atan(0.5), tol=1e-12, max_iter=3)
    assert nfev == len(calls) <= 4
    assert math.isfinite(root)


def test_secant_root_stops_on_flat_secant():
    root, nfev = secant_root(lambda a: 1.0, 0.0, -0.5, 1.0)
    assert root == -0.5
    assert nfev == 1


def test_secant_root_stops_on_non_finite_values():
    root, _ = secant_root(lambda a: math.nan, 0.0, -0.5, 1.0)
    assert root == 0.0


def test_mirror_step_halves_to_the_minimum_of_a_parabola():
    x = np.array([1.0])
    direction = np.array([2.0])
    rate = 1.2
    candidate = x - rate * direction
    new_rate, nfev = secant_mirror_step(
        square, square(x), candidate, square(candidate), direction, rate
    )
    # start sits at alpha=-1.2 and the mirror point at alpha=-0.2 from the candidate
    assert new_rate == pytest.approx(0.5, abs=1e-3)
    assert square(x - new_rate * direction) < 1e-5
    assert nfev > 1


def test_mirror_step_in_two_dimensions():
    center = np.array([1.0, -2.0])

    def bowl(p):
        return float(np.sum((p - center) ** 2))

    x = np.array([3.0, 1.0])
    direction = 2 * (x - center)
    rate = 1.3
    candidate = x - rate * direction
    assert bowl(candidate) > bowl(x)
    new_rate, _ = secant_mirror_step(bowl, bowl(x), candidate, bowl(candidate), direction, rate)
    np.testing.assert_allclose(x - new_rate * direction, center, atol=1e-2)


def test_mirror_step_rate_stays_positive():
    x = np.array([1.0])
    direction = np.array([1.0])
    candidate = x - 0.5 * direction
    # flat line: the secant cannot move, which would give a zero rate
    new_rate, _ = secant_mirror_step(
        lambda p: 1.0, 0.0, candidate, 1.0, direction, 0.5
    )
    assert new_rate > 0


def test_backtracking_accepts_first_improvement():
    x = np.array([1.0, -2.0])
    direction = 2 * x
    point, value, rate, nfev = backtracking_step(
        square, x, square(x), direction, 0.25, lambda p: p
    )
    assert nfev == 1
    assert rate == 0.25
    np.testing.assert_allclose(point, x / 2)
    assert value == pytest.approx(square(x) / 4)


def test_backtracking_shrinks_until_not_worse():
    x = np.array([1.0])
    direction = np.array([2.0])
    point, value, rate, nfev = backtracking_step(
        square, x, square(x), direction, 1.2, lambda p: p, shrink=0.5
    )
    assert nfev == 2
    assert rate == pytest.approx(0.6)
    assert value <= square(x)


def test_backtracking_projects_candidates():
    x = np.array([0.5])
    point, _, _, _ = backtracking_step(
        lambda p: float((p[0] - 5.0) ** 2),
        x,
        20.25,
        np.array([-9.0]),
        1.0,
        lambda p: np.clip(p, 0.0, 1.0),
    )
    np.testing.assert_array_equal(point, [1.0])


def test_backtracking_exhaustion_raises():
    with pytest.raises(LineSearchFailure):
        backtracking_step(
            lambda p: 1.0, np.array([1.0]), 0.0, np.array([1.0]), 1.0, lambda p: p,
            max_attempts=10,
        )


def test_backtracking_rejects_invalid_shrink():
    with pytest.raises(ValueError):
        backtracking_step(square, np.array([1.0]), 1.0, np.array([2.0]), 1.0, lambda p: p, shrink=1.5)
