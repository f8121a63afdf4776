import numpy as np
import pytest

from secantgd.optimize.utils import euclidean_distance, finite_difference_derivative


def counted(fun):
    calls = []

    def wrapper(x):
        calls.append(np.array(x))
        return fun(x)

    return wrapper, calls


def test_linear_function_derivative_is_exact():
    fun, calls = counted(lambda x: float(3 * x[0] - 2 * x[1]))
    x = np.array([0.2, -0.1])
    grad, nfev = finite_difference_derivative(fun, x, fun(x), 1e-3, np.ones(2))
    np.testing.assert_allclose(grad, [3.0, -2.0], atol=1e-8)
    assert nfev == 2
    assert len(calls) == 3


def test_probe_is_relative_to_coordinate():
    fun, calls = counted(lambda x: float(x[0] ** 2))
    x = np.array([2.0])
    finite_difference_derivative(fun, x, 4.0, 1e-3, np.ones(1))
    assert calls[0][0] == pytest.approx(2.0 * (1 + 1e-3))


def test_scales_shrink_probe():
    fun, calls = counted(lambda x: float(x[0] ** 2))
    finite_difference_derivative(fun, np.array([2.0]), 4.0, 1e-3, np.array([0.1]))
    assert calls[0][0] == pytest.approx(2.0 * (1 + 1e-4))


def test_quadratic_forward_bias():
    x = np.array([1.5, -0.5])
    fun = lambda p: float(np.sum(p**2))
    grad, _ = finite_difference_derivative(fun, x, fun(x), 1e-3, np.ones(2))
    # forward quotient of x**2 is 2x + x*h
    np.testing.assert_allclose(grad, 2 * x + x * 1e-3, rtol=1e-8)


def test_zero_coordinate_uses_additive_probe():
    fun, calls = counted(lambda x: float((x[0] - 1.0) ** 2 + x[1]))
    x = np.array([0.0, 1.0])
    grad, nfev = finite_difference_derivative(fun, x, fun(x), 1e-3, np.ones(2))
    assert calls[1][0] == pytest.approx(1e-3)
    assert grad[0] == pytest.approx(-2.0 + 1e-3)
    assert grad[1] == pytest.approx(1.0)
    assert nfev == 2


def test_undefined_forward_probe_falls_back_to_backward():
    def fun(x):
        return float(np.log(1.0 - x[0]) if x[0] < 1.0 else np.nan)

    x = np.array([1.0 - 1e-4])
    fx = fun(x)
    grad, nfev = finite_difference_derivative(fun, x, fx, 1e-3, np.ones(1))
    assert nfev == 2
    assert grad[0] < 0
    assert np.isfinite(grad[0])


def test_both_probes_undefined_gives_zero():
    def fun(x):
        return 0.0 if x[0] == 2.0 else float("inf")

    grad, nfev = finite_difference_derivative(fun, np.array([2.0]), 0.0, 1e-3, np.ones(1))
    assert grad[0] == 0.0
    assert nfev == 2


def test_invalid_step_raises():
    with pytest.raises(ValueError):
        finite_difference_derivative(lambda x: 0.0, np.array([1.0]), 0.0, 0.0, np.ones(1))


def test_euclidean_distance():
    assert euclidean_distance([0.0, 0.0], [3.0, 4.0]) == pytest.approx(5.0)
