import numpy as np
import pytest

from secantgd.optimize import BoxBounds, ConfigurationError


def test_projection_without_bounds_is_identity():
    bounds = BoxBounds(3)
    point = np.array([-1e6, 0.0, 1e6])
    np.testing.assert_array_equal(bounds.project(point), point)
    assert not bounds.is_set


def test_projection_clamps_and_is_idempotent(rng):
    bounds = BoxBounds(4, lower=[-1.0, -2.0, 0.0, -np.inf], upper=[1.0, 2.0, 0.5, 3.0])
    for _ in range(50):
        point = rng.normal(scale=5.0, size=4)
        projected = bounds.project(point)
        assert np.all(projected >= bounds.lower)
        assert np.all(projected <= bounds.upper)
        np.testing.assert_array_equal(bounds.project(projected), projected)
        inside = (point >= bounds.lower) & (point <= bounds.upper)
        np.testing.assert_array_equal(projected[inside], point[inside])


def test_one_sided_bounds():
    bounds = BoxBounds(2).with_lower([0.0, 0.0])
    np.testing.assert_array_equal(bounds.project([-1.0, 5.0]), [0.0, 5.0])
    bounds = bounds.with_upper([1.0, 1.0])
    np.testing.assert_array_equal(bounds.project([-1.0, 5.0]), [0.0, 1.0])


def test_single_coordinate_outside_bounds_is_rejected():
    # Any one coordinate outside its bound invalidates the point; requiring
    # every coordinate to be out of bounds would let this point through.
    bounds = BoxBounds(2, lower=[-2.0, -2.0], upper=[2.0, 2.0])
    assert bounds.contains([1.6, -1.2])
    assert not bounds.contains([2.5, 0.0])
    np.testing.assert_array_equal(bounds.violations([2.5, 0.0]), [0])
    with pytest.raises(ConfigurationError):
        bounds.validate([2.5, 0.0])
    with pytest.raises(ConfigurationError):
        bounds.validate([0.0, -3.0])


def test_points_on_the_boundary_are_valid():
    bounds = BoxBounds(2, lower=[0.0, 0.0], upper=[1.0, 1.0])
    bounds.validate([0.0, 1.0])


def test_crossed_bounds_raise():
    with pytest.raises(ConfigurationError):
        BoxBounds(2, lower=[0.0, 2.0], upper=[1.0, 1.0])
    with pytest.raises(ConfigurationError):
        BoxBounds(2, upper=[1.0, 1.0]).with_lower([0.0, 5.0])


def test_wrong_dimension_raises():
    with pytest.raises(ConfigurationError):
        BoxBounds(2, lower=[0.0, 0.0, 0.0])
