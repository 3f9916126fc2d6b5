import numpy as np
import pytest

from mandelclick.escape import escape_magnitude, escape_magnitude_grid
from mandelclick.plane import PlaneVector

@pytest.mark.parametrize("c", [PlaneVector(0.3, -0.7), PlaneVector(-2.5, 1.2), PlaneVector(0.0, 0.0)])
def test_zero_iterations_is_magnitude_of_c(c):
    assert escape_magnitude(0, c) == c.magnitude()

@pytest.mark.parametrize("n", [0, 1, 5, 30, 300])
def test_origin_never_escapes(n):
    assert escape_magnitude(n, PlaneVector(0.0, 0.0)) == 0.0

def test_two_grows():
    c = PlaneVector(2.0, 0.0)
    assert escape_magnitude(1, c) == 6.0
    assert escape_magnitude(1, c) >= c.magnitude()
    assert escape_magnitude(2, c) == 38.0

def test_period_two_orbit():
    c = PlaneVector(-1.0, 0.0)
    assert escape_magnitude(1, c) == 0.0
    assert escape_magnitude(2, c) == 1.0
    assert escape_magnitude(31, c) == 0.0

def test_runs_past_divergence_without_raising():
    value = escape_magnitude(60, PlaneVector(2.0, 2.0))
    assert np.isnan(value) or value == float("inf")

def test_negative_iterations_rejected():
    with pytest.raises(ValueError):
        escape_magnitude(-1, PlaneVector(0.0, 0.0))
    with pytest.raises(ValueError):
        escape_magnitude_grid(-1, np.zeros(2), np.zeros(2))

def test_grid_matches_scalar_bit_for_bit():
    xs = np.linspace(-2.5, 0.7, 17)
    ys = np.linspace(-1.2, 1.2, 13)
    cx, cy = np.meshgrid(xs, ys)
    for n in (0, 1, 7, 30, 60):
        grid = escape_magnitude_grid(n, cx, cy)
        scalar = np.array([
            [escape_magnitude(n, PlaneVector(float(x), float(y))) for x, y in zip(row_x, row_y)]
            for row_x, row_y in zip(cx, cy)
        ])
        np.testing.assert_array_equal(grid, scalar)

def test_grid_shape_mismatch():
    with pytest.raises(ValueError):
        escape_magnitude_grid(3, np.zeros(3), np.zeros(4))
