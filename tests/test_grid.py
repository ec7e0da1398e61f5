import numpy as np
import pytest

from orbitalfield.grid import cube_axis, radial_grid_linear, spatial_range, trapezoid_weights
from orbitalfield.utils import cartesian_to_spherical, trapz


@pytest.mark.grid
@pytest.mark.quick
def test_linear_grid_integral_of_one():
    r, w = radial_grid_linear(101, 0.0, 2.0)
    # ∫_0^2 1 dr = 2
    assert np.isclose(np.sum(w), 2.0, rtol=0, atol=1e-12)


@pytest.mark.grid
@pytest.mark.quick
def test_trapezoid_weights_integrate_sine():
    r = np.linspace(0.0, np.pi, 2001)
    w = trapezoid_weights(r)
    # ∫_0^π sin = 2
    assert np.isclose(trapz(np.sin(r), r, w), 2.0, atol=1e-6)
    assert np.isclose(trapz(np.sin(r), r), 2.0, atol=1e-6)


@pytest.mark.grid
def test_trapz_without_weights_on_nonuniform_grid():
    """线性函数的梯形积分在非均匀网格上精确：∫_0^3 (2r+1) dr = 12。"""
    r = np.array([0.0, 0.1, 0.5, 1.7, 3.0])
    assert np.isclose(trapz(2.0 * r + 1.0, r), 12.0, rtol=1e-14)
    assert np.isclose(trapz(2.0 * r + 1.0, r), trapz(2.0 * r + 1.0, r, trapezoid_weights(r)), rtol=1e-14)


@pytest.mark.grid
def test_trapezoid_weights_reject_non_monotonic():
    with pytest.raises(ValueError, match="单调递增"):
        trapezoid_weights(np.array([0.0, 1.0, 0.5]))


@pytest.mark.grid
@pytest.mark.quick
def test_spatial_range_grows_with_n():
    assert spatial_range(1) == 17.0
    assert spatial_range(3) == 41.0
    with pytest.raises(ValueError):
        spatial_range(0)


@pytest.mark.grid
@pytest.mark.quick
def test_cube_axis_includes_both_endpoints():
    axis = cube_axis(32, 17.0)
    assert axis.size == 32
    assert axis[0] == -17.0
    assert axis[-1] == 17.0
    assert np.allclose(axis, -axis[::-1])


@pytest.mark.grid
def test_cube_axis_odd_size_hits_origin():
    axis = cube_axis(17, 29.0)
    assert axis[8] == 0.0


@pytest.mark.grid
@pytest.mark.quick
def test_spherical_conversion_guarded_at_origin():
    r, theta, phi = cartesian_to_spherical(0.0, 0.0, 0.0)
    assert r == 0.0
    assert np.isfinite(theta) and np.isclose(theta, np.pi / 2)
    assert phi == 0.0


@pytest.mark.grid
def test_spherical_conversion_axes():
    r, theta, phi = cartesian_to_spherical(
        np.array([1.0, 0.0, 0.0, 0.0]),
        np.array([0.0, 2.0, 0.0, 0.0]),
        np.array([0.0, 0.0, 3.0, -3.0]),
    )
    assert np.allclose(r, [1.0, 2.0, 3.0, 3.0])
    assert np.allclose(theta, [np.pi / 2, np.pi / 2, 0.0, np.pi], atol=1e-2)
    assert np.all(np.isfinite(theta))
    assert np.isclose(phi[1], np.pi / 2)
