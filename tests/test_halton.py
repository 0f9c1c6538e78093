"""
Unit tests for the Halton sequence and coordinate helpers.
"""

import math

import numpy as np
import pytest

from orbital_sim.halton import halton, point_3d, spherical_point, spherical_to_cartesian


def test_halton_known_values():
    assert halton(0, 2) == 0.0
    assert halton(1, 2) == 0.5
    assert halton(2, 2) == 0.25
    assert halton(3, 2) == 0.75
    assert halton(1, 3) == pytest.approx(1.0 / 3.0)
    # 5 = 12 in base 3 -> 0.21 in base 3
    assert halton(5, 3) == pytest.approx(2.0 / 3.0 + 1.0 / 9.0)


def test_halton_in_unit_interval():
    for base in (2, 3, 5, 7):
        values = np.array([halton(i, base) for i in range(2000)])
        assert np.all(values >= 0.0)
        assert np.all(values < 1.0)


def test_halton_is_deterministic():
    for i in (0, 1, 17, 1234, 98765):
        for base in (2, 3, 5):
            assert halton(i, base) == halton(i, base)


def test_halton_base2_fills_every_bin():
    """The first 2^k base-2 values hit each of the 2^k equal bins exactly once."""
    k = 10
    values = np.array([halton(i, 2) for i in range(1 << k)])
    bins = np.floor(values * (1 << k)).astype(int)
    assert np.array_equal(np.sort(bins), np.arange(1 << k))


def test_spherical_point_ranges():
    for i in range(1, 500):
        r, theta, phi = spherical_point(i)
        assert 0.0 <= r < 1.0
        assert 0.0 <= theta <= math.pi
        assert 0.0 <= phi < 2.0 * math.pi
        assert r == halton(i, 2)
        assert theta == pytest.approx(halton(i, 3) * math.pi)
        assert phi == pytest.approx(halton(i, 5) * 2.0 * math.pi)


def test_point_3d_in_cube():
    for i in range(500):
        p = np.array(point_3d(i))
        assert np.all(p >= -1.0) and np.all(p < 1.0)


def test_spherical_to_cartesian():
    x, y, z = spherical_to_cartesian(1.0, 0.0, 0.0)
    assert (x, y, z) == pytest.approx((0.0, 0.0, 1.0))

    x, y, z = spherical_to_cartesian(2.0, math.pi / 2, 0.0)
    assert (x, y, z) == pytest.approx((2.0, 0.0, 0.0), abs=1e-12)

    x, y, z = spherical_to_cartesian(3.0, math.pi / 2, math.pi / 2)
    assert (x, y, z) == pytest.approx((0.0, 3.0, 0.0), abs=1e-12)

    x, y, z = spherical_to_cartesian(1.7, 1.1, 4.2)
    assert math.sqrt(x * x + y * y + z * z) == pytest.approx(1.7)
