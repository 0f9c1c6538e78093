"""
Unit tests for the special-function kernels.
"""

import math

import numpy as np
import pytest
from scipy.special import eval_genlaguerre, lpmv

from orbital_sim.density import calculate_gamma
from orbital_sim.special import (
    associated_laguerre,
    associated_laguerre_series,
    associated_legendre,
    factorial,
)


def test_factorial_small_values():
    assert factorial(0) == 1
    assert factorial(1) == 1
    assert factorial(5) == 120
    assert factorial(10) == 3628800


def test_factorial_upper_limit_is_exact():
    assert factorial(20) == 2432902008176640000
    assert factorial(20) == math.factorial(20)


def test_factorial_negative_is_zero():
    for k in (-1, -2, -5, -20):
        assert factorial(k) == 0


def test_legendre_zero_when_m_exceeds_l():
    for l in range(0, 5):
        for m in range(l + 1, l + 4):
            for x in np.linspace(-1.0, 1.0, 11):
                assert associated_legendre(l, m, x) == 0.0
                assert associated_legendre(l, -m, x) == 0.0


def test_legendre_known_values():
    for x in np.linspace(-1.0, 1.0, 9):
        assert associated_legendre(0, 0, x) == 1.0
    assert associated_legendre(1, 0, 0.5) == pytest.approx(0.5, abs=1e-10)
    # Condon-Shortley phase: P_1^1(x) = -sqrt(1 - x^2)
    assert associated_legendre(1, 1, 0.5) == pytest.approx(-0.866025403784439, abs=1e-10)
    assert associated_legendre(2, 0, 0.5) == pytest.approx(-0.125, abs=1e-10)
    assert associated_legendre(2, 1, 0.5) == pytest.approx(-1.299038105676658, abs=1e-10)


def test_legendre_uses_absolute_m():
    for l in range(1, 5):
        for m in range(1, l + 1):
            assert associated_legendre(l, -m, 0.3) == associated_legendre(l, m, 0.3)


def test_legendre_matches_scipy():
    xs = np.linspace(-0.95, 0.95, 13)
    for l in range(0, 9):
        for m in range(0, l + 1):
            ours = np.array([associated_legendre(l, m, x) for x in xs])
            ref = lpmv(m, l, xs)
            scale = max(1.0, np.abs(ref).max())
            np.testing.assert_allclose(ours, ref, rtol=1e-9, atol=1e-12 * scale)


def test_laguerre_base_cases():
    for alpha in (0.0, 1.0, 2.5, 7.0):
        for x in (0.0, 0.3, 4.0, 25.0):
            assert associated_laguerre(0, alpha, x) == 1.0
    # L_1^alpha(x) = 1 + alpha - x
    assert associated_laguerre(1, 2, 3) == pytest.approx(0.0, abs=1e-10)
    assert associated_laguerre(1, 4, 2) == pytest.approx(3.0, abs=1e-10)
    # L_2^2(4) = 8 - 16 + 6
    assert associated_laguerre(2, 2, 4) == pytest.approx(-2.0, abs=1e-10)


def test_laguerre_invalid_domain_returns_zero():
    assert associated_laguerre(-1, 2, 3) == 0.0
    assert associated_laguerre(-3, 0.5, 1.0) == 0.0
    assert associated_laguerre(1.5, 2.0, 1.0) == 0.0
    assert associated_laguerre(2, 2.0, -0.1) == 0.0


def test_laguerre_matches_scipy():
    xs = np.linspace(0.0, 15.0, 16)
    for alpha in (1.0, 3.0, 2.0 * calculate_gamma(1), 2.0 * calculate_gamma(3)):
        for n in range(0, 11):
            ours = np.array([associated_laguerre(n, alpha, x) for x in xs])
            ref = eval_genlaguerre(n, alpha, xs)
            scale = max(1.0, np.abs(ref).max())
            np.testing.assert_allclose(ours, ref, rtol=1e-8, atol=1e-10 * scale)


def test_laguerre_recurrence_matches_series_for_small_n():
    """The binomial-sum definition agrees with the recurrence where it is well conditioned."""
    alpha = 2.0 * calculate_gamma(0)
    for n in range(0, 7):
        for x in (0.0, 0.5, 2.0, 6.0, 10.0):
            assert associated_laguerre(n, alpha, x) == pytest.approx(
                associated_laguerre_series(n, alpha, x), rel=1e-8, abs=1e-8
            )
