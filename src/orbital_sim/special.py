"""
Special functions for hydrogen-like orbitals.

Recurrence-based evaluation of the factorial, associated Legendre and
associated Laguerre polynomials. All kernels are compiled with numba and
return 0.0 for inputs outside their domain instead of raising, so that an
invalid channel simply contributes nothing to a density.
"""

from __future__ import annotations

import math

from numba import njit

###############################################################################
# Factorial
###############################################################################


@njit(cache=True)
def factorial(k):
    """
    k! with floating accumulation.

    Returns 1.0 for k in {0, 1} and 0.0 for k < 0. The product is exact up
    to 22! (20! = 2432902008176640000 is representable), float64-rounded
    beyond that and inf past 170!.
    """
    if k < 0:
        return 0.0
    result = 1.0
    for i in range(2, int(k) + 1):
        result *= i
    return result


###############################################################################
# Associated Legendre P_l^m(x)
###############################################################################


@njit(cache=True, fastmath=True)
def associated_legendre(l, m, x):
    """
    Associated Legendre polynomial P_l^|m|(x), Condon-Shortley phase included.

    m is normalized to |m|; callers that need the sign convention for
    negative m apply it themselves. Returns 0.0 when |m| > l.
    """
    m_abs = abs(m)
    if m_abs > l:
        return 0.0
    if l == 0:
        return 1.0

    # P_m^m = (-1)^m (2m-1)!! (1-x^2)^(m/2)
    pmm = 1.0
    if m_abs > 0:
        somx2 = math.sqrt(max(0.0, (1.0 - x) * (1.0 + x)))
        fact = 1.0
        for _ in range(m_abs):
            pmm *= -fact * somx2
            fact += 2.0
    if l == m_abs:
        return pmm

    pm1m = x * (2 * m_abs + 1) * pmm
    if l == m_abs + 1:
        return pm1m

    for ll in range(m_abs + 2, l + 1):
        pll = ((2 * ll - 1) * x * pm1m - (ll + m_abs - 1) * pmm) / (ll - m_abs)
        pmm = pm1m
        pm1m = pll
    return pm1m


###############################################################################
# Associated Laguerre L_n^alpha(x)
###############################################################################


@njit(cache=True, fastmath=True)
def associated_laguerre(n, alpha, x):
    """
    Associated Laguerre polynomial L_n^alpha(x) by upward recurrence in n.

    Seeded from L_0 = 1 and L_1 = 1 + alpha - x. Returns 0.0 for negative or
    non-integer n and for x < 0.
    """
    if n < 0 or n != int(n) or x < 0.0:
        return 0.0
    k = int(n)
    if k == 0:
        return 1.0
    lm2 = 1.0
    lm1 = 1.0 + alpha - x
    for j in range(1, k):
        lj = ((2 * j + 1 + alpha - x) * lm1 - (j + alpha) * lm2) / (j + 1)
        lm2 = lm1
        lm1 = lj
    return lm1


def associated_laguerre_series(n, alpha, x):
    """
    Reference L_n^alpha(x) from the explicit binomial sum.

        L_n^alpha(x) = sum_i (-1)^i C(n + alpha, n - i) x^i / i!

    Only well conditioned for small n; kept as an oracle for the recurrence.
    """
    if n < 0 or n != int(n) or x < 0.0:
        return 0.0
    n = int(n)
    total = 0.0
    for i in range(n + 1):
        binom = math.gamma(n + alpha + 1) / (
            math.gamma(n - i + 1) * math.gamma(alpha + i + 1)
        )
        total += (-1) ** i * binom * x**i / math.factorial(i)
    return total


__all__ = [
    "factorial",
    "associated_legendre",
    "associated_laguerre",
    "associated_laguerre_series",
]
