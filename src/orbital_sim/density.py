"""
Probability density models for hydrogen-like orbitals.

The radial part follows a Dirac-derived approximation: the large component
G = rho^(gamma-1) exp(-rho/2) L_{n_r}^{2 gamma}(rho) with the relativistic
exponent gamma = sqrt(kappa^2 - (Z alpha)^2), kappa = -(l+1), plus a small
component F = (alpha Z / (n + gamma)) G. This is a physically motivated
model, not an exact solution of the Dirac equation for every (n, l).

A non-relativistic Schrodinger radial function is available through the
same kernels by passing ``model=RADIAL_SCHRODINGER``.

All densities are unnormalized: only ratios for a fixed state matter.
"""

from __future__ import annotations

import math

from numba import njit

from .special import associated_laguerre, associated_legendre, factorial

###############################################################################
# Constants
###############################################################################

ALPHA = 1.0 / 137.035999084  # fine-structure constant
Z = 1.0  # nuclear charge (hydrogen)

# Smallest scaled radius fed to rho^(gamma-1). For l = 0 the exponent is
# slightly negative, so rho = 0 would diverge.
RHO_FLOOR = 1e-12

FOUR_PI = 4.0 * math.pi

RADIAL_DIRAC = 0
RADIAL_SCHRODINGER = 1

RADIAL_MODELS = {
    "dirac": RADIAL_DIRAC,
    "schrodinger": RADIAL_SCHRODINGER,
}


def resolve_radial_model(model: int | str) -> int:
    """Map a model name (as used in parameter files) to its kernel flag."""
    if isinstance(model, str):
        try:
            return RADIAL_MODELS[model.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown radial model: {model!r} (expected one of {sorted(RADIAL_MODELS)})"
            ) from None
    if model not in RADIAL_MODELS.values():
        raise ValueError(f"Unknown radial model flag: {model!r}")
    return int(model)


def radial_model_name(model: int) -> str:
    for name, flag in RADIAL_MODELS.items():
        if flag == model:
            return name
    raise ValueError(f"Unknown radial model flag: {model!r}")


###############################################################################
# Radial part
###############################################################################


@njit(cache=True)
def calculate_gamma(l: int) -> float:
    """
    Relativistic exponent sqrt(kappa^2 - (Z alpha)^2) with kappa = -(l+1).

    The radicand is positive for every l >= 0 since Z alpha << 1.
    """
    kappa = -(l + 1.0)
    return math.sqrt(kappa * kappa - (Z * ALPHA) ** 2)


@njit(cache=True)
def _dirac_radial(n, l, r):
    rho = max(2.0 * Z * r / n, RHO_FLOOR)
    gamma = calculate_gamma(l)
    n_r = n - (l + 1)
    lag = associated_laguerre(n_r, 2.0 * gamma, rho)
    g = rho ** (gamma - 1.0) * math.exp(-rho / 2.0) * lag
    f = (ALPHA * Z / (n + gamma)) * g
    return g * g + f * f


@njit(cache=True)
def _schrodinger_radial(n, l, r):
    rho = max(2.0 * Z * r / n, RHO_FLOOR)
    n_r = n - l - 1
    if n_r < 0:
        return 0.0
    norm = math.sqrt(
        (2.0 * Z / n) ** 3 * factorial(n_r) / (2.0 * n * factorial(n + l))
    )
    lag = associated_laguerre(n_r, 2 * l + 1, rho)
    radial = norm * math.exp(-rho / 2.0) * rho**l * lag
    return radial * radial


@njit(cache=True)
def radial_probability(n, l, r, model=RADIAL_DIRAC):
    """
    Unnormalized radial density for (n, l) at radius r >= 0.

    Finite and non-negative on r >= 0, vanishing as r -> inf for every state
    and as r -> 0 for l > 0. Out-of-domain input (n < 1, l < 0, l >= n,
    r < 0) gives 0.0.
    """
    if n < 1 or l < 0 or l >= n or r < 0.0:
        return 0.0
    if model == RADIAL_SCHRODINGER:
        return _schrodinger_radial(n, l, r)
    return _dirac_radial(n, l, r)


###############################################################################
# Angular part
###############################################################################


@njit(cache=True)
def angular_probability(l, m, theta, phi=0.0):
    """
    Unnormalized angular density.

    s: isotropic 1/(4 pi). p: real combinations p_z (m=0), p_x (m=-1),
    p_y (m=+1). Everything else uses the phi-averaged |Y_l^m|^2, so the
    phi dependence of real d, f, ... orbitals is not resolved.
    """
    if l == 0 and m == 0:
        return 1.0 / FOUR_PI
    if l == 1:
        if m == 0:
            c = math.cos(theta)
            return c * c
        if m == -1:
            s = math.sin(theta) * math.cos(phi)
            return s * s
        if m == 1:
            s = math.sin(theta) * math.sin(phi)
            return s * s

    m_abs = abs(m)
    plm = associated_legendre(l, m_abs, math.cos(theta))
    if plm == 0.0:
        return 0.0
    norm = (2 * l + 1) / FOUR_PI * factorial(l - m_abs) / factorial(l + m_abs)
    return norm * plm * plm


###############################################################################
# Joint density
###############################################################################


@njit(cache=True)
def probability_density(n, l, m, r, theta, phi, model=RADIAL_DIRAC):
    """Joint density radial * angular * r^2 in spherical coordinates."""
    return (
        radial_probability(n, l, r, model)
        * angular_probability(l, m, theta, phi)
        * r
        * r
    )


__all__ = [
    "ALPHA",
    "Z",
    "RADIAL_DIRAC",
    "RADIAL_SCHRODINGER",
    "RADIAL_MODELS",
    "resolve_radial_model",
    "radial_model_name",
    "calculate_gamma",
    "radial_probability",
    "angular_probability",
    "probability_density",
]
