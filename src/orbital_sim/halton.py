"""
Halton low-discrepancy sequence.

Stateless: every value is a pure function of (index, base), so a sampling
run can be reproduced or resumed from any index.
"""

from __future__ import annotations

import math
from typing import Tuple

from numba import njit

# Bases for the (r, theta, phi) dimensions
BASE_R = 2
BASE_THETA = 3
BASE_PHI = 5


@njit(cache=True, fastmath=True)
def halton(index: int, base: int) -> float:
    """Van der Corput radical inverse of `index` in `base`, in [0, 1)."""
    result = 0.0
    f = 1.0 / base
    i = index
    while i > 0:
        result += f * (i % base)
        i //= base
        f /= base
    return result


@njit(cache=True, fastmath=True)
def spherical_point(index: int) -> Tuple[float, float, float]:
    """
    Raw (r, theta, phi) sample in the canonical box [0,1) x [0,pi) x [0,2pi).

    The radius is not yet scaled to the orbital; see sampler.
    """
    r = halton(index, BASE_R)
    theta = halton(index, BASE_THETA) * math.pi
    phi = halton(index, BASE_PHI) * 2.0 * math.pi
    return r, theta, phi


@njit(cache=True, fastmath=True)
def point_3d(index: int) -> Tuple[float, float, float]:
    """Quasi-random point in the cube [-1, 1)^3."""
    x = halton(index, BASE_R) * 2.0 - 1.0
    y = halton(index, BASE_THETA) * 2.0 - 1.0
    z = halton(index, BASE_PHI) * 2.0 - 1.0
    return x, y, z


@njit(cache=True, fastmath=True)
def spherical_to_cartesian(r: float, theta: float, phi: float) -> Tuple[float, float, float]:
    sin_t = math.sin(theta)
    x = r * sin_t * math.cos(phi)
    y = r * sin_t * math.sin(phi)
    z = r * math.cos(theta)
    return x, y, z


__all__ = [
    "halton",
    "spherical_point",
    "point_3d",
    "spherical_to_cartesian",
]
