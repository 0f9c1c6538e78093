"""
Enclosing-radius (r90) estimation with a per-state cache.

r90(n, l) is the radius enclosing 90% of the radial probability (95% for
s states). It is found by integrating radial(r) * r^2 outward on a grid
that scales with n^2 and is memoized per (n, l) for the process lifetime.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional, Tuple

from numba import njit

from .density import RADIAL_DIRAC, radial_model_name, radial_probability, resolve_radial_model

logger = logging.getLogger(__name__)

###############################################################################
# Constants
###############################################################################

STEP_PER_N2 = 0.02  # dr = 0.02 * n^2
CEILING_PER_N2 = 40.0  # integration stops at 40 * n^2
TARGET_S = 0.95
TARGET_DEFAULT = 0.90

CacheKey = Tuple[int, int]


def target_fraction(l: int) -> float:
    return TARGET_S if l == 0 else TARGET_DEFAULT


###############################################################################
# Integration kernel
###############################################################################


@njit(cache=True)
def _integrate_quantile(n, l, target, model):
    """
    Midpoint-rule integral of radial * r^2 from 0 to the ceiling.

    Returns the radius at the end of the first step where the cumulative
    fraction reaches `target`, or the ceiling when the total is zero.
    """
    dr = STEP_PER_N2 * n * n
    ceiling = CEILING_PER_N2 * n * n
    steps = int(ceiling / dr)

    total = 0.0
    for i in range(steps):
        r = (i + 0.5) * dr
        total += radial_probability(n, l, r, model) * r * r * dr
    if not total > 0.0:
        return ceiling

    threshold = target * total
    cumulative = 0.0
    for i in range(steps):
        r = (i + 0.5) * dr
        cumulative += radial_probability(n, l, r, model) * r * r * dr
        if cumulative >= threshold:
            return (i + 1) * dr
    return ceiling


###############################################################################
# Cache
###############################################################################


class QuantileCache:
    """
    Compute-once cache of enclosing radii keyed by (n, l).

    Entries are created lazily and never invalidated. Concurrent first
    requests for the same key are serialized on a per-key lock, so the
    integral runs once and every caller sees the same stored value.
    """

    def __init__(self, model: int | str = RADIAL_DIRAC) -> None:
        self.model = resolve_radial_model(model)
        self._values: Dict[CacheKey, float] = {}
        self._locks: Dict[CacheKey, threading.Lock] = {}
        self._guard = threading.Lock()
        self.misses = 0

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._values

    def _key_lock(self, key: CacheKey) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def get(self, n: int, l: int) -> float:
        """
        Enclosing radius for (n, l). Pairs with l outside [0, n) have no
        radial density and map to the 40 n^2 ceiling.

        Raises:
            ValueError: if n < 1 (the grid scales with n^2).
        """
        if n < 1:
            raise ValueError(f"n must be >= 1, got {n}")
        key = (int(n), int(l))
        value = self._values.get(key)
        if value is not None:
            return value

        with self._key_lock(key):
            value = self._values.get(key)
            if value is None:
                value = float(
                    _integrate_quantile(key[0], key[1], target_fraction(key[1]), self.model)
                )
                self._values[key] = value
                with self._guard:
                    self.misses += 1
                logger.debug(
                    "r90 miss n=%d l=%d model=%s -> %.4f",
                    key[0], key[1], radial_model_name(self.model), value,
                )
        return value

    r90 = get


_default_caches: Dict[int, QuantileCache] = {}
_default_guard = threading.Lock()


def default_cache(model: int | str = RADIAL_DIRAC) -> QuantileCache:
    """Process-wide cache for a radial model."""
    flag = resolve_radial_model(model)
    with _default_guard:
        cache = _default_caches.get(flag)
        if cache is None:
            cache = QuantileCache(flag)
            _default_caches[flag] = cache
        return cache


def r90(n: int, l: int, cache: Optional[QuantileCache] = None) -> float:
    """Radius enclosing 90% (95% for l = 0) of the radial probability."""
    if cache is None:
        cache = default_cache()
    return cache.get(n, l)


__all__ = [
    "QuantileCache",
    "default_cache",
    "r90",
    "target_fraction",
]
