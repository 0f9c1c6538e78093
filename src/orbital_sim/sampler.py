"""
Orbital point-cloud sampler.

Rejection sampling of the joint density radial(r) * angular(theta, phi) * r^2
with a Halton-driven proposal:

- Envelope: the radial factor radial * r^2 is scanned over [0, extent * n^2]
  with a fixed spacing in Bohr radii, each local maximum rescanned finely,
  and the angular factor on a theta x phi grid; the product of the two
  maxima is used as the majorant p_max.
- Proposal: Halton index i gives (u, theta, phi); the radius is
  r_max * cbrt(u), i.e. uniform in volume up to r_max.
- Acceptance: an independent uniform draw below density / p_max.

The Halton index advances on every attempt, accepted or not. Unless
max_attempts_factor is given, the attempt budget is derived from the mean
acceptance over the first Halton proposals, with a safety margin and a hard
cap. A low envelope can only shorten the cloud, never stall the run.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import asdict, dataclass
from typing import Callable, Optional, Tuple

import numpy as np
from numba import njit

from . import utils
from .density import (
    RADIAL_DIRAC,
    angular_probability,
    probability_density,
    radial_model_name,
    radial_probability,
    resolve_radial_model,
)
from .halton import spherical_point, spherical_to_cartesian
from .quantile import QuantileCache, default_cache

logger = logging.getLogger(__name__)

###############################################################################
# Constants
###############################################################################

DEFAULT_PARTICLE_COUNT = 3000
# Attempt budget when max_attempts_factor is unset: BUDGET_SAFETY times the
# attempts the estimated acceptance needs, clamped to
# [MIN_ATTEMPTS_FACTOR, MAX_ATTEMPTS_FACTOR] x particle_count.
BUDGET_SAFETY = 3.0
MIN_ATTEMPTS_FACTOR = 10
MAX_ATTEMPTS_FACTOR = 1000
DEFAULT_ACCEPTANCE_SAMPLES = 4096
DEFAULT_ENVELOPE_STEPS = 120  # radial grid intervals per n^2
REFINE_STEPS = 32
DEFAULT_ENVELOPE_EXTENT = 6.0  # radial scan covers [0, 6 n^2]
DEFAULT_R_MAX_FACTOR = 1.5  # proposal radius = 1.5 * r90, capped by the scan
DEFAULT_ANGULAR_GRID = 64
DEFAULT_CHUNK_ATTEMPTS = 50_000

###############################################################################
# Envelope
###############################################################################


@njit(cache=True)
def _radial_shell(n, l, r, model):
    return radial_probability(n, l, r, model) * r * r


@njit(cache=True)
def _refine_peak(n, l, r_lo, r_hi, model):
    best = 0.0
    dr = (r_hi - r_lo) / REFINE_STEPS
    for k in range(REFINE_STEPS + 1):
        p = _radial_shell(n, l, r_lo + k * dr, model)
        if p > best:
            best = p
    return best


@njit(cache=True)
def _radial_envelope(n, l, extent, steps, model):
    # Grid spacing is extent / steps Bohr radii for every n: the inner lobe
    # of an ns state stays about one Bohr radius wide as n grows.
    if n < 1 or steps < 1:
        return 0.0
    intervals = steps * n * n
    dr = extent * n * n / intervals
    p_max = 0.0
    prev = 0.0
    prev_prev = 0.0
    for i in range(intervals + 1):
        p = _radial_shell(n, l, i * dr, model)
        # point i-1 is a local maximum: rescan its bracket finely
        if i >= 1 and prev > prev_prev and prev >= p:
            peak = _refine_peak(n, l, max(0.0, (i - 2) * dr), i * dr, model)
            if peak > p_max:
                p_max = peak
        if p > p_max:
            p_max = p
        prev_prev = prev
        prev = p
    return p_max


@njit(cache=True)
def _angular_envelope(l, m, grid):
    a_max = 0.0
    for i in range(grid + 1):
        theta = math.pi * i / grid
        for j in range(grid):
            phi = 2.0 * math.pi * j / grid
            a = angular_probability(l, m, theta, phi)
            if a > a_max:
                a_max = a
    return a_max


def estimate_envelope(
    n: int,
    l: int,
    m: int,
    steps: int = DEFAULT_ENVELOPE_STEPS,
    extent: float = DEFAULT_ENVELOPE_EXTENT,
    angular_grid: int = DEFAULT_ANGULAR_GRID,
    model: int = RADIAL_DIRAC,
) -> float:
    """
    Grid majorant of probability_density for the state.

    `steps` is the number of radial intervals per n^2, so the spacing is
    extent / steps Bohr radii for every n. Radial peaks are rescanned
    on a finer bracket; the angular maximum stays a plain grid maximum.
    """
    radial_max = _radial_envelope(n, l, float(extent), int(steps), model)
    angular_max = _angular_envelope(l, m, int(angular_grid))
    return float(radial_max * angular_max)


###############################################################################
# Rejection kernel
###############################################################################


@njit(cache=True)
def _rejection_sample(
    n: int,
    l: int,
    m: int,
    out: np.ndarray,
    accepted: int,
    p_max: float,
    r_max: float,
    index: int,
    attempt_limit: int,
    model: int,
) -> Tuple[int, int, int]:
    """
    Fill `out` from row `accepted` onward, using at most `attempt_limit` draws.

    Returns:
        (accepted, next_index, attempts)
    """
    target = out.shape[0]
    attempts = 0
    while accepted < target and attempts < attempt_limit:
        u, theta, phi = spherical_point(index)
        index += 1
        attempts += 1

        r = r_max * u ** (1.0 / 3.0)
        p = probability_density(n, l, m, r, theta, phi, model)
        if np.random.random() < p / p_max:
            x, y, z = spherical_to_cartesian(r, theta, phi)
            out[accepted, 0] = x
            out[accepted, 1] = y
            out[accepted, 2] = z
            accepted += 1
    return accepted, index, attempts


@njit(cache=True)
def _estimate_acceptance(n, l, m, p_max, r_max, index, samples, model):
    """Mean acceptance probability over `samples` proposals from `index`."""
    total = 0.0
    for k in range(samples):
        u, theta, phi = spherical_point(index + k)
        r = r_max * u ** (1.0 / 3.0)
        ratio = probability_density(n, l, m, r, theta, phi, model) / p_max
        total += min(ratio, 1.0)
    return total / samples


###############################################################################
# Configuration and Main Interface
###############################################################################


@dataclass
class SamplerParams:
    n: int = 1
    l: int = 0
    m: int = 0
    particle_count: int = DEFAULT_PARTICLE_COUNT
    max_attempts_factor: Optional[int] = None
    acceptance_samples: int = DEFAULT_ACCEPTANCE_SAMPLES
    envelope_steps: int = DEFAULT_ENVELOPE_STEPS
    envelope_extent: float = DEFAULT_ENVELOPE_EXTENT
    r_max_factor: float = DEFAULT_R_MAX_FACTOR
    angular_grid: int = DEFAULT_ANGULAR_GRID
    chunk_attempts: int = DEFAULT_CHUNK_ATTEMPTS
    start_index: int = 1
    radial_model: str = "dirac"
    seed: Optional[int] = None

    @property
    def state(self) -> utils.QuantumState:
        return utils.QuantumState(self.n, self.l, self.m)


class OrbitalSampler:
    """
    Rejection sampler for a single orbital state.

    The enclosing-radius cache is injected so its lifetime (and locking)
    is owned by the caller; by default the process-wide cache for the
    radial model is used.
    """

    def __init__(self, params: SamplerParams, cache: Optional[QuantileCache] = None) -> None:
        self.params = params
        self.state = params.state.validate()
        if params.particle_count < 0:
            raise ValueError(f"particle_count must be >= 0, got {params.particle_count}")
        if params.max_attempts_factor is not None and params.max_attempts_factor < 1:
            raise ValueError(
                f"max_attempts_factor must be >= 1, got {params.max_attempts_factor}"
            )
        if params.start_index < 1:
            raise ValueError(f"start_index must be >= 1, got {params.start_index}")

        self.model = resolve_radial_model(params.radial_model)
        if cache is None:
            cache = default_cache(self.model)
        elif cache.model != self.model:
            raise ValueError(
                f"Cache radial model {radial_model_name(cache.model)!r} does not match "
                f"sampler model {radial_model_name(self.model)!r}"
            )
        self.cache = cache

        if params.seed is not None:
            utils.set_seed(params.seed)

        n, l, m = self.state.n, self.state.l, self.state.m
        self.p_max = estimate_envelope(
            n, l, m,
            steps=params.envelope_steps,
            extent=params.envelope_extent,
            angular_grid=params.angular_grid,
            model=self.model,
        )
        self.r90 = self.cache.get(n, l)
        self.r_max = min(params.r_max_factor * self.r90, params.envelope_extent * n * n)
        self.expected_acceptance = 0.0
        if params.particle_count > 0 and self.p_max > 0.0:
            self.expected_acceptance = float(
                _estimate_acceptance(
                    n, l, m, self.p_max, self.r_max, params.start_index,
                    max(1, params.acceptance_samples), self.model,
                )
            )
        self.max_attempts = self._attempt_budget()
        logger.debug(
            "%s: p_max=%.4g r_max=%.3f acceptance~%.4f budget=%d",
            self.state, self.p_max, self.r_max, self.expected_acceptance, self.max_attempts,
        )

        self.positions = np.zeros((params.particle_count, 3), dtype=np.float64)
        self.num_accepted = 0
        self.attempts = 0
        self.next_index = params.start_index

    def _attempt_budget(self) -> int:
        count = self.params.particle_count
        if self.params.max_attempts_factor is not None:
            return self.params.max_attempts_factor * count
        cap = MAX_ATTEMPTS_FACTOR * count
        if not self.expected_acceptance > 0.0:
            return cap
        needed = math.ceil(BUDGET_SAFETY * count / self.expected_acceptance)
        return int(min(max(needed, MIN_ATTEMPTS_FACTOR * count), cap))

    def run(self, should_stop: Optional[Callable[[], bool]] = None) -> utils.ParticleCloud:
        """
        Sample until the cloud is full or the attempt budget is spent.

        `should_stop` is polled between chunks; returning True ends the run
        with whatever has been accepted so far.
        """
        count = self.params.particle_count
        if count > 0 and not self.p_max > 0.0:
            logger.warning(
                "Zero density envelope for %s; returning an empty cloud", self.state
            )
            return self.result()

        t_start = time.perf_counter()
        chunk = max(1, self.params.chunk_attempts)

        while self.num_accepted < count and self.attempts < self.max_attempts:
            if should_stop is not None and should_stop():
                logger.info(
                    "Sampling stopped at %d/%d particles", self.num_accepted, count
                )
                break

            limit = min(chunk, self.max_attempts - self.attempts)
            self.num_accepted, self.next_index, used = _rejection_sample(
                self.state.n,
                self.state.l,
                self.state.m,
                self.positions,
                self.num_accepted,
                self.p_max,
                self.r_max,
                self.next_index,
                limit,
                self.model,
            )
            self.attempts += used

            elapsed = time.perf_counter() - t_start
            rate = self.num_accepted / elapsed if elapsed > 0 else 0.0
            logger.info(
                "[orbital] %d/%d particles, %d attempts, %.0f particles/s",
                self.num_accepted, count, self.attempts, rate,
            )

        if self.num_accepted < count and self.attempts >= self.max_attempts:
            logger.warning(
                "Attempt budget exhausted for %s: %d/%d particles after %d attempts",
                self.state, self.num_accepted, count, self.attempts,
            )
        return self.result()

    def get_positions(self) -> np.ndarray:
        """Accepted positions as an Nx3 array (copy)."""
        return self.positions[: self.num_accepted].copy()

    def result(self) -> utils.ParticleCloud:
        meta = {
            "model": radial_model_name(self.model),
            "n": self.state.n,
            "l": self.state.l,
            "m": self.state.m,
            "p_max": self.p_max,
            "r90": self.r90,
            "r_max": self.r_max,
            "expected_acceptance": self.expected_acceptance,
            "max_attempts": self.max_attempts,
            "seed": self.params.seed,
        }
        return utils.ParticleCloud(
            positions=self.get_positions(),
            requested=self.params.particle_count,
            attempts=self.attempts,
            next_index=self.next_index,
            meta=meta,
        )


def run_model(
    params: SamplerParams | dict | None = None, cache: Optional[QuantileCache] = None
) -> utils.ParticleCloud:
    """
    Run the orbital sampler and return a ParticleCloud.
    """
    if params is None:
        params = SamplerParams()
    elif isinstance(params, dict):
        params = SamplerParams(**params)

    sim = OrbitalSampler(params, cache=cache)
    cloud = sim.run()
    cloud.meta["params"] = asdict(params)
    return cloud


def generate_orbital_particles(
    n: int,
    l: int,
    m: int,
    particle_count: int,
    cache: Optional[QuantileCache] = None,
    **overrides,
) -> utils.ParticleCloud:
    """
    Sample `particle_count` points for state (n, l, m).

    The result may be shorter than requested (see ParticleCloud.complete);
    treat `particle_count` as an upper bound.
    """
    params = SamplerParams(n=n, l=l, m=m, particle_count=particle_count, **overrides)
    return OrbitalSampler(params, cache=cache).run()


__all__ = [
    "SamplerParams",
    "OrbitalSampler",
    "estimate_envelope",
    "generate_orbital_particles",
    "run_model",
]
