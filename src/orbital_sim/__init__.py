"""
Hydrogen Orbital Sampling Library

Samples point clouds from a relativistically corrected hydrogen-like
orbital density:
- special: factorial, associated Legendre and Laguerre polynomials
- halton: low-discrepancy proposal sequence
- density: radial (Dirac or Schrodinger), angular and joint densities
- quantile: cached enclosing radius r90(n, l)
- sampler: rejection sampler producing ParticleCloud results
"""

from .density import (
    RADIAL_DIRAC,
    RADIAL_SCHRODINGER,
    angular_probability,
    calculate_gamma,
    probability_density,
    radial_probability,
)
from .labels import orbital_color, orbital_formula, orbital_letter, orbital_name
from .quantile import QuantileCache, default_cache, r90
from .sampler import OrbitalSampler, SamplerParams, generate_orbital_particles, run_model
from .utils import ParticleCloud, QuantumState
from . import utils

__version__ = "0.1.0"

__all__ = [
    # Sampling
    "OrbitalSampler",
    "SamplerParams",
    "generate_orbital_particles",
    "run_model",
    # Densities
    "probability_density",
    "radial_probability",
    "angular_probability",
    "calculate_gamma",
    "RADIAL_DIRAC",
    "RADIAL_SCHRODINGER",
    # Enclosing radius
    "QuantileCache",
    "default_cache",
    "r90",
    # Labels
    "orbital_color",
    "orbital_formula",
    "orbital_letter",
    "orbital_name",
    # Containers and utilities
    "ParticleCloud",
    "QuantumState",
    "utils",
]
