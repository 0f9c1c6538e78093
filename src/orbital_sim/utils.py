# src/orbital_sim/utils.py
from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
from numba import njit

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    tomllib = None  # type: ignore


@dataclass(frozen=True)
class QuantumState:
    """Quantum numbers (n, l, m) of a hydrogen-like orbital."""

    n: int
    l: int
    m: int = 0

    @property
    def is_valid(self) -> bool:
        return self.n >= 1 and 0 <= self.l <= self.n - 1 and -self.l <= self.m <= self.l

    def validate(self) -> "QuantumState":
        if not self.is_valid:
            raise ValueError(
                f"Invalid quantum state (n={self.n}, l={self.l}, m={self.m}): "
                "need n >= 1, 0 <= l <= n-1, -l <= m <= l"
            )
        return self


@dataclass
class ParticleCloud:
    """
    Sampled orbital point cloud.

    `positions` holds at most `requested` rows; fewer means the attempt
    budget ran out or the run was stopped early (`complete` is False).
    """

    positions: np.ndarray
    requested: int
    attempts: int = 0
    next_index: int = 1
    meta: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return int(self.positions.shape[0])

    @property
    def complete(self) -> bool:
        return len(self) == self.requested

    @property
    def acceptance_rate(self) -> float:
        return len(self) / self.attempts if self.attempts > 0 else 0.0

    def radii(self) -> np.ndarray:
        return np.sqrt(np.sum(self.positions**2, axis=1))


@njit(cache=True)
def _seed_kernels(seed: int) -> None:
    # numba keeps its own generator state, separate from numpy's
    np.random.seed(seed)


def set_seed(seed: int = 0) -> None:
    """Seed the global numpy RNG and the RNG used inside compiled kernels."""
    np.random.seed(seed)
    _seed_kernels(seed)


def now_str() -> str:
    return time.strftime("%Y%m%d-%H%M%S")


def save_cloud(
    path: str | os.PathLike[str], cloud: ParticleCloud, *, overwrite: bool = True
) -> None:
    """Serialize a ParticleCloud to a compressed .npz file."""
    if not overwrite and Path(path).exists():
        raise FileExistsError(f"{path} already exists")
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(
        path,
        positions=np.asarray(cloud.positions, dtype=np.float64),
        requested=np.int64(cloud.requested),
        attempts=np.int64(cloud.attempts),
        next_index=np.int64(cloud.next_index),
        meta=np.array(cloud.meta, dtype=object),
    )


def load_cloud(path: str | os.PathLike[str]) -> ParticleCloud:
    """Load a .npz written by save_cloud."""
    with np.load(path, allow_pickle=True) as data:
        positions = data["positions"].astype(float)
        meta: Dict[str, Any] = {}
        if "meta" in data:
            meta_raw = data["meta"]
            meta = meta_raw.item() if meta_raw.shape == () else {}
        return ParticleCloud(
            positions=positions,
            requested=int(data["requested"]) if "requested" in data else len(positions),
            attempts=int(data["attempts"]) if "attempts" in data else 0,
            next_index=int(data["next_index"]) if "next_index" in data else 1,
            meta=meta,
        )


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Load sampler parameters from JSON or TOML.
    """
    path = str(path)
    with open(path, "rb") as fh:
        data = fh.read()
    suffix = Path(path).suffix.lower()
    if suffix in {".json", ""}:
        return json.loads(data.decode("utf-8"))
    if suffix in {".toml", ".tml"}:
        if tomllib is None:
            raise RuntimeError("tomllib is unavailable; cannot parse TOML files")
        return tomllib.loads(data.decode("utf-8"))
    raise ValueError(f"Unsupported parameter file format: {suffix}")


def merge_params(base: Optional[Dict[str, Any]], **overrides: Any) -> Dict[str, Any]:
    """Overlay non-None keyword overrides (e.g. CLI flags) on a parameter dict."""
    merged = dict(base or {})
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return merged
