#!/usr/bin/env python3
"""
Single Orbital Sampling Runner

Samples one orbital point cloud and saves it as .npz. Parameters come from
the command line, optionally layered over a JSON/TOML parameter file.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from orbital_sim import SamplerParams, orbital_formula, orbital_name, run_model, utils


def build_params(args) -> SamplerParams:
    base = utils.load_params(args.params) if args.params else {}
    merged = utils.merge_params(
        base,
        n=args.n,
        l=args.l,
        m=args.m,
        particle_count=args.count,
        radial_model=args.model,
        seed=args.seed,
    )
    return SamplerParams(**merged)


def main():
    parser = argparse.ArgumentParser(
        description="Sample a single hydrogen orbital point cloud",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--n", type=int, default=None, help="Principal quantum number")
    parser.add_argument("--l", type=int, default=None, help="Angular quantum number")
    parser.add_argument("--m", type=int, default=None, help="Magnetic quantum number")
    parser.add_argument(
        "--count",
        type=int,
        default=None,
        help="Number of particles to sample (upper bound)",
    )
    parser.add_argument(
        "--model",
        choices=["dirac", "schrodinger"],
        default=None,
        help="Radial model (default: dirac)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for the acceptance draws (default: 42)",
    )
    parser.add_argument(
        "--params",
        type=str,
        default=None,
        help="JSON or TOML file with SamplerParams fields",
    )
    parser.add_argument(
        "--out",
        type=str,
        default=None,
        help="Output .npz file path (auto-generated if not provided)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        params = build_params(args)
    except (ValueError, TypeError, RuntimeError, OSError) as e:
        parser.error(str(e))

    print(
        f"Sampling {orbital_name(params.n, params.l, params.m)}: "
        f"N={params.particle_count}, model={params.radial_model}, seed={params.seed}"
    )
    start_time = time.time()
    try:
        cloud = run_model(params)
    except ValueError as e:
        parser.error(str(e))
    elapsed_time = time.time() - start_time

    if args.out is None:
        timestamp = utils.now_str()
        output_dir = Path("results")
        output_dir.mkdir(exist_ok=True)
        args.out = str(
            output_dir
            / f"orbital_n{params.n}_l{params.l}_m{params.m}_S{params.seed}_{timestamp}.npz"
        )

    cloud.meta["formula"] = orbital_formula(params.n, params.l, params.m)
    utils.save_cloud(args.out, cloud)

    print("\nSampling finished.")
    print(f"   Time elapsed: {elapsed_time:.2f} seconds")
    print(f"   Particles: {len(cloud)}/{cloud.requested} ({cloud.attempts} attempts)")
    print(f"   r90: {cloud.meta['r90']:.3f}")
    if not cloud.complete:
        print("   Attempt budget exhausted: cloud is short")
    print(f"   Output saved to: {args.out}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
