#!/usr/bin/env python3
"""
Batch Orbital Sampling Runner

Samples every (n, l, m) state up to --n-max in parallel and writes one .npz
per state plus a manifest.json describing the batch.
"""

import argparse
import json
import logging
import sys
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, List, Tuple

from orbital_sim import SamplerParams, orbital_color, orbital_formula, orbital_name, run_model, utils


def enumerate_states(n_max: int) -> List[Tuple[int, int, int]]:
    """All valid (n, l, m) with 1 <= n <= n_max."""
    return [
        (n, l, m)
        for n in range(1, n_max + 1)
        for l in range(n)
        for m in range(-l, l + 1)
    ]


def run_single_sampling(
    n: int, l: int, m: int, count: int, model: str, seed: int, output_path: str
) -> Dict[str, Any]:
    """
    Sample one state and save it.

    Runs in a worker process, so it must stay at module level for pickling.
    """
    params = SamplerParams(
        n=n, l=l, m=m, particle_count=count, radial_model=model, seed=seed
    )
    cloud = run_model(params)
    cloud.meta["formula"] = orbital_formula(n, l, m)
    cloud.meta["color"] = orbital_color(l, m)
    utils.save_cloud(output_path, cloud)

    return {
        "output_path": output_path,
        "state": [n, l, m],
        "seed": seed,
        "particles": len(cloud),
        "attempts": cloud.attempts,
        "complete": cloud.complete,
        "r90": cloud.meta["r90"],
    }


def main():
    parser = argparse.ArgumentParser(
        description="Sample a batch of hydrogen orbital point clouds",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--n-max",
        type=int,
        required=True,
        help="Sample every state with n <= n-max",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=3000,
        help="Particles per state (default: 3000)",
    )
    parser.add_argument(
        "--model",
        choices=["dirac", "schrodinger"],
        default="dirac",
        help="Radial model (default: dirac)",
    )
    parser.add_argument(
        "--jobs",
        type=int,
        default=1,
        help="Number of parallel processes (default: 1)",
    )
    parser.add_argument(
        "--name",
        type=str,
        default="batch",
        help="Batch name for output folder (default: 'batch')",
    )
    parser.add_argument(
        "--base-seed",
        type=int,
        default=42,
        help="Base seed (each state gets base_seed + index) (default: 42)",
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.WARNING)
    if args.n_max < 1:
        parser.error("--n-max must be >= 1")

    states = enumerate_states(args.n_max)
    timestamp = utils.now_str()
    batch_dir = (
        Path("results") / "batches" / f"{args.name}_{args.model}_n{args.n_max}_N{args.count}_{timestamp}"
    )
    batch_dir.mkdir(parents=True, exist_ok=True)

    manifest = {
        "model": args.model,
        "n_max": args.n_max,
        "num_particles": args.count,
        "states": len(states),
        "base_seed": args.base_seed,
        "jobs": args.jobs,
        "timestamp": timestamp,
        "batch_name": args.name,
    }
    manifest_path = batch_dir / "manifest.json"
    with open(manifest_path, "w") as f:
        json.dump(manifest, f, indent=2)

    print("Batch sampling started:")
    print(f"  Model: {args.model}")
    print(f"  States: {len(states)} (n <= {args.n_max})")
    print(f"  Particles per state: {args.count}")
    print(f"  Parallel jobs: {args.jobs}")
    print(f"  Output directory: {batch_dir}")
    print()

    tasks = []
    for i, (n, l, m) in enumerate(states):
        output_path = str(batch_dir / f"n{n}_l{l}_m{m}.npz")
        tasks.append((n, l, m, args.count, args.model, args.base_seed + i, output_path))

    start_time = time.time()
    results = []
    failed = []

    with ProcessPoolExecutor(max_workers=args.jobs) as executor:
        future_to_task = {
            executor.submit(run_single_sampling, *task): task for task in tasks
        }

        completed = 0
        for future in as_completed(future_to_task):
            completed += 1
            task = future_to_task[future]
            label = orbital_name(*task[:3])
            try:
                result = future.result()
                results.append(result)
                print(
                    f"  [{completed}/{len(tasks)}] {label}: "
                    f"particles={result['particles']}, r90={result['r90']:.2f}"
                )
            except Exception as e:
                failed.append({"task": list(task), "error": str(e)})
                print(f"  [{completed}/{len(tasks)}] FAILED: {label} - {e}")

    elapsed_time = time.time() - start_time

    manifest["results"] = {
        "total": len(tasks),
        "successful": len(results),
        "short_clouds": sum(1 for r in results if not r["complete"]),
        "failed": len(failed),
        "elapsed_seconds": elapsed_time,
    }
    manifest["clouds"] = results
    if failed:
        manifest["failures"] = failed

    with open(manifest_path, "w") as f:
        json.dump(manifest, f, indent=2)

    print()
    print("=" * 60)
    print("Batch sampling completed!")
    print(f"  Successful: {len(results)}/{len(tasks)}")
    print(f"  Short clouds: {manifest['results']['short_clouds']}")
    print(f"  Failed: {len(failed)}/{len(tasks)}")
    print(f"  Total time: {elapsed_time:.2f} seconds")
    print(f"  Manifest: {manifest_path}")
    print("=" * 60)

    return 0 if len(failed) == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
