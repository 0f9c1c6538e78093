"""
Projected Density Plotter for Orbital Point Clouds.

Bins a saved cloud onto the x-z plane (z is the quantization axis) and
writes a density image.
"""
import argparse
from pathlib import Path

import matplotlib.colors as mcolors
import matplotlib.pyplot as plt
import numpy as np
from numba import njit

from orbital_sim import orbital_color, orbital_name, utils


@njit(cache=True)
def compute_density_grid(u_coords, v_coords, grid, scale, half_extent):
    """
    Numba-accelerated 2D histogram on a square window centred at the nucleus.
    """
    H, W = grid.shape
    for i in range(len(u_coords)):
        px = int((u_coords[i] + half_extent) * scale)
        py = int((v_coords[i] + half_extent) * scale)
        if 0 <= px < W and 0 <= py < H:
            grid[py, px] += 1


def render_density(cloud, output_path, res_power=9, mode="log", extent=None):
    res = 1 << res_power
    if len(cloud) == 0:
        raise ValueError("Cloud is empty; nothing to plot.")

    x = cloud.positions[:, 0]
    z = cloud.positions[:, 2]

    # Window defaults to the sampled radius so every point lands on the grid
    if extent is None:
        extent = float(cloud.meta.get("r_max", np.abs(cloud.positions).max()))
    half_extent = extent * 1.02
    scale = res / (2.0 * half_extent)

    grid = np.zeros((res, res), dtype=np.int32)
    print(f"Binning {len(x):,} particles on a {res}x{res} grid...")
    compute_density_grid(x, z, grid, scale, half_extent)
    max_count = max(int(grid.max()), 1)

    if mode == "log":
        norm = mcolors.LogNorm(vmin=1, vmax=max(max_count, 2))
        title_mode = "Logarithmic Density"
    elif mode == "linear":
        norm = mcolors.Normalize(vmin=0, vmax=max_count)
        title_mode = "Linear Density"
    else:
        raise ValueError(f"Unknown mode: {mode}")

    meta = cloud.meta
    color = orbital_color(meta.get("l", -1), meta.get("m", 0))
    cmap = mcolors.LinearSegmentedColormap.from_list("orbital", ["#000000", color])

    fig, ax = plt.subplots(figsize=(8, 8))
    grid_masked = np.ma.masked_where(grid == 0, grid.astype(np.float32))
    im = ax.imshow(
        grid_masked,
        cmap=cmap,
        norm=norm,
        interpolation="nearest",
        origin="lower",
        extent=(-half_extent, half_extent, -half_extent, half_extent),
    )
    plt.colorbar(im, label="Particles per Pixel")
    ax.set_xlabel("x (Bohr radii)")
    ax.set_ylabel("z (Bohr radii)")

    label = ""
    if {"n", "l", "m"} <= meta.keys():
        label = orbital_name(meta["n"], meta["l"], meta["m"])
    ax.set_title(f"{label} x-z projection ({title_mode}) | {len(cloud):,} particles")

    if output_path:
        plt.savefig(output_path, dpi=200, bbox_inches="tight")
        print(f"Saved to {output_path}")
    plt.close(fig)


def main():
    parser = argparse.ArgumentParser(description="Projected orbital density plotter")
    parser.add_argument("file", help="Input .npz file")
    parser.add_argument("--res-power", type=int, default=9, help="Resolution power of 2 (default 9 -> 512px)")
    parser.add_argument("--mode", choices=["log", "linear"], default="log", help="Colour scaling")
    parser.add_argument("--extent", type=float, default=None, help="Half-width of the window (default: r_max)")
    parser.add_argument("--out", default=None, help="Output filename")

    args = parser.parse_args()

    cloud = utils.load_cloud(args.file)

    if args.out is None:
        input_path = Path(args.file)
        out_path = input_path.parent / (input_path.stem + f"_xz_{args.mode}.png")
    else:
        out_path = args.out

    render_density(cloud, out_path, args.res_power, args.mode, args.extent)


if __name__ == "__main__":
    main()
