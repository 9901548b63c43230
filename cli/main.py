"""CLI entry point for coarse world generation and export."""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
import logging
import platform
import shutil
import time

import numpy as np
from worldgen.climate import BIOME_NAMES
from worldgen.coarse import generate
from worldgen.config import GeneratorConfig
from worldgen.hydrology import route_flow, validate_flow_routing
from worldgen.io import (
    META_FILE,
    create_staging_dir,
    export_grid,
    move_tree_contents,
    resolve_output_dir,
    safe_clean_output_dir,
    write_json,
    write_png_rgb,
    write_png_u8,
)
from worldgen.metrics import summarize_grid
from worldgen.seed import random_seed
from worldgen.viewer import biome_rgb, composite_rgb, height_gray


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deterministic coarse world generator")
    parser.add_argument("--seed", default=None, help="Seed text; a random seed is used when omitted")
    parser.add_argument("--out", default="data", help="Directory receiving the binary field files")
    parser.add_argument("--overwrite", action="store_true", help="Overwrite files in an existing output directory")
    parser.add_argument(
        "--json",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Write meta.json with seed, config and metrics",
    )
    parser.add_argument("--previews", action="store_true", help="Also write composite/biome/height PNG previews")
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Re-route the exported elevation and check flow invariants before writing",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log per-stage timings")
    return parser


def main(argv: list[str] | None = None, *, config: GeneratorConfig | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    seed = args.seed if args.seed is not None else random_seed()
    cfg = config or GeneratorConfig()

    try:
        out_dir = resolve_output_dir(args.out, overwrite=args.overwrite)
    except FileExistsError as exc:
        parser.error(str(exc))

    generation_start = time.perf_counter()
    grid = generate(seed, config=cfg)
    generation_seconds = time.perf_counter() - generation_start
    metrics = summarize_grid(grid)

    if args.validate:
        elevation = grid.field2d("elevation")
        routing = route_flow(elevation, config=cfg.hydrology)
        try:
            validate_flow_routing(elevation, routing.downstream, routing.accumulation)
        except ValueError as exc:
            print(f"Flow validation failed: {exc}")
            return 1
        print("Flow validation passed")

    try:
        stage_dir = create_staging_dir(out_dir)
    except ValueError as exc:
        parser.error(str(exc))
    try:
        export_grid(grid, stage_dir)
        if args.previews:
            elevation = grid.field2d("elevation")
            biome = grid.field2d("biome")
            write_png_rgb(stage_dir / "composite.png", composite_rgb(biome, elevation, grid.field2d("river")))
            write_png_rgb(stage_dir / "biome.png", biome_rgb(biome, elevation))
            write_png_u8(stage_dir / "height.png", height_gray(elevation))
        if args.json:
            meta = {
                "seed": seed,
                "width": grid.width,
                "height": grid.height,
                "config": cfg.to_dict(),
                "metrics": metrics.to_dict(),
                "generated_at_utc": datetime.now(timezone.utc).isoformat(),
                "generation_seconds": generation_seconds,
                "python_version": platform.python_version(),
                "numpy_version": np.__version__,
            }
            write_json(stage_dir / META_FILE, meta)

        safe_clean_output_dir(out_dir)
        move_tree_contents(stage_dir, out_dir)
    finally:
        shutil.rmtree(stage_dir, ignore_errors=True)

    print(f"World generated with seed: {seed}")
    print(
        "Land fraction "
        f"{metrics.land.land_fraction:.3f}; "
        f"landmasses {metrics.land.num_components}; "
        f"dominant landmass ratio {metrics.land.largest_land_ratio:.3f}"
    )
    print(f"Rivers: {metrics.river_cell_fraction * 100.0:.2f}% of cells, wetlands={metrics.wetland_cells}")
    dominant = int(np.argmax(metrics.biome_histogram))
    print(f"Most common biome: {BIOME_NAMES[dominant]}")
    print(f"Generation time: {generation_seconds:.3f} s ({grid.width}x{grid.height})")
    print(f"Output directory: {out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
