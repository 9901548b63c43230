"""CLI that paints an exported coarse grid to a PNG."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from worldgen.config import DEFAULT_HEIGHT, DEFAULT_WIDTH
from worldgen.io import write_png_rgb
from worldgen.viewer import RENDER_MODES, render_export


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render exported coarse world binaries")
    parser.add_argument("--data", default="data", help="Directory holding the exported .bin files")
    parser.add_argument("--mode", choices=RENDER_MODES, default="composite", help="What to draw")
    parser.add_argument("--out", default=None, help="PNG path (default: <data>/<mode>.png)")
    parser.add_argument("--w", type=int, default=DEFAULT_WIDTH, help="Grid width in cells")
    parser.add_argument("--h", type=int, default=DEFAULT_HEIGHT, help="Grid height in cells")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    print(f"loading fields from {args.data}...")
    result = render_export(args.data, args.mode, width=args.w, height=args.h)
    if result.image is None:
        print(result.status)
        return 1

    out_path = Path(args.out) if args.out else Path(args.data) / f"{args.mode}.png"
    write_png_rgb(out_path, result.image)
    print(f"{result.status}: {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
