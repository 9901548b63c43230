"""Binary export of generated grids and the matching reader."""

from __future__ import annotations

import json
from pathlib import Path
import shutil
import tempfile
from typing import Any

import numpy as np
from PIL import Image

from worldgen.config import DEFAULT_HEIGHT, DEFAULT_WIDTH
from worldgen.coarse import FIELD_RANGES, CoarseGrid

INT16_SCALE = 32767.0

# field name -> file name, in write order
INT16_FILES = {
    "elevation": "elevation.bin",
    "temperature": "temp.bin",
    "rainfall": "rainfall.bin",
    "humidity": "humidity.bin",
    "wind_u": "windU.bin",
    "wind_v": "windV.bin",
    "river": "river.bin",
}
BIOME_FILE = "biome.bin"
SEED_FILE = "seed.txt"
META_FILE = "meta.json"
PREVIEW_FILES = ("composite.png", "biome.png", "height.png")

# every file an export run may write; cleaning removes these and nothing else
OUTPUT_FILES = (*INT16_FILES.values(), BIOME_FILE, SEED_FILE, META_FILE, *PREVIEW_FILES)


class ExportFormatError(ValueError):
    """Raised when an exported binary does not match the expected layout."""


def encode_int16(values: np.ndarray, value_range: tuple[float, float]) -> np.ndarray:
    """Clamp to `value_range` and store `round(v * 32767)` as little-endian int16."""

    lo, hi = value_range
    clamped = np.clip(np.asarray(values, dtype=np.float64), lo, hi)
    scaled = np.floor(clamped * INT16_SCALE + 0.5)
    return scaled.astype("<i2")


def decode_int16(raw: np.ndarray, value_range: tuple[float, float]) -> np.ndarray:
    lo, hi = value_range
    values = raw.astype(np.float32) / np.float32(INT16_SCALE)
    return np.clip(values, lo, hi).astype(np.float32)


def encode_biome(values: np.ndarray) -> np.ndarray:
    return np.clip(np.asarray(values, dtype=np.int64), 0, 255).astype(np.uint8)


def export_grid(grid: CoarseGrid, out_dir: str | Path) -> dict[str, Path]:
    """Write the binary file set for `grid` into `out_dir`. OSError propagates."""

    target = Path(out_dir)
    target.mkdir(parents=True, exist_ok=True)
    written: dict[str, Path] = {}

    for name, filename in INT16_FILES.items():
        path = target / filename
        path.write_bytes(encode_int16(getattr(grid, name), FIELD_RANGES[name]).tobytes())
        written[name] = path

    biome_path = target / BIOME_FILE
    biome_path.write_bytes(encode_biome(grid.biome).tobytes())
    written["biome"] = biome_path

    seed_path = target / SEED_FILE
    seed_path.write_text(grid.seed, encoding="utf-8")
    written["seed"] = seed_path
    return written


def read_field(path: str | Path, value_range: tuple[float, float], *, expected_size: int | None = None) -> np.ndarray:
    payload = Path(path).read_bytes()
    if len(payload) % 2:
        raise ExportFormatError(f"{path}: odd byte count {len(payload)} for int16 data")
    raw = np.frombuffer(payload, dtype="<i2")
    _check_size(path, raw.size, expected_size)
    return decode_int16(raw, value_range)


def read_biome(path: str | Path, *, expected_size: int | None = None) -> np.ndarray:
    raw = np.frombuffer(Path(path).read_bytes(), dtype=np.uint8)
    _check_size(path, raw.size, expected_size)
    return raw.copy()


def load_export(
    directory: str | Path,
    *,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> CoarseGrid:
    """Rebuild a CoarseGrid from an exported file set."""

    base = Path(directory)
    size = width * height
    fields = {
        name: read_field(base / filename, FIELD_RANGES[name], expected_size=size)
        for name, filename in INT16_FILES.items()
    }
    biome = read_biome(base / BIOME_FILE, expected_size=size)
    seed_path = base / SEED_FILE
    seed = seed_path.read_text(encoding="utf-8") if seed_path.exists() else ""
    return CoarseGrid(width=width, height=height, seed=seed, biome=biome, **fields)


def _check_size(path: str | Path, actual: int, expected: int | None) -> None:
    if expected is not None and actual != expected:
        raise ExportFormatError(f"{path}: expected {expected} cells, found {actual}")


def resolve_output_dir(out_root: str | Path, *, overwrite: bool) -> Path:
    """Create and return the export directory for one generation run."""

    target = Path(out_root)
    if target.exists() and any(target.iterdir()) and not overwrite:
        raise FileExistsError(
            f"Output directory already exists and is not empty: {target}. Use --overwrite to replace files."
        )
    target.mkdir(parents=True, exist_ok=True)
    return target


def safe_clean_output_dir(target: Path) -> None:
    """Delete the files a previous export left in `target`; anything else is kept."""

    target_r = target.resolve()
    if not target_r.exists():
        target_r.mkdir(parents=True, exist_ok=True)
        return

    for name in OUTPUT_FILES:
        child = target_r / name
        if child.is_dir() and not child.is_symlink():
            raise FileExistsError(f"{child} is a directory; refusing to replace it")
        if child.is_symlink() or child.is_file():
            child.unlink()


def create_staging_dir(target: Path) -> Path:
    """Make a temporary directory beside `target` that will not be touched by cleaning it."""

    target_r = target.resolve()
    parent = target_r.parent
    if parent == target_r or parent.is_relative_to(target_r):
        raise ValueError(f"{target_r} has no parent directory to stage outputs in")
    return Path(tempfile.mkdtemp(prefix=".staging-", dir=str(parent)))


def move_tree_contents(src_dir: Path, dst_dir: Path) -> None:
    for child in src_dir.iterdir():
        shutil.move(str(child), str(dst_dir / child.name))


def write_png_u8(path: str | Path, raster_u8: np.ndarray) -> None:
    Image.fromarray(raster_u8.astype(np.uint8)).save(Path(path))


def write_png_rgb(path: str | Path, raster_rgb: np.ndarray) -> None:
    Image.fromarray(raster_rgb.astype(np.uint8)).save(Path(path))


def write_json(path: str | Path, payload: dict[str, Any]) -> None:
    text = json.dumps(payload, indent=2, sort_keys=True)
    Path(path).write_text(text + "\n", encoding="utf-8")
