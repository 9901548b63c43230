"""Raster rendering of exported coarse grids."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

import numpy as np
from matplotlib.colors import ListedColormap

from worldgen.config import DEFAULT_HEIGHT, DEFAULT_WIDTH
from worldgen.io import load_export

logger = logging.getLogger(__name__)

SHALLOW_SEA_LEVEL = 0.38
BEACH_BAND_END = SHALLOW_SEA_LEVEL + 0.012
RIVER_OVERLAY_MIN = 0.15

RENDER_MODES = ("composite", "biome", "height")

_OCEAN_BAND_EDGES = np.array([0.25, 0.5, 0.75, 0.9, 1.0])
_OCEAN_BAND_COLORS = np.array(
    [
        [4, 24, 68],
        [6, 44, 104],
        [20, 80, 136],
        [42, 118, 170],
        [125, 202, 230],
    ],
    dtype=np.float64,
)
_BEACH = np.array([218, 204, 140], dtype=np.float64)
_MOUNTAIN_BASE = np.array([122, 116, 99], dtype=np.float64)
_MOUNTAIN_PEAK = np.array([181, 178, 170], dtype=np.float64)
_RIVER_COLOR = np.array([125, 198, 240], dtype=np.float64)

# Land palette by biome id; index 15 is the fallback for unknown ids.
_LAND_PALETTE = [
    (196, 177, 96),  # 0 deep ocean (never drawn on land)
    (196, 177, 96),  # 1 cold shelf
    (196, 177, 96),  # 2 warm shelf
    (211, 130, 78),  # 3 desert
    (204, 167, 94),  # 4 scrub
    (194, 180, 96),  # 5 savanna
    (134, 168, 80),  # 6 grassland
    (99, 146, 76),  # 7 temperate forest
    (76, 122, 69),  # 8 tropical seasonal forest
    (60, 103, 62),  # 9 rainforest
    (87, 120, 93),  # 10 taiga
    (178, 177, 153),  # 11 tundra
    (122, 116, 99),  # 12 rocky mountain
    (233, 233, 232),  # 13 alpine snow
    (96, 160, 140),  # 14 wetlands
    (196, 177, 96),  # plains fallback
]
_FALLBACK_INDEX = len(_LAND_PALETTE) - 1


@dataclass(frozen=True)
class RenderResult:
    """Rendered RGB raster (None when loading failed) and a status line."""

    image: np.ndarray | None
    status: str


def _round(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


def land_colormap_rgb(biome: np.ndarray) -> np.ndarray:
    """Map biome ids to flat land colours via a discrete ListedColormap."""

    cmap = ListedColormap([tuple(c / 255.0 for c in rgb) for rgb in _LAND_PALETTE], name="coarse_biomes")
    idx = biome.astype(np.int32)
    idx = np.where((idx < 0) | (idx >= _FALLBACK_INDEX), _FALLBACK_INDEX, idx)
    rgba = cmap(idx)
    return np.round(rgba[..., :3] * 255.0)


def biome_rgb(biome: np.ndarray, elevation: np.ndarray) -> np.ndarray:
    """Colour each cell from its biome id, with banded ocean and a beach strip."""

    if biome.shape != elevation.shape:
        raise ValueError("biome and elevation shape mismatch")

    e = np.clip(elevation.astype(np.float64), 0.0, 1.0)
    rgb = land_colormap_rgb(biome)

    mountain = biome == 12
    t = np.clip((e - 0.62) / 0.25, 0.0, 1.0)[..., None]
    ramp = _round(_MOUNTAIN_BASE + (_MOUNTAIN_PEAK - _MOUNTAIN_BASE) * t)
    rgb = np.where(mountain[..., None], ramp, rgb)

    beach = (e >= SHALLOW_SEA_LEVEL) & (e < BEACH_BAND_END)
    rgb[beach] = _BEACH

    sea = e < SHALLOW_SEA_LEVEL
    band = np.searchsorted(_OCEAN_BAND_EDGES, np.clip(e / SHALLOW_SEA_LEVEL, 0.0, 1.0), side="left")
    rgb[sea] = _OCEAN_BAND_COLORS[np.minimum(band[sea], len(_OCEAN_BAND_EDGES) - 1)]
    return rgb.astype(np.uint8)


def composite_rgb(biome: np.ndarray, elevation: np.ndarray, river: np.ndarray) -> np.ndarray:
    """Biome colours with rivers blended over land."""

    base = biome_rgb(biome, elevation).astype(np.float64)
    overlay = (river > RIVER_OVERLAY_MIN) & (elevation >= SHALLOW_SEA_LEVEL)
    intensity = np.clip((river - RIVER_OVERLAY_MIN) / 0.5, 0.0, 1.0)
    alpha = (0.25 + intensity * 0.45)[..., None]
    blended = _round(base * (1.0 - alpha) + _RIVER_COLOR * alpha)
    return np.where(overlay[..., None], blended, base).astype(np.uint8)


def height_gray(elevation: np.ndarray) -> np.ndarray:
    """8-bit grayscale that separates sea from land."""

    v = np.clip(elevation.astype(np.float64), 0.0, 1.0)
    sea = v * 0.8
    land = 0.2 + (v - SHALLOW_SEA_LEVEL) / (1.0 - SHALLOW_SEA_LEVEL) * 0.8
    shaded = np.where(v < SHALLOW_SEA_LEVEL, sea, land)
    return _round(shaded * 255.0).astype(np.uint8)


def render_export(
    directory: str | Path,
    mode: str = "composite",
    *,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> RenderResult:
    """Load an exported file set and paint it; load failures become an error status."""

    if mode not in RENDER_MODES:
        raise ValueError(f"unknown render mode {mode!r}; expected one of {RENDER_MODES}")

    try:
        grid = load_export(directory, width=width, height=height)
    except (OSError, ValueError) as exc:
        logger.warning("Render aborted: %s", exc)
        return RenderResult(image=None, status=f"error: {exc}")

    elevation = grid.field2d("elevation")
    if mode == "height":
        gray = height_gray(elevation)
        return RenderResult(image=np.stack((gray, gray, gray), axis=-1), status="height rendered")

    biome = grid.field2d("biome")
    if mode == "biome":
        return RenderResult(image=biome_rgb(biome, elevation), status="biome rendered")

    river = grid.field2d("river")
    return RenderResult(image=composite_rgb(biome, elevation, river), status="composite rendered")
