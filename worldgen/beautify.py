"""Small domain warp plus detail octaves applied after erosion."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from worldgen.config import BeautifyConfig
from worldgen.noise import NoiseSource, sample_grid


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round to the nearest integer with .5 going toward +inf."""

    return np.floor(values + 0.5)


def warp_sample(field: np.ndarray, offset_x: np.ndarray, offset_y: np.ndarray) -> np.ndarray:
    """Nearest-cell sample of `field` at (x + offset_x, y + offset_y), clamped to the grid."""

    height, width = field.shape
    yy, xx = np.indices((height, width), dtype=np.float64)
    sx = np.clip(round_half_up(xx + offset_x), 0, width - 1).astype(np.intp)
    sy = np.clip(round_half_up(yy + offset_y), 0, height - 1).astype(np.intp)
    return field[sy, sx]


def beautify(
    eroded: np.ndarray,
    warp_x: NoiseSource,
    warp_y: NoiseSource,
    details: Sequence[NoiseSource],
    *,
    config: BeautifyConfig | None = None,
) -> np.ndarray:
    """Warp the eroded field by up to `warp_px` cells and add detail noise; result in [-1, 1]."""

    cfg = config or BeautifyConfig()
    if len(details) != len(cfg.detail_frequencies):
        raise ValueError("one detail noise source is required per detail octave")

    height, width = eroded.shape
    w1 = sample_grid(warp_x, width, height, cfg.warp_frequency)
    w2 = sample_grid(warp_y, width, height, cfg.warp_frequency)
    warped = warp_sample(eroded, w1 * cfg.warp_px, w2 * cfg.warp_px)

    detail = np.zeros((height, width), dtype=np.float64)
    for source, frequency, weight in zip(details, cfg.detail_frequencies, cfg.detail_weights):
        detail += sample_grid(source, width, height, frequency) * weight

    return np.clip(warped + detail, -1.0, 1.0)


def to_unit_elevation(beautified: np.ndarray) -> np.ndarray:
    """Remap [-1, 1] elevation to the public [0, 1] range."""

    return np.clip((beautified + 1.0) * 0.5, 0.0, 1.0)
