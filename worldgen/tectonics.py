"""Ridge and rift perturbation along synthetic plate seams."""

from __future__ import annotations

import numpy as np

from worldgen.config import TectonicsConfig
from worldgen.noise import NoiseSource, sample_grid


def plate_boundary_strength(plate: np.ndarray, *, config: TectonicsConfig | None = None) -> np.ndarray:
    """Return `clamp(1 - k*|p|, 0, 1)`; non-zero only in narrow bands around p's zero-crossings."""

    cfg = config or TectonicsConfig()
    return np.clip(1.0 - np.abs(plate) * cfg.boundary_sharpness, 0.0, 1.0)


def apply_plate_tectonics(
    base_elev: np.ndarray,
    mask: np.ndarray,
    plate_noise: NoiseSource,
    *,
    config: TectonicsConfig | None = None,
) -> np.ndarray:
    """Add ridge uplift (p >= 0) or rift depression (p < 0) near plate boundaries.

    Deep-ocean cells (mask <= 0) are left untouched. Returns a new array.
    """

    if base_elev.shape != mask.shape:
        raise ValueError("base_elev and mask shape mismatch")

    cfg = config or TectonicsConfig()
    height, width = mask.shape
    plate = sample_grid(plate_noise, width, height, cfg.plate_frequency)
    boundary = plate_boundary_strength(plate, config=cfg)

    active = (mask > 0.0) & (boundary > 0.0)
    factor = np.where(plate >= 0.0, cfg.ridge_uplift, cfg.rift_depression)

    result = base_elev.astype(np.float64, copy=True)
    result[active] += (boundary * mask * factor)[active]
    return result
