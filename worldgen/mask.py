"""Continental mask and raw elevation signal."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from worldgen.config import MaskConfig
from worldgen.noise import NoiseSource, sample_grid, unit_noise


@dataclass(frozen=True)
class ContinentalMask:
    """Landness in [0, 1] and the unshaped elevation signal it scales."""

    mask: np.ndarray
    base_elev: np.ndarray


def radial_falloff(width: int, height: int, *, config: MaskConfig | None = None) -> np.ndarray:
    """Centered falloff `clamp(1 - rNorm**p, 0, 1)` that keeps land off the map edges."""

    cfg = config or MaskConfig()
    xs = np.arange(width, dtype=np.float64) / max(width - 1, 1) * 2.0 - 1.0
    ys = np.arange(height, dtype=np.float64) / max(height - 1, 1) * 2.0 - 1.0
    r_norm = np.sqrt(xs[None, :] ** 2 + ys[:, None] ** 2) / cfg.world_radius
    return np.clip(1.0 - np.power(r_norm, cfg.radial_power), 0.0, 1.0)


def build_continental_mask(
    width: int,
    height: int,
    continental: NoiseSource,
    warp: NoiseSource,
    *,
    config: MaskConfig | None = None,
) -> ContinentalMask:
    """Combine radial falloff, shape noise and coastline warp into a land mask."""

    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")

    cfg = config or MaskConfig()
    radial = radial_falloff(width, height, config=cfg)

    shape = unit_noise(sample_grid(continental, width, height, cfg.shape_frequency))
    shaped = np.power(np.clip(shape, 0.0, 1.0), cfg.shape_power)

    w = unit_noise(sample_grid(warp, width, height, cfg.warp_frequency))
    warp_factor = cfg.warp_base + cfg.warp_span * (w - 0.5)

    mask = np.clip(radial * shaped * warp_factor, 0.0, 1.0)

    raw = sample_grid(
        continental,
        width,
        height,
        cfg.raw_frequency,
        offset_x=cfg.raw_offset_x,
        offset_y=cfg.raw_offset_y,
    )
    return ContinentalMask(mask=mask, base_elev=raw * mask)
