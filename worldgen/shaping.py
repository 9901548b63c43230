"""Banded elevation shaping: deep ocean, continental shelf, land."""

from __future__ import annotations

import numpy as np

from worldgen.config import ShapingConfig


def shape_elevation(
    base_elev: np.ndarray,
    mask: np.ndarray,
    *,
    config: ShapingConfig | None = None,
) -> np.ndarray:
    """Remap raw elevation into [-1, 1] according to the mask band of each cell."""

    if base_elev.shape != mask.shape:
        raise ValueError("base_elev and mask shape mismatch")

    cfg = config or ShapingConfig()
    h = np.clip(base_elev, -1.0, 1.0)

    shelf_top = 0.0
    t_ocean = mask / cfg.deep_ocean_mask
    ocean = cfg.ocean_floor + t_ocean * (cfg.shelf_top_depth - cfg.ocean_floor)

    t_shelf = (mask - cfg.deep_ocean_mask) / (cfg.shelf_mask - cfg.deep_ocean_mask)
    shelf = cfg.shelf_top_depth + t_shelf * (shelf_top - cfg.shelf_top_depth)

    t_land = (mask - cfg.shelf_mask) / (1.0 - cfg.shelf_mask)
    base_land = cfg.land_base + t_land * (cfg.land_top - cfg.land_base)
    mountain_boost = np.clip((h + cfg.mountain_offset) * cfg.mountain_gain, 0.0, cfg.mountain_cap)
    land = base_land + mountain_boost

    shaped = np.select(
        [mask < cfg.deep_ocean_mask, mask < cfg.shelf_mask],
        [ocean, shelf],
        default=land,
    )
    return np.clip(shaped, -1.0, 1.0)
