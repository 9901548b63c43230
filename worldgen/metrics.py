"""Summary metrics for generated coarse grids."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

import numpy as np
from scipy import ndimage

from worldgen.climate import BIOME_COUNT
from worldgen.coarse import CoarseGrid

LAND_LEVEL = 0.38


@dataclass(frozen=True)
class ConnectivityMetrics:
    """Connected component and coverage summary for a boolean land mask."""

    num_components: int
    largest_component_area: int
    total_land_pixels: int
    largest_land_ratio: float
    land_fraction: float


@dataclass(frozen=True)
class GridMetrics:
    land: ConnectivityMetrics
    river_cell_fraction: float
    max_river: float
    wetland_cells: int
    biome_histogram: tuple[int, ...]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def connected_components_metrics(mask: np.ndarray, *, connectivity: int = 8) -> ConnectivityMetrics:
    """Compute connected component statistics for a land mask."""

    if mask.ndim != 2:
        raise ValueError("mask must be 2D")
    if connectivity not in (4, 8):
        raise ValueError("connectivity must be 4 or 8")

    mask_bool = mask.astype(bool, copy=False)
    total_land = int(mask_bool.sum())
    if total_land == 0:
        return ConnectivityMetrics(0, 0, 0, 0.0, 0.0)

    structure = ndimage.generate_binary_structure(2, 2 if connectivity == 8 else 1)
    labels, count = ndimage.label(mask_bool, structure=structure)
    sizes = np.bincount(labels.ravel())[1:]
    largest = int(sizes.max())
    return ConnectivityMetrics(
        num_components=int(count),
        largest_component_area=largest,
        total_land_pixels=total_land,
        largest_land_ratio=float(largest / total_land),
        land_fraction=float(total_land / mask_bool.size),
    )


def summarize_grid(grid: CoarseGrid) -> GridMetrics:
    land = grid.field2d("elevation") >= LAND_LEVEL
    histogram = np.bincount(grid.biome.astype(np.int64), minlength=BIOME_COUNT)[:BIOME_COUNT]
    return GridMetrics(
        land=connected_components_metrics(land, connectivity=8),
        river_cell_fraction=float(np.mean(grid.river > 0.0)),
        max_river=float(np.max(grid.river)),
        wetland_cells=int(histogram[14]),
        biome_histogram=tuple(int(v) for v in histogram),
    )
