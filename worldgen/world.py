"""Hierarchical world-model shapes seeded by the coarse grid.

These are data declarations for downstream refinement stages. The coarse
pipeline never populates them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

REGION_SCALE = 8
LOCAL_SCALE = 32


def region_shape(coarse_width: int, coarse_height: int) -> tuple[int, int]:
    """(width, height) of the region grid refining a coarse grid."""

    return coarse_width * REGION_SCALE, coarse_height * REGION_SCALE


def local_shape(region_width: int, region_height: int) -> tuple[int, int]:
    """(width, height) of the local grid refining a region grid."""

    return region_width * LOCAL_SCALE, region_height * LOCAL_SCALE


def _empty() -> np.ndarray:
    return np.zeros(0, dtype=np.float32)


@dataclass
class WorldSimGrid:
    """Simulation-scale fields, including pressure and plate ids."""

    width: int
    height: int
    elevation: np.ndarray = field(default_factory=_empty)
    temperature: np.ndarray = field(default_factory=_empty)
    pressure: np.ndarray = field(default_factory=_empty)
    humidity: np.ndarray = field(default_factory=_empty)
    wind_u: np.ndarray = field(default_factory=_empty)
    wind_v: np.ndarray = field(default_factory=_empty)
    rainfall: np.ndarray = field(default_factory=_empty)
    plate_id: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int32))


@dataclass
class RegionGrid:
    """Region refinement; moisture, heat and elevation are inherited from the coarse grid."""

    width: int
    height: int
    biome: list[str] = field(default_factory=list)
    moisture: np.ndarray = field(default_factory=_empty)
    heat: np.ndarray = field(default_factory=_empty)
    elevation: np.ndarray = field(default_factory=_empty)
    region_id: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int32))

    @classmethod
    def for_coarse(cls, coarse_width: int, coarse_height: int) -> "RegionGrid":
        width, height = region_shape(coarse_width, coarse_height)
        return cls(width=width, height=height)


@dataclass
class LocalGrid:
    """Tile-level grid holding packed RGBA colours."""

    width: int
    height: int
    color: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int32))

    @classmethod
    def for_region(cls, region: RegionGrid) -> "LocalGrid":
        width, height = local_shape(region.width, region.height)
        return cls(width=width, height=height)


@dataclass
class World:
    sim: WorldSimGrid
    region: RegionGrid
    local: LocalGrid


@dataclass
class TemperatureState:
    """Per-cell climate state: surface temperature, cloud cover, insolation, heat flux."""

    surface: np.ndarray = field(default_factory=_empty)
    cloud_cover: np.ndarray = field(default_factory=_empty)
    solar_insolation: np.ndarray = field(default_factory=_empty)
    heat_flux: np.ndarray = field(default_factory=_empty)
