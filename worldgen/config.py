"""Configuration models for coarse world generation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


DEFAULT_WIDTH = 2048
DEFAULT_HEIGHT = 1024


@dataclass(frozen=True)
class MaskConfig:
    """Controls the continental mask and raw elevation signal."""

    world_radius: float = 0.8
    radial_power: float = 2.5
    shape_frequency: float = 0.004
    shape_power: float = 1.8
    warp_frequency: float = 0.003
    warp_base: float = 0.7
    warp_span: float = 0.6
    raw_frequency: float = 0.01
    raw_offset_x: float = 100.0
    raw_offset_y: float = 200.0


@dataclass(frozen=True)
class TectonicsConfig:
    """Controls ridge/rift perturbation along synthetic plate seams."""

    plate_frequency: float = 0.0015
    boundary_sharpness: float = 6.0
    ridge_uplift: float = 0.7
    rift_depression: float = -0.5


@dataclass(frozen=True)
class ShapingConfig:
    """Mask bands and curves used to shape raw elevation."""

    deep_ocean_mask: float = 0.20
    shelf_mask: float = 0.35
    ocean_floor: float = -1.0
    shelf_top_depth: float = -0.4
    land_base: float = -0.1
    land_top: float = 1.0
    mountain_offset: float = 0.3
    mountain_gain: float = 0.8
    mountain_cap: float = 0.8


@dataclass(frozen=True)
class ErosionConfig:
    """Asymmetric peak-erosion / valley-fill relaxation."""

    iterations: int = 6
    strength: float = 0.45
    fill_ratio: float = 0.35


@dataclass(frozen=True)
class BeautifyConfig:
    """Domain warp and detail octaves applied after erosion."""

    warp_frequency: float = 0.01
    warp_px: float = 8.0
    detail_frequencies: tuple[float, ...] = (0.03, 0.06)
    detail_weights: tuple[float, ...] = (0.08, 0.04)


@dataclass(frozen=True)
class HydrologyConfig:
    """Steepest-descent routing and river normalization."""

    sea_level: float = 0.35
    min_drop: float = 0.0001
    trickle_cutoff: float = 0.05


@dataclass(frozen=True)
class ClimateConfig:
    """Temperature, humidity, wind and biome thresholds."""

    temperature_frequency: float = 0.01
    humidity_frequency: float = 0.01
    humidity_offset: tuple[float, float] = (999.0, 123.0)
    wind_frequency: float = 0.02
    latitude_weight: float = 0.65
    noise_weight: float = 0.35
    altitude_cooling: float = 0.3
    deep_sea_level: float = 0.25
    shallow_sea_level: float = 0.38
    coastal_humidity_gain: float = 0.4
    warm_shelf_temperature: float = 0.6
    wetland_river_threshold: float = 0.45


@dataclass(frozen=True)
class GeneratorConfig:
    """Primary generation configuration."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    mask: MaskConfig = field(default_factory=MaskConfig)
    tectonics: TectonicsConfig = field(default_factory=TectonicsConfig)
    shaping: ShapingConfig = field(default_factory=ShapingConfig)
    erosion: ErosionConfig = field(default_factory=ErosionConfig)
    beautify: BeautifyConfig = field(default_factory=BeautifyConfig)
    hydrology: HydrologyConfig = field(default_factory=HydrologyConfig)
    climate: ClimateConfig = field(default_factory=ClimateConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
