"""Latitude/noise climate proxies and decision-tree biome classification."""

from __future__ import annotations

import numpy as np

from worldgen.config import ClimateConfig
from worldgen.noise import NoiseSource, sample_grid, unit_noise


BIOME_DEEP_OCEAN = np.uint8(0)
BIOME_COLD_SHELF = np.uint8(1)
BIOME_WARM_SHELF = np.uint8(2)
BIOME_DESERT = np.uint8(3)
BIOME_SCRUB = np.uint8(4)
BIOME_SAVANNA = np.uint8(5)
BIOME_GRASSLAND = np.uint8(6)
BIOME_TEMPERATE_FOREST = np.uint8(7)
BIOME_TROPICAL_SEASONAL_FOREST = np.uint8(8)
BIOME_RAINFOREST = np.uint8(9)
BIOME_TAIGA = np.uint8(10)
BIOME_TUNDRA = np.uint8(11)
BIOME_ROCKY_MOUNTAIN = np.uint8(12)
BIOME_ALPINE_SNOW = np.uint8(13)
BIOME_WETLANDS = np.uint8(14)

BIOME_NAMES = (
    "deep ocean",
    "cold shelf",
    "warm shelf",
    "desert",
    "scrub",
    "savanna",
    "grassland",
    "temperate forest",
    "tropical seasonal forest",
    "rainforest",
    "taiga",
    "tundra",
    "rocky mountain",
    "alpine snow",
    "wetlands",
)
BIOME_COUNT = len(BIOME_NAMES)


def compute_temperature(
    elevation: np.ndarray,
    temp_noise: NoiseSource,
    *,
    config: ClimateConfig | None = None,
) -> np.ndarray:
    """Hottest at the vertical center, noise-perturbed, cooled by altitude."""

    cfg = config or ClimateConfig()
    h, w = elevation.shape
    lat = np.arange(h, dtype=np.float64)[:, None] / h
    lat_temp = 1.0 - np.abs(lat - 0.5) * 2.0
    noise_temp = unit_noise(sample_grid(temp_noise, w, h, cfg.temperature_frequency))

    t = cfg.latitude_weight * lat_temp + cfg.noise_weight * noise_temp
    t = t - elevation * cfg.altitude_cooling
    return np.clip(t, 0.0, 1.0)


def compute_humidity(
    elevation: np.ndarray,
    humidity_noise: NoiseSource,
    *,
    config: ClimateConfig | None = None,
) -> np.ndarray:
    """Noise humidity, boosted over the coastal band just below the shelf edge."""

    cfg = config or ClimateConfig()
    h, w = elevation.shape
    off_x, off_y = cfg.humidity_offset
    freq = cfg.humidity_frequency
    humidity = unit_noise(
        sample_grid(humidity_noise, w, h, freq, offset_x=off_x * freq, offset_y=off_y * freq)
    )

    coastal = (elevation < cfg.shallow_sea_level) & (elevation > cfg.deep_sea_level)
    boost = (cfg.shallow_sea_level - elevation) * cfg.coastal_humidity_gain
    humidity = np.where(coastal, humidity + boost, humidity)
    return np.clip(humidity, 0.0, 1.0)


def compute_rainfall(humidity: np.ndarray, elevation: np.ndarray) -> np.ndarray:
    if humidity.shape != elevation.shape:
        raise ValueError("humidity and elevation shape mismatch")
    return np.clip(humidity * (1.0 - np.abs(elevation - 0.5)), 0.0, 1.0)


def compute_wind(
    u_noise: NoiseSource,
    v_noise: NoiseSource,
    width: int,
    height: int,
    *,
    config: ClimateConfig | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    cfg = config or ClimateConfig()
    wind_u = sample_grid(u_noise, width, height, cfg.wind_frequency)
    wind_v = sample_grid(v_noise, width, height, cfg.wind_frequency)
    return np.clip(wind_u, -1.0, 1.0), np.clip(wind_v, -1.0, 1.0)


def classify_biomes(
    *,
    elevation: np.ndarray,
    temperature: np.ndarray,
    humidity: np.ndarray,
    rainfall: np.ndarray,
    river: np.ndarray,
    config: ClimateConfig | None = None,
) -> np.ndarray:
    """Assign biome ids 0..14; strong rivers override every land classification."""

    cfg = config or ClimateConfig()
    e = elevation
    t = temperature
    hum = humidity
    dryness = 1.0 - hum

    deep = e < cfg.deep_sea_level
    shelf = ~deep & (e < cfg.shallow_sea_level)
    land = ~deep & ~shelf

    very_cold = land & (t < 0.18)
    cold = land & ~very_cold & (t < 0.35)
    hot = land & ~very_cold & ~cold & (t > 0.7)
    temperate = land & ~very_cold & ~cold & ~hot

    conditions = [
        deep,
        shelf & (t > cfg.warm_shelf_temperature),
        shelf,
        very_cold & (e > 0.8),
        very_cold,
        cold & (e > 0.8),
        cold & (e > 0.6),
        cold,
        hot & (dryness > 0.75),
        hot & (dryness > 0.55),
        hot & (hum > 0.8) & (rainfall > 0.65),
        hot & (hum > 0.55),
        hot,
        temperate & (dryness > 0.7),
        temperate & (dryness > 0.5),
        temperate & (hum > 0.7),
        temperate,
    ]
    choices = [
        BIOME_DEEP_OCEAN,
        BIOME_WARM_SHELF,
        BIOME_COLD_SHELF,
        BIOME_ALPINE_SNOW,
        BIOME_TUNDRA,
        BIOME_ALPINE_SNOW,
        BIOME_ROCKY_MOUNTAIN,
        BIOME_TAIGA,
        BIOME_DESERT,
        BIOME_SCRUB,
        BIOME_RAINFOREST,
        BIOME_TROPICAL_SEASONAL_FOREST,
        BIOME_SAVANNA,
        BIOME_DESERT,
        BIOME_GRASSLAND,
        BIOME_TEMPERATE_FOREST,
        BIOME_GRASSLAND,
    ]
    biome = np.select(conditions, choices, default=BIOME_DEEP_OCEAN).astype(np.uint8)

    # Rivers win over climate zoning; this must stay the last assignment.
    biome[land & (river > cfg.wetland_river_threshold)] = BIOME_WETLANDS
    return biome
