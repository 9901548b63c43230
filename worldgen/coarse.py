"""Coarse planetary grid: data type and generation pipeline."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import logging
import time
from typing import Iterator

import numpy as np

from worldgen import seed as seeds
from worldgen.beautify import beautify, to_unit_elevation
from worldgen.climate import (
    classify_biomes,
    compute_humidity,
    compute_rainfall,
    compute_temperature,
    compute_wind,
)
from worldgen.config import GeneratorConfig
from worldgen.erosion import erode
from worldgen.hydrology import route_flow
from worldgen.mask import build_continental_mask
from worldgen.noise import NoiseFactory, seeded_noise
from worldgen.shaping import shape_elevation
from worldgen.tectonics import apply_plate_tectonics

logger = logging.getLogger(__name__)

FIELD_RANGES: dict[str, tuple[float, float]] = {
    "elevation": (0.0, 1.0),
    "temperature": (0.0, 1.0),
    "humidity": (0.0, 1.0),
    "rainfall": (0.0, 1.0),
    "wind_u": (-1.0, 1.0),
    "wind_v": (-1.0, 1.0),
    "river": (0.0, 1.0),
}


@dataclass(frozen=True)
class CoarseGrid:
    """Finished coarse grid. Every field is a flat row-major array of width*height cells."""

    width: int
    height: int
    seed: str
    elevation: np.ndarray
    temperature: np.ndarray
    humidity: np.ndarray
    rainfall: np.ndarray
    wind_u: np.ndarray
    wind_v: np.ndarray
    river: np.ndarray
    biome: np.ndarray

    def __post_init__(self) -> None:
        size = self.width * self.height
        for name, values in self.fields().items():
            if values.shape != (size,):
                raise ValueError(f"{name} has shape {values.shape}, expected ({size},)")
            values.flags.writeable = False

    @property
    def size(self) -> int:
        return self.width * self.height

    def fields(self) -> dict[str, np.ndarray]:
        return {
            "elevation": self.elevation,
            "temperature": self.temperature,
            "humidity": self.humidity,
            "rainfall": self.rainfall,
            "wind_u": self.wind_u,
            "wind_v": self.wind_v,
            "river": self.river,
            "biome": self.biome,
        }

    def field2d(self, name: str) -> np.ndarray:
        """Return a (height, width) view of one field."""

        return self.fields()[name].reshape((self.height, self.width))

    def index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")
        return y * self.width + x


def generate(
    seed: str = seeds.DEFAULT_SEED,
    *,
    config: GeneratorConfig | None = None,
    noise_factory: NoiseFactory | None = None,
) -> CoarseGrid:
    """Generate the coarse grid for `seed`. Pure and deterministic; performs no I/O."""

    cfg = config or GeneratorConfig()
    if cfg.width <= 0 or cfg.height <= 0:
        raise ValueError("width and height must be positive")

    make_noise = noise_factory or seeded_noise
    noise = {suffix: make_noise(seeds.subseed(seed, suffix)) for suffix in seeds.STAGE_SUFFIXES}
    width, height = cfg.width, cfg.height
    started = time.perf_counter()

    with _stage("continental mask"):
        continental = build_continental_mask(
            width,
            height,
            noise[seeds.SUFFIX_CONTINENTAL],
            noise[seeds.SUFFIX_WARP],
            config=cfg.mask,
        )
    mask = continental.mask

    with _stage("plate tectonics"):
        base_elev = apply_plate_tectonics(
            continental.base_elev,
            mask,
            noise[seeds.SUFFIX_PLATE],
            config=cfg.tectonics,
        )

    with _stage("elevation shaping"):
        shaped = shape_elevation(base_elev, mask, config=cfg.shaping)

    with _stage("erosion"):
        eroded = erode(shaped, config=cfg.erosion)

    with _stage("beautify"):
        beautified = beautify(
            eroded,
            noise[seeds.SUFFIX_BEAUTY_WARP_1],
            noise[seeds.SUFFIX_BEAUTY_WARP_2],
            (noise[seeds.SUFFIX_DETAIL_1], noise[seeds.SUFFIX_DETAIL_2]),
            config=cfg.beautify,
        )
        elevation = _public(to_unit_elevation(beautified), "elevation")

    with _stage("hydrology"):
        routing = route_flow(elevation, config=cfg.hydrology)
        river = _public(routing.river.reshape((height, width)), "river")

    with _stage("climate"):
        temperature = _public(
            compute_temperature(elevation, noise[seeds.SUFFIX_TEMPERATURE], config=cfg.climate),
            "temperature",
        )
        humidity = _public(
            compute_humidity(elevation, noise[seeds.SUFFIX_HUMIDITY], config=cfg.climate),
            "humidity",
        )
        rainfall = _public(compute_rainfall(humidity, elevation), "rainfall")
        wind_u, wind_v = compute_wind(
            noise[seeds.SUFFIX_WIND_U],
            noise[seeds.SUFFIX_WIND_V],
            width,
            height,
            config=cfg.climate,
        )
        wind_u = _public(wind_u, "wind_u")
        wind_v = _public(wind_v, "wind_v")

    with _stage("biomes"):
        biome = classify_biomes(
            elevation=elevation,
            temperature=temperature,
            humidity=humidity,
            rainfall=rainfall,
            river=river,
            config=cfg.climate,
        )

    logger.info(
        "Generated %dx%d coarse grid for seed %r in %.3f s",
        width,
        height,
        seed,
        time.perf_counter() - started,
    )
    return CoarseGrid(
        width=width,
        height=height,
        seed=seed,
        elevation=elevation.ravel(),
        temperature=temperature.ravel(),
        humidity=humidity.ravel(),
        rainfall=rainfall.ravel(),
        wind_u=wind_u.ravel(),
        wind_v=wind_v.ravel(),
        river=river.ravel(),
        biome=np.clip(biome, 0, 14).astype(np.uint8).ravel(),
    )


def _public(values: np.ndarray, name: str) -> np.ndarray:
    """Clamp to the field's declared range and cast to the stored dtype."""

    lo, hi = FIELD_RANGES[name]
    finite = np.nan_to_num(values, nan=lo, posinf=hi, neginf=lo)
    return np.clip(finite.astype(np.float32), lo, hi)


@contextmanager
def _stage(name: str) -> Iterator[None]:
    start = time.perf_counter()
    yield
    logger.debug("Stage %s finished in %.3f s", name, time.perf_counter() - start)
