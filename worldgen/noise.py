"""Seeded 2-D noise sources used by the generation pipeline."""

from __future__ import annotations

from typing import Callable, Protocol

import numpy as np
from opensimplex import OpenSimplex

from worldgen.seed import seed_hash64

_SEED_MASK = (1 << 63) - 1


class NoiseSource(Protocol):
    """Deterministic mapping from real coordinates to a value in [-1, 1]."""

    def __call__(self, x: float, y: float) -> float:
        ...

    def grid(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        ...


NoiseFactory = Callable[[str], NoiseSource]


class SeededNoise:
    """OpenSimplex noise keyed by a seed string.

    Two instances built from the same seed text produce bit-identical values.
    """

    def __init__(self, seed_text: str) -> None:
        self.seed_text = seed_text
        self.seed = seed_hash64(seed_text) & _SEED_MASK
        self._simplex = OpenSimplex(self.seed)

    def __call__(self, x: float, y: float) -> float:
        value = self._simplex.noise2(float(x), float(y))
        return float(np.clip(value, -1.0, 1.0))

    def grid(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Sample on the outer product of `xs` and `ys`; result is (len(ys), len(xs))."""

        x = np.ascontiguousarray(xs, dtype=np.float64).ravel()
        y = np.ascontiguousarray(ys, dtype=np.float64).ravel()
        values = self._simplex.noise2array(x, y)
        return np.clip(values, -1.0, 1.0)

    def __repr__(self) -> str:
        return f"SeededNoise({self.seed_text!r})"


def seeded_noise(seed_text: str) -> NoiseSource:
    """Default noise factory."""

    return SeededNoise(seed_text)


def axis_coords(length: int, frequency: float, offset: float = 0.0) -> np.ndarray:
    """Pixel indices along one axis scaled into noise space."""

    if length <= 0:
        raise ValueError("length must be positive")
    return np.arange(length, dtype=np.float64) * frequency + offset


def sample_grid(
    source: NoiseSource,
    width: int,
    height: int,
    frequency: float,
    *,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
) -> np.ndarray:
    """Sample `source(x*frequency + offset_x, y*frequency + offset_y)` for every cell."""

    xs = axis_coords(width, frequency, offset_x)
    ys = axis_coords(height, frequency, offset_y)
    values = np.asarray(source.grid(xs, ys), dtype=np.float64)
    if values.shape != (height, width):
        raise ValueError(f"noise grid has shape {values.shape}, expected {(height, width)}")
    return np.clip(values, -1.0, 1.0)


def unit_noise(values: np.ndarray) -> np.ndarray:
    """Map noise in [-1, 1] to [0, 1]."""

    return (values + 1.0) * 0.5
