from __future__ import annotations

import numpy as np
import pytest

from worldgen.config import GeneratorConfig


class ConstantNoise:
    """Noise source returning one value everywhere."""

    def __init__(self, value: float) -> None:
        self.value = float(value)

    def __call__(self, x: float, y: float) -> float:
        return self.value

    def grid(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        return np.full((len(ys), len(xs)), self.value, dtype=np.float64)


@pytest.fixture
def constant_noise():
    return ConstantNoise


@pytest.fixture
def small_config() -> GeneratorConfig:
    return GeneratorConfig(width=256, height=128)
