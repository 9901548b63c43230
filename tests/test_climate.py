from __future__ import annotations

import numpy as np
import pytest

from worldgen.climate import (
    BIOME_COUNT,
    BIOME_NAMES,
    BIOME_WETLANDS,
    classify_biomes,
    compute_humidity,
    compute_rainfall,
    compute_temperature,
    compute_wind,
)


# (elevation, temperature, humidity, rainfall, river, expected biome)
_CASES = [
    (0.10, 0.90, 0.90, 0.90, 0.0, 0),  # deep ocean
    (0.30, 0.70, 0.50, 0.50, 0.0, 2),  # warm shelf
    (0.30, 0.50, 0.50, 0.50, 0.0, 1),  # cold shelf
    (0.90, 0.10, 0.50, 0.50, 0.0, 13),  # very cold peak
    (0.50, 0.10, 0.50, 0.50, 0.0, 11),  # tundra
    (0.85, 0.30, 0.50, 0.50, 0.0, 13),  # cold peak
    (0.70, 0.30, 0.50, 0.50, 0.0, 12),  # rocky mountain
    (0.50, 0.30, 0.50, 0.50, 0.0, 10),  # taiga
    (0.50, 0.80, 0.20, 0.50, 0.0, 3),  # hot desert
    (0.50, 0.80, 0.40, 0.50, 0.0, 4),  # scrub
    (0.50, 0.80, 0.90, 0.70, 0.0, 9),  # rainforest
    (0.50, 0.80, 0.90, 0.50, 0.0, 8),  # tropical seasonal forest
    (0.50, 0.80, 0.50, 0.50, 0.0, 5),  # savanna
    (0.50, 0.50, 0.25, 0.50, 0.0, 3),  # temperate desert
    (0.50, 0.50, 0.40, 0.50, 0.0, 6),  # dry grassland
    (0.50, 0.50, 0.80, 0.50, 0.0, 7),  # temperate forest
    (0.50, 0.50, 0.60, 0.50, 0.0, 6),  # grassland
]


def _row(values) -> np.ndarray:
    return np.array([values], dtype=np.float64)


def test_biome_names_cover_every_id() -> None:
    assert BIOME_COUNT == 15
    assert BIOME_NAMES[0] == "deep ocean"
    assert BIOME_NAMES[14] == "wetlands"


def test_decision_tree_branches() -> None:
    columns = list(zip(*_CASES))
    biome = classify_biomes(
        elevation=_row(columns[0]),
        temperature=_row(columns[1]),
        humidity=_row(columns[2]),
        rainfall=_row(columns[3]),
        river=_row(columns[4]),
    )
    assert biome.dtype == np.uint8
    assert biome[0].tolist() == list(columns[5])


def test_strong_river_overrides_land_only() -> None:
    elevation = _row([0.5, 0.9, 0.38, 0.3, 0.1, 0.5])
    river = _row([0.5, 1.0, 0.9, 0.9, 1.0, 0.45])
    temperature = _row([0.8, 0.1, 0.5, 0.7, 0.5, 0.5])
    humidity = np.full_like(elevation, 0.2)

    biome = classify_biomes(
        elevation=elevation,
        temperature=temperature,
        humidity=humidity,
        rainfall=humidity,
        river=river,
    )

    assert biome[0].tolist() == [14, 14, 14, 2, 0, 3]


def test_override_invariant_on_random_fields() -> None:
    rng = np.random.default_rng(17)
    shape = (48, 64)
    elevation = rng.random(shape)
    river = rng.random(shape)
    biome = classify_biomes(
        elevation=elevation,
        temperature=rng.random(shape),
        humidity=rng.random(shape),
        rainfall=rng.random(shape),
        river=river,
    )

    strong_land = (river > 0.45) & (elevation >= 0.38)
    assert np.all(biome[strong_land] == BIOME_WETLANDS)
    assert np.all(biome[elevation < 0.38] != BIOME_WETLANDS)
    assert int(biome.max()) < BIOME_COUNT


def test_temperature_follows_latitude_and_altitude(constant_noise) -> None:
    flat = np.zeros((4, 3))
    temperature = compute_temperature(flat, constant_noise(0.0))

    # 0.65 * latitude band + 0.35 * 0.5
    assert temperature[:, 0].tolist() == pytest.approx([0.175, 0.5, 0.825, 0.5])

    high = np.full((4, 3), 1.0)
    cooled = compute_temperature(high, constant_noise(0.0))
    np.testing.assert_allclose(cooled, np.clip(temperature - 0.3, 0.0, 1.0))


def test_temperature_is_clamped(constant_noise) -> None:
    temperature = compute_temperature(np.zeros((8, 8)), constant_noise(1.0))
    assert float(temperature.max()) <= 1.0
    assert float(temperature.min()) >= 0.0


def test_humidity_coastal_boost(constant_noise) -> None:
    elevation = _row([0.1, 0.25, 0.3, 0.38, 0.5])
    humidity = compute_humidity(elevation, constant_noise(0.0))
    assert humidity[0].tolist() == pytest.approx([0.5, 0.5, 0.5 + 0.08 * 0.4, 0.5, 0.5])


def test_rainfall_peaks_at_mid_elevation() -> None:
    humidity = _row([0.8, 0.8, 0.8])
    elevation = _row([0.5, 1.0, 0.0])
    assert compute_rainfall(humidity, elevation)[0].tolist() == pytest.approx([0.8, 0.4, 0.4])

    with pytest.raises(ValueError):
        compute_rainfall(np.zeros((2, 2)), np.zeros((2, 3)))


def test_wind_is_clamped_noise(constant_noise) -> None:
    wind_u, wind_v = compute_wind(constant_noise(0.25), constant_noise(-3.0), 5, 4)
    assert wind_u.shape == (4, 5)
    assert np.all(wind_u == 0.25)
    assert np.all(wind_v == -1.0)
