from __future__ import annotations

import numpy as np
import pytest

from worldgen.config import ErosionConfig
from worldgen.erosion import erode, erosion_pass, neighbor_counts


def _hand_pass(before: np.ndarray, strength: float = 0.45, fill_ratio: float = 0.35) -> np.ndarray:
    h, w = before.shape
    out = np.empty_like(before)
    fill = strength * fill_ratio
    for y in range(h):
        for x in range(w):
            neighbors = []
            if x > 0:
                neighbors.append(before[y, x - 1])
            if x < w - 1:
                neighbors.append(before[y, x + 1])
            if y > 0:
                neighbors.append(before[y - 1, x])
            if y < h - 1:
                neighbors.append(before[y + 1, x])
            avg = sum(neighbors) / len(neighbors)
            cell = before[y, x]
            if cell > avg:
                new = avg + (cell - avg) * (1.0 - strength)
            else:
                new = cell * (1.0 - fill) + avg * fill
            out[y, x] = min(max(new, -1.0), 1.0)
    return out


def _one_pass(field: np.ndarray) -> np.ndarray:
    out = np.empty_like(field)
    avg = np.empty_like(field)
    counts = neighbor_counts(*field.shape)
    return erosion_pass(field, out, counts, avg, config=ErosionConfig())


def test_neighbor_counts_at_borders() -> None:
    counts = neighbor_counts(3, 4)
    assert counts[0, 0] == 2
    assert counts[0, 1] == 3
    assert counts[1, 1] == 4
    assert counts[2, 3] == 2


def test_single_cell_island_loses_45_percent_of_excess() -> None:
    field = np.zeros((5, 5))
    field[2, 2] = 1.0

    out = _one_pass(field)

    assert out[2, 2] == pytest.approx(0.55)
    # A neighbour of the spike sees avg 0.25 and fills gently toward it.
    assert out[2, 1] == pytest.approx(0.25 * 0.45 * 0.35)
    assert out[0, 0] == 0.0


def test_spike_on_plateau_keeps_55_percent_of_excess() -> None:
    field = np.full((5, 5), 0.2)
    field[2, 2] = 0.6
    out = _one_pass(field)
    assert out[2, 2] == pytest.approx(0.2 + 0.4 * 0.55)


def test_pass_reads_only_pre_pass_values() -> None:
    rng = np.random.default_rng(11)
    before = rng.uniform(-1.0, 1.0, size=(4, 5))
    snapshot = before.copy()

    out = _one_pass(before)

    assert np.array_equal(before, snapshot)
    np.testing.assert_allclose(out, _hand_pass(snapshot), rtol=0, atol=1e-12)


def test_pass_refuses_aliased_buffers() -> None:
    field = np.zeros((3, 3))
    with pytest.raises(ValueError):
        erosion_pass(field, field, neighbor_counts(3, 3), np.empty_like(field))


def test_erode_matches_repeated_hand_passes() -> None:
    rng = np.random.default_rng(5)
    shaped = rng.uniform(-1.0, 1.0, size=(6, 7))

    expected = shaped.copy()
    for _ in range(3):
        expected = _hand_pass(expected)

    out = erode(shaped, config=ErosionConfig(iterations=3))
    np.testing.assert_allclose(out, expected, rtol=0, atol=1e-12)
    assert out is not shaped


def test_erode_smooths_and_stays_in_range() -> None:
    rng = np.random.default_rng(9)
    shaped = rng.uniform(-1.0, 1.0, size=(32, 32))
    out = erode(shaped)
    assert float(out.min()) >= -1.0
    assert float(out.max()) <= 1.0
    assert float(np.var(out)) < float(np.var(shaped))
