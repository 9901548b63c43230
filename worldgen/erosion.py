"""Coarse thermal/hydraulic erosion by asymmetric neighbour relaxation."""

from __future__ import annotations

import numpy as np

from worldgen.config import ErosionConfig


def neighbor_counts(height: int, width: int) -> np.ndarray:
    """Number of in-grid 4-neighbours per cell (2 at corners, 3 on edges, 4 inside)."""

    counts = np.zeros((height, width), dtype=np.float64)
    counts[:, 1:] += 1.0
    counts[:, :-1] += 1.0
    counts[1:, :] += 1.0
    counts[:-1, :] += 1.0
    return counts


def neighbor_mean(field: np.ndarray, counts: np.ndarray, out: np.ndarray) -> np.ndarray:
    """Average of the existing up/down/left/right neighbours, written into `out`."""

    out.fill(0.0)
    out[:, 1:] += field[:, :-1]
    out[:, :-1] += field[:, 1:]
    out[1:, :] += field[:-1, :]
    out[:-1, :] += field[1:, :]
    # Isolated cells (1x1 grid) keep their own height.
    np.divide(out, counts, out=out, where=counts > 0)
    np.copyto(out, field, where=counts == 0)
    return out


def erosion_pass(
    current: np.ndarray,
    out: np.ndarray,
    counts: np.ndarray,
    avg: np.ndarray,
    *,
    config: ErosionConfig | None = None,
) -> np.ndarray:
    """One relaxation pass reading only `current` and writing only `out`."""

    if out is current:
        raise ValueError("erosion pass requires distinct read and write buffers")

    cfg = config or ErosionConfig()
    fill = cfg.strength * cfg.fill_ratio
    neighbor_mean(current, counts, avg)

    eroded = avg + (current - avg) * (1.0 - cfg.strength)
    filled = current * (1.0 - fill) + avg * fill
    np.copyto(out, np.where(current > avg, eroded, filled))
    np.clip(out, -1.0, 1.0, out=out)
    return out


def erode(shaped: np.ndarray, *, config: ErosionConfig | None = None) -> np.ndarray:
    """Run the configured number of passes with a swapped pair of buffers."""

    if shaped.ndim != 2:
        raise ValueError("shaped elevation must be a 2D array")

    cfg = config or ErosionConfig()
    height, width = shaped.shape
    counts = neighbor_counts(height, width)

    current = np.clip(shaped, -1.0, 1.0).astype(np.float64, copy=True)
    buffer = np.empty_like(current)
    avg = np.empty_like(current)

    for _ in range(max(0, cfg.iterations)):
        erosion_pass(current, buffer, counts, avg, config=cfg)
        current, buffer = buffer, current

    return current
