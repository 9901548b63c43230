"""Steepest-descent flow routing and river intensity."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numba import njit

from worldgen.config import HydrologyConfig


# (dy, dx) in scan order; on equal drops the earlier neighbour wins.
_NEIGHBORS_8 = [
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
]


@dataclass(frozen=True)
class FlowRouting:
    """Flat (row-major) routing products for one elevation field."""

    order: np.ndarray
    downstream: np.ndarray
    accumulation: np.ndarray
    river: np.ndarray


def descending_order(elevation: np.ndarray) -> np.ndarray:
    """Flat cell indices sorted highest first; equal elevations keep index order."""

    flat = np.asarray(elevation, dtype=np.float64).ravel()
    return np.argsort(-flat, kind="stable")


def assign_downstream(elevation: np.ndarray, *, config: HydrologyConfig | None = None) -> np.ndarray:
    """Single receiver per land cell by steepest 8-neighbour drop, -1 where none."""

    if elevation.ndim != 2:
        raise ValueError("elevation must be a 2D array")

    cfg = config or HydrologyConfig()
    h, w = elevation.shape
    elev = elevation.astype(np.float64, copy=False)

    best_drop = np.zeros((h, w), dtype=np.float64)
    dest = np.full((h, w), -1, dtype=np.int64)
    index_grid = np.arange(h * w, dtype=np.int64).reshape((h, w))

    for dy, dx in _NEIGHBORS_8:
        drop = elev - _neighbor(elev, dy, dx, fill=np.inf)
        better = drop > best_drop
        best_drop[better] = drop[better]
        dest[better] = _neighbor(index_grid, dy, dx, fill=-1)[better]

    land = elev > cfg.sea_level
    valid = land & (best_drop > cfg.min_drop)
    dest[~valid] = -1
    return dest.ravel()


@njit(cache=True)
def _accumulate(order, downstream, land, accum):
    for i in range(order.shape[0]):
        src = order[i]
        if not land[src]:
            continue
        flow = accum[src] + 1.0
        accum[src] = flow
        dst = downstream[src]
        if dst >= 0:
            accum[dst] += flow
    return accum


def accumulate_flow(
    order: np.ndarray,
    downstream: np.ndarray,
    land: np.ndarray,
) -> np.ndarray:
    """Walk `order` once, adding one unit per land cell and pushing the total downstream.

    `order` must be descending elevation so every cell is final before it is pushed.
    """

    size = downstream.shape[0]
    if order.shape[0] != size or land.size != size:
        raise ValueError("order, downstream and land must cover the same cells")

    accum = np.zeros(size, dtype=np.float64)
    return _accumulate(
        np.ascontiguousarray(order, dtype=np.int64),
        np.ascontiguousarray(downstream, dtype=np.int64),
        np.ascontiguousarray(land.ravel(), dtype=np.bool_),
        accum,
    )


def normalize_river(accumulation: np.ndarray, *, config: HydrologyConfig | None = None) -> np.ndarray:
    """Scale by the global maximum, drop trickles below the cutoff, clamp to [0, 1]."""

    cfg = config or HydrologyConfig()
    max_flow = float(np.max(accumulation)) if accumulation.size else 0.0
    # Divide rather than multiply by the reciprocal so the maximum maps to exactly 1.0.
    river = accumulation / max_flow if max_flow > 0.0 else accumulation.astype(np.float64, copy=True)
    river[river < cfg.trickle_cutoff] = 0.0
    return np.clip(river, 0.0, 1.0)


def route_flow(elevation: np.ndarray, *, config: HydrologyConfig | None = None) -> FlowRouting:
    """Direction assignment and accumulation over one shared descending-elevation order."""

    cfg = config or HydrologyConfig()
    order = descending_order(elevation)
    downstream = assign_downstream(elevation, config=cfg)
    land = np.asarray(elevation, dtype=np.float64).ravel() > cfg.sea_level
    accumulation = accumulate_flow(order, downstream, land)
    river = normalize_river(accumulation, config=cfg)
    return FlowRouting(order=order, downstream=downstream, accumulation=accumulation, river=river)


def validate_flow_routing(elevation: np.ndarray, downstream: np.ndarray, accumulation: np.ndarray) -> None:
    """Raise ValueError if routing violates its invariants."""

    flat = np.asarray(elevation, dtype=np.float64).ravel()
    if downstream.shape[0] != flat.shape[0] or accumulation.shape[0] != flat.shape[0]:
        raise ValueError("routing arrays do not match elevation size")
    if np.isnan(accumulation).any():
        raise ValueError("flow accumulation contains NaN")
    if np.any(accumulation < 0.0):
        raise ValueError("flow accumulation has negative values")

    src = np.flatnonzero(downstream >= 0)
    dst = downstream[src]
    if np.any(dst >= flat.shape[0]):
        raise ValueError("downstream index out of range")
    if np.any(dst == src):
        raise ValueError("cell routes to itself")
    if np.any(flat[dst] >= flat[src]):
        raise ValueError("detected uphill or flat downstream routing")


def _neighbor(field: np.ndarray, dy: int, dx: int, *, fill) -> np.ndarray:
    """Return `out[y, x] = field[y + dy, x + dx]`, `fill` outside the grid."""

    h, w = field.shape
    out = np.full(field.shape, fill, dtype=field.dtype)

    y_dst0 = max(0, -dy)
    y_dst1 = h - max(0, dy)
    x_dst0 = max(0, -dx)
    x_dst1 = w - max(0, dx)

    out[y_dst0:y_dst1, x_dst0:x_dst1] = field[y_dst0 + dy : y_dst1 + dy, x_dst0 + dx : x_dst1 + dx]
    return out
