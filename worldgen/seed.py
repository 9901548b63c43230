"""Seed text handling and per-stage sub-seed derivation."""

from __future__ import annotations

import hashlib
import secrets
import time

import numpy as np

SUFFIX_CONTINENTAL = "_continental"
SUFFIX_WARP = "_warp"
SUFFIX_PLATE = "_plate"
SUFFIX_TEMPERATURE = "_temp"
SUFFIX_HUMIDITY = "_humidity"
SUFFIX_WIND_U = "_windU"
SUFFIX_WIND_V = "_windV"
SUFFIX_DETAIL_1 = "_detail1"
SUFFIX_DETAIL_2 = "_detail2"
SUFFIX_BEAUTY_WARP_1 = "_beautyWarp1"
SUFFIX_BEAUTY_WARP_2 = "_beautyWarp2"

STAGE_SUFFIXES = (
    SUFFIX_CONTINENTAL,
    SUFFIX_WARP,
    SUFFIX_PLATE,
    SUFFIX_TEMPERATURE,
    SUFFIX_HUMIDITY,
    SUFFIX_WIND_U,
    SUFFIX_WIND_V,
    SUFFIX_DETAIL_1,
    SUFFIX_DETAIL_2,
    SUFFIX_BEAUTY_WARP_1,
    SUFFIX_BEAUTY_WARP_2,
)

DEFAULT_SEED = "world-seed"

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def subseed(seed: str, suffix: str) -> str:
    """Return the sub-seed text for one pipeline stage."""

    return f"{seed}{suffix}"


def seed_hash64(seed: str) -> int:
    """Hash seed text to a deterministic unsigned 64-bit integer."""

    digest = hashlib.blake2b(
        seed.encode("utf-8", errors="surrogatepass"),
        digest_size=8,
        person=b"worldgen0",
    ).digest()
    return int.from_bytes(digest, byteorder="big", signed=False)


def random_seed() -> str:
    """Return a fresh seed: base-36 millisecond timestamp plus a random tag."""

    stamp = np.base_repr(int(time.time() * 1000), 36).lower()
    tag = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"{stamp}_{tag}"

