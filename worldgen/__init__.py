"""Deterministic coarse world generation package."""

from .coarse import CoarseGrid, generate
from .config import DEFAULT_HEIGHT, DEFAULT_WIDTH, GeneratorConfig

__all__ = ["DEFAULT_WIDTH", "DEFAULT_HEIGHT", "GeneratorConfig", "CoarseGrid", "generate"]
