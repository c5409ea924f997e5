"""Lume Stylist - wardrobe storage and AI outfit generation backend."""

__version__ = "1.0.0"

from lume.core.config import LumeConfig, config

__all__ = [
    "LumeConfig",
    "config",
]
