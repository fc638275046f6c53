"""Configuration helpers."""

from .config import CacheConfig

__all__ = ["CacheConfig"]
