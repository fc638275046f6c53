from .lru import Cache, EvictedCallback, nbytes

__all__ = ["Cache", "EvictedCallback", "nbytes"]
