"""byte_lru

An embeddable in-memory key/value cache that evicts the least recently used
entry once the combined size of keys and values exceeds a byte budget.

Locking, cache fill on miss and any secondary tier are left to the embedding
component; eviction can be observed through the ``on_evicted`` callback.
"""

from .cache import Cache, EvictedCallback
from .utils.config import CacheConfig

__all__ = [
    "Cache",
    "CacheConfig",
    "EvictedCallback",
]

__version__ = "0.1.0"
