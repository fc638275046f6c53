from __future__ import annotations

import logging
import typing as t
from dataclasses import dataclass

from ..monitoring import metrics
from ..utils.config import CacheConfig

logger = logging.getLogger(__name__)

Data = t.Union[str, bytes]
EvictedCallback = t.Callable[[Data, Data], None]

# Slot index that marks "no neighbour".
_NIL = -1


def nbytes(data: Data) -> int:
    if isinstance(data, bytes):
        return len(data)
    # surrogatepass: lone surrogates are valid str content
    return len(data.encode("utf-8", "surrogatepass"))


@dataclass
class _Entry:
    key: Data
    value: Data
    prev: int = _NIL
    next: int = _NIL


class Cache:
    """LRU cache bounded by the total byte size of its keys and values.

    Entries live in an arena of slots linked into a recency list, most
    recently used at the head. The index maps a key to its slot number.
    ``max_bytes == 0`` disables eviction.

    Not thread-safe; callers must serialize access.
    """

    def __init__(
        self,
        max_bytes: int = 0,
        on_evicted: t.Optional[EvictedCallback] = None,
        record_metrics: bool = True,
    ) -> None:
        self._max_bytes = max_bytes
        self._nbytes = 0
        self._slots: t.List[t.Optional[_Entry]] = []
        self._free: t.List[int] = []
        self._index: t.Dict[Data, int] = {}
        self._head = _NIL
        self._tail = _NIL
        self._record_metrics = record_metrics
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self.on_evicted = on_evicted

    @classmethod
    def from_config(cls, config: CacheConfig, on_evicted: t.Optional[EvictedCallback] = None) -> "Cache":
        return cls(
            max_bytes=config.max_bytes,
            on_evicted=on_evicted,
            record_metrics=config.record_metrics,
        )

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    @property
    def current_bytes(self) -> int:
        return self._nbytes

    # -- recency list ------------------------------------------------------

    def _unlink(self, handle: int) -> None:
        entry = self._slots[handle]
        if entry.prev == _NIL:
            self._head = entry.next
        else:
            self._slots[entry.prev].next = entry.next
        if entry.next == _NIL:
            self._tail = entry.prev
        else:
            self._slots[entry.next].prev = entry.prev
        entry.prev = entry.next = _NIL

    def _push_front(self, handle: int) -> None:
        entry = self._slots[handle]
        entry.prev = _NIL
        entry.next = self._head
        if self._head != _NIL:
            self._slots[self._head].prev = handle
        self._head = handle
        if self._tail == _NIL:
            self._tail = handle

    def _move_to_front(self, handle: int) -> None:
        if handle == self._head:
            return
        self._unlink(handle)
        self._push_front(handle)

    def _alloc(self, entry: _Entry) -> int:
        if self._free:
            handle = self._free.pop()
            self._slots[handle] = entry
        else:
            handle = len(self._slots)
            self._slots.append(entry)
        return handle

    # -- public API --------------------------------------------------------

    def get(self, key: Data) -> t.Tuple[Data, bool]:
        """Return ``(value, True)`` and mark the entry most recently used,
        or ``("", False)`` when the key is absent.

        A miss leaves the entries untouched; only the hit/miss stats and
        metrics count it.
        """
        handle = self._index.get(key)
        if handle is None:
            self._misses += 1
            if self._record_metrics:
                metrics.lru_cache_requests_total.inc(result="miss")
            return "", False
        self._hits += 1
        if self._record_metrics:
            metrics.lru_cache_requests_total.inc(result="hit")
        self._move_to_front(handle)
        return self._slots[handle].value, True

    def add(self, key: Data, value: Data) -> None:
        """Insert or update ``key`` and evict from the LRU end while over budget.

        An entry larger than the budget on its own is not rejected; eviction
        stops once the cache is empty.
        """
        handle = self._index.get(key)
        if handle is not None:
            entry = self._slots[handle]
            delta = nbytes(value) - nbytes(entry.value)
            self._move_to_front(handle)
            self._nbytes += delta
            entry.value = value
        else:
            size = nbytes(key) + nbytes(value)
            handle = self._alloc(_Entry(key, value))
            self._push_front(handle)
            self._index[key] = handle
            self._nbytes += size
            if self._record_metrics:
                metrics.lru_cache_entry_size_bytes.observe(size)
        while self._max_bytes != 0 and self._nbytes > self._max_bytes:
            if not self._index:
                break
            self.remove_oldest()

    def remove_oldest(self) -> None:
        """Evict the least recently used entry. No-op on an empty cache."""
        handle = self._tail
        if handle == _NIL:
            return
        entry = self._slots[handle]
        self._unlink(handle)
        del self._index[entry.key]
        self._slots[handle] = None
        self._free.append(handle)
        freed = nbytes(entry.key) + nbytes(entry.value)
        self._nbytes -= freed
        self._evictions += 1
        if self._record_metrics:
            metrics.lru_cache_evictions_total.inc()
        logger.debug("evicted key=%r freed=%d bytes remaining=%d", entry.key, freed, self._nbytes)
        if self.on_evicted is not None:
            self.on_evicted(entry.key, entry.value)

    def len(self) -> int:
        return len(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def keys(self) -> t.List[Data]:
        """Keys ordered from most to least recently used."""
        out: t.List[Data] = []
        handle = self._head
        while handle != _NIL:
            entry = self._slots[handle]
            out.append(entry.key)
            handle = entry.next
        return out

    def stats(self) -> t.Dict[str, int]:
        return {
            "entries": len(self._index),
            "current_bytes": self._nbytes,
            "max_bytes": self._max_bytes,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
        }
