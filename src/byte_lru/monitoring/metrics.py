from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass
class Counter:
    name: str
    help: str
    values: Dict[Tuple, float] = field(default_factory=dict)

    def inc(self, value: float = 1.0, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        self.values[key] = self.values.get(key, 0.0) + value

    def get(self, **labels: Any) -> float:
        return self.values.get(tuple(sorted(labels.items())), 0.0)


@dataclass
class Histogram:
    name: str
    help: str
    buckets: List[float]
    counts: Dict[Tuple, List[int]] = field(default_factory=dict)

    def observe(self, val: float, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        if key not in self.counts:
            # last slot is the +Inf bucket
            self.counts[key] = [0 for _ in range(len(self.buckets) + 1)]
        for i, b in enumerate(self.buckets):
            if val <= b:
                self.counts[key][i] += 1
                break
        else:
            self.counts[key][-1] += 1

    def total(self, **labels: Any) -> int:
        return sum(self.counts.get(tuple(sorted(labels.items())), []))


# Predefined metrics
lru_cache_requests_total = Counter("lru_cache_requests_total", "Cache lookups by result (hit/miss)")
lru_cache_evictions_total = Counter("lru_cache_evictions_total", "Entries evicted from the LRU end")
lru_cache_entry_size_bytes = Histogram(
    "lru_cache_entry_size_bytes",
    "Size of newly inserted entries (key + value)",
    buckets=[16, 64, 256, 1024, 4096, 16384, 65536, 262144, 1048576],
)
