"""Shared fixtures for unit tests."""

from __future__ import annotations

import typing as t

import pytest

from byte_lru import Cache
from byte_lru.cache import nbytes


class EvictionRecorder:
    """Callable that records every (key, value) handed to on_evicted."""

    def __init__(self) -> None:
        self.calls: t.List[t.Tuple[str, str]] = []

    def __call__(self, key: str, value: str) -> None:
        self.calls.append((key, value))

    @property
    def keys(self) -> t.List[str]:
        return [k for k, _ in self.calls]


@pytest.fixture
def evictions():
    """Fresh eviction recorder."""
    return EvictionRecorder()


@pytest.fixture
def small_cache(evictions):
    """10-byte cache wired to the eviction recorder."""
    return Cache(max_bytes=10, on_evicted=evictions)


def check_consistent(cache: Cache) -> None:
    """Byte total and index/recency membership agree with the live entries."""
    keys = cache.keys()
    assert len(keys) == len(set(keys)) == len(cache) == cache.len()
    assert all(key in cache for key in keys)
    total = 0
    # Reading from the LRU end back to the MRU end restores the original order.
    for key in reversed(keys):
        value, found = cache.get(key)
        assert found
        total += nbytes(key) + nbytes(value)
    assert cache.keys() == keys
    assert cache.current_bytes == total


@pytest.fixture
def assert_consistent():
    """Invariant checker for a Cache instance."""
    return check_consistent
