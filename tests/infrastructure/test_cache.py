"""Tests for the TTL cache and memoization wrapper."""

from finexplorer.infrastructure.cache import TTLCache, memoize


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl() -> None:
    clock = _Clock()
    cache = TTLCache(ttl_seconds=10, clock=clock)
    cache.set("tree", 1)

    clock.now = 9.0
    assert cache.get("tree") == 1
    clock.now = 10.5
    assert cache.get("tree") is None
    assert cache.stats() == {"hits": 1, "misses": 1, "size": 0}


def test_full_cache_evicts_entry_expiring_first() -> None:
    clock = _Clock()
    cache = TTLCache(maxsize=2, ttl_seconds=10, clock=clock)
    cache.set("a", 1)
    clock.now = 1.0
    cache.set("b", 2)
    cache.set("c", 3)

    assert cache.get("a") is None
    assert cache.get("b") == 2
    assert cache.get("c") == 3


def test_delete_and_clear() -> None:
    cache = TTLCache()
    cache.set("a", 1)
    cache.set("b", 2)

    cache.delete("a")
    assert cache.get("a", "missing") == "missing"
    cache.clear()
    assert cache.stats() == {"hits": 0, "misses": 0, "size": 0}


def test_memoize_reuses_results_within_ttl() -> None:
    """Identical calls should hit the cache until the entry expires."""
    clock = _Clock()
    cache = TTLCache(ttl_seconds=5, clock=clock)
    calls = []

    @memoize(cache)
    def load(dimension, model="fs"):
        calls.append((dimension, model))
        return len(calls)

    assert load("fs") == 1
    assert load("fs") == 1
    assert load("functions", model="hrm2") == 2
    clock.now = 6.0
    assert load("fs") == 3
    assert load.cache is cache


def test_memoize_caches_falsy_results_with_custom_key() -> None:
    cache = TTLCache()
    calls = []

    @memoize(cache, key=lambda ids: tuple(ids))
    def load(ids):
        calls.append(ids)
        return []

    assert load(["a", "b"]) == []
    assert load(["a", "b"]) == []
    assert len(calls) == 1
