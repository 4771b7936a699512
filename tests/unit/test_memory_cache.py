"""Tests for LRUTTLCache (fixed TTL, LRU eviction, counters)."""

import pytest

from audio_catalog.infrastructure.cache import LRUTTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def test_get_returns_value_until_ttl_expires(clock: FakeClock) -> None:
    cache: LRUTTLCache[str] = LRUTTLCache("test", max_size=3, ttl=10, clock=clock)
    cache.set("a", "A")
    clock.now += 9.9
    assert cache.get("a") == "A"
    clock.now += 0.1
    assert cache.get("a") is None
    assert len(cache) == 0


def test_reads_do_not_extend_ttl(clock: FakeClock) -> None:
    cache: LRUTTLCache[str] = LRUTTLCache("test", max_size=3, ttl=10, clock=clock)
    cache.set("a", "A")
    clock.now += 8
    assert cache.get("a") == "A"
    clock.now += 3
    assert cache.get("a") is None


def test_least_recently_used_is_evicted(clock: FakeClock) -> None:
    cache: LRUTTLCache[int] = LRUTTLCache("test", max_size=2, ttl=60, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.get("a") == 1
    cache.set("c", 3)
    assert "a" in cache
    assert "b" not in cache
    assert "c" in cache
    assert len(cache) == 2


def test_hit_and_miss_counters(clock: FakeClock) -> None:
    cache: LRUTTLCache[int] = LRUTTLCache("test", max_size=5, ttl=60, clock=clock)
    cache.set("a", 1)
    cache.get("a")
    cache.get("a")
    cache.get("missing")
    assert cache.stats() == {"size": 1, "max_size": 5, "ttl": 60, "hits": 2, "misses": 1}


def test_purge_stale_drops_only_expired(clock: FakeClock) -> None:
    cache: LRUTTLCache[int] = LRUTTLCache("test", max_size=5, ttl=10, clock=clock)
    cache.set("old", 1)
    clock.now += 6
    cache.set("new", 2)
    clock.now += 5
    assert cache.purge_stale() == 1
    assert "new" in cache
    assert len(cache) == 1


def test_delete_and_clear(clock: FakeClock) -> None:
    cache: LRUTTLCache[int] = LRUTTLCache("test", max_size=5, ttl=10, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.delete("a") is True
    assert cache.delete("a") is False
    cache.clear()
    assert len(cache) == 0


def test_contains_ignores_non_string_keys(clock: FakeClock) -> None:
    cache: LRUTTLCache[int] = LRUTTLCache("test", max_size=5, ttl=10, clock=clock)
    cache.set("1", 1)
    assert 1 not in cache


@pytest.mark.parametrize("max_size,ttl", [(0, 10), (5, 0)])
def test_invalid_bounds_are_rejected(max_size: int, ttl: float) -> None:
    with pytest.raises(ValueError):
        LRUTTLCache("test", max_size=max_size, ttl=ttl)
