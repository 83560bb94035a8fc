"""Tests for the in-memory TTL cache."""

from datetime import UTC, datetime, timedelta

from nutrition_engine.services.cache import InMemoryCache


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now


def test_entries_expire_after_ttl() -> None:
    clock = _Clock()
    cache = InMemoryCache(clock=clock)

    cache.set("fdc:food:1", "oats", ttl_seconds=60)
    assert cache.get("fdc:food:1") == "oats"

    clock.now += timedelta(seconds=60)
    assert cache.get("fdc:food:1") is None
    assert len(cache) == 0


def test_oldest_entry_is_evicted_when_full() -> None:
    cache = InMemoryCache(max_entries=2)

    cache.set("a", 1, ttl_seconds=60)
    cache.set("b", 2, ttl_seconds=60)
    cache.set("c", 3, ttl_seconds=60)

    assert cache.get("a") is None
    assert cache.get("b") == 2
    assert cache.get("c") == 3
    assert len(cache) == 2


def test_overwrite_does_not_evict() -> None:
    cache = InMemoryCache(max_entries=2)

    cache.set("a", 1, ttl_seconds=60)
    cache.set("b", 2, ttl_seconds=60)
    cache.set("b", 20, ttl_seconds=60)

    assert cache.get("a") == 1
    assert cache.get("b") == 20
