"""Tests for the TTL cache, driven by a fake clock."""

from __future__ import annotations

import pytest

from cbpi.cache import TTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    return TTLCache(default_ttl=10, clock=clock)


class TestTTLCache:
    def test_set_and_get(self, cache: TTLCache) -> None:
        cache.set("a", 1)
        assert cache.get("a") == 1
        assert cache.has("a")

    def test_missing_key(self, cache: TTLCache) -> None:
        assert cache.get("nope") is None
        assert cache.get("nope", "fallback") == "fallback"
        assert not cache.has("nope")

    def test_expiry(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("a", 1)
        clock.now = 10
        assert cache.get("a") == 1
        clock.now = 10.5
        assert cache.get("a") is None
        assert not cache.has("a")

    def test_custom_ttl(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("short", 1, ttl=1)
        cache.set("long", 2)
        clock.now = 5
        assert cache.keys() == ["long"]

    def test_falsy_values_are_cached(self, cache: TTLCache) -> None:
        cache.set("zero", 0)
        assert cache.has("zero")
        assert cache.get("zero", "fallback") == 0

    def test_sweep_on_set(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("old", 1)
        clock.now = 20
        cache.set("new", 2)
        assert cache.stats() == {"size": 1, "keys": ["new"]}

    def test_size(self, cache: TTLCache, clock: FakeClock) -> None:
        cache.set("a", 1)
        cache.set("b", 2, ttl=100)
        assert cache.size() == 2
        clock.now = 50
        assert cache.size() == 1

    def test_delete_and_clear(self, cache: TTLCache) -> None:
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.delete("a") is True
        assert cache.delete("a") is False
        cache.clear()
        assert cache.size() == 0
