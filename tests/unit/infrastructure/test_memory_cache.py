"""Tests for MemoryCacheAdapter (TTL expiry, reaper)."""

from __future__ import annotations

import pytest

from reelscout.infrastructure.cache.memory_adapter import MemoryCacheAdapter


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> _Clock:
    return _Clock()


@pytest.fixture()
def cache(clock: _Clock) -> MemoryCacheAdapter:
    return MemoryCacheAdapter(ttl_seconds=3600, reaper_interval=0, clock=clock)


class TestExpiry:
    @pytest.mark.asyncio
    async def test_value_lives_until_ttl(self, cache: MemoryCacheAdapter, clock: _Clock) -> None:
        await cache.set("k", "v", ttl=60)

        clock.now = 30
        assert await cache.get("k") == "v"

        clock.now = 61
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_expired_entry_removed_on_read(
        self, cache: MemoryCacheAdapter, clock: _Clock
    ) -> None:
        await cache.set("k", "v", ttl=10)
        clock.now = 11
        assert not await cache.exists("k")
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_default_ttl(self, cache: MemoryCacheAdapter, clock: _Clock) -> None:
        await cache.set("k", "v")
        clock.now = 3599
        assert await cache.get("k") == "v"
        clock.now = 3601
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_overwrite_resets_ttl(self, cache: MemoryCacheAdapter, clock: _Clock) -> None:
        await cache.set("k", "old", ttl=60)
        clock.now = 50
        await cache.set("k", "new", ttl=60)
        clock.now = 100
        assert await cache.get("k") == "new"


class TestOperations:
    @pytest.mark.asyncio
    async def test_miss(self, cache: MemoryCacheAdapter) -> None:
        assert await cache.get("missing") is None

    @pytest.mark.asyncio
    async def test_delete(self, cache: MemoryCacheAdapter) -> None:
        await cache.set("k", 1)
        assert await cache.delete("k")
        assert not await cache.delete("k")

    @pytest.mark.asyncio
    async def test_clear(self, cache: MemoryCacheAdapter) -> None:
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.clear()
        assert len(cache) == 0


class TestReaper:
    @pytest.mark.asyncio
    async def test_sweep_drops_only_expired(
        self, cache: MemoryCacheAdapter, clock: _Clock
    ) -> None:
        await cache.set("short", 1, ttl=10)
        await cache.set("long", 2, ttl=100)
        clock.now = 50

        assert cache.sweep() == 1
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_context_manager_starts_and_stops_reaper(self, clock: _Clock) -> None:
        cache = MemoryCacheAdapter(reaper_interval=0.01, clock=clock)
        async with cache:
            assert cache._reaper is not None
        assert cache._reaper is None

    @pytest.mark.asyncio
    async def test_reaper_disabled_with_zero_interval(self, cache: MemoryCacheAdapter) -> None:
        async with cache:
            assert cache._reaper is None
