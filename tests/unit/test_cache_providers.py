"""Unit tests for MemoryCacheProvider and TTLValueCache."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.cache.ttl_value_cache import CacheEntry, TTLValueCache
from src.utils.errors import NotFoundError, ProviderUnavailableError
from tests.conftest import FakeClock


# ======================================================================
# MemoryCacheProvider
# ======================================================================


class TestMemoryCacheProvider:
    @pytest.fixture()
    def cache(self, clock: FakeClock) -> MemoryCacheProvider:
        return MemoryCacheProvider(max_size=100, ttl=60, timer=clock)

    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self, cache: MemoryCacheProvider) -> None:
        assert await cache.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, cache: MemoryCacheProvider) -> None:
        await cache.set("key1", "value1")
        assert await cache.get("key1") == "value1"

    @pytest.mark.asyncio
    async def test_empty_string_is_a_hit(self, cache: MemoryCacheProvider) -> None:
        await cache.set("no-art", "")
        assert await cache.get("no-art") == ""
        assert await cache.exists("no-art") is True

    @pytest.mark.asyncio
    async def test_entries_expire(self, cache: MemoryCacheProvider, clock: FakeClock) -> None:
        await cache.set("key1", "value1")
        clock.advance(61)
        assert await cache.get("key1") is None
        assert await cache.exists("key1") is False

    @pytest.mark.asyncio
    async def test_delete_removes_key(self, cache: MemoryCacheProvider) -> None:
        await cache.set("key1", "value1")
        await cache.delete("key1")
        assert await cache.get("key1") is None

    @pytest.mark.asyncio
    async def test_delete_nonexistent_is_noop(self, cache: MemoryCacheProvider) -> None:
        await cache.delete("nonexistent")

    @pytest.mark.asyncio
    async def test_max_size_evicts(self, clock: FakeClock) -> None:
        cache = MemoryCacheProvider(max_size=2, ttl=60, timer=clock)
        for i in range(3):
            await cache.set(f"k{i}", i)
        assert len(cache) == 2


# ======================================================================
# TTLValueCache
# ======================================================================


class TestCacheEntry:
    def test_fresh_until_ttl(self) -> None:
        entry = CacheEntry(value=1, fetched_at=100.0)
        assert entry.is_fresh(now=159.0, ttl=60) is True
        assert entry.is_fresh(now=160.0, ttl=60) is False


class TestTTLValueCache:
    @pytest.mark.asyncio
    async def test_first_get_fetches(self, clock: FakeClock) -> None:
        fetch = AsyncMock(return_value=["a"])
        cache = TTLValueCache(fetch, ttl=600, clock=clock)
        assert await cache.get() == ["a"]
        fetch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_fresh_value_is_served_without_fetch(self, clock: FakeClock) -> None:
        fetch = AsyncMock(return_value="v1")
        cache = TTLValueCache(fetch, ttl=600, clock=clock)
        await cache.get()
        clock.advance(599)
        assert await cache.get() == "v1"
        assert fetch.await_count == 1

    @pytest.mark.asyncio
    async def test_expired_value_is_refetched(self, clock: FakeClock) -> None:
        fetch = AsyncMock(side_effect=["v1", "v2"])
        cache = TTLValueCache(fetch, ttl=600, clock=clock)
        await cache.get()
        clock.advance(601)
        assert await cache.get() == "v2"

    @pytest.mark.asyncio
    async def test_stale_value_served_when_refresh_fails(self, clock: FakeClock) -> None:
        fetch = AsyncMock(
            side_effect=["v1", ProviderUnavailableError("down", provider_name="groupie")]
        )
        cache = TTLValueCache(fetch, ttl=600, clock=clock)
        assert await cache.get() == "v1"

        clock.advance(601)
        assert await cache.get() == "v1"
        # The stale entry is kept, not refreshed.
        assert cache.peek is not None
        assert cache.peek.value == "v1"

    @pytest.mark.asyncio
    async def test_error_propagates_without_prior_value(self, clock: FakeClock) -> None:
        fetch = AsyncMock(side_effect=NotFoundError("gone"))
        cache = TTLValueCache(fetch, ttl=600, clock=clock)
        with pytest.raises(NotFoundError):
            await cache.get()
        assert cache.peek is None

    @pytest.mark.asyncio
    async def test_invalidate_forces_fetch(self, clock: FakeClock) -> None:
        fetch = AsyncMock(side_effect=["v1", "v2"])
        cache = TTLValueCache(fetch, ttl=600, clock=clock)
        await cache.get()
        cache.invalidate()
        assert await cache.get() == "v2"

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_fetch(self, clock: FakeClock) -> None:
        calls = 0

        async def fetch() -> str:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0)
            return "v"

        cache = TTLValueCache(fetch, ttl=600, clock=clock)
        results = await asyncio.gather(*(cache.get() for _ in range(5)))
        assert results == ["v"] * 5
        assert calls == 1
