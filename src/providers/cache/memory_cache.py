"""In-memory keyed cache backed by ``cachetools.TTLCache``.

Single-process, lost on restart.  The iTunes provider uses one instance
to remember artwork URLs per artist id for 30 minutes, including the
empty string for artists with no artwork.
"""

from __future__ import annotations

import time
from typing import Any, Callable

import structlog
from cachetools import TTLCache

from src.interfaces.cache_provider import ICacheProvider
from src.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)


class MemoryCacheProvider(ICacheProvider):
    """TTL cache with LRU eviction once ``max_size`` entries are held.

    Parameters
    ----------
    max_size:
        Maximum number of entries.
    ttl:
        Time-to-live in seconds, applied uniformly to every entry.
    timer:
        Clock used for expiry; injectable for tests.
    name:
        Label used in log events.
    """

    def __init__(
        self,
        max_size: int = 1000,
        ttl: float = 1800,
        timer: Callable[[], float] = time.monotonic,
        name: str = "memory",
    ) -> None:
        self._name = name
        self._cache: TTLCache[str, Any] = TTLCache(maxsize=max_size, ttl=ttl, timer=timer)

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        value = self._cache.get(key)
        logger.debug("cache_hit" if value is not None else "cache_miss", cache=self._name, key=key)
        return value

    async def set(self, key: str, value: Any) -> None:
        self._cache[key] = value

    async def delete(self, key: str) -> None:
        self._cache.pop(key, None)

    async def exists(self, key: str) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)
