"""Single-value read-through cache with stale-on-error fallback.

Holds exactly one value (the whole Groupie artist list, the relations
index, the suggestion index), so one ``asyncio.Lock`` per instance guards
the entire check-fetch-store sequence.  Concurrent callers that arrive
while a refresh is running wait for it and then see the new value instead
of starting a second fetch.

Read contract:

* fresh value (``now - fetched_at < ttl``) -> returned, no fetch
* otherwise fetch; success replaces the entry
* fetch failure with a stale entry -> stale value returned, error logged
* fetch failure with no entry ever stored -> error propagates
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar

import structlog

from src.utils.errors import GroupieTrackerError
from src.utils.logging import get_logger

_T = TypeVar("_T")

logger: structlog.BoundLogger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 600.0


@dataclass(frozen=True)
class CacheEntry(Generic[_T]):
    """A cached value and the clock reading at which it was fetched."""

    value: _T
    fetched_at: float

    def is_fresh(self, now: float, ttl: float) -> bool:
        return now - self.fetched_at < ttl


class TTLValueCache(Generic[_T]):
    """Read-through cache for one value produced by an async ``fetch`` callable.

    Parameters
    ----------
    fetch:
        Zero-argument coroutine function producing the value.  Expected to
        raise :class:`GroupieTrackerError` subclasses on failure.
    ttl:
        Freshness window in seconds.
    name:
        Label used in log events.
    clock:
        Monotonic clock; injectable for tests.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[_T]],
        ttl: float = DEFAULT_TTL_SECONDS,
        name: str = "value",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch = fetch
        self._ttl = ttl
        self._name = name
        self._clock = clock
        self._entry: CacheEntry[_T] | None = None
        self._lock = asyncio.Lock()

    @property
    def peek(self) -> CacheEntry[_T] | None:
        """The current entry, fresh or stale, without triggering a fetch."""
        return self._entry

    def invalidate(self) -> None:
        """Forget the cached value; the next :meth:`get` fetches."""
        self._entry = None

    async def get(self) -> _T:
        async with self._lock:
            entry = self._entry
            if entry is not None and entry.is_fresh(self._clock(), self._ttl):
                return entry.value

            try:
                value = await self._fetch()
            except GroupieTrackerError as exc:
                if entry is not None:
                    logger.warning(
                        "cache_refresh_failed_serving_stale",
                        cache=self._name,
                        age_seconds=round(self._clock() - entry.fetched_at, 1),
                        error=str(exc),
                    )
                    return entry.value
                logger.error("cache_fetch_failed", cache=self._name, error=str(exc))
                raise

            self._entry = CacheEntry(value=value, fetched_at=self._clock())
            logger.debug("cache_refreshed", cache=self._name)
            return value
