"""Bounded fan-out helpers shared by the providers and services.

Every fan-out in the application follows the same shape: build one
coroutine per item, run them under a semaphore so at most N upstream calls
are in flight, and join before anything is merged or sorted.  Sorting only
ever happens on the joined result, so output order never depends on which
sub-fetch finished first.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, TypeVar

import structlog

from src.utils.logging import get_logger

_T = TypeVar("_T")
_R = TypeVar("_R")

_logger: structlog.BoundLogger = get_logger(__name__)


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run awaitables concurrently with at most ``semaphore`` slots in flight.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Concurrency gate.  Callers create one per fan-out so independent
        requests do not starve each other.
    return_exceptions:
        Mirrors ``asyncio.gather``: when ``True`` failures are returned in
        place instead of raised.

    Returns
    -------
    list
        Results in input order.
    """

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    return await asyncio.gather(*(_wrapped(c) for c in coros), return_exceptions=return_exceptions)


async def bounded_map(
    fn: Callable[[_T], Awaitable[_R]],
    items: Iterable[_T],
    limit: int,
    default: _R,
    logger: structlog.BoundLogger | None = None,
    error_event: str = "fan_out_item_failed",
) -> list[_R]:
    """Apply ``fn`` to every item with at most ``limit`` calls in flight.

    A failing item is logged and replaced by ``default``; the list keeps
    input order and length.  ``asyncio.CancelledError`` is not swallowed.
    """
    log = logger or _logger
    item_list = list(items)
    if not item_list:
        return []

    semaphore = asyncio.Semaphore(max(1, limit))
    raw = await throttled_gather([fn(item) for item in item_list], semaphore)

    results: list[_R] = []
    for item, value in zip(item_list, raw):
        if isinstance(value, asyncio.CancelledError):
            raise value
        if isinstance(value, BaseException):
            log.debug(error_event, item=str(item), error=str(value))
            results.append(default)
        else:
            results.append(value)
    return results
