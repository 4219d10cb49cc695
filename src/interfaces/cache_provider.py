"""Abstract base class for keyed cache providers.

Used for small per-key lookups that are worth remembering for a while
(e.g. iTunes artwork URLs per artist).  Whole-dataset values use
:class:`src.providers.cache.ttl_value_cache.TTLValueCache` instead, which
adds stale-on-error fallback.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ICacheProvider(ABC):
    """Contract for async key-value caches with expiry."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the value stored under *key*, or ``None`` if missing or expired.

        Falsy values such as ``""`` are legitimate cached values and are
        returned as-is.
        """

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store *value* under *key* using the cache's TTL."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove *key*; a no-op when it is absent."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present and not expired."""
