"""Cache providers.

MemoryCacheProvider is a keyed cachetools TTL cache (per-artist artwork).
TTLValueCache holds one whole-dataset value with stale-on-error fallback.
Both are process-memory only.
"""

from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.cache.ttl_value_cache import CacheEntry, TTLValueCache

__all__ = ["CacheEntry", "MemoryCacheProvider", "TTLValueCache"]
