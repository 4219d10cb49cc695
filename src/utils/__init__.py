"""Utility modules for Groupie Tracker.

- **errors** -- exception hierarchy rooted at GroupieTrackerError.
- **http** -- the shared JSON fetch helper and transport error tagging.
- **concurrency** -- semaphore-bounded fan-out helpers.
- **logging** -- structlog setup (console in development, JSON in production).
- **release_dates** / **ordering** -- date parsing, merge-by-id, release sort.
- **text_normalizer** -- match folding, title casing, compact numbers.
- **location_keys** / **place_matching** -- dataset location keys and
  geocoder candidate scoring.
"""

from src.utils.concurrency import bounded_map, throttled_gather
from src.utils.errors import (
    ConfigurationError,
    GeocodingError,
    GroupieTrackerError,
    NotFoundError,
    ProviderUnavailableError,
    RateLimitError,
)
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "GeocodingError",
    "GroupieTrackerError",
    "NotFoundError",
    "ProviderUnavailableError",
    "RateLimitError",
    "bounded_map",
    "configure_logging",
    "get_logger",
    "throttled_gather",
]
