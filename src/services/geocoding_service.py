"""Place resolution and concert-map assembly.

:class:`GeocodeResolver` chains a city-oriented primary geocoder with a
region-aware secondary one and remembers every answer, positive or
negative, for the life of the process.  :class:`ConcertMapService` turns a
Groupie ``datesLocations`` mapping into geocoded map pins.
"""

from __future__ import annotations

import asyncio

import structlog

from src.interfaces.geocoding_provider import IGeocodingProvider
from src.models.geo import GeocodeResult, MapLocation
from src.utils.concurrency import bounded_map
from src.utils.errors import GeocodingError, GroupieTrackerError
from src.utils.location_keys import resolve_location_key
from src.utils.logging import get_logger
from src.utils.place_matching import normalize_us_state_name

_US = "US"
DEFAULT_GEOCODE_CONCURRENCY = 4
DEFAULT_MAX_LOCATIONS = 25


class GeocodeResolver:
    """Resolve ``(place, country_code)`` to coordinates with a permanent cache.

    Attempt order for one place:

    1. For ``US`` places that fuzzy-match a state name, the secondary
       geocoder with the normalized state name.
    2. Primary, then secondary, with the raw place.
    3. When the normalized state name differs from the raw place, primary
       then secondary again with the normalized name.

    The first hit wins.  The cache has no size bound and no expiry; the
    key space is the small set of Groupie concert locations.
    """

    def __init__(self, primary: IGeocodingProvider, secondary: IGeocodingProvider) -> None:
        self._primary = primary
        self._secondary = secondary
        self._cache: dict[str, GeocodeResult | None] = {}
        self._lock = asyncio.Lock()
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @staticmethod
    def cache_key(place: str, country_code: str) -> str:
        return f"{place.strip().lower()}|{country_code.strip().upper()}"

    def __len__(self) -> int:
        return len(self._cache)

    # -- Public API -----------------------------------------------------------

    async def resolve(self, place: str, country_code: str = "") -> GeocodeResult | None:
        """Return the best in-country match for *place*, or ``None``.

        Raises
        ------
        GeocodingError
            When every geocoder call failed with a transport error.  Nothing
            is cached in that case, so a later call retries.
        """
        place = (place or "").strip()
        if not place:
            return None
        cc = (country_code or "").strip().upper()
        key = self.cache_key(place, cc)

        async with self._lock:
            if key in self._cache:
                return self._cache[key]

        result, answered = await self._try_geocode(place, cc)
        if result is None and not answered:
            self._logger.warning("geocode_all_providers_failed", place=place, country=cc)
            raise GeocodingError(message=f"No geocoder reachable for {place!r}")

        async with self._lock:
            self._cache[key] = result
        self._logger.debug("geocode_resolved", place=place, country=cc, found=result is not None)
        return result

    # -- Internal helpers -----------------------------------------------------

    async def _try_geocode(self, place: str, cc: str) -> tuple[GeocodeResult | None, bool]:
        state = normalize_us_state_name(place) if cc == _US else None

        attempts: list[tuple[IGeocodingProvider, str]] = []
        if state:
            attempts.append((self._secondary, state))
        attempts += [(self._primary, place), (self._secondary, place)]
        if state and state.lower() != place.lower():
            attempts += [(self._primary, state), (self._secondary, state)]

        answered = False
        for provider, query in attempts:
            try:
                result = await provider.geocode(query, cc)
            except GroupieTrackerError as exc:
                self._logger.debug(
                    "geocode_attempt_failed",
                    provider=provider.get_provider_name(),
                    query=query,
                    error=str(exc),
                )
                continue
            answered = True
            if result is not None:
                return result, True
        return None, answered


class ConcertMapService:
    """Build map pins for an artist's concert locations."""

    def __init__(
        self,
        resolver: GeocodeResolver,
        concurrency: int = DEFAULT_GEOCODE_CONCURRENCY,
        max_locations: int = DEFAULT_MAX_LOCATIONS,
    ) -> None:
        self._resolver = resolver
        self._concurrency = concurrency
        self._max_locations = max_locations
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def build_locations(self, dates_locations: dict[str, list[str]]) -> list[MapLocation]:
        """Geocode up to ``max_locations`` keys (sorted) and return the resolved ones.

        Keys that fail or resolve to nothing are dropped; the output keeps
        sorted-key order.
        """
        keys = sorted(dates_locations)[: self._max_locations]

        async def _one(raw_key: str) -> MapLocation | None:
            parsed = resolve_location_key(raw_key)
            result = await self._resolver.resolve(parsed.place, parsed.country_code)
            if result is None:
                return None
            return MapLocation(
                key=raw_key,
                name=parsed.display_label,
                lat=result.lat,
                lng=result.lng,
                dates=list(dates_locations.get(raw_key) or []),
            )

        resolved = await bounded_map(
            _one,
            keys,
            limit=self._concurrency,
            default=None,
            logger=self._logger,
            error_event="concert_location_failed",
        )
        locations = [loc for loc in resolved if loc is not None]
        self._logger.info("concert_map_built", requested=len(keys), resolved=len(locations))
        return locations
