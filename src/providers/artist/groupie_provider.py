"""Groupie Trackers dataset provider implementing IArtistProvider.

The dataset is a fixed list of ~50 artists plus a relations index of
concert dates per location.  Both documents are fetched whole and held in
:class:`TTLValueCache` instances (10 minutes, stale-on-error), so search
and filtering run locally with no per-keystroke network call.
"""

from __future__ import annotations

import time
from typing import Callable

import httpx
import structlog
from pydantic import ValidationError

from src.interfaces.artist_provider import IArtistProvider
from src.models.entities import ArtistRecord, ProviderTag, ReleaseRecord, TrackRecord
from src.models.groupie import GroupieArtist, GroupieFilter, Relation, RelationIndex
from src.providers.cache.ttl_value_cache import DEFAULT_TTL_SECONDS, TTLValueCache
from src.utils.errors import NotFoundError, ProviderUnavailableError
from src.utils.http import DEFAULT_USER_AGENT, fetch_json
from src.utils.location_keys import humanize_location_key
from src.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

_BASE_URL = "https://groupietrackers.herokuapp.com/api"
_ARTISTS_URL = f"{_BASE_URL}/artists"
_RELATION_URL = f"{_BASE_URL}/relation"


def _parse_artist_id(artist_id: str) -> int:
    try:
        value = int(str(artist_id).strip())
    except ValueError:
        raise NotFoundError(
            message=f"Invalid artist id {artist_id!r}", provider_name="groupie"
        ) from None
    if value <= 0:
        raise NotFoundError(message=f"Invalid artist id {artist_id!r}", provider_name="groupie")
    return value


def meta_line(artist: GroupieArtist) -> str:
    return f"Created {artist.creation_date} • {len(artist.members)} members"


class GroupieProvider(IArtistProvider):
    """Artist backend over the fixed Groupie Trackers dataset.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient``.
    cache_ttl:
        Freshness window for the artists list and relations index.
    timeout:
        Per-call timeout for the two dataset downloads.
    clock:
        Monotonic clock handed to both caches; injectable for tests.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        cache_ttl: float = DEFAULT_TTL_SECONDS,
        timeout: float = 8.0,
        user_agent: str = DEFAULT_USER_AGENT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = http_client
        self._timeout = timeout
        self._user_agent = user_agent
        self._artists_cache: TTLValueCache[list[GroupieArtist]] = TTLValueCache(
            self._fetch_artists, ttl=cache_ttl, name="groupie_artists", clock=clock
        )
        self._relations_cache: TTLValueCache[RelationIndex] = TTLValueCache(
            self._fetch_relations, ttl=cache_ttl, name="groupie_relations", clock=clock
        )

    # ------------------------------------------------------------------
    # Dataset downloads
    # ------------------------------------------------------------------

    async def _fetch_artists(self) -> list[GroupieArtist]:
        data = await fetch_json(
            self._client,
            _ARTISTS_URL,
            provider=self.get_provider_name(),
            timeout=self._timeout,
            user_agent=self._user_agent,
        )
        if not isinstance(data, list):
            raise ProviderUnavailableError(
                message="Artists payload is not a list", provider_name=self.get_provider_name()
            )
        try:
            artists = [GroupieArtist.model_validate(item) for item in data]
        except ValidationError as exc:
            raise ProviderUnavailableError(
                message=f"Unexpected artists payload: {exc.error_count()} invalid fields",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("groupie_artists_fetched", count=len(artists))
        return artists

    async def _fetch_relations(self) -> RelationIndex:
        data = await fetch_json(
            self._client,
            _RELATION_URL,
            provider=self.get_provider_name(),
            timeout=self._timeout,
            user_agent=self._user_agent,
        )
        try:
            index = RelationIndex.model_validate(data)
        except ValidationError as exc:
            raise ProviderUnavailableError(
                message=f"Unexpected relations payload: {exc.error_count()} invalid fields",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("groupie_relations_fetched", count=len(index.index))
        return index

    # ------------------------------------------------------------------
    # Dataset accessors
    # ------------------------------------------------------------------

    async def list_artists(self) -> list[GroupieArtist]:
        """Return the whole (cached) artist list."""
        return await self._artists_cache.get()

    async def get_relations(self) -> RelationIndex:
        """Return the whole (cached) relations index."""
        return await self._relations_cache.get()

    async def get_relation(self, artist_id: str) -> Relation | None:
        """Return the concert relation for one artist, or ``None`` if it has none."""
        numeric_id = _parse_artist_id(artist_id)
        index = await self.get_relations()
        return index.for_artist(numeric_id)

    async def search_with_filter(
        self, query: str, filters: GroupieFilter | None = None, limit: int = 0
    ) -> list[ArtistRecord]:
        """Search by name or member name, then narrow by *filters*.

        An empty query matches every artist.  ``limit <= 0`` means no cap.
        """
        artists = await self.list_artists()
        needle = (query or "").strip().lower()
        filters = filters or GroupieFilter()

        location_ids: set[int] | None = None
        location_needle = filters.location.strip().lower()
        if location_needle:
            index = await self.get_relations()
            location_ids = {
                rel.id
                for rel in index.index
                if any(location_needle in humanize_location_key(key).lower() for key in rel.dates_locations)
            }

        matched: list[ArtistRecord] = []
        for artist in artists:
            if needle and needle not in artist.name.lower() and not any(
                needle in member.lower() for member in artist.members
            ):
                continue
            if filters.year_min and artist.creation_date < filters.year_min:
                continue
            if filters.year_max and artist.creation_date > filters.year_max:
                continue
            if filters.member_counts and len(artist.members) not in filters.member_counts:
                continue
            if location_ids is not None and artist.id not in location_ids:
                continue
            matched.append(self._to_record(artist))

        logger.debug("groupie_search", query=needle, matched=len(matched))
        if limit > 0:
            return matched[:limit]
        return matched

    # ------------------------------------------------------------------
    # IArtistProvider implementation
    # ------------------------------------------------------------------

    async def search_artists(self, query: str, limit: int = 0) -> list[ArtistRecord]:
        return await self.search_with_filter(query, None, limit)

    async def get_artist(self, artist_id: str) -> ArtistRecord:
        numeric_id = _parse_artist_id(artist_id)
        for artist in await self.list_artists():
            if artist.id == numeric_id:
                return self._to_record(artist)
        raise NotFoundError(
            message=f"Artist {numeric_id} not found", provider_name=self.get_provider_name()
        )

    async def get_top_tracks(self, artist_id: str, limit: int = 10) -> list[TrackRecord]:
        # The dataset carries no track data.
        return []

    async def get_latest_releases(self, artist_id: str, limit: int = 10) -> list[ReleaseRecord]:
        return []

    def get_provider_name(self) -> str:
        return ProviderTag.GROUPIE.value

    def is_available(self) -> bool:
        return True

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _to_record(artist: GroupieArtist) -> ArtistRecord:
        return ArtistRecord(
            id=str(artist.id),
            display_name=artist.name,
            image_url=artist.image,
            meta_line=meta_line(artist),
            provider=ProviderTag.GROUPIE,
        )
