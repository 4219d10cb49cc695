"""Artist catalog and detail-page services.

:class:`ArtistCatalogService` dispatches calls to the provider selected by a
:class:`ProviderTag` and layers Last.fm listener counts over search results.
:class:`ArtistDetailService` assembles a whole detail page concurrently,
where only the primary artist lookup is allowed to fail the request.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from src.interfaces.artist_provider import DEFAULT_LIST_LIMIT, IArtistProvider
from src.interfaces.enrichment_provider import IListenerCountProvider, ISummaryProvider
from src.models.detail import ArtistDetail, ArtistSummary, ListenedArtist
from src.models.entities import ArtistRecord, ProviderTag, ReleaseRecord, TrackRecord
from src.models.geo import MapLocation
from src.models.groupie import GroupieFilter
from src.providers.artist.groupie_provider import GroupieProvider
from src.services.geocoding_service import ConcertMapService
from src.utils.concurrency import bounded_map
from src.utils.errors import ConfigurationError, GroupieTrackerError
from src.utils.logging import get_logger
from src.utils.ordering import id_sort_key

SORT_RELEVANCE = "relevance"
SORT_LISTENERS = "listeners"

DEFAULT_LISTENER_CONCURRENCY = 8


def sort_by_listeners(items: list[ListenedArtist]) -> list[ListenedArtist]:
    """Order by listeners descending, then name, then id.

    When no item has a known count the input (relevance) order is kept.
    """
    if not any(item.listeners > 0 for item in items):
        return list(items)
    return sorted(
        items,
        key=lambda item: (
            -item.listeners,
            item.artist.display_name.lower(),
            id_sort_key(item.artist.id),
        ),
    )


class ArtistCatalogService:
    """Provider dispatch plus listener-count enrichment.

    Parameters
    ----------
    providers:
        One :class:`IArtistProvider` per supported tag.
    listeners:
        Listener-count source; ``None`` disables enrichment (every count 0).
    listener_concurrency:
        Gate for the per-artist listener fan-out on search.
    """

    def __init__(
        self,
        providers: dict[ProviderTag, IArtistProvider],
        listeners: IListenerCountProvider | None = None,
        listener_concurrency: int = DEFAULT_LISTENER_CONCURRENCY,
    ) -> None:
        self._providers = dict(providers)
        self._listeners = listeners
        self._listener_concurrency = listener_concurrency
        self._logger: structlog.BoundLogger = get_logger(__name__)

    def provider(self, tag: ProviderTag) -> IArtistProvider:
        """Return the provider for *tag*.

        Raises
        ------
        ConfigurationError
            When no provider is registered for *tag* or it lacks credentials.
        """
        provider = self._providers.get(tag)
        if provider is None:
            raise ConfigurationError(message=f"No provider registered for {tag.value!r}")
        if not provider.is_available():
            raise ConfigurationError(
                message=f"Provider {tag.value!r} is not configured",
                provider_name=provider.get_provider_name(),
            )
        return provider

    def available_providers(self) -> list[str]:
        return [tag.value for tag, p in self._providers.items() if p.is_available()]

    # -- Public API -----------------------------------------------------------

    async def search_artists(
        self,
        tag: ProviderTag,
        query: str,
        limit: int | None = None,
        filters: GroupieFilter | None = None,
    ) -> list[ArtistRecord]:
        """Search the provider for *tag*.

        *filters* (creation year, member count, concert location) only exist
        in the Groupie dataset; for any other provider they are ignored.
        """
        provider = self.provider(tag)
        if filters is not None and not filters.is_empty():
            if isinstance(provider, GroupieProvider):
                return await provider.search_with_filter(query, filters, limit or 0)
            self._logger.debug("search_filters_ignored", provider=tag.value)
        if limit is None:
            return await provider.search_artists(query)
        return await provider.search_artists(query, limit)

    async def get_artist(self, tag: ProviderTag, artist_id: str) -> ArtistRecord:
        return await self.provider(tag).get_artist(artist_id)

    async def get_top_tracks(
        self, tag: ProviderTag, artist_id: str, limit: int = DEFAULT_LIST_LIMIT
    ) -> list[TrackRecord]:
        return await self.provider(tag).get_top_tracks(artist_id, limit)

    async def get_latest_releases(
        self, tag: ProviderTag, artist_id: str, limit: int = DEFAULT_LIST_LIMIT
    ) -> list[ReleaseRecord]:
        return await self.provider(tag).get_latest_releases(artist_id, limit)

    async def get_listener_count(self, artist_name: str) -> int:
        """Return the Last.fm listener count, or 0 when unknown for any reason."""
        if self._listeners is None or not self._listeners.is_available():
            return 0
        try:
            return await self._listeners.get_listener_count(artist_name)
        except GroupieTrackerError as exc:
            self._logger.debug("listener_count_unavailable", artist=artist_name, error=str(exc))
            return 0

    async def search_with_listeners(
        self,
        tag: ProviderTag,
        query: str,
        limit: int | None = None,
        sort: str = SORT_RELEVANCE,
        filters: GroupieFilter | None = None,
    ) -> list[ListenedArtist]:
        """Search, attach listener counts, and apply the requested ordering."""
        artists = await self.search_artists(tag, query, limit, filters)
        counts = await bounded_map(
            self.get_listener_count,
            [artist.display_name for artist in artists],
            limit=self._listener_concurrency,
            default=0,
            logger=self._logger,
            error_event="listener_count_failed",
        )
        items = [ListenedArtist(artist=a, listeners=c) for a, c in zip(artists, counts)]
        if sort == SORT_LISTENERS:
            items = sort_by_listeners(items)

        self._logger.info(
            "artist_search",
            provider=tag.value,
            query=query,
            sort=sort,
            result_count=len(items),
        )
        return items


class ArtistDetailService:
    """Concurrent assembly of an :class:`ArtistDetail`.

    The primary ``get_artist`` call propagates its error.  Top tracks,
    releases, the Wikipedia summary, the listener count and (for Groupie
    artists) the concert map are fetched together once the artist is known,
    and each one falls back to its empty value on failure.
    """

    def __init__(
        self,
        catalog: ArtistCatalogService,
        summaries: ISummaryProvider | None = None,
        groupie: GroupieProvider | None = None,
        concert_map: ConcertMapService | None = None,
        track_limit: int = DEFAULT_LIST_LIMIT,
        release_limit: int = DEFAULT_LIST_LIMIT,
    ) -> None:
        self._catalog = catalog
        self._summaries = summaries
        self._groupie = groupie
        self._concert_map = concert_map
        self._track_limit = track_limit
        self._release_limit = release_limit
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def get_artist_detail(self, tag: ProviderTag, artist_id: str) -> ArtistDetail:
        artist = await self._catalog.get_artist(tag, artist_id)

        results = await asyncio.gather(
            self._catalog.get_top_tracks(tag, artist_id, self._track_limit),
            self._catalog.get_latest_releases(tag, artist_id, self._release_limit),
            self._summary(artist.display_name),
            self._catalog.get_listener_count(artist.display_name),
            self._locations(tag, artist_id),
            return_exceptions=True,
        )
        tracks, releases, summary, listeners, locations = (
            self._or_default(name, value, default)
            for name, value, default in zip(
                ("top_tracks", "releases", "summary", "listeners", "locations"),
                results,
                ([], [], None, 0, []),
            )
        )

        self._logger.info(
            "artist_detail_built",
            provider=tag.value,
            artist_id=artist_id,
            tracks=len(tracks),
            releases=len(releases),
            has_summary=summary is not None,
            locations=len(locations),
        )
        return ArtistDetail(
            artist=artist,
            top_tracks=tracks,
            releases=releases,
            summary=summary,
            listeners=listeners,
            locations=locations,
        )

    # -- Internal helpers -----------------------------------------------------

    def _or_default(self, part: str, value: Any, default: Any) -> Any:
        if isinstance(value, asyncio.CancelledError):
            raise value
        if isinstance(value, BaseException):
            self._logger.warning("artist_detail_part_failed", part=part, error=str(value))
            return default
        return value

    async def _summary(self, title: str) -> ArtistSummary | None:
        if self._summaries is None:
            return None
        return await self._summaries.get_summary(title)

    async def _locations(self, tag: ProviderTag, artist_id: str) -> list[MapLocation]:
        if tag is not ProviderTag.GROUPIE or self._groupie is None or self._concert_map is None:
            return []
        relation = await self._groupie.get_relation(artist_id)
        if relation is None:
            return []
        return await self._concert_map.build_locations(relation.dates_locations)
