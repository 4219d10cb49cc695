"""Apple Music / iTunes Search API provider implementing IArtistProvider.

The iTunes artist entity has no picture, so search results borrow the
artwork of each artist's most recent album: one ``/lookup`` call per
artist, at most six in flight, remembered for 30 minutes in a
:class:`MemoryCacheProvider` (including "no artwork", stored as ``""``).
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from src.interfaces.artist_provider import (
    DEFAULT_LIST_LIMIT,
    DEFAULT_SEARCH_LIMIT,
    IArtistProvider,
    clamp_limit,
    effective_query,
)
from src.interfaces.cache_provider import ICacheProvider
from src.models.entities import ArtistRecord, ProviderTag, ReleaseRecord, TrackRecord
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.utils.concurrency import bounded_map
from src.utils.errors import GroupieTrackerError, NotFoundError
from src.utils.http import DEFAULT_USER_AGENT, fetch_json
from src.utils.logging import get_logger
from src.utils.ordering import merge_by_id, sort_newest_first
from src.utils.release_dates import parse_release_date

logger: structlog.BoundLogger = get_logger(__name__)

_BASE_URL = "https://itunes.apple.com"
_SEARCH_URL = f"{_BASE_URL}/search"
_LOOKUP_URL = f"{_BASE_URL}/lookup"

DEFAULT_ARTWORK_SIZE = 300


def normalize_artwork_url(url: str) -> str:
    """Trim *url* and upgrade ``http://`` to ``https://``."""
    url = (url or "").strip()
    if url.startswith("http://"):
        return "https://" + url[len("http://"):]
    return url


def upscale_artwork(url: str, size: int = DEFAULT_ARTWORK_SIZE) -> str:
    """Rewrite the size-encoded tail (``100x100bb.jpg``) to ``{size}x{size}bb.jpg``.

    URLs without that tail are returned unchanged.
    """
    url = (url or "").strip()
    if not url or size <= 0:
        return ""
    head, _, last = url.rpartition("/")
    x_pos = last.find("x")
    bb_pos = last.find("bb.")
    if x_pos > 0 and bb_pos > x_pos:
        ext = last[bb_pos + 3:]
        if ext:
            tail = f"{size}x{size}bb.{ext}"
            return f"{head}/{tail}" if head else tail
    return url


def meta_line(primary_genre: str) -> str:
    return primary_genre.strip() or "Apple artist"


def _parse_positive_id(raw: str) -> int:
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise NotFoundError(message=f"Invalid artist id {raw!r}", provider_name="apple") from None
    if value <= 0:
        raise NotFoundError(message=f"Invalid artist id {raw!r}", provider_name="apple")
    return value


class ITunesProvider(IArtistProvider):
    """Artist search and lookup against the public iTunes Search API.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient``.
    country:
        Storefront used for every call; a fixed market keeps results stable.
    artwork_cache:
        Keyed cache for per-artist artwork URLs.  A 30-minute
        :class:`MemoryCacheProvider` is created when omitted.
    artwork_concurrency:
        Gate for the per-artist artwork fan-out on search.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        country: str = "FR",
        artwork_cache: ICacheProvider | None = None,
        artwork_concurrency: int = 6,
        artwork_size: int = DEFAULT_ARTWORK_SIZE,
        search_timeout: float = 8.0,
        lookup_timeout: float = 5.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._client = http_client
        self._country = country
        if artwork_cache is None:
            artwork_cache = MemoryCacheProvider(max_size=2000, ttl=1800, name="itunes_artwork")
        self._artwork_cache = artwork_cache
        self._artwork_concurrency = artwork_concurrency
        self._artwork_size = artwork_size
        self._search_timeout = search_timeout
        self._lookup_timeout = lookup_timeout
        self._user_agent = user_agent

    async def _get(self, url: str, params: dict[str, Any], timeout: float) -> list[dict[str, Any]]:
        data = await fetch_json(
            self._client,
            url,
            provider=self.get_provider_name(),
            params=params,
            timeout=timeout,
            user_agent=self._user_agent,
        )
        results = (data or {}).get("results") if isinstance(data, dict) else None
        return [item for item in results or [] if isinstance(item, dict)]

    # ------------------------------------------------------------------
    # IArtistProvider implementation
    # ------------------------------------------------------------------

    async def search_artists(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[ArtistRecord]:
        """Search artists and attach best-effort artwork to each result."""
        limit = clamp_limit(limit, DEFAULT_SEARCH_LIMIT)
        items = await self._get(
            _SEARCH_URL,
            {
                "term": effective_query(query),
                "media": "music",
                "entity": "musicArtist",
                "limit": limit,
                "country": self._country,
                "lang": "en_us",
            },
            timeout=self._search_timeout,
        )
        hits = [
            item
            for item in items
            if int(item.get("artistId") or 0) > 0 and str(item.get("artistName") or "").strip()
        ][:limit]

        artwork = await bounded_map(
            self.get_artist_artwork,
            [str(item["artistId"]) for item in hits],
            limit=self._artwork_concurrency,
            default="",
            logger=logger,
            error_event="itunes_artwork_failed",
        )
        artists = [self._to_artist(item, art) for item, art in zip(hits, artwork)]
        logger.debug("itunes_artist_search", query=query, result_count=len(artists))
        return artists

    async def get_artist(self, artist_id: str) -> ArtistRecord:
        numeric_id = _parse_positive_id(artist_id)
        items = await self._get(_LOOKUP_URL, {"id": numeric_id}, timeout=self._lookup_timeout)
        for item in items:
            if int(item.get("artistId") or 0) == numeric_id and item.get("artistName"):
                try:
                    art = await self.get_artist_artwork(str(numeric_id))
                except GroupieTrackerError as exc:
                    logger.debug("itunes_artwork_failed", artist_id=numeric_id, error=str(exc))
                    art = ""
                return self._to_artist(item, art)
        raise NotFoundError(
            message=f"Artist {numeric_id} not found", provider_name=self.get_provider_name()
        )

    async def get_top_tracks(self, artist_id: str, limit: int = DEFAULT_LIST_LIMIT) -> list[TrackRecord]:
        numeric_id = _parse_positive_id(artist_id)
        limit = clamp_limit(limit, DEFAULT_LIST_LIMIT)
        items = await self._get(
            _LOOKUP_URL,
            {"id": numeric_id, "entity": "song", "limit": limit, "sort": "recent", "country": self._country},
            timeout=self._search_timeout,
        )
        tracks = [
            self._to_track(item)
            for item in items
            if item.get("wrapperType") == "track"
            and item.get("kind") == "song"
            and int(item.get("trackId") or 0) > 0
            and str(item.get("trackName") or "").strip()
        ]
        return sort_newest_first(merge_by_id(tracks), limit)

    async def get_latest_releases(
        self, artist_id: str, limit: int = DEFAULT_LIST_LIMIT
    ) -> list[ReleaseRecord]:
        numeric_id = _parse_positive_id(artist_id)
        limit = clamp_limit(limit, DEFAULT_LIST_LIMIT)
        items = await self._get(
            _LOOKUP_URL,
            {"id": numeric_id, "entity": "album", "limit": limit, "sort": "recent", "country": self._country},
            timeout=self._search_timeout,
        )
        releases = [
            self._to_release(item)
            for item in items
            if item.get("wrapperType") == "collection"
            and str(item.get("collectionType") or "").strip().lower() in ("album", "")
            and int(item.get("collectionId") or 0) > 0
            and str(item.get("collectionName") or "").strip()
        ]
        return sort_newest_first(merge_by_id(releases), limit)

    def get_provider_name(self) -> str:
        return ProviderTag.APPLE.value

    def is_available(self) -> bool:
        return True

    # ------------------------------------------------------------------
    # Artwork
    # ------------------------------------------------------------------

    async def get_artist_artwork(self, artist_id: str) -> str:
        """Return an upscaled artwork URL from the artist's latest album, or ``""``."""
        cache_key = f"{artist_id}:{self._artwork_size}"
        cached = await self._artwork_cache.get(cache_key)
        if cached is not None:
            return cached

        numeric_id = _parse_positive_id(artist_id)
        items = await self._get(
            _LOOKUP_URL,
            {"id": numeric_id, "entity": "album", "limit": 1, "sort": "recent", "country": self._country},
            timeout=self._lookup_timeout,
        )
        art = ""
        for item in items:
            if item.get("wrapperType") == "collection" and item.get("artworkUrl100"):
                art = upscale_artwork(normalize_artwork_url(item["artworkUrl100"]), self._artwork_size)
                break

        await self._artwork_cache.set(cache_key, art)
        return art

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _to_artist(item: dict[str, Any], artwork: str) -> ArtistRecord:
        genre = str(item.get("primaryGenreName") or "")
        return ArtistRecord(
            id=str(item["artistId"]),
            display_name=str(item.get("artistName") or "").strip(),
            image_url=artwork,
            meta_line=meta_line(genre),
            provider=ProviderTag.APPLE,
            external_url=str(item.get("artistLinkUrl") or ""),
            genres=[genre] if genre else [],
        )

    def _to_track(self, item: dict[str, Any]) -> TrackRecord:
        raw_date = str(item.get("releaseDate") or "")
        return TrackRecord(
            id=str(item["trackId"]),
            title=str(item.get("trackName") or "").strip(),
            release_date=parse_release_date(raw_date),
            raw_release_date=raw_date,
            artwork_url=upscale_artwork(normalize_artwork_url(str(item.get("artworkUrl100") or "")), self._artwork_size),
            external_url=str(item.get("trackViewUrl") or ""),
            preview_url=str(item.get("previewUrl") or ""),
            duration_seconds=int(item.get("trackTimeMillis") or 0) // 1000,
            album_title=str(item.get("collectionName") or ""),
        )

    def _to_release(self, item: dict[str, Any]) -> ReleaseRecord:
        raw_date = str(item.get("releaseDate") or "")
        return ReleaseRecord(
            id=str(item["collectionId"]),
            title=str(item.get("collectionName") or "").strip(),
            release_date=parse_release_date(raw_date),
            raw_release_date=raw_date,
            artwork_url=upscale_artwork(normalize_artwork_url(str(item.get("artworkUrl100") or "")), self._artwork_size),
            external_url=str(item.get("collectionViewUrl") or ""),
            record_type=str(item.get("collectionType") or "").lower(),
            track_count=int(item.get("trackCount") or 0),
        )
