"""Spotify Web API provider implementing IArtistProvider.

Every call carries a bearer token from :class:`SpotifyTokenManager`.  A
401 answer means the cached token was revoked early; the provider drops it
and retries the call once with a fresh one.
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
from src.models.entities import ArtistRecord, ProviderTag, ReleaseRecord, TrackRecord
from src.providers.artist.spotify_auth import SpotifyTokenManager
from src.utils.errors import NotFoundError, ProviderUnavailableError
from src.utils.http import DEFAULT_USER_AGENT, fetch_json
from src.utils.logging import get_logger
from src.utils.ordering import merge_by_id, sort_newest_first
from src.utils.release_dates import parse_release_date
from src.utils.text_normalizer import format_int_compact

logger: structlog.BoundLogger = get_logger(__name__)

_API_BASE = "https://api.spotify.com/v1"
_SEARCH_URL = f"{_API_BASE}/search"
_ARTISTS_URL = f"{_API_BASE}/artists"

_ALBUM_PAGE_SIZE = 50
_MAX_ALBUM_PAGES = 3


def _first_image(images: Any) -> str:
    # Spotify lists images largest first.
    if isinstance(images, list) and images and isinstance(images[0], dict):
        return str(images[0].get("url") or "")
    return ""


def meta_line(followers: int, genres: list[str]) -> str:
    if followers > 0:
        return f"{format_int_compact(followers)} followers"
    if genres:
        return genres[0]
    return "Spotify artist"


class SpotifyProvider(IArtistProvider):
    """Artist search and lookup against the Spotify Web API.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient``.
    token_manager:
        Process-wide token manager (owned by the composition root).
    market:
        ISO country code for top tracks and album availability.
    search_timeout, lookup_timeout:
        Per-call timeouts for listing and single-record calls.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token_manager: SpotifyTokenManager,
        market: str = "FR",
        search_timeout: float = 8.0,
        lookup_timeout: float = 5.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._client = http_client
        self._tokens = token_manager
        self._market = market
        self._search_timeout = search_timeout
        self._lookup_timeout = lookup_timeout
        self._user_agent = user_agent

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _api_get(
        self, url: str, params: dict[str, Any] | None = None, timeout: float | None = None
    ) -> Any:
        timeout = timeout or self._lookup_timeout
        try:
            return await self._authorized_get(url, params, timeout)
        except ProviderUnavailableError as exc:
            if exc.status_code != 401:
                raise
            logger.info("spotify_token_rejected_retrying", url=url)
            self._tokens.invalidate()
            return await self._authorized_get(url, params, timeout)

    async def _authorized_get(self, url: str, params: dict[str, Any] | None, timeout: float) -> Any:
        token = await self._tokens.get_token()
        return await fetch_json(
            self._client,
            url,
            provider=self.get_provider_name(),
            params=params,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            user_agent=self._user_agent,
        )

    @staticmethod
    def _require_id(artist_id: str) -> str:
        value = (artist_id or "").strip()
        if not value:
            raise NotFoundError(message="Empty artist id", provider_name="spotify")
        return value

    # ------------------------------------------------------------------
    # IArtistProvider implementation
    # ------------------------------------------------------------------

    async def search_artists(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[ArtistRecord]:
        limit = clamp_limit(limit, DEFAULT_SEARCH_LIMIT)
        data = await self._api_get(
            _SEARCH_URL,
            params={"q": effective_query(query), "type": "artist", "limit": limit},
            timeout=self._search_timeout,
        )
        items = ((data or {}).get("artists") or {}).get("items") or []
        artists = [self._to_artist(item) for item in items if isinstance(item, dict) and item.get("id")]
        logger.debug("spotify_artist_search", query=query, result_count=len(artists))
        return artists

    async def get_artist(self, artist_id: str) -> ArtistRecord:
        artist_id = self._require_id(artist_id)
        data = await self._api_get(f"{_ARTISTS_URL}/{artist_id}")
        if not isinstance(data, dict) or not data.get("id"):
            raise NotFoundError(
                message=f"Artist {artist_id} not found", provider_name=self.get_provider_name()
            )
        return self._to_artist(data)

    async def get_top_tracks(self, artist_id: str, limit: int = DEFAULT_LIST_LIMIT) -> list[TrackRecord]:
        artist_id = self._require_id(artist_id)
        limit = clamp_limit(limit, DEFAULT_LIST_LIMIT)
        data = await self._api_get(
            f"{_ARTISTS_URL}/{artist_id}/top-tracks", params={"market": self._market}
        )
        tracks = [
            self._to_track(item)
            for item in (data or {}).get("tracks") or []
            if isinstance(item, dict) and item.get("id")
        ]
        return sort_newest_first(merge_by_id(tracks), limit)

    async def get_latest_releases(
        self, artist_id: str, limit: int = DEFAULT_LIST_LIMIT
    ) -> list[ReleaseRecord]:
        artist_id = self._require_id(artist_id)
        limit = clamp_limit(limit, DEFAULT_LIST_LIMIT)

        releases: list[ReleaseRecord] = []
        url: str | None = f"{_ARTISTS_URL}/{artist_id}/albums"
        params: dict[str, Any] | None = {
            "include_groups": "album,single",
            "market": self._market,
            "limit": _ALBUM_PAGE_SIZE,
        }
        for _ in range(_MAX_ALBUM_PAGES):
            if not url:
                break
            data = await self._api_get(url, params=params, timeout=self._search_timeout)
            releases.extend(
                self._to_release(item)
                for item in (data or {}).get("items") or []
                if isinstance(item, dict) and item.get("id")
            )
            # "next" is an absolute URL with the paging params already set.
            url = (data or {}).get("next")
            params = None

        merged = merge_by_id(releases)
        logger.debug("spotify_releases", artist_id=artist_id, fetched=len(releases), unique=len(merged))
        return sort_newest_first(merged, limit)

    def get_provider_name(self) -> str:
        return ProviderTag.SPOTIFY.value

    def is_available(self) -> bool:
        return self._tokens.is_configured

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _to_artist(item: dict[str, Any]) -> ArtistRecord:
        genres = [str(g) for g in item.get("genres") or []]
        followers = int(((item.get("followers") or {}).get("total")) or 0)
        return ArtistRecord(
            id=str(item["id"]),
            display_name=str(item.get("name") or ""),
            image_url=_first_image(item.get("images")),
            meta_line=meta_line(followers, genres),
            provider=ProviderTag.SPOTIFY,
            external_url=str((item.get("external_urls") or {}).get("spotify") or ""),
            genres=genres,
        )

    @staticmethod
    def _to_track(item: dict[str, Any]) -> TrackRecord:
        album = item.get("album") or {}
        raw_date = str(album.get("release_date") or "")
        return TrackRecord(
            id=str(item["id"]),
            title=str(item.get("name") or ""),
            release_date=parse_release_date(raw_date),
            raw_release_date=raw_date,
            artwork_url=_first_image(album.get("images")),
            external_url=str((item.get("external_urls") or {}).get("spotify") or ""),
            preview_url=str(item.get("preview_url") or ""),
            duration_seconds=int(item.get("duration_ms") or 0) // 1000,
            album_title=str(album.get("name") or ""),
        )

    @staticmethod
    def _to_release(item: dict[str, Any]) -> ReleaseRecord:
        raw_date = str(item.get("release_date") or "")
        return ReleaseRecord(
            id=str(item["id"]),
            title=str(item.get("name") or ""),
            release_date=parse_release_date(raw_date),
            raw_release_date=raw_date,
            artwork_url=_first_image(item.get("images")),
            external_url=str((item.get("external_urls") or {}).get("spotify") or ""),
            record_type=str(item.get("album_type") or ""),
            track_count=int(item.get("total_tracks") or 0),
        )
