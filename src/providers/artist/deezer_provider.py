"""Deezer public API provider implementing IArtistProvider.

Deezer answers most errors with HTTP 200 and an ``{"error": {...}}``
envelope, so every call goes through :meth:`DeezerProvider._get`, which
turns the envelope into the same typed errors :func:`fetch_json` raises
for HTTP statuses.

Latest releases need the most work.  Depending on the artist, Deezer hides
singles and EPs from the unfiltered ``/albums`` listing, and listing
entries often lack ``release_date``.  The provider therefore:

1. lists albums unfiltered (required) and with ``type=single|ep|album``
   (best-effort), merging the passes by id;
2. enriches the first ``clamp(want * 6, 30, 50)`` candidates with
   ``/album/{id}`` (at most 6 in flight) to fill dates and track counts;
3. sorts newest first and truncates to ``want``.
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
from src.utils.concurrency import bounded_map
from src.utils.errors import (
    GroupieTrackerError,
    NotFoundError,
    ProviderUnavailableError,
    RateLimitError,
)
from src.utils.http import DEFAULT_USER_AGENT, fetch_json, is_not_found_message
from src.utils.logging import get_logger
from src.utils.ordering import merge_by_id, sort_newest_first
from src.utils.release_dates import parse_release_date
from src.utils.text_normalizer import format_int_compact

logger: structlog.BoundLogger = get_logger(__name__)

_BASE_URL = "https://api.deezer.com"

# Deezer error codes (https://developers.deezer.com/api/errors).
_ERROR_QUOTA = 4
_ERROR_DATA_NOT_FOUND = 800

_ALBUM_LISTING_SIZE = 50
_RECORD_TYPE_PASSES = ("", "single", "ep", "album")
_MIN_CANDIDATES = 30
_MAX_CANDIDATES = 50
_CANDIDATES_PER_WANTED = 6


def _first_nonempty(item: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = item.get(key)
        if value:
            return str(value)
    return ""


def _picture(item: dict[str, Any]) -> str:
    return _first_nonempty(item, "picture_xl", "picture_big", "picture_medium", "picture")


def _cover(item: dict[str, Any]) -> str:
    return _first_nonempty(item, "cover_xl", "cover_big", "cover_medium", "cover")


def meta_line(nb_fan: int, nb_album: int) -> str:
    if nb_fan > 0:
        return f"{format_int_compact(nb_fan)} fans"
    if nb_album > 0:
        return f"{nb_album} albums"
    return "Deezer artist"


def candidate_count(want: int, available: int) -> int:
    """How many listed albums get a detail lookup for a request of *want*."""
    count = min(max(want * _CANDIDATES_PER_WANTED, _MIN_CANDIDATES), _MAX_CANDIDATES)
    count = max(count, want)
    return min(count, available)


def _parse_positive_id(raw: str, what: str = "artist") -> int:
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise NotFoundError(message=f"Invalid {what} id {raw!r}", provider_name="deezer") from None
    if value <= 0:
        raise NotFoundError(message=f"Invalid {what} id {raw!r}", provider_name="deezer")
    return value


class DeezerProvider(IArtistProvider):
    """Artist search and lookup against the public Deezer API (no auth).

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient``.
    timeout:
        Per-call timeout for every Deezer request.
    album_detail_concurrency:
        Gate for the ``/album/{id}`` enrichment fan-out.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        timeout: float = 8.0,
        album_detail_concurrency: int = 6,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._client = http_client
        self._timeout = timeout
        self._album_detail_concurrency = album_detail_concurrency
        self._user_agent = user_agent

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        data = await fetch_json(
            self._client,
            f"{_BASE_URL}{path}",
            provider=self.get_provider_name(),
            params=params,
            timeout=self._timeout,
            user_agent=self._user_agent,
        )
        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            self._raise_envelope(path, data["error"])
        return data

    def _raise_envelope(self, path: str, error: dict[str, Any]) -> None:
        code = error.get("code")
        message = str(error.get("message") or "unknown error").strip()
        text = f"{path}: deezer error {code}: {message}"
        if code == _ERROR_DATA_NOT_FOUND or is_not_found_message(message):
            raise NotFoundError(message=text, provider_name=self.get_provider_name())
        if code == _ERROR_QUOTA:
            raise RateLimitError(message=text, provider_name=self.get_provider_name())
        raise ProviderUnavailableError(message=text, provider_name=self.get_provider_name())

    # ------------------------------------------------------------------
    # IArtistProvider implementation
    # ------------------------------------------------------------------

    async def search_artists(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[ArtistRecord]:
        limit = clamp_limit(limit, DEFAULT_SEARCH_LIMIT)
        data = await self._get("/search/artist", {"q": effective_query(query), "limit": limit})
        artists = [
            self._to_artist(item)
            for item in (data or {}).get("data") or []
            if isinstance(item, dict) and int(item.get("id") or 0) > 0
        ]
        logger.debug("deezer_artist_search", query=query, result_count=len(artists))
        return artists[:limit]

    async def get_artist(self, artist_id: str) -> ArtistRecord:
        numeric_id = _parse_positive_id(artist_id)
        data = await self._get(f"/artist/{numeric_id}")
        if not isinstance(data, dict) or int(data.get("id") or 0) == 0:
            raise NotFoundError(
                message=f"Artist {numeric_id} not found", provider_name=self.get_provider_name()
            )
        return self._to_artist(data)

    async def get_top_tracks(self, artist_id: str, limit: int = DEFAULT_LIST_LIMIT) -> list[TrackRecord]:
        numeric_id = _parse_positive_id(artist_id)
        limit = clamp_limit(limit, DEFAULT_LIST_LIMIT)
        data = await self._get(f"/artist/{numeric_id}/top", {"limit": limit})
        tracks = [
            self._to_track(item)
            for item in (data or {}).get("data") or []
            if isinstance(item, dict) and int(item.get("id") or 0) > 0
        ]
        # Top-track entries carry no release date; ordering falls to title, then id.
        return sort_newest_first(merge_by_id(tracks), limit)

    async def get_latest_releases(
        self, artist_id: str, limit: int = DEFAULT_LIST_LIMIT
    ) -> list[ReleaseRecord]:
        numeric_id = _parse_positive_id(artist_id)
        want = clamp_limit(limit, DEFAULT_LIST_LIMIT)

        listed = await self._list_albums(numeric_id)
        if not listed:
            return []

        candidates = listed[: candidate_count(want, len(listed))]
        enriched = await bounded_map(
            self._enrich_release,
            candidates,
            limit=self._album_detail_concurrency,
            default=None,
            logger=logger,
            error_event="deezer_album_detail_failed",
        )
        releases = [full or original for full, original in zip(enriched, candidates)]

        logger.debug(
            "deezer_releases",
            artist_id=numeric_id,
            listed=len(listed),
            enriched=len(candidates),
        )
        return sort_newest_first(releases, want)

    def get_provider_name(self) -> str:
        return ProviderTag.DEEZER.value

    def is_available(self) -> bool:
        return True

    # ------------------------------------------------------------------
    # Release helpers
    # ------------------------------------------------------------------

    async def _list_albums(self, artist_id: int) -> list[ReleaseRecord]:
        releases: list[ReleaseRecord] = []
        for record_type in _RECORD_TYPE_PASSES:
            params: dict[str, Any] = {"limit": _ALBUM_LISTING_SIZE}
            if record_type:
                params["type"] = record_type
            try:
                data = await self._get(f"/artist/{artist_id}/albums", params)
            except GroupieTrackerError as exc:
                if not record_type:
                    raise
                logger.debug(
                    "deezer_album_pass_failed", artist_id=artist_id, type=record_type, error=str(exc)
                )
                continue
            releases.extend(
                self._to_release(item)
                for item in (data or {}).get("data") or []
                if isinstance(item, dict) and int(item.get("id") or 0) > 0
            )
        return merge_by_id(releases)

    async def _enrich_release(self, release: ReleaseRecord) -> ReleaseRecord:
        album_id = _parse_positive_id(release.id, "album")
        data = await self._get(f"/album/{album_id}")
        if not isinstance(data, dict) or int(data.get("id") or 0) == 0:
            raise NotFoundError(
                message=f"Album {album_id} not found", provider_name=self.get_provider_name()
            )

        raw_date = str(data.get("release_date") or "")
        released = parse_release_date(raw_date)
        if released is None:
            raw_date, released = release.raw_release_date, release.release_date
        return release.model_copy(
            update={
                "title": release.title or str(data.get("title") or ""),
                "release_date": released,
                "raw_release_date": raw_date,
                "record_type": release.record_type or str(data.get("record_type") or ""),
                "track_count": int(data.get("nb_tracks") or release.track_count),
                "artwork_url": release.artwork_url or _cover(data),
                "external_url": release.external_url or str(data.get("link") or ""),
            }
        )

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _to_artist(item: dict[str, Any]) -> ArtistRecord:
        return ArtistRecord(
            id=str(item["id"]),
            display_name=str(item.get("name") or ""),
            image_url=_picture(item),
            meta_line=meta_line(int(item.get("nb_fan") or 0), int(item.get("nb_album") or 0)),
            provider=ProviderTag.DEEZER,
            external_url=str(item.get("link") or ""),
        )

    @staticmethod
    def _to_track(item: dict[str, Any]) -> TrackRecord:
        album = item.get("album") or {}
        return TrackRecord(
            id=str(item["id"]),
            title=str(item.get("title") or ""),
            artwork_url=_cover(album),
            external_url=str(item.get("link") or ""),
            preview_url=str(item.get("preview") or ""),
            duration_seconds=int(item.get("duration") or 0),
            album_title=str(album.get("title") or ""),
        )

    @staticmethod
    def _to_release(item: dict[str, Any]) -> ReleaseRecord:
        raw_date = str(item.get("release_date") or "")
        return ReleaseRecord(
            id=str(item["id"]),
            title=str(item.get("title") or ""),
            release_date=parse_release_date(raw_date),
            raw_release_date=raw_date,
            artwork_url=_cover(item),
            external_url=str(item.get("link") or ""),
            record_type=str(item.get("record_type") or ""),
            track_count=int(item.get("nb_tracks") or 0),
        )


