"""Unit tests for the Deezer artist provider."""

from __future__ import annotations

from datetime import date
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.models.entities import ProviderTag
from src.providers.artist.deezer_provider import DeezerProvider, candidate_count, meta_line
from src.utils.errors import NotFoundError, ProviderUnavailableError, RateLimitError
from tests.conftest import make_response


@pytest.fixture()
def provider(mock_client: AsyncMock) -> DeezerProvider:
    return DeezerProvider(http_client=mock_client, album_detail_concurrency=2)


def _route(routes: dict[str, Any]):
    """Build a ``client.get`` side effect that answers by path (and ``type`` param)."""

    async def _get(url: str, **kwargs: Any) -> MagicMock:
        path = url.removeprefix("https://api.deezer.com")
        record_type = (kwargs.get("params") or {}).get("type")
        key = f"{path}?type={record_type}" if record_type else path
        value = routes.get(key, routes.get(path))
        if isinstance(value, Exception):
            raise value
        if value is None:
            return make_response({"error": {"type": "DataException", "message": "no data", "code": 800}})
        return make_response(value)

    return _get


class TestDeezerSearch:
    @pytest.mark.asyncio
    async def test_empty_query_sends_default(self, provider: DeezerProvider, mock_client: AsyncMock) -> None:
        mock_client.get.return_value = make_response({"data": []})
        await provider.search_artists("")
        params = mock_client.get.call_args.kwargs["params"]
        assert params == {"q": "a", "limit": 30}

    @pytest.mark.asyncio
    async def test_search_maps_picture_and_meta(self, provider: DeezerProvider, mock_client: AsyncMock) -> None:
        mock_client.get.return_value = make_response(
            {
                "data": [
                    {
                        "id": 27,
                        "name": "Daft Punk",
                        "picture_medium": "https://e-cdns/medium.jpg",
                        "picture_xl": "https://e-cdns/xl.jpg",
                        "nb_fan": 4_200_000,
                        "nb_album": 30,
                        "link": "https://www.deezer.com/artist/27",
                    },
                    {"id": 0, "name": "bogus"},
                ]
            }
        )

        artists = await provider.search_artists("daft")

        assert len(artists) == 1
        assert artists[0].id == "27"
        assert artists[0].image_url == "https://e-cdns/xl.jpg"
        assert artists[0].meta_line == "4.2m fans"
        assert artists[0].provider is ProviderTag.DEEZER


class TestDeezerErrors:
    @pytest.mark.asyncio
    async def test_http_404_is_not_found(self, provider: DeezerProvider, mock_client: AsyncMock) -> None:
        mock_client.get.return_value = make_response({}, status_code=404)
        with pytest.raises(NotFoundError):
            await provider.get_artist("27")

    @pytest.mark.asyncio
    async def test_envelope_800_is_not_found(self, provider: DeezerProvider, mock_client: AsyncMock) -> None:
        mock_client.get.return_value = make_response(
            {"error": {"type": "DataException", "message": "no data", "code": 800}}
        )
        with pytest.raises(NotFoundError):
            await provider.get_artist("999999999")

    @pytest.mark.asyncio
    async def test_envelope_quota_is_rate_limit(self, provider: DeezerProvider, mock_client: AsyncMock) -> None:
        mock_client.get.return_value = make_response(
            {"error": {"type": "Exception", "message": "Quota limit exceeded", "code": 4}}
        )
        with pytest.raises(RateLimitError):
            await provider.get_artist("27")

    @pytest.mark.asyncio
    async def test_timeout_is_distinct_from_not_found(
        self, provider: DeezerProvider, mock_client: AsyncMock
    ) -> None:
        mock_client.get.side_effect = httpx.TimeoutException("slow")
        with pytest.raises(ProviderUnavailableError) as exc_info:
            await provider.get_artist("27")
        assert not isinstance(exc_info.value, NotFoundError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["0", "-3", "abc", ""])
    async def test_invalid_id_is_not_found_without_network(
        self, provider: DeezerProvider, mock_client: AsyncMock, bad_id: str
    ) -> None:
        with pytest.raises(NotFoundError):
            await provider.get_artist(bad_id)
        mock_client.get.assert_not_called()


class TestDeezerTopTracks:
    @pytest.mark.asyncio
    async def test_undated_tracks_sort_by_title_then_id(
        self, provider: DeezerProvider, mock_client: AsyncMock
    ) -> None:
        mock_client.get.return_value = make_response(
            {
                "data": [
                    {"id": 3, "title": "Harder", "album": {"title": "Discovery"}},
                    {"id": 2, "title": "around the World", "duration": 429},
                    {"id": 1, "title": "Harder"},
                ]
            }
        )

        tracks = await provider.get_top_tracks("27", limit=10)

        assert [(t.title, t.id) for t in tracks] == [
            ("around the World", "2"),
            ("Harder", "1"),
            ("Harder", "3"),
        ]
        assert mock_client.get.call_args.kwargs["params"] == {"limit": 10}


class TestDeezerReleases:
    @pytest.mark.asyncio
    async def test_passes_are_merged_and_enriched(
        self, provider: DeezerProvider, mock_client: AsyncMock
    ) -> None:
        mock_client.get.side_effect = _route(
            {
                "/artist/27/albums": {
                    "data": [
                        {"id": 10, "title": "Homework", "release_date": "1997-01-20"},
                        {"id": 11, "title": "Discovery", "release_date": "0000-00-00"},
                    ]
                },
                "/artist/27/albums?type=single": {
                    "data": [{"id": 12, "title": "One More Time", "release_date": "2000-11-13"}]
                },
                "/artist/27/albums?type=ep": ProviderUnavailableError("ep pass down"),
                "/artist/27/albums?type=album": {
                    "data": [{"id": 11, "title": "Discovery", "release_date": "2001-03-12"}]
                },
                "/album/10": {"id": 10, "release_date": "0000-00-00", "nb_tracks": 16},
                "/album/11": {"id": 11, "release_date": "2001-03-07", "nb_tracks": 14},
                "/album/12": ProviderUnavailableError("album detail down"),
            }
        )

        releases = await provider.get_latest_releases("27", limit=10)

        assert [r.id for r in releases] == ["11", "12", "10"]
        discovery, single, homework = releases
        assert discovery.release_date == date(2001, 3, 7)
        assert discovery.track_count == 14
        # A failed detail lookup keeps the listing's data.
        assert single.release_date == date(2000, 11, 13)
        # An unknown detail date does not erase the listed one.
        assert homework.release_date == date(1997, 1, 20)
        assert homework.track_count == 16

    @pytest.mark.asyncio
    async def test_unfiltered_listing_failure_propagates(
        self, provider: DeezerProvider, mock_client: AsyncMock
    ) -> None:
        mock_client.get.side_effect = _route({"/artist/27/albums": ProviderUnavailableError("down")})
        with pytest.raises(ProviderUnavailableError):
            await provider.get_latest_releases("27")

    @pytest.mark.asyncio
    async def test_no_albums(self, provider: DeezerProvider, mock_client: AsyncMock) -> None:
        mock_client.get.side_effect = _route(
            {
                "/artist/27/albums": {"data": []},
                "/artist/27/albums?type=single": {"data": []},
                "/artist/27/albums?type=ep": {"data": []},
                "/artist/27/albums?type=album": {"data": []},
            }
        )
        assert await provider.get_latest_releases("27") == []


class TestDeezerHelpers:
    @pytest.mark.parametrize(
        ("want", "available", "expected"),
        [(10, 100, 50), (1, 100, 30), (10, 12, 12), (5, 40, 30)],
    )
    def test_candidate_count(self, want: int, available: int, expected: int) -> None:
        assert candidate_count(want, available) == expected

    def test_meta_line(self) -> None:
        assert meta_line(0, 7) == "7 albums"
        assert meta_line(0, 0) == "Deezer artist"
