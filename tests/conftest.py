"""Shared pytest fixtures for the Groupie Tracker test suite."""

from __future__ import annotations

from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.models.entities import ArtistRecord, ProviderTag


def make_response(payload: Any = None, status_code: int = 200) -> MagicMock:
    """Return a mock ``httpx.Response`` whose ``.json()`` yields *payload*.

    ``payload`` may be an exception instance, in which case ``.json()``
    raises it (malformed-body tests).
    """
    response = MagicMock(spec=httpx.Response)
    response.status_code = status_code
    response.text = "" if isinstance(payload, Exception) else str(payload)
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


class FakeClock:
    """Manually advanced monotonic clock for TTL and token tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def mock_client() -> AsyncMock:
    """An ``httpx.AsyncClient`` stand-in; tests set ``get``/``post`` behaviour."""
    client = AsyncMock(spec=httpx.AsyncClient)
    client.get = AsyncMock()
    client.post = AsyncMock()
    return client


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def artist_factory() -> Callable[..., ArtistRecord]:
    def _make(
        artist_id: str = "1",
        name: str = "Queen",
        provider: ProviderTag = ProviderTag.GROUPIE,
    ) -> ArtistRecord:
        return ArtistRecord(id=artist_id, display_name=name, provider=provider)

    return _make


# ---------------------------------------------------------------------------
# Groupie dataset fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def groupie_artists_payload() -> list[dict[str, Any]]:
    return [
        {
            "id": 1,
            "image": "https://groupietrackers.herokuapp.com/api/images/queen.jpeg",
            "name": "Queen",
            "members": ["Freddie Mercury", "Brian May", "John Deacon", "Roger Taylor"],
            "creationDate": 1970,
            "firstAlbum": "14-12-1973",
        },
        {
            "id": 2,
            "image": "https://groupietrackers.herokuapp.com/api/images/soja.jpeg",
            "name": "SOJA",
            "members": ["Jacob Hemphill", "Bob Jefferson"],
            "creationDate": 1997,
            "firstAlbum": "05-06-2002",
        },
        {
            "id": 3,
            "image": "https://groupietrackers.herokuapp.com/api/images/beyonce.jpeg",
            "name": "Beyoncé",
            "members": ["Beyoncé Knowles"],
            "creationDate": 2003,
            "firstAlbum": "24-06-2003",
        },
    ]


@pytest.fixture
def groupie_relations_payload() -> dict[str, Any]:
    return {
        "index": [
            {
                "id": 1,
                "datesLocations": {
                    "north_carolina-usa": ["26-08-2019"],
                    "london-uk": ["01-09-2019", "02-09-2019"],
                },
            },
            {
                "id": 2,
                "datesLocations": {"paris-france": ["10-10-2020"]},
            },
            {
                "id": 3,
                "datesLocations": {"los_angeles-usa": ["05-05-2021"]},
            },
        ]
    }


@pytest.fixture
def groupie_client(
    mock_client: AsyncMock,
    groupie_artists_payload: list[dict[str, Any]],
    groupie_relations_payload: dict[str, Any],
) -> AsyncMock:
    """A client that serves the two Groupie dataset documents by URL."""

    async def _get(url: str, **kwargs: Any) -> MagicMock:
        if url.endswith("/artists"):
            return make_response(groupie_artists_payload)
        if url.endswith("/relation"):
            return make_response(groupie_relations_payload)
        return make_response({}, status_code=404)

    mock_client.get.side_effect = _get
    return mock_client
