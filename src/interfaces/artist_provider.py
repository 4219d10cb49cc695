"""Abstract base class for artist backends.

Groupie, Spotify, Deezer and Apple/iTunes all implement this contract so
the services layer can dispatch on :class:`~src.models.entities.ProviderTag`
without knowing any upstream's JSON shape.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.entities import ArtistRecord, ReleaseRecord, TrackRecord

# Some upstreams reject empty search terms; a single common letter returns a
# broad result set instead.
DEFAULT_QUERY = "a"

DEFAULT_SEARCH_LIMIT = 30
DEFAULT_LIST_LIMIT = 10
MAX_LIMIT = 50


def effective_query(query: str | None) -> str:
    """Return *query* stripped, or :data:`DEFAULT_QUERY` when it is blank."""
    text = (query or "").strip()
    return text or DEFAULT_QUERY


def clamp_limit(limit: int | None, default: int) -> int:
    """Return *limit* when it is within ``1..MAX_LIMIT``, else *default*."""
    if limit is None or limit <= 0 or limit > MAX_LIMIT:
        return default
    return limit


class IArtistProvider(ABC):
    """Contract for an artist search and lookup backend."""

    @abstractmethod
    async def search_artists(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[ArtistRecord]:
        """Search for artists matching *query*.

        Parameters
        ----------
        query:
            Free-text search.  Blank input is replaced by
            :data:`DEFAULT_QUERY` for live upstreams.
        limit:
            Maximum number of results (1-50).

        Returns
        -------
        list[ArtistRecord]
            Results in the upstream's own relevance order.

        Raises
        ------
        src.utils.errors.ProviderUnavailableError
            If the upstream cannot be reached or answers garbage.
        src.utils.errors.ConfigurationError
            If the provider needs credentials that are not configured.
        """

    @abstractmethod
    async def get_artist(self, artist_id: str) -> ArtistRecord:
        """Fetch one artist by its provider-specific id.

        Raises
        ------
        src.utils.errors.NotFoundError
            If the upstream has no artist with that id.
        src.utils.errors.ProviderUnavailableError
            On transport failure.
        """

    @abstractmethod
    async def get_top_tracks(self, artist_id: str, limit: int = DEFAULT_LIST_LIMIT) -> list[TrackRecord]:
        """Return the artist's top tracks, newest first, then title, then id."""

    @abstractmethod
    async def get_latest_releases(
        self, artist_id: str, limit: int = DEFAULT_LIST_LIMIT
    ) -> list[ReleaseRecord]:
        """Return the artist's releases, newest first, then title, then id."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the provider identifier (matches a ProviderTag value)."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider has what it needs to make calls."""
