"""Abstract base classes for best-effort enrichment lookups.

Enrichment never decides whether a page renders: callers catch every
:class:`~src.utils.errors.GroupieTrackerError` raised here and fall back
to 0 or ``None``.  Implementations still raise typed errors so the
failure reason shows up in logs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.detail import ArtistSummary


class IListenerCountProvider(ABC):
    """Contract for listener-count lookups keyed by artist display name."""

    @abstractmethod
    async def get_listener_count(self, artist_name: str) -> int:
        """Return the listener count for *artist_name*.

        Names are used instead of ids because every provider has its own
        id space.

        Raises
        ------
        src.utils.errors.ConfigurationError
            If no API key is configured.
        src.utils.errors.NotFoundError
            If the upstream does not know the artist.
        src.utils.errors.ProviderUnavailableError
            On transport failure or a missing/non-numeric field.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the provider identifier."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured."""


class ISummaryProvider(ABC):
    """Contract for encyclopedia summary lookups keyed by title."""

    @abstractmethod
    async def get_summary(self, title: str) -> ArtistSummary | None:
        """Return the summary for the page best matching *title*.

        Returns ``None`` when no page matched or the page has no extract
        or canonical URL.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the provider identifier."""
