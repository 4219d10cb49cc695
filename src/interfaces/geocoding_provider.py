"""Abstract base class for forward geocoders (place name to coordinates)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.geo import GeocodeResult

CANDIDATE_COUNT = 5


class IGeocodingProvider(ABC):
    """Contract for a single geocoding backend.

    The resolver chains several of these; each one only has to answer
    "best in-country match or nothing".
    """

    @abstractmethod
    async def geocode(self, place: str, country_code: str = "") -> GeocodeResult | None:
        """Look up *place*, restricted to *country_code* when one is given.

        Parameters
        ----------
        place:
            Free-text place name ("Los Angeles", "Arizona").
        country_code:
            ISO-3166 alpha-2 code.  Candidates from any other country are
            rejected, never returned as a best guess.

        Returns
        -------
        GeocodeResult or None
            The highest-scoring candidate among up to
            :data:`CANDIDATE_COUNT`, or ``None`` when nothing matched.

        Raises
        ------
        src.utils.errors.ProviderUnavailableError
            On transport failure.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the provider identifier."""
