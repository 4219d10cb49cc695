"""Custom exception hierarchy for Groupie Tracker.

All application exceptions inherit from :class:`GroupieTrackerError`, which
carries an optional ``provider_name`` so error handlers can identify which
upstream (e.g. "spotify", "deezer", "open_meteo") caused the failure.

    GroupieTrackerError  (base -- catch-all for any application error)
    +-- ConfigurationError       (missing credentials / invalid config)
    +-- NotFoundError            (the upstream has no such record)
    +-- ProviderUnavailableError (timeout, non-2xx, malformed JSON)
    |   +-- RateLimitError       (HTTP 429)
    +-- GeocodingError           (no geocoder could be reached)

``NotFoundError`` deliberately does not derive from
``ProviderUnavailableError``: the API layer maps the first to a 404 and the
second to a 500, and enrichment callers treat both as "no data".
"""

from __future__ import annotations


class GroupieTrackerError(Exception):
    """Base exception for all Groupie Tracker errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which upstream triggered the error.  The
    ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[deezer] Artist 42 not found``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(GroupieTrackerError):
    """Raised when credentials or settings needed for a call are missing.

    Always raised before any network request is attempted.
    """

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Upstream lookup errors
# ---------------------------------------------------------------------------

class NotFoundError(GroupieTrackerError):
    """Raised when an upstream confirms that the requested record does not exist.

    Tagged at the transport boundary (HTTP 404, provider error codes, or an
    upstream error message saying the id is unknown) so callers never have
    to inspect error text.
    """

    def __init__(
        self,
        message: str = "Record not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderUnavailableError(GroupieTrackerError):
    """Raised when an upstream is unreachable or answers with garbage.

    Covers timeouts, connection errors, non-2xx statuses other than 404,
    and bodies that are not valid JSON.  ``status_code`` is set when the
    upstream did answer.
    """

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._status_code = status_code

    @property
    def status_code(self) -> int | None:
        return self._status_code


class RateLimitError(ProviderUnavailableError):
    """Raised when an upstream answers HTTP 429."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, status_code=429)


# ---------------------------------------------------------------------------
# Geocoding errors
# ---------------------------------------------------------------------------

class GeocodingError(GroupieTrackerError):
    """Raised when every geocoder failed with a transport error.

    A resolution that reached at least one geocoder and found nothing is a
    plain negative result, not this error.
    """

    def __init__(
        self,
        message: str = "Geocoding failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
