"""Last.fm listener-count provider implementing IListenerCountProvider.

Uses ``artist.getInfo`` and reads ``artist.stats.listeners``, which
Last.fm serialises as a string.  Without ``LASTFM_API_KEY`` the provider is
unavailable and every call raises :class:`ConfigurationError` up front.
"""

from __future__ import annotations

import httpx
import structlog

from src.interfaces.enrichment_provider import IListenerCountProvider
from src.utils.errors import ConfigurationError, NotFoundError, ProviderUnavailableError
from src.utils.http import DEFAULT_USER_AGENT, fetch_json, is_not_found_message
from src.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

_API_URL = "https://ws.audioscrobbler.com/2.0/"

# Last.fm error code for "The artist you supplied could not be found".
_ERROR_INVALID_PARAMETERS = 6


class LastfmListenerProvider(IListenerCountProvider):
    """Listener counts from the Last.fm web service."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        timeout: float = 5.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._client = http_client
        self._api_key = api_key.strip()
        self._timeout = timeout
        self._user_agent = user_agent

    async def get_listener_count(self, artist_name: str) -> int:
        if not self._api_key:
            raise ConfigurationError(
                message="LASTFM_API_KEY is not set", provider_name=self.get_provider_name()
            )
        name = (artist_name or "").strip()
        if not name:
            raise NotFoundError(message="Empty artist name", provider_name=self.get_provider_name())

        data = await fetch_json(
            self._client,
            _API_URL,
            provider=self.get_provider_name(),
            params={
                "method": "artist.getInfo",
                "artist": name,
                "api_key": self._api_key,
                "format": "json",
            },
            timeout=self._timeout,
            user_agent=self._user_agent,
        )

        if isinstance(data, dict) and data.get("error"):
            message = str(data.get("message") or "")
            if data.get("error") == _ERROR_INVALID_PARAMETERS or is_not_found_message(message):
                raise NotFoundError(
                    message=f"Unknown artist {name!r}", provider_name=self.get_provider_name()
                )
            raise ProviderUnavailableError(
                message=f"Last.fm error {data.get('error')}: {message}",
                provider_name=self.get_provider_name(),
            )

        raw = str((((data or {}).get("artist") or {}).get("stats") or {}).get("listeners") or "").strip()
        if not raw:
            raise ProviderUnavailableError(
                message=f"No listener count for {name!r}", provider_name=self.get_provider_name()
            )
        try:
            count = int(raw)
        except ValueError:
            raise ProviderUnavailableError(
                message=f"Non-numeric listener count {raw!r}", provider_name=self.get_provider_name()
            ) from None

        logger.debug("lastfm_listeners", artist=name, listeners=count)
        return count

    def get_provider_name(self) -> str:
        return "lastfm"

    def is_available(self) -> bool:
        return bool(self._api_key)
