"""Spotify client-credentials token manager.

One instance per process, owned by the composition root and shared by the
Spotify provider.  Token lifecycle:

    no token -> valid -> (time passes) -> expiring -> refreshing -> valid

A token is served only while ``now < expires_at - 30s``.  The fast path
needs no lock; a refresh takes an ``asyncio.Lock`` and re-checks before
calling the token endpoint so concurrent callers trigger a single refresh.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable

import httpx
import structlog

from src.models.entities import AccessToken
from src.utils.errors import ConfigurationError, ProviderUnavailableError
from src.utils.http import DEFAULT_USER_AGENT, fetch_json
from src.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

TOKEN_URL = "https://accounts.spotify.com/api/token"
REFRESH_MARGIN_SECONDS = 30.0

_PROVIDER = "spotify"


class SpotifyTokenManager:
    """Acquire and cache a Spotify app token via the client-credentials grant.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient``.
    client_id, client_secret:
        Application credentials.  When either is empty every
        :meth:`get_token` call raises :class:`ConfigurationError` without
        touching the network.
    timeout:
        Timeout for the token endpoint call.
    clock:
        Clock used for expiry; injectable for tests.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        client_id: str,
        client_secret: str,
        timeout: float = 5.0,
        user_agent: str = DEFAULT_USER_AGENT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = http_client
        self._client_id = client_id.strip()
        self._client_secret = client_secret.strip()
        self._timeout = timeout
        self._user_agent = user_agent
        self._clock = clock
        self._token: AccessToken | None = None
        self._lock = asyncio.Lock()

    @property
    def is_configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    @property
    def current(self) -> AccessToken | None:
        """The cached token, whether or not it is still fresh."""
        return self._token

    def invalidate(self) -> None:
        """Drop the cached token so the next call fetches a new one."""
        self._token = None

    async def get_token(self) -> str:
        """Return a bearer token that is valid for at least 30 more seconds.

        Raises
        ------
        ConfigurationError
            If client id or secret is missing.
        ProviderUnavailableError
            If the token endpoint fails or returns no token.
        """
        token = self._token
        if token is not None and token.is_fresh(self._clock(), REFRESH_MARGIN_SECONDS):
            return token.value

        if not self.is_configured:
            raise ConfigurationError(
                message="SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET are not set",
                provider_name=_PROVIDER,
            )

        async with self._lock:
            token = self._token
            if token is not None and token.is_fresh(self._clock(), REFRESH_MARGIN_SECONDS):
                return token.value

            self._token = await self._request_token()
            return self._token.value

    async def _request_token(self) -> AccessToken:
        data = await fetch_json(
            self._client,
            TOKEN_URL,
            provider=_PROVIDER,
            method="POST",
            data={"grant_type": "client_credentials"},
            auth=(self._client_id, self._client_secret),
            timeout=self._timeout,
            user_agent=self._user_agent,
        )

        value = str(data.get("access_token") or "") if isinstance(data, dict) else ""
        if not value:
            raise ProviderUnavailableError(
                message="Token endpoint returned no access_token", provider_name=_PROVIDER
            )
        try:
            expires_in = float(data.get("expires_in") or 0)
        except (TypeError, ValueError):
            expires_in = 0.0

        token = AccessToken(value=value, expires_at=self._clock() + expires_in)
        logger.info("spotify_token_refreshed", expires_in=expires_in)
        return token
