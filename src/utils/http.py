"""JSON-over-HTTP helper shared by every provider.

:func:`fetch_json` is the single transport boundary of the application.
It sets the user agent and a per-call timeout, decodes the body, and turns
every failure into a tagged exception from :mod:`src.utils.errors`:

    timeout / connection error       -> ProviderUnavailableError
    HTTP 404                         -> NotFoundError
    HTTP 429                         -> RateLimitError
    other non-2xx                    -> NotFoundError when the upstream error
                                        message says the id is unknown,
                                        ProviderUnavailableError otherwise
    body is not JSON                 -> ProviderUnavailableError

Providers whose upstream reports errors inside a 200 body (Deezer,
Last.fm) run that message through :func:`is_not_found_message` so the
classification lives in one place.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx
import structlog

from src.utils.errors import NotFoundError, ProviderUnavailableError, RateLimitError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

DEFAULT_USER_AGENT = "groupie-tracker/0.1 (+https://groupietrackers.herokuapp.com)"

_NOT_FOUND_MARKERS = ("not found", "unknown id", "invalid id", "no data")


def is_not_found_message(message: str | None) -> bool:
    """Return ``True`` when an upstream error message means "no such record".

    Upstreams are inconsistent about casing, so the match is case-insensitive.
    """
    if not message:
        return False
    lowered = message.lower()
    return any(marker in lowered for marker in _NOT_FOUND_MARKERS)


def _error_message(response: httpx.Response) -> str:
    """Best-effort extraction of an upstream error message from a response body."""
    try:
        body = response.json()
    except ValueError:
        return str(response.text or "")[:200]

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("message") or error.get("type") or "")
        if isinstance(error, str):
            return error
        for key in ("message", "error_description", "detail"):
            if body.get(key):
                return str(body[key])
    return ""


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    provider: str,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    timeout: float = 8.0,
    user_agent: str = DEFAULT_USER_AGENT,
    method: str = "GET",
    data: Mapping[str, str] | None = None,
    auth: tuple[str, str] | None = None,
) -> Any:
    """Execute one request and return the decoded JSON body.

    Parameters
    ----------
    client:
        Shared ``httpx.AsyncClient``.
    url:
        Absolute endpoint URL.
    provider:
        Provider name attached to any raised error.
    params, headers:
        Query parameters and extra headers.  ``Accept`` and ``User-Agent``
        are always set.
    timeout:
        Per-call timeout in seconds.
    method:
        ``"GET"`` or ``"POST"``.  ``data`` and ``auth`` are only sent with
        POST (form body and HTTP Basic credentials).

    Raises
    ------
    NotFoundError, RateLimitError, ProviderUnavailableError
    """
    request_headers = {"Accept": "application/json", "User-Agent": user_agent}
    if headers:
        request_headers.update(headers)

    try:
        if method.upper() == "POST":
            response = await client.post(
                url,
                data=dict(data or {}),
                auth=auth,
                headers=request_headers,
                timeout=httpx.Timeout(timeout),
            )
        else:
            response = await client.get(
                url,
                params=dict(params or {}),
                headers=request_headers,
                timeout=httpx.Timeout(timeout),
            )
    except httpx.TimeoutException as exc:
        raise ProviderUnavailableError(
            message=f"Timeout after {timeout}s calling {url}",
            provider_name=provider,
        ) from exc
    except httpx.HTTPError as exc:
        raise ProviderUnavailableError(
            message=f"HTTP error calling {url}: {exc}",
            provider_name=provider,
        ) from exc

    status = response.status_code
    if status == 404:
        raise NotFoundError(message=f"{url} returned 404", provider_name=provider)
    if status == 429:
        raise RateLimitError(message=f"{url} rate limited the request", provider_name=provider)
    if not 200 <= status < 300:
        detail = _error_message(response)
        if is_not_found_message(detail):
            raise NotFoundError(message=f"{url}: {detail}", provider_name=provider)
        _logger.debug("upstream_error_status", provider=provider, url=url, status=status)
        raise ProviderUnavailableError(
            message=f"{url} returned HTTP {status}: {detail}".rstrip(": "),
            provider_name=provider,
            status_code=status,
        )

    try:
        return response.json()
    except ValueError as exc:
        raise ProviderUnavailableError(
            message=f"Malformed JSON from {url}",
            provider_name=provider,
            status_code=status,
        ) from exc
