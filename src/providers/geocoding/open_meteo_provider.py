"""Open-Meteo geocoding provider (primary geocoder).

Fast and keyless, but city-oriented: it handles "Los Angeles" well and
regions such as US states poorly, which is why the resolver falls back to
Nominatim.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from src.interfaces.geocoding_provider import CANDIDATE_COUNT, IGeocodingProvider
from src.models.geo import GeocodeResult
from src.utils.http import DEFAULT_USER_AGENT, fetch_json
from src.utils.logging import get_logger
from src.utils.place_matching import pick_best

logger: structlog.BoundLogger = get_logger(__name__)

_SEARCH_URL = "https://geocoding-api.open-meteo.com/v1/search"


def _display_label(item: dict[str, Any]) -> str:
    name = str(item.get("name") or "").strip()
    admin = str(item.get("admin1") or "").strip()
    country = str(item.get("country") or "").strip()
    label = name
    if admin and admin.lower() != name.lower():
        label = f"{label}, {admin}"
    if country:
        label = f"{label}, {country}"
    return label


class OpenMeteoGeocoder(IGeocodingProvider):
    """Forward geocoding via ``geocoding-api.open-meteo.com``."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        timeout: float = 6.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._client = http_client
        self._timeout = timeout
        self._user_agent = user_agent

    async def geocode(self, place: str, country_code: str = "") -> GeocodeResult | None:
        cc = country_code.strip().upper()
        params: dict[str, Any] = {
            "name": place,
            "count": CANDIDATE_COUNT,
            "language": "en",
            "format": "json",
        }
        if cc:
            params["country"] = cc

        data = await fetch_json(
            self._client,
            _SEARCH_URL,
            provider=self.get_provider_name(),
            params=params,
            timeout=self._timeout,
            user_agent=self._user_agent,
        )
        candidates = [
            item
            for item in (data or {}).get("results") or []
            if isinstance(item, dict)
            and (not cc or str(item.get("country_code") or "").strip().upper() == cc)
        ]
        best = pick_best(
            place,
            candidates,
            name_of=lambda c: str(c.get("name") or ""),
            admin_of=lambda c: str(c.get("admin1") or ""),
        )
        if best is None:
            logger.debug("open_meteo_no_match", place=place, country=cc)
            return None
        return GeocodeResult(
            lat=float(best.get("latitude") or 0.0),
            lng=float(best.get("longitude") or 0.0),
            display_label=_display_label(best),
        )

    def get_provider_name(self) -> str:
        return "open_meteo"
