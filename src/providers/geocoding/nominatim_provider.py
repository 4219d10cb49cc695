"""OpenStreetMap Nominatim geocoding provider (secondary geocoder).

Slower and rate-limited, but it understands administrative regions, so the
resolver asks it first for US state names and as a fallback otherwise.
Coordinates arrive as strings.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from src.interfaces.geocoding_provider import CANDIDATE_COUNT, IGeocodingProvider
from src.models.geo import GeocodeResult
from src.utils.errors import ProviderUnavailableError
from src.utils.http import DEFAULT_USER_AGENT, fetch_json
from src.utils.logging import get_logger
from src.utils.place_matching import pick_best

logger: structlog.BoundLogger = get_logger(__name__)

_SEARCH_URL = "https://nominatim.openstreetmap.org/search"


def _candidate_name(item: dict[str, Any]) -> str:
    return str(item.get("name") or "").strip() or str(item.get("display_name") or "").strip()


def _address(item: dict[str, Any]) -> dict[str, Any]:
    address = item.get("address")
    return address if isinstance(address, dict) else {}


class NominatimGeocoder(IGeocodingProvider):
    """Forward geocoding via ``nominatim.openstreetmap.org``."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        timeout: float = 6.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._client = http_client
        self._timeout = timeout
        # Nominatim's usage policy requires an identifying User-Agent.
        self._user_agent = user_agent

    async def geocode(self, place: str, country_code: str = "") -> GeocodeResult | None:
        cc = country_code.strip().lower()
        params: dict[str, Any] = {
            "q": place,
            "format": "jsonv2",
            "limit": CANDIDATE_COUNT,
            "addressdetails": 1,
        }
        if cc:
            params["countrycodes"] = cc

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
            for item in (data if isinstance(data, list) else [])
            if isinstance(item, dict)
            and (not cc or str(_address(item).get("country_code") or "").strip().lower() == cc)
        ]
        best = pick_best(
            place,
            candidates,
            name_of=_candidate_name,
            admin_of=lambda c: str(_address(c).get("state") or ""),
        )
        if best is None:
            logger.debug("nominatim_no_match", place=place, country=cc)
            return None

        try:
            lat = float(str(best.get("lat")).strip())
            lng = float(str(best.get("lon")).strip())
        except ValueError as exc:
            raise ProviderUnavailableError(
                message=f"Unparseable coordinates for {place!r}",
                provider_name=self.get_provider_name(),
            ) from exc

        label = str(best.get("display_name") or "").strip() or _candidate_name(best)
        return GeocodeResult(lat=lat, lng=lng, display_label=label)

    def get_provider_name(self) -> str:
        return "nominatim"
