"""Groupie Tracker FastAPI application entry point.

Wires together all providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging before the first component is built.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router as api_router
from src.config.loader import load_config
from src.config.settings import Settings
from src.interfaces.artist_provider import IArtistProvider
from src.models.entities import ProviderTag
from src.providers.artist.deezer_provider import DeezerProvider
from src.providers.artist.groupie_provider import GroupieProvider
from src.providers.artist.itunes_provider import ITunesProvider
from src.providers.artist.spotify_auth import SpotifyTokenManager
from src.providers.artist.spotify_provider import SpotifyProvider
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.providers.enrichment.lastfm_provider import LastfmListenerProvider
from src.providers.enrichment.wikipedia_provider import WikipediaSummaryProvider
from src.providers.geocoding.nominatim_provider import NominatimGeocoder
from src.providers.geocoding.open_meteo_provider import OpenMeteoGeocoder
from src.services.artist_service import ArtistCatalogService, ArtistDetailService
from src.services.geocoding_service import ConcertMapService, GeocodeResolver
from src.services.suggestion_service import SuggestionService
from src.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)

_VERSION = str((config.get("app") or {}).get("version", "0.1.0"))


# ---------------------------------------------------------------------------
# Component construction
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, app_config: dict[str, Any]) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    aggregation: dict[str, int] = app_config["aggregation"]
    user_agent = app_settings.http_user_agent

    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=30.0, follow_redirects=True)

    # -- Artist providers --
    groupie = GroupieProvider(
        http_client=http_client,
        cache_ttl=app_settings.dataset_cache_ttl,
        timeout=app_settings.search_timeout,
        user_agent=user_agent,
    )
    token_manager = SpotifyTokenManager(
        http_client=http_client,
        client_id=app_settings.spotify_client_id,
        client_secret=app_settings.spotify_client_secret,
        timeout=app_settings.lookup_timeout,
        user_agent=user_agent,
    )
    spotify = SpotifyProvider(
        http_client=http_client,
        token_manager=token_manager,
        market=app_settings.spotify_market,
        search_timeout=app_settings.search_timeout,
        lookup_timeout=app_settings.lookup_timeout,
        user_agent=user_agent,
    )
    deezer = DeezerProvider(
        http_client=http_client,
        timeout=app_settings.search_timeout,
        album_detail_concurrency=aggregation["album_detail_concurrency"],
        user_agent=user_agent,
    )
    itunes = ITunesProvider(
        http_client=http_client,
        country=app_settings.itunes_country,
        artwork_cache=MemoryCacheProvider(
            max_size=2000, ttl=app_settings.artwork_cache_ttl, name="itunes_artwork"
        ),
        artwork_concurrency=aggregation["artwork_concurrency"],
        search_timeout=app_settings.search_timeout,
        lookup_timeout=app_settings.lookup_timeout,
        user_agent=user_agent,
    )
    artist_providers: dict[ProviderTag, IArtistProvider] = {
        ProviderTag.GROUPIE: groupie,
        ProviderTag.SPOTIFY: spotify,
        ProviderTag.DEEZER: deezer,
        ProviderTag.APPLE: itunes,
    }

    # -- Enrichment --
    listeners = LastfmListenerProvider(
        http_client=http_client,
        api_key=app_settings.lastfm_api_key,
        timeout=app_settings.lookup_timeout,
        user_agent=user_agent,
    )
    summaries = WikipediaSummaryProvider(
        http_client=http_client,
        timeout=app_settings.lookup_timeout,
        user_agent=user_agent,
    )

    # -- Geocoding --
    resolver = GeocodeResolver(
        primary=OpenMeteoGeocoder(
            http_client=http_client, timeout=app_settings.geocode_timeout, user_agent=user_agent
        ),
        secondary=NominatimGeocoder(
            http_client=http_client, timeout=app_settings.geocode_timeout, user_agent=user_agent
        ),
    )
    concert_map = ConcertMapService(
        resolver=resolver,
        concurrency=aggregation["geocode_concurrency"],
        max_locations=aggregation["geocode_max_locations"],
    )

    # -- Services --
    catalog = ArtistCatalogService(
        providers=artist_providers,
        listeners=listeners,
        listener_concurrency=aggregation["listener_concurrency"],
    )
    detail = ArtistDetailService(
        catalog=catalog,
        summaries=summaries,
        groupie=groupie,
        concert_map=concert_map,
    )
    suggestions = SuggestionService(groupie=groupie, ttl=app_settings.dataset_cache_ttl)

    provider_registry: dict[str, bool] = {
        tag.value: provider.is_available() for tag, provider in artist_providers.items()
    }
    provider_registry[listeners.get_provider_name()] = listeners.is_available()

    return {
        "http_client": http_client,
        "catalog_service": catalog,
        "detail_service": detail,
        "suggestion_service": suggestions,
        "summary_provider": summaries,
        "geocode_resolver": resolver,
        "provider_registry": provider_registry,
        "version": _VERSION,
    }


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    missing = settings.get_missing_credentials()
    _logger.info(
        "app_startup",
        version=_VERSION,
        environment=settings.app_env,
        providers=components["provider_registry"],
        missing_credentials=missing,
    )

    yield

    # -- Shutdown: close shared httpx client --
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="Groupie Tracker API",
        version=_VERSION,
        description=(
            "Browse artists from the Groupie Trackers dataset, Spotify, Deezer "
            "and Apple Music, enriched with Last.fm listener counts, Wikipedia "
            "summaries and geocoded concert locations."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
