"""FastAPI routes for the Groupie Tracker aggregation core.

Service dependencies are resolved from ``app.state`` via FastAPI's
``Depends`` using the ``Annotated`` pattern.  Every artist route takes a
``source`` query parameter (groupie, spotify, deezer, apple); unknown or
missing values fall back to groupie.

Route map (all under ``/api/v1``):

    GET /artists                  search, Groupie filters, optional listener sort
    GET /artists/suggest          Groupie autocomplete
    GET /artists/{id}             full detail page
    GET /artists/{id}/tracks      top tracks, newest first
    GET /artists/{id}/releases    latest releases, newest first
    GET /summary                  Wikipedia summary for a title
    GET /locations/resolve        parse and geocode a dataset location key
    GET /health                   health check + provider availability
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, Query, Request

from src.api.schemas import (
    ArtistListResponse,
    ErrorResponse,
    HealthResponse,
    LocationResolveResponse,
    ReleaseListResponse,
    SummaryResponse,
    TrackListResponse,
)
from src.interfaces.artist_provider import DEFAULT_LIST_LIMIT
from src.interfaces.enrichment_provider import ISummaryProvider
from src.models.detail import ArtistDetail, Suggestion
from src.models.entities import ProviderTag
from src.models.groupie import GroupieFilter
from src.services.artist_service import SORT_RELEVANCE, ArtistCatalogService, ArtistDetailService
from src.services.geocoding_service import GeocodeResolver
from src.services.suggestion_service import SuggestionService
from src.utils.location_keys import resolve_location_key

router = APIRouter(prefix="/api/v1")

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


# ---------------------------------------------------------------------------
# Dependency helpers
# ---------------------------------------------------------------------------


def _get_catalog(request: Request) -> ArtistCatalogService:
    """Return the artist catalog service from application state."""
    return request.app.state.catalog_service


def _get_detail_service(request: Request) -> ArtistDetailService:
    return request.app.state.detail_service


def _get_suggestion_service(request: Request) -> SuggestionService:
    return request.app.state.suggestion_service


def _get_summary_provider(request: Request) -> ISummaryProvider:
    return request.app.state.summary_provider


def _get_resolver(request: Request) -> GeocodeResolver:
    return request.app.state.geocode_resolver


def _get_source(source: str = Query(default="", description="groupie, spotify, deezer or apple")) -> ProviderTag:
    return ProviderTag.from_param(source)


def _get_filters(
    year_min: int | None = None,
    year_max: int | None = None,
    members: list[int] = Query(default=[], description="Accepted member counts; repeatable"),
    location: str = Query(default="", description="Concert location substring"),
) -> GroupieFilter | None:
    filters = GroupieFilter(
        year_min=year_min,
        year_max=year_max,
        member_counts=frozenset(members),
        location=location,
    )
    return None if filters.is_empty() else filters


CatalogDep = Annotated[ArtistCatalogService, Depends(_get_catalog)]
DetailDep = Annotated[ArtistDetailService, Depends(_get_detail_service)]
SuggestionDep = Annotated[SuggestionService, Depends(_get_suggestion_service)]
SummaryDep = Annotated[ISummaryProvider, Depends(_get_summary_provider)]
ResolverDep = Annotated[GeocodeResolver, Depends(_get_resolver)]
SourceDep = Annotated[ProviderTag, Depends(_get_source)]
FiltersDep = Annotated[GroupieFilter | None, Depends(_get_filters)]


# ---------------------------------------------------------------------------
# Artist endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/artists",
    response_model=ArtistListResponse,
    responses=_ERROR_RESPONSES,
    summary="Search artists on one source",
)
async def search_artists(
    catalog: CatalogDep,
    source: SourceDep,
    filters: FiltersDep,
    q: str = "",
    limit: int | None = None,
    sort: Literal["relevance", "listeners"] = SORT_RELEVANCE,
) -> ArtistListResponse:
    """Search *source* for *q* and attach Last.fm listener counts.

    ``year_min``, ``year_max``, ``members`` and ``location`` narrow a
    Groupie search; other sources ignore them.
    """
    artists = await catalog.search_with_listeners(source, q, limit, sort, filters)
    return ArtistListResponse(source=source.value, query=q, sort=sort, artists=artists)


@router.get(
    "/artists/suggest",
    response_model=list[Suggestion],
    summary="Autocomplete suggestions (Groupie only)",
)
async def suggest_artists(
    suggestions: SuggestionDep,
    source: SourceDep,
    q: str = "",
) -> list[Suggestion]:
    return await suggestions.suggest(source, q)


@router.get(
    "/artists/{artist_id}",
    response_model=ArtistDetail,
    responses=_ERROR_RESPONSES,
    summary="Artist detail page",
)
async def get_artist_detail(
    artist_id: str,
    details: DetailDep,
    source: SourceDep,
) -> ArtistDetail:
    """Return the artist plus every enrichment that could be fetched."""
    return await details.get_artist_detail(source, artist_id)


@router.get(
    "/artists/{artist_id}/tracks",
    response_model=TrackListResponse,
    responses=_ERROR_RESPONSES,
    summary="Top tracks, newest first",
)
async def get_top_tracks(
    artist_id: str,
    catalog: CatalogDep,
    source: SourceDep,
    limit: int = DEFAULT_LIST_LIMIT,
) -> TrackListResponse:
    tracks = await catalog.get_top_tracks(source, artist_id, limit)
    return TrackListResponse(source=source.value, artist_id=artist_id, tracks=tracks)


@router.get(
    "/artists/{artist_id}/releases",
    response_model=ReleaseListResponse,
    responses=_ERROR_RESPONSES,
    summary="Latest releases, newest first",
)
async def get_latest_releases(
    artist_id: str,
    catalog: CatalogDep,
    source: SourceDep,
    limit: int = DEFAULT_LIST_LIMIT,
) -> ReleaseListResponse:
    releases = await catalog.get_latest_releases(source, artist_id, limit)
    return ReleaseListResponse(source=source.value, artist_id=artist_id, releases=releases)


# ---------------------------------------------------------------------------
# Enrichment endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/summary",
    response_model=SummaryResponse,
    responses=_ERROR_RESPONSES,
    summary="Wikipedia summary for an artist name",
)
async def get_summary(
    summaries: SummaryDep,
    title: str = Query(..., min_length=1),
) -> SummaryResponse:
    summary = await summaries.get_summary(title)
    return SummaryResponse(title=title, summary=summary)


@router.get(
    "/locations/resolve",
    response_model=LocationResolveResponse,
    responses=_ERROR_RESPONSES,
    summary="Parse and geocode a dataset location key",
)
async def resolve_location(
    resolver: ResolverDep,
    key: str = Query(..., min_length=1, description='e.g. "los_angeles-usa"'),
) -> LocationResolveResponse:
    """Turn ``place-country`` into a display label and coordinates."""
    location = resolve_location_key(key)
    result = await resolver.resolve(location.place, location.country_code)
    return LocationResolveResponse(location=location, result=result)


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Application health check",
)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider availability."""
    providers: dict[str, Any] = {}
    if hasattr(request.app.state, "provider_registry"):
        providers = dict(request.app.state.provider_registry)

    status = "healthy" if all(providers.values()) else "degraded"
    if not providers.get(ProviderTag.GROUPIE.value, False):
        status = "unhealthy"

    return HealthResponse(
        status=status,
        version=getattr(request.app.state, "version", "0.1.0"),
        providers=providers,
    )
