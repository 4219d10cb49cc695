"""Groupie Tracker API layer: routes, schemas, and middleware."""

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router
from src.api.schemas import (
    ArtistListResponse,
    ErrorResponse,
    HealthResponse,
    LocationResolveResponse,
    ReleaseListResponse,
    SummaryResponse,
    TrackListResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "ArtistListResponse",
    "ErrorResponse",
    "HealthResponse",
    "LocationResolveResponse",
    "ReleaseListResponse",
    "SummaryResponse",
    "TrackListResponse",
]
