"""Pydantic response schemas for the Groupie Tracker JSON API.

Domain models from :mod:`src.models` are returned as-is where they already
have the right shape; the wrappers here add the request echo (source,
query, sort) that clients use to match responses to requests.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from src.models.detail import ArtistSummary, ListenedArtist
from src.models.entities import ReleaseRecord, TrackRecord
from src.models.geo import GeocodeResult, LocationKey


class ArtistListResponse(BaseModel):
    """Search results for one source, already in the requested order."""

    source: str
    query: str
    sort: str
    artists: list[ListenedArtist] = Field(default_factory=list)


class TrackListResponse(BaseModel):
    source: str
    artist_id: str
    tracks: list[TrackRecord] = Field(default_factory=list)


class ReleaseListResponse(BaseModel):
    source: str
    artist_id: str
    releases: list[ReleaseRecord] = Field(default_factory=list)


class SummaryResponse(BaseModel):
    """Wikipedia summary lookup; ``summary`` is null when no page matched."""

    title: str
    summary: ArtistSummary | None = None


class LocationResolveResponse(BaseModel):
    """A parsed location key and its coordinates (null when unresolved)."""

    location: LocationKey
    result: GeocodeResult | None = None


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the error-handling middleware."""

    error: str
    detail: str
