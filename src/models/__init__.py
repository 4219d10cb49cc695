"""Groupie Tracker domain models: re-exports all public model classes.

The models are organized by concern:
    - entities.py: provider-agnostic artist/track/release views and tokens
    - groupie.py : Groupie dataset wire models and search filters
    - geo.py     : geocoding results, parsed location keys, map pins
    - detail.py  : composite detail-page and suggestion models
"""

from __future__ import annotations

from src.models.detail import (
    ArtistDetail,
    ArtistSummary,
    ListenedArtist,
    Suggestion,
    SuggestionType,
)
from src.models.entities import (
    AccessToken,
    ArtistRecord,
    ProviderTag,
    ReleaseRecord,
    TrackRecord,
)
from src.models.geo import GeocodeResult, LocationKey, MapLocation
from src.models.groupie import GroupieArtist, GroupieFilter, Relation, RelationIndex

__all__ = [
    "AccessToken",
    "ArtistDetail",
    "ArtistRecord",
    "ArtistSummary",
    "GeocodeResult",
    "GroupieArtist",
    "GroupieFilter",
    "ListenedArtist",
    "LocationKey",
    "MapLocation",
    "ProviderTag",
    "Relation",
    "RelationIndex",
    "ReleaseRecord",
    "Suggestion",
    "SuggestionType",
    "TrackRecord",
]
