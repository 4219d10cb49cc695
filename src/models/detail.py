"""Composite models assembled by the services layer."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from src.models.entities import ArtistRecord, ReleaseRecord, TrackRecord
from src.models.geo import MapLocation


class ArtistSummary(BaseModel):
    """A Wikipedia extract and the canonical page URL it came from."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    extract: str
    page_url: str


class ListenedArtist(BaseModel):
    """A search result paired with its Last.fm listener count (0 = unknown)."""

    model_config = ConfigDict(frozen=True)

    artist: ArtistRecord
    listeners: int = 0


class ArtistDetail(BaseModel):
    """Everything shown on an artist detail page.

    Only ``artist`` is guaranteed; every other field degrades to its empty
    value when the corresponding enrichment failed.
    """

    model_config = ConfigDict(frozen=True)

    artist: ArtistRecord
    top_tracks: list[TrackRecord] = Field(default_factory=list)
    releases: list[ReleaseRecord] = Field(default_factory=list)
    summary: ArtistSummary | None = None
    listeners: int = 0
    locations: list[MapLocation] = Field(default_factory=list)


class SuggestionType(str, Enum):
    """Kinds of search suggestion, in display priority order."""

    GROUP = "group"
    MEMBER = "member"
    LOCATION = "location"

    @property
    def rank(self) -> int:
        return _SUGGESTION_RANK[self]


_SUGGESTION_RANK = {SuggestionType.GROUP: 0, SuggestionType.MEMBER: 1, SuggestionType.LOCATION: 2}


class Suggestion(BaseModel):
    """One autocomplete entry for the Groupie search box."""

    model_config = ConfigDict(frozen=True)

    type: SuggestionType
    label: str
    value: str
    target: str = ""
