"""Provider-agnostic view models for artists, tracks and releases.

Every provider client maps its native JSON into these models, so the
services and the API never see upstream shapes.  All models are frozen
Pydantic v2 models: they are derived on demand from upstream data and
never mutated afterwards.

Key relationships:
    - ArtistRecord is what search and get-by-id return for every provider
    - TrackRecord and ReleaseRecord carry a parsed ``release_date`` used by
      src/utils/ordering.py and the raw upstream string for display
"""

from __future__ import annotations

import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProviderTag(str, Enum):
    """The four artist backends a caller can switch between."""

    GROUPIE = "groupie"
    SPOTIFY = "spotify"
    DEEZER = "deezer"
    APPLE = "apple"

    @classmethod
    def from_param(cls, value: str | None) -> ProviderTag:
        """Map a ``source`` query parameter to a tag; unknown values mean Groupie."""
        normalized = (value or "").strip().lower()
        for tag in cls:
            if tag.value == normalized:
                return tag
        return cls.GROUPIE


class ArtistRecord(BaseModel):
    """One artist as shown on a results card or detail header."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    image_url: str = ""
    meta_line: str = ""
    provider: ProviderTag
    external_url: str = ""
    genres: list[str] = Field(default_factory=list)


class TrackRecord(BaseModel):
    """A playable track (top-tracks list)."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    release_date: datetime.date | None = None
    raw_release_date: str = ""
    artwork_url: str = ""
    external_url: str = ""
    preview_url: str = ""
    duration_seconds: int = 0
    album_title: str = ""


class ReleaseRecord(BaseModel):
    """An album, EP or single (latest-releases list)."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    release_date: datetime.date | None = None
    raw_release_date: str = ""
    artwork_url: str = ""
    external_url: str = ""
    record_type: str = ""
    track_count: int = 0


class AccessToken(BaseModel):
    """A bearer token and its absolute expiry on the token manager's clock."""

    model_config = ConfigDict(frozen=True)

    value: str
    expires_at: float

    def is_fresh(self, now: float, margin: float) -> bool:
        """True while ``now`` is strictly before ``expires_at - margin``."""
        return now < self.expires_at - margin
