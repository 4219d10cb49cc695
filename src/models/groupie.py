"""Wire models for the Groupie Trackers dataset API.

The dataset is small and fixed: one list of artists and one relations
index mapping each artist id to ``{location_key: [dates]}``.  Field
aliases match the upstream camelCase JSON.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GroupieArtist(BaseModel):
    """One entry of ``/api/artists``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str
    image: str = ""
    members: list[str] = Field(default_factory=list)
    creation_date: int = Field(default=0, alias="creationDate")
    first_album: str = Field(default="", alias="firstAlbum")


class Relation(BaseModel):
    """Concert dates per location key for one artist."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    dates_locations: dict[str, list[str]] = Field(default_factory=dict, alias="datesLocations")


class RelationIndex(BaseModel):
    """The ``/api/relation`` document."""

    model_config = ConfigDict(frozen=True)

    index: list[Relation] = Field(default_factory=list)

    def for_artist(self, artist_id: int) -> Relation | None:
        for relation in self.index:
            if relation.id == artist_id:
                return relation
        return None


class GroupieFilter(BaseModel):
    """Optional narrowing applied to a Groupie search.

    ``member_counts`` empty means "any"; ``location`` is matched against
    humanized location labels (case-insensitive substring).
    """

    model_config = ConfigDict(frozen=True)

    year_min: int | None = None
    year_max: int | None = None
    member_counts: frozenset[int] = frozenset()
    location: str = ""

    def is_empty(self) -> bool:
        return (
            self.year_min is None
            and self.year_max is None
            and not self.member_counts
            and not self.location.strip()
        )
