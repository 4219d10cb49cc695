"""Geocoding models: resolver results, parsed location keys, map pins."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GeocodeResult(BaseModel):
    """Coordinates and a human label for one resolved place."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float
    display_label: str = ""


class LocationKey(BaseModel):
    """A parsed ``place-country`` dataset key.

    Attributes
    ----------
    place:
        Title-cased place name used as the geocoding query.
    country_code:
        ISO-3166 alpha-2 code, or ``""`` when the country is not in the
        lookup table (the geocoder then does not filter by country).
    display_label:
        ``"Los Angeles, USA"`` style label for the UI.
    """

    model_config = ConfigDict(frozen=True)

    raw: str
    place: str
    country: str = ""
    country_code: str = ""
    display_label: str = ""


class MapLocation(BaseModel):
    """A geocoded concert location with the dates played there."""

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    lat: float
    lng: float
    dates: list[str] = Field(default_factory=list)
