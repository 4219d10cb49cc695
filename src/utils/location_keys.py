"""Parsing of Groupie concert-location keys.

The dataset encodes concert locations as ``place_with_underscores-country``
(``"los_angeles-usa"``, ``"new_south_wales-australia"``).  This module
turns a key into a geocoding query (title-cased place + ISO-3166 alpha-2
country code) and a display label.  Pure string work, no I/O.
"""

from __future__ import annotations

from src.models.geo import LocationKey
from src.utils.text_normalizer import title_words

# Countries that appear in the dataset, keyed by the lower-cased key suffix.
COUNTRY_CODES: dict[str, str] = {
    "usa": "US",
    "united states": "US",
    "united states of america": "US",
    "uk": "GB",
    "united kingdom": "GB",
    "france": "FR",
    "switzerland": "CH",
    "australia": "AU",
    "new zealand": "NZ",
    "japan": "JP",
    "indonesia": "ID",
    "hungary": "HU",
    "belarus": "BY",
    "slovakia": "SK",
    "mexico": "MX",
    "french polynesia": "PF",
    "new caledonia": "NC",
}

_DISPLAY_OVERRIDES = {"Usa": "USA", "Uk": "UK"}


def split_location_key(key: str) -> tuple[str, str]:
    """Split *key* into ``(place, country)`` with underscores as spaces.

    The last ``-`` separated part is the country; a key with no dash has
    no country.
    """
    text = key.strip()
    if not text:
        return "", ""

    parts = text.split("-")
    if len(parts) == 1:
        return parts[0].replace("_", " "), ""

    place = " ".join(parts[:-1]).replace("_", " ")
    country = parts[-1].replace("_", " ")
    return place, country


def country_code_from_key(key: str) -> str:
    """Return the ISO alpha-2 code for the key's country, or ``""`` if unknown."""
    _, country = split_location_key(key)
    return COUNTRY_CODES.get(" ".join(country.lower().split()), "")


def humanize_location_key(key: str) -> str:
    """``"new_south_wales-australia"`` -> ``"New South Wales, Australia"``."""
    place, country = split_location_key(key)
    place = title_words(place)
    country = title_words(country)
    country = _DISPLAY_OVERRIDES.get(country, country)
    if not place:
        return country
    if not country:
        return place
    return f"{place}, {country}"


def resolve_location_key(raw_key: str) -> LocationKey:
    """Parse *raw_key* into the place query, country code and display label."""
    place, country = split_location_key(raw_key)
    return LocationKey(
        raw=raw_key,
        place=title_words(place),
        country=title_words(country),
        country_code=country_code_from_key(raw_key),
        display_label=humanize_location_key(raw_key),
    )
