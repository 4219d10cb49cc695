"""Release-date parsing across the formats the upstreams actually send.

Spotify reports ``release_date`` at year, month or day precision, iTunes
sends RFC 3339 timestamps, and Deezer sends ``YYYY-MM-DD`` with
``0000-00-00`` for "unknown".  All of these are ISO 8601 forms, so they go
through python-dateutil's strict ISO parser and are reduced to a calendar
:class:`datetime.date`; missing components default to the first month or
day.  Anything else is unparsable and yields ``None``.
"""

from __future__ import annotations

from datetime import date

from dateutil import parser as dateutil_parser


def parse_release_date(raw: str | None) -> date | None:
    """Parse *raw* into a date, or return ``None`` if it cannot be parsed.

    >>> parse_release_date("2024-06")
    datetime.date(2024, 6, 1)
    >>> parse_release_date("2024-06-01T12:34:56.123Z")
    datetime.date(2024, 6, 1)
    >>> parse_release_date("0000-00-00") is None
    True
    """
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None

    try:
        return dateutil_parser.isoparse(text).date()
    except (ValueError, OverflowError):
        return None
