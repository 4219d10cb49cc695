"""Merge and sort helpers for track and release lists.

Upstream listings are neither stable across calls nor free of duplicates
(Deezer's filtered album passes overlap, Spotify pages can repeat an
album), so every list the application returns goes through these two
functions after all fan-out has joined.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Protocol, TypeVar


class Dated(Protocol):
    """Anything with an id, a title and an optional parsed release date."""

    @property
    def id(self) -> str: ...

    @property
    def title(self) -> str: ...

    @property
    def release_date(self) -> date | None: ...


_D = TypeVar("_D", bound=Dated)


def _prefer_incoming(kept: Dated, incoming: Dated) -> bool:
    if incoming.release_date is None:
        return False
    if kept.release_date is None:
        return True
    return incoming.release_date > kept.release_date


def merge_by_id(items: Iterable[_D]) -> list[_D]:
    """De-duplicate *items* by ``id``.

    The first-seen position of each id is kept.  A later duplicate replaces
    the kept copy when it alone has a parseable date, or when both do and
    its date is strictly newer.
    """
    merged: dict[str, _D] = {}
    for item in items:
        if not item.id:
            continue
        kept = merged.get(item.id)
        if kept is None or _prefer_incoming(kept, item):
            merged[item.id] = item
    return list(merged.values())


def id_sort_key(item_id: str) -> tuple[int, int, str]:
    """Sort key for provider ids: numeric ids by value, before any other id."""
    if item_id.isdigit():
        return (0, int(item_id), item_id)
    return (1, 0, item_id)


def sort_key(item: Dated) -> tuple:
    """Newest first, undated last, then lower-cased title, then id."""
    released = item.release_date
    return (
        0 if released is not None else 1,
        -released.toordinal() if released is not None else 0,
        item.title.lower(),
        id_sort_key(item.id),
    )


def sort_newest_first(items: Iterable[_D], limit: int | None = None) -> list[_D]:
    """Return *items* in the canonical release order, truncated to *limit*."""
    ordered = sorted(items, key=sort_key)
    if limit is not None and limit >= 0:
        return ordered[:limit]
    return ordered
