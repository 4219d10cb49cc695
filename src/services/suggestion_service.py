"""Autocomplete suggestions for the Groupie search box.

The index holds every group name, member name and humanized concert
location from the Groupie dataset, each with an accent-folded form used
for matching.  It is rebuilt at most every ten minutes.
"""

from __future__ import annotations

import time
from typing import Callable, NamedTuple

import structlog

from src.models.detail import Suggestion, SuggestionType
from src.models.entities import ProviderTag
from src.providers.artist.groupie_provider import GroupieProvider
from src.providers.cache.ttl_value_cache import DEFAULT_TTL_SECONDS, TTLValueCache
from src.utils.location_keys import humanize_location_key
from src.utils.logging import get_logger
from src.utils.text_normalizer import normalize_for_match

MIN_QUERY_LENGTH = 2
MAX_SUGGESTIONS = 10

_TARGET_QUERY = "q"
_TARGET_LOCATION = "location"


class IndexedSuggestion(NamedTuple):
    suggestion: Suggestion
    norm: str


def match_score(norm: str, query: str) -> int | None:
    """0 for a prefix match, 1 for a word-prefix match, 2 for a substring, else ``None``."""
    if not norm or query not in norm:
        return None
    if norm.startswith(query):
        return 0
    if f" {query}" in norm:
        return 1
    return 2


class SuggestionService:
    """Builds and queries the cached suggestion index."""

    def __init__(
        self,
        groupie: GroupieProvider,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._groupie = groupie
        self._index: TTLValueCache[list[IndexedSuggestion]] = TTLValueCache(
            self._build_index, ttl=ttl, name="groupie_suggestions", clock=clock
        )
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def suggest(self, tag: ProviderTag, raw_query: str) -> list[Suggestion]:
        """Return up to ten suggestions for *raw_query*.

        Only the Groupie source has suggestions; other sources, and queries
        shorter than two characters, get an empty list.
        """
        if tag is not ProviderTag.GROUPIE:
            return []
        raw = (raw_query or "").strip()
        if len(raw) < MIN_QUERY_LENGTH:
            return []
        query = normalize_for_match(raw)
        if not query:
            return []

        index = await self._index.get()
        scored: list[tuple[int, IndexedSuggestion]] = []
        for item in index:
            score = match_score(item.norm, query)
            if score is not None:
                scored.append((score, item))
        scored.sort(
            key=lambda pair: (
                pair[0],
                pair[1].suggestion.type.rank,
                pair[1].suggestion.label.lower(),
            )
        )

        out: list[Suggestion] = []
        seen: set[tuple[SuggestionType, str]] = set()
        for _, item in scored:
            key = (item.suggestion.type, item.suggestion.label.lower())
            if key in seen:
                continue
            seen.add(key)
            out.append(item.suggestion)
            if len(out) >= MAX_SUGGESTIONS:
                break
        return out

    async def _build_index(self) -> list[IndexedSuggestion]:
        artists = await self._groupie.list_artists()
        relations = await self._groupie.get_relations()

        by_key: dict[tuple[SuggestionType, str], IndexedSuggestion] = {}

        def add(kind: SuggestionType, label: str, target: str) -> None:
            label = label.strip()
            norm = normalize_for_match(label)
            if not label or not norm or (kind, norm) in by_key:
                return
            by_key[(kind, norm)] = IndexedSuggestion(
                Suggestion(type=kind, label=label, value=label, target=target), norm
            )

        for artist in artists:
            add(SuggestionType.GROUP, artist.name, _TARGET_QUERY)
            for member in artist.members:
                add(SuggestionType.MEMBER, member, _TARGET_QUERY)
        for relation in relations.index:
            for key in relation.dates_locations:
                add(SuggestionType.LOCATION, humanize_location_key(key) or key, _TARGET_LOCATION)

        items = sorted(
            by_key.values(),
            key=lambda item: (item.suggestion.type.rank, item.suggestion.label.lower()),
        )
        self._logger.info("suggestion_index_built", size=len(items))
        return items
