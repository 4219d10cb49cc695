"""Wikipedia summary provider implementing ISummaryProvider.

Artist names are ambiguous ("Queen", "Muse"), so the lookup runs a few
targeted searches before falling back to the bare name:

    "<name> artist" -> "<name> band" -> "<name> music group" -> "<name>"

The first search with at least one hit decides.  Among its hits the
provider prefers an exact title match, then ``"<name> (band)"`` style
disambiguation pages, then the top hit.  The chosen page's REST summary
supplies the extract and canonical URL.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from src.interfaces.enrichment_provider import ISummaryProvider
from src.models.detail import ArtistSummary
from src.utils.errors import GroupieTrackerError, NotFoundError
from src.utils.http import DEFAULT_USER_AGENT, fetch_json
from src.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

_SEARCH_URL = "https://en.wikipedia.org/w/api.php"
_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary/"

QUERY_HINTS: tuple[str, ...] = (" artist", " band", " music group", "")
_QUERY_SUFFIXES = (" band", " music group", " musical group", " singer", " musician", " rapper", " artist")
_DISAMBIGUATORS = (
    "(band)",
    "(music group)",
    "(musical group)",
    "(singer)",
    "(musician)",
    "(rapper)",
    "(artist)",
)


def strip_query_suffix(query: str) -> str:
    """Drop one trailing hint such as ``" band"`` from *query*."""
    base = query.strip()
    lowered = base.lower()
    for suffix in _QUERY_SUFFIXES:
        if lowered.endswith(suffix):
            return base[: -len(suffix)].strip()
    return base


def pick_title(titles: list[str], query: str) -> str | None:
    """Choose the best page title among search hits for *query*."""
    base = strip_query_suffix(query).lower()
    preferred: str | None = None
    for title in titles:
        lowered = title.lower()
        if lowered == base:
            return title
        if (
            preferred is None
            and lowered.startswith(base + " (")
            and any(tag in lowered for tag in _DISAMBIGUATORS)
        ):
            preferred = title
    if preferred is not None:
        return preferred
    return titles[0] if titles else None


class WikipediaSummaryProvider(ISummaryProvider):
    """Best-effort English Wikipedia summaries for artist detail pages."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        timeout: float = 5.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._client = http_client
        self._timeout = timeout
        self._user_agent = user_agent

    async def _search_titles(self, query: str) -> list[str]:
        data = await fetch_json(
            self._client,
            _SEARCH_URL,
            provider=self.get_provider_name(),
            params={
                "action": "query",
                "list": "search",
                "format": "json",
                "utf8": "1",
                "srlimit": "10",
                "srsearch": query,
            },
            timeout=self._timeout,
            user_agent=self._user_agent,
        )
        hits: list[Any] = ((data or {}).get("query") or {}).get("search") or []
        return [str(hit["title"]) for hit in hits if isinstance(hit, dict) and hit.get("title")]

    async def resolve_title(self, title: str) -> str | None:
        """Return the page title the summary should be fetched for, if any.

        Raises the last transport error when every search attempt failed.
        """
        last_error: GroupieTrackerError | None = None
        any_answered = False
        for hint in QUERY_HINTS:
            query = f"{title}{hint}"
            try:
                titles = await self._search_titles(query)
            except GroupieTrackerError as exc:
                logger.debug("wikipedia_search_failed", query=query, error=str(exc))
                last_error = exc
                continue
            any_answered = True
            if titles:
                return pick_title(titles, query)
        if not any_answered and last_error is not None:
            raise last_error
        return None

    async def get_summary(self, title: str) -> ArtistSummary | None:
        title = (title or "").strip()
        if not title:
            return None

        page_title = await self.resolve_title(title)
        if page_title is None:
            logger.info("wikipedia_no_match", title=title)
            return None

        try:
            data = await fetch_json(
                self._client,
                _SUMMARY_URL + quote(page_title, safe=""),
                provider=self.get_provider_name(),
                timeout=self._timeout,
                user_agent=self._user_agent,
            )
        except NotFoundError:
            return None

        extract = str((data or {}).get("extract") or "").strip()
        page_url = str((((data or {}).get("content_urls") or {}).get("desktop") or {}).get("page") or "")
        if not extract or not page_url:
            return None
        return ArtistSummary(title=page_title, extract=extract, page_url=page_url)

    def get_provider_name(self) -> str:
        return "wikipedia"
