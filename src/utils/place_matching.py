"""Candidate scoring and US-state typo correction for the geocoders."""

from __future__ import annotations

from typing import Sequence, TypeVar

from src.utils.text_normalizer import edit_distance, title_words

_C = TypeVar("_C")

US_STATES: tuple[str, ...] = (
    "alabama", "alaska", "arizona", "arkansas", "california", "colorado", "connecticut",
    "delaware", "florida", "georgia", "hawaii", "idaho", "illinois", "indiana", "iowa",
    "kansas", "kentucky", "louisiana", "maine", "maryland", "massachusetts", "michigan",
    "minnesota", "mississippi", "missouri", "montana", "nebraska", "nevada",
    "new hampshire", "new jersey", "new mexico", "new york", "north carolina",
    "north dakota", "ohio", "oklahoma", "oregon", "pennsylvania", "rhode island",
    "south carolina", "south dakota", "tennessee", "texas", "utah", "vermont",
    "virginia", "washington", "west virginia", "wisconsin", "wyoming",
)

_MAX_STATE_DISTANCE = 2
_DISTANCE_BONUS = {0: 30, 1: 20, 2: 10}


def score_candidate(query: str, name: str, admin: str = "") -> int:
    """Score how well a geocoder candidate named *name* matches *query*.

    exact +100, prefix +40, substring +20, edit distance 0/1/2 adds
    30/20/10, and +5 when the candidate's admin region contains the query.
    """
    q = query.strip().lower()
    n = name.strip().lower()
    a = admin.strip().lower()
    if not q:
        return 0

    score = 0
    if n == q:
        score += 100
    if n.startswith(q):
        score += 40
    if q in n:
        score += 20
    if n:
        score += _DISTANCE_BONUS.get(edit_distance(q, n), 0)
    if a and q in a:
        score += 5
    return score


def pick_best(query: str, candidates: Sequence[_C], name_of, admin_of) -> _C | None:
    """Return the highest-scoring candidate; ties keep the earlier one."""
    best: _C | None = None
    best_score = -1
    for candidate in candidates:
        score = score_candidate(query, name_of(candidate), admin_of(candidate))
        if score > best_score:
            best, best_score = candidate, score
    return best


def normalize_us_state_name(text: str) -> str | None:
    """Return the title-cased US state closest to *text*, within two edits.

    >>> normalize_us_state_name("arizone")
    'Arizona'
    >>> normalize_us_state_name("paris") is None
    True
    """
    query = " ".join(text.lower().replace(",", " ").split())
    if not query:
        return None

    best = min(US_STATES, key=lambda state: edit_distance(query, state))
    if edit_distance(query, best) <= _MAX_STATE_DISTANCE:
        return title_words(best)
    return None
