"""Text helpers for artist names, place names and display strings.

Three concerns live here:

1. **Matching** -- :func:`normalize_for_match` folds accents, case and
   punctuation so "Beyoncé" and "beyonce" hit the same suggestion, and
   :func:`edit_distance` wraps rapidfuzz's Levenshtein distance for the
   geocoder's typo tolerance.

2. **Display** -- :func:`title_words` turns dataset tokens such as
   ``"los_angeles"`` into "Los Angeles".

3. **Compact numbers** -- :func:`format_int_compact` renders follower and
   fan counts as "1.2k" / "3.4m" for artist meta lines.
"""

from __future__ import annotations

import re
import unicodedata

from rapidfuzz.distance import Levenshtein

_NON_ALNUM_RE = re.compile(r"[^0-9a-z]+")


def normalize_for_match(text: str) -> str:
    """Lower-case, strip accents, and collapse non-alphanumerics to single spaces.

    >>> normalize_for_match("  Beyoncé & Jay-Z ")
    'beyonce jay z'
    """
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM_RE.sub(" ", stripped.lower()).strip()


def title_words(text: str) -> str:
    """Replace underscores/dashes with spaces and capitalise each word.

    >>> title_words("saint_petersburg")
    'Saint Petersburg'
    """
    words = text.replace("_", " ").replace("-", " ").split()
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between *a* and *b* (case-sensitive)."""
    return Levenshtein.distance(a, b)


_COMPACT_UNITS = ((1_000_000_000, "b"), (1_000_000, "m"), (1_000, "k"))


def format_int_compact(value: int) -> str:
    """Render *value* with a k/m/b suffix and at most one decimal.

    >>> format_int_compact(999), format_int_compact(1200), format_int_compact(2_000_000)
    ('999', '1.2k', '2m')
    """
    if value < 0:
        return "-" + format_int_compact(-value)
    for index, (threshold, suffix) in enumerate(_COMPACT_UNITS):
        if value >= threshold:
            text = f"{value / threshold:.1f}".removesuffix(".0")
            if text == "1000" and index > 0:
                # Rounded up into the next unit (999_999 is "1m", not "1000k").
                threshold, suffix = _COMPACT_UNITS[index - 1]
                text = f"{value / threshold:.1f}".removesuffix(".0")
            return f"{text}{suffix}"
    return str(value)
