"""Unit tests for release-date parsing, merge-by-id and the canonical sort."""

from __future__ import annotations

from datetime import date

import pytest

from src.models.entities import ReleaseRecord, TrackRecord
from src.utils.ordering import merge_by_id, sort_newest_first
from src.utils.release_dates import parse_release_date


def _release(release_id: str, title: str, raw: str = "") -> ReleaseRecord:
    return ReleaseRecord(
        id=release_id,
        title=title,
        release_date=parse_release_date(raw),
        raw_release_date=raw,
    )


# ======================================================================
# parse_release_date
# ======================================================================


class TestParseReleaseDate:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2024", date(2024, 1, 1)),
            ("2024-06", date(2024, 6, 1)),
            ("2024-06-01", date(2024, 6, 1)),
            ("2024-06-01T12:34:56Z", date(2024, 6, 1)),
            ("2024-06-01T12:34:56.123Z", date(2024, 6, 1)),
        ],
    )
    def test_supported_formats(self, raw: str, expected: date) -> None:
        assert parse_release_date(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "\t\n"])
    def test_empty_and_whitespace_are_unparsable(self, raw: str) -> None:
        assert parse_release_date(raw) is None

    def test_none_is_unparsable(self) -> None:
        assert parse_release_date(None) is None

    def test_deezer_unknown_date_is_unparsable(self) -> None:
        assert parse_release_date("0000-00-00") is None

    def test_impossible_calendar_date_is_unparsable(self) -> None:
        assert parse_release_date("2023-02-30") is None

    def test_offset_timestamp(self) -> None:
        assert parse_release_date("2019-11-15T08:00:00+02:00") == date(2019, 11, 15)

    def test_free_text_is_unparsable(self) -> None:
        assert parse_release_date("June 2024") is None

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert parse_release_date("  1999-12-31  ") == date(1999, 12, 31)

    def test_space_separated_time_part(self) -> None:
        assert parse_release_date("2010-10-04 00:00:00") == date(2010, 10, 4)

    @pytest.mark.parametrize("raw", ["2024-13", "2024-06-01Tnoon", "not-a-date", "99999-01-01"])
    def test_malformed_iso_forms_are_unparsable(self, raw: str) -> None:
        assert parse_release_date(raw) is None


# ======================================================================
# sort_newest_first
# ======================================================================


class TestSortNewestFirst:
    def test_newest_first(self) -> None:
        items = [
            _release("1", "Old", "2001-01-01"),
            _release("2", "New", "2023-05-01"),
            _release("3", "Mid", "2012"),
        ]
        assert [r.title for r in sort_newest_first(items)] == ["New", "Mid", "Old"]

    def test_same_date_orders_title_case_insensitively(self) -> None:
        items = [_release("1", "B", "2020-01-01"), _release("2", "a", "2020-01-01")]
        assert [r.title for r in sort_newest_first(items)] == ["a", "B"]

    def test_dated_sorts_before_undated_regardless_of_value(self) -> None:
        items = [_release("1", "Undated"), _release("2", "Ancient", "1901")]
        assert [r.title for r in sort_newest_first(items)] == ["Ancient", "Undated"]

    def test_id_breaks_remaining_ties_numerically(self) -> None:
        items = [_release("10", "Same"), _release("9", "Same"), _release("abc", "Same")]
        assert [r.id for r in sort_newest_first(items)] == ["9", "10", "abc"]

    def test_order_is_independent_of_input_order(self) -> None:
        items = [
            _release("1", "x", "2020"),
            _release("2", "Y", "2020"),
            _release("3", "z"),
            _release("4", "w", "2021-03"),
        ]
        forward = [r.id for r in sort_newest_first(items)]
        backward = [r.id for r in sort_newest_first(list(reversed(items)))]
        assert forward == backward == ["4", "1", "2", "3"]

    def test_limit_truncates_after_sorting(self) -> None:
        items = [_release(str(i), f"t{i}", f"20{10 + i}") for i in range(5)]
        result = sort_newest_first(items, limit=2)
        assert [r.id for r in result] == ["4", "3"]

    def test_tracks_use_same_ordering(self) -> None:
        tracks = [
            TrackRecord(id="a", title="Song B"),
            TrackRecord(id="b", title="song a"),
        ]
        assert [t.title for t in sort_newest_first(tracks)] == ["song a", "Song B"]


# ======================================================================
# merge_by_id
# ======================================================================


class TestMergeById:
    def test_keeps_first_seen_position(self) -> None:
        items = [_release("1", "A"), _release("2", "B"), _release("1", "A again")]
        merged = merge_by_id(items)
        assert [r.id for r in merged] == ["1", "2"]

    def test_valid_date_replaces_missing_date(self) -> None:
        items = [_release("1", "A"), _release("1", "A", "2020-02-02")]
        merged = merge_by_id(items)
        assert len(merged) == 1
        assert merged[0].release_date == date(2020, 2, 2)

    def test_missing_date_never_replaces_valid_date(self) -> None:
        items = [_release("1", "A", "2020-02-02"), _release("1", "A", "0000-00-00")]
        merged = merge_by_id(items)
        assert merged[0].release_date == date(2020, 2, 2)

    def test_newer_date_wins(self) -> None:
        items = [_release("1", "A", "2019"), _release("1", "A", "2021")]
        assert merge_by_id(items)[0].release_date == date(2021, 1, 1)

    def test_items_without_id_are_dropped(self) -> None:
        assert merge_by_id([_release("", "Nameless", "2020")]) == []
