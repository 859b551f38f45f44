"""Tests for the client-side tag/date filter."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from notesync.schemas.notes import Note
from notesync.schemas.tags import Tag
from notesync.sync.filters import end_of_day, filter_notes, start_of_day

TAG_A = Tag(id="a" * 8 + "-0000-4000-8000-" + "0" * 12, name="A", color="#111111")
TAG_B = Tag(id="b" * 8 + "-0000-4000-8000-" + "0" * 12, name="B", color="#222222")


def _note(note_id: str, created_at: datetime, tags: list[Tag]) -> Note:
    return Note(
        id=note_id,
        title=note_id,
        content="",
        created_at=created_at,
        updated_at=created_at,
        tags=tags,
    )


@pytest.fixture
def notes() -> list[Note]:
    return [
        _note("n2", datetime(2024, 1, 2, 8, 30, tzinfo=UTC), [TAG_B]),
        _note("n1", datetime(2024, 1, 1, 14, 0, tzinfo=UTC), [TAG_A]),
    ]


def _ids(notes: list[Note]) -> list[str]:
    return [n.id for n in notes]


def test_no_filters_returns_everything(notes: list[Note]) -> None:
    assert _ids(filter_notes(notes)) == ["n2", "n1"]


def test_tag_filter(notes: list[Note]) -> None:
    assert _ids(filter_notes(notes, tag_ids={TAG_A.id})) == ["n1"]


def test_tag_filter_is_or(notes: list[Note]) -> None:
    assert _ids(filter_notes(notes, tag_ids={TAG_A.id, TAG_B.id})) == ["n2", "n1"]


def test_date_filter(notes: list[Note]) -> None:
    assert _ids(filter_notes(notes, selected_date=date(2024, 1, 2))) == ["n2"]


def test_tag_and_date_combine_with_and(notes: list[Note]) -> None:
    assert filter_notes(notes, tag_ids={TAG_A.id}, selected_date=date(2024, 1, 2)) == []


def test_untagged_note_excluded_by_tag_filter() -> None:
    untagged = _note("n3", datetime(2024, 1, 1, tzinfo=UTC), [])
    assert filter_notes([untagged], tag_ids={TAG_A.id}) == []


def test_day_bounds_are_inclusive() -> None:
    day = date(2024, 3, 10)
    first = _note("first", start_of_day(day), [])
    last = _note("last", end_of_day(day), [])
    next_day = _note("next", end_of_day(day) + timedelta(microseconds=1), [])
    assert _ids(filter_notes([first, last, next_day], selected_date=day)) == ["first", "last"]


def test_day_bounds_follow_timezone() -> None:
    tz = timezone(timedelta(hours=-5))
    # 03:00 UTC on Jan 2 is still Jan 1 at UTC-5
    note = _note("late", datetime(2024, 1, 2, 3, 0, tzinfo=UTC), [])
    assert _ids(filter_notes([note], selected_date=date(2024, 1, 1), tz=tz)) == ["late"]
    assert filter_notes([note], selected_date=date(2024, 1, 2), tz=tz) == []


def test_end_of_day_is_last_microsecond() -> None:
    end = end_of_day(date(2024, 1, 1))
    assert end.hour == 23 and end.minute == 59 and end.second == 59
    assert end.microsecond == 999_999
