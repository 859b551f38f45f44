"""
Note Filtering

Pure computation of the filtered note view from the full note list,
the selected tag filter (OR semantics) and the selected calendar date
(inclusive day bounds). The two filters combine with AND.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from datetime import UTC, date, datetime, time, tzinfo

from notesync.schemas.notes import Note


def start_of_day(day: date, tz: tzinfo = UTC) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def end_of_day(day: date, tz: tzinfo = UTC) -> datetime:
    """Last representable instant of ``day`` (23:59:59.999999)."""
    return datetime.combine(day, time.max, tzinfo=tz)


def filter_notes(
    notes: Iterable[Note],
    tag_ids: Collection[str] = (),
    selected_date: date | None = None,
    tz: tzinfo = UTC,
) -> list[Note]:
    """
    Apply the tag and date filters, keeping the input order.

    Args:
        notes: Full note list.
        tag_ids: Keep notes carrying at least one of these tags; empty means no tag filter.
        selected_date: Keep notes created within that day in ``tz``.
        tz: Timezone used to compute day boundaries.
    """
    filtered = list(notes)

    if tag_ids:
        wanted = set(tag_ids)
        filtered = [n for n in filtered if wanted.intersection(n.tag_ids)]

    if selected_date is not None:
        start = start_of_day(selected_date, tz)
        end = end_of_day(selected_date, tz)
        filtered = [n for n in filtered if start <= n.created_at <= end]

    return filtered
