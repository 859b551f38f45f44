"""
Autosaver Unit Tests

Time is driven by ManualClock, so every debounce scenario is exact:
nothing is written until the test advances the clock past the delay.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Any

import pytest

from notesync.actions.results import ActionResult, Failure, Success
from notesync.schemas.notes import Note
from notesync.sync.autosave import Autosaver, SaveStatus
from tests.fakes import ManualClock

NOTE_ID = "3f2b6c1e-8a4d-4c7e-9b1a-5d6e7f8a9b0c"


class RecordingSave:
    """Stand-in for the update action; records payloads, can fail on demand."""

    def __init__(self) -> None:
        self.payloads: list[dict[str, Any]] = []
        self.times: list[float] = []
        self.fail_with: str | None = None
        self.clock: ManualClock | None = None

    async def __call__(self, note_id: str, payload: dict[str, Any]) -> ActionResult[Note]:
        self.payloads.append(payload)
        if self.clock is not None:
            self.times.append(self.clock.now)
        if self.fail_with is not None:
            return Failure(self.fail_with)
        now = datetime(2024, 1, 1, tzinfo=UTC)
        return Success(Note(id=note_id, created_at=now, updated_at=now, **payload))


@pytest.fixture
def save(clock: ManualClock) -> RecordingSave:
    recorder = RecordingSave()
    recorder.clock = clock
    return recorder


@pytest.fixture
def saver(save: RecordingSave, clock: ManualClock) -> Autosaver:
    return Autosaver(
        NOTE_ID,
        title="Draft",
        content="<p>start</p>",
        save=save,
        delay=2.0,
        call_later=clock.call_later,
    )


@pytest.mark.asyncio
async def test_single_save_after_last_edit(
    saver: Autosaver, save: RecordingSave, clock: ManualClock
) -> None:
    saver.edit_content("<p>one</p>")
    clock.advance(1.0)
    saver.edit_content("<p>two</p>")
    clock.advance(1.5)
    await saver.wait_idle()
    assert save.payloads == []

    clock.advance(0.5)
    await saver.wait_idle()

    assert save.payloads == [{"title": "Draft", "content": "<p>two</p>"}]
    assert save.times == [pytest.approx(3.0)]


@pytest.mark.asyncio
async def test_no_edits_no_save(saver: Autosaver, save: RecordingSave, clock: ManualClock) -> None:
    clock.advance(10)
    await saver.wait_idle()
    assert save.payloads == []
    assert saver.status is SaveStatus.IDLE


@pytest.mark.asyncio
async def test_status_transitions(saver: Autosaver, clock: ManualClock) -> None:
    assert saver.status is SaveStatus.IDLE
    saver.edit_title("New")
    assert saver.status is SaveStatus.EDITING
    assert saver.pending

    clock.advance(2.0)
    assert saver.status is SaveStatus.EDITING  # task scheduled, not yet run
    await saver.wait_idle()

    assert saver.status is SaveStatus.IDLE
    assert not saver.pending


@pytest.mark.asyncio
async def test_empty_title_saved_as_none(
    saver: Autosaver, save: RecordingSave, clock: ManualClock
) -> None:
    saver.edit_title("")
    clock.advance(2.0)
    await saver.wait_idle()
    assert save.payloads == [{"title": None, "content": "<p>start</p>"}]


@pytest.mark.asyncio
async def test_title_and_content_share_one_timer(
    saver: Autosaver, save: RecordingSave, clock: ManualClock
) -> None:
    saver.edit_title("T")
    clock.advance(0.5)
    saver.edit_content("<p>c</p>")
    assert clock.armed == 1
    clock.advance(2.0)
    await saver.wait_idle()
    assert save.payloads == [{"title": "T", "content": "<p>c</p>"}]


@pytest.mark.asyncio
async def test_failure_sets_error_until_next_success(
    saver: Autosaver, save: RecordingSave, clock: ManualClock
) -> None:
    save.fail_with = "Failed to update note"
    saver.edit_content("<p>x</p>")
    clock.advance(2.0)
    await saver.wait_idle()

    assert saver.status is SaveStatus.ERROR
    assert saver.error == "Failed to update note"

    # Editing again does not clear the error by itself
    saver.edit_content("<p>y</p>")
    assert saver.error == "Failed to update note"

    save.fail_with = None
    clock.advance(2.0)
    await saver.wait_idle()
    assert saver.status is SaveStatus.IDLE
    assert saver.error is None


@pytest.mark.asyncio
async def test_cancel_prevents_future_save(
    saver: Autosaver, save: RecordingSave, clock: ManualClock
) -> None:
    saver.edit_content("<p>x</p>")
    saver.cancel()
    clock.advance(5.0)
    await saver.wait_idle()
    assert save.payloads == []
    assert saver.status is SaveStatus.IDLE


@pytest.mark.asyncio
async def test_on_saved_receives_note(save: RecordingSave, clock: ManualClock) -> None:
    seen: list[Note] = []

    async def on_saved(note: Note) -> None:
        seen.append(note)

    saver = Autosaver(
        NOTE_ID,
        save=save,
        on_saved=on_saved,
        delay=2.0,
        call_later=clock.call_later,
    )
    saver.edit_content("<p>hi</p>")
    clock.advance(2.0)
    await saver.wait_idle()

    assert [n.content for n in seen] == ["<p>hi</p>"]


@pytest.mark.asyncio
async def test_on_saved_not_called_on_failure(save: RecordingSave, clock: ManualClock) -> None:
    calls = 0

    async def on_saved(note: Note) -> None:
        nonlocal calls
        calls += 1

    save.fail_with = "boom"
    saver = Autosaver(NOTE_ID, save=save, on_saved=on_saved, delay=2.0, call_later=clock.call_later)
    saver.edit_content("<p>hi</p>")
    clock.advance(2.0)
    await saver.wait_idle()
    assert calls == 0


class GatedSave(RecordingSave):
    """Blocks every save on ``gate`` and tracks how many run at once."""

    def __init__(self) -> None:
        super().__init__()
        self.gate = asyncio.Event()
        self.active = 0
        self.max_active = 0

    async def __call__(self, note_id: str, payload: dict[str, Any]) -> ActionResult[Note]:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await self.gate.wait()
            return await super().__call__(note_id, payload)
        finally:
            self.active -= 1


@pytest.mark.asyncio
async def test_edit_during_save_is_saved_after_it(clock: ManualClock) -> None:
    save = GatedSave()
    saver = Autosaver(NOTE_ID, save=save, delay=2.0, call_later=clock.call_later)

    saver.edit_content("a")
    clock.advance(2.0)
    await asyncio.sleep(0)  # first save is now waiting on the gate
    assert saver.status is SaveStatus.SAVING
    assert save.active == 1

    saver.edit_content("b")
    assert saver.status is SaveStatus.EDITING
    clock.advance(2.0)
    await asyncio.sleep(0)  # second save queued behind the first
    assert save.active == 1

    save.gate.set()
    await saver.wait_idle()

    assert save.max_active == 1
    assert save.payloads == [
        {"title": None, "content": "a"},
        {"title": None, "content": "b"},
    ]
    assert saver.status is SaveStatus.IDLE


@pytest.mark.asyncio
async def test_flush_saves_armed_draft_now(
    saver: Autosaver, save: RecordingSave, clock: ManualClock
) -> None:
    saver.edit_content("<p>unsaved</p>")
    saver.flush()
    await saver.wait_idle()

    assert save.payloads == [{"title": "Draft", "content": "<p>unsaved</p>"}]
    assert save.times == [0.0]
    assert clock.armed == 0
    assert not saver.pending


@pytest.mark.asyncio
async def test_flush_without_edits_is_noop(saver: Autosaver, save: RecordingSave) -> None:
    saver.flush()
    await saver.wait_idle()
    assert save.payloads == []
