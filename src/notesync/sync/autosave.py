"""
Debounced Autosave

One ``Autosaver`` per editing session (i.e. per selected note). Edits
update a draft and restart a fixed-delay timer; when the timer elapses
the draft is captured as it is at that moment and written with a single
update call.

State machine::

    IDLE/ERROR --edit--> EDITING --timer--> SAVING --ok--> IDLE (+ on_saved)
                                                  \\--fail--> ERROR

Cancelling the timer only prevents a future firing. A save already in
flight is never retracted, and switching notes does not cancel the
previous note's autosaver.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Protocol

from notesync.actions.results import ActionResult
from notesync.core.config import settings
from notesync.schemas.notes import Note

logger = logging.getLogger(__name__)


class SaveStatus(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    SAVING = "saving"
    ERROR = "error"


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


CallLater = Callable[[float, Callable[[], None]], TimerHandle]
SaveFn = Callable[[str, dict[str, Any]], Awaitable[ActionResult[Note]]]
SavedFn = Callable[[Note], Awaitable[Any]]


class Autosaver:
    """
    Debounced title/content writer for a single note.

    Args:
        note_id: Note being edited.
        title: Initial title shown in the editor ("" for untitled).
        content: Initial HTML content.
        save: Update call, e.g. ``notesync.actions.notes.update_note`` bound to a gateway.
        on_saved: Awaited after every successful save (the session refresh).
        delay: Debounce delay in seconds (default ``AUTOSAVE_DELAY_MS``).
        call_later: Timer factory; defaults to the running loop's ``call_later``.
    """

    def __init__(
        self,
        note_id: str,
        *,
        title: str = "",
        content: str = "",
        save: SaveFn,
        on_saved: SavedFn | None = None,
        delay: float | None = None,
        call_later: CallLater | None = None,
    ) -> None:
        self.note_id = note_id
        self.title = title
        self.content = content
        self.status = SaveStatus.IDLE
        self.error: str | None = None
        self._save_fn = save
        self._on_saved = on_saved
        self._delay = settings.AUTOSAVE_DELAY if delay is None else delay
        self._call_later = call_later
        self._timer: TimerHandle | None = None
        # Serializes timer-driven saves of this note
        self._lock = asyncio.Lock()
        self._tasks: set[asyncio.Task[None]] = set()

    def __repr__(self) -> str:
        return f"<Autosaver(note={self.note_id:.8}, status={self.status.value})>"

    @property
    def pending(self) -> bool:
        """True while a timer is armed or a save is in flight."""
        return self._timer is not None or bool(self._tasks)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def edit_title(self, title: str) -> None:
        self.title = title
        self._restart_timer()

    def edit_content(self, content: str) -> None:
        self.content = content
        self._restart_timer()

    def cancel(self) -> None:
        """Disarm the timer. Does not affect a save already in flight."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            if self.status is SaveStatus.EDITING:
                self.status = SaveStatus.IDLE

    def flush(self) -> None:
        """Fire an armed timer now instead of waiting for the delay."""
        if self._timer is not None:
            self._timer.cancel()
            self._elapse()

    async def wait_idle(self) -> None:
        """Wait for in-flight saves (not for an armed timer)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def _restart_timer(self) -> None:
        self.status = SaveStatus.EDITING
        if self._timer is not None:
            self._timer.cancel()
        call_later = self._call_later or asyncio.get_running_loop().call_later
        self._timer = call_later(self._delay, self._elapse)
        logger.debug("Autosave timer armed for note %s (%.2fs)", self.note_id, self._delay)

    def _elapse(self) -> None:
        self._timer = None
        # Draft as of now, not as of when the timer was armed
        payload = {"title": self.title or None, "content": self.content}
        task = asyncio.get_running_loop().create_task(self._save(payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _save(self, payload: dict[str, Any]) -> None:
        async with self._lock:
            self.status = SaveStatus.SAVING
            result = await self._save_fn(self.note_id, payload)

        # An edit during the save re-armed the timer; keep EDITING in that case
        if result.ok:
            self.error = None
            if self.status is SaveStatus.SAVING:
                self.status = SaveStatus.IDLE
            logger.debug("Autosaved note %s", self.note_id)
            if self._on_saved is not None:
                await self._on_saved(result.data)
        else:
            self.error = result.error
            if self.status is SaveStatus.SAVING:
                self.status = SaveStatus.ERROR
            logger.warning("Autosave failed for note %s: %s", self.note_id, result.error)
