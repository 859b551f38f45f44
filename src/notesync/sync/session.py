"""
Notes Session

In-memory state container for one client: the cached notes and tags,
the selected note and its editing session, the tag filter, the selected
date and the derived filtered view.

Only the transition methods below mutate the cache, and only in response
to successful gateway results. Readers get tuples and read-only
properties. The filtered view is recomputed after every change to the
cache, the tag filter or the selected date.

Known races, kept on purpose:
    - Selecting another note (or deleting the selected one) neither
      cancels nor awaits the previous note's autosave; a stale save may
      land after the user moved on and will trigger its own refresh.
    - Tag toggles and deletes are not serialized against autosaves of
      the same note.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import UTC, date, tzinfo
from typing import Any
from zoneinfo import ZoneInfo

from notesync.actions import notes as note_actions
from notesync.actions import tags as tag_actions
from notesync.actions.results import ActionResult, Failure
from notesync.core.config import settings
from notesync.repositories.gateway import NotesGateway
from notesync.schemas.notes import Note
from notesync.schemas.tags import Tag, TagDeletion
from notesync.sync.autosave import Autosaver, CallLater, SaveStatus
from notesync.sync.filters import filter_notes

logger = logging.getLogger(__name__)

NO_SELECTION = "No note selected"


def _zone(name: str) -> tzinfo:
    # UTC needs no tz database
    return UTC if name.upper() == "UTC" else ZoneInfo(name)


class NotesSession:
    """
    Client synchronization core.

    Usage::

        session = NotesSession(SqlGateway(get_session_factory()))
        await session.load()
        await session.create_note()
        session.edit_content("<p>hello</p>")   # saved ~2s after the last edit
        await session.toggle_note_tag(tag.id)  # written immediately
    """

    def __init__(
        self,
        gateway: NotesGateway,
        *,
        autosave_delay: float | None = None,
        timezone: tzinfo | None = None,
        call_later: CallLater | None = None,
    ) -> None:
        self._gateway = gateway
        self._autosave_delay = settings.AUTOSAVE_DELAY if autosave_delay is None else autosave_delay
        self._tz = timezone or _zone(settings.TIMEZONE)
        self._call_later = call_later

        self._notes: list[Note] = []
        self._tags: list[Tag] = []
        self._selected: Note | None = None
        self._selected_tag_ids: list[str] = []
        self._selected_date: date | None = None
        self._filtered: list[Note] = []

        self._editor: Autosaver | None = None
        # Editors of previously selected notes that may still fire
        self._retired: list[Autosaver] = []

        self.last_error: str | None = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def notes(self) -> tuple[Note, ...]:
        return tuple(self._notes)

    @property
    def tags(self) -> tuple[Tag, ...]:
        return tuple(self._tags)

    @property
    def filtered_notes(self) -> tuple[Note, ...]:
        return tuple(self._filtered)

    @property
    def selected_note(self) -> Note | None:
        return self._selected

    @property
    def selected_tag_ids(self) -> tuple[str, ...]:
        return tuple(self._selected_tag_ids)

    @property
    def selected_date(self) -> date | None:
        return self._selected_date

    @property
    def editor(self) -> Autosaver | None:
        return self._editor

    @property
    def save_status(self) -> SaveStatus:
        return self._editor.status if self._editor is not None else SaveStatus.IDLE

    @property
    def autosave_error(self) -> str | None:
        return self._editor.error if self._editor is not None else None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Initial fetch of notes and tags, concurrently."""
        notes_result, tags_result = await asyncio.gather(
            note_actions.list_notes(self._gateway),
            tag_actions.list_tags(self._gateway),
        )
        self._apply_notes(notes_result)
        self._apply_tags(tags_result)
        logger.info("Session loaded: %d notes, %d tags", len(self._notes), len(self._tags))

    async def refresh_notes(self) -> ActionResult[list[Note]]:
        """Re-fetch every note and re-point the selection to the fresh copy."""
        result = await note_actions.list_notes(self._gateway)
        self._apply_notes(result)
        return result

    async def refresh_tags(self) -> ActionResult[list[Tag]]:
        result = await tag_actions.list_tags(self._gateway)
        self._apply_tags(result)
        return result

    def _apply_notes(self, result: ActionResult[list[Note]]) -> None:
        if not result.ok:
            self._record(result)
            return
        self._notes = list(result.data)
        if self._selected is not None:
            fresh = self._find_note(self._selected.id)
            if fresh is None:
                logger.info("Selected note %s no longer exists", self._selected.id)
                self._retire_editor()
            self._selected = fresh
        self._recompute()

    def _apply_tags(self, result: ActionResult[list[Tag]]) -> None:
        if not result.ok:
            self._record(result)
            return
        self._tags = list(result.data)

    # ------------------------------------------------------------------
    # Selection and editing
    # ------------------------------------------------------------------

    def select_note(self, note_id: str | None) -> Note | None:
        """
        Select a cached note and open an editing session for it.

        The previous note's autosaver keeps running. Returns the selected
        note, or None when ``note_id`` is None or unknown.
        """
        if note_id is None:
            self.clear_selection()
            return None
        note = self._find_note(note_id)
        if note is None:
            logger.warning("Cannot select unknown note %s", note_id)
            return None
        if self._selected is None or self._selected.id != note.id:
            self._retire_editor()
            self._editor = Autosaver(
                note.id,
                title=note.title or "",
                content=note.content,
                save=self._save_note,
                on_saved=self._on_autosaved,
                delay=self._autosave_delay,
                call_later=self._call_later,
            )
        self._selected = note
        return note

    def clear_selection(self) -> None:
        self._retire_editor()
        self._selected = None

    def edit_title(self, title: str) -> bool:
        """Route a title edit to the active editing session. False if none."""
        if self._editor is None:
            return False
        self._editor.edit_title(title)
        return True

    def edit_content(self, content: str) -> bool:
        if self._editor is None:
            return False
        self._editor.edit_content(content)
        return True

    async def _save_note(self, note_id: str, payload: dict[str, Any]) -> ActionResult[Note]:
        result = await note_actions.update_note(self._gateway, note_id, payload)
        if not result.ok:
            self._record(result)
        return result

    async def _on_autosaved(self, note: Note) -> None:
        await self.refresh_notes()

    def _retire_editor(self) -> None:
        """Detach the active editor without cancelling it."""
        if self._editor is not None and self._editor.pending:
            self._retired.append(self._editor)
        self._editor = None
        self._retired = [e for e in self._retired if e.pending]

    # ------------------------------------------------------------------
    # Note mutations
    # ------------------------------------------------------------------

    async def create_note(self) -> ActionResult[Note]:
        """Create an empty note, refresh, and select it."""
        result = await note_actions.create_note(self._gateway, {"title": None, "content": ""})
        if not result.ok:
            return self._record(result)
        await self.refresh_notes()
        if self.select_note(result.data.id) is None:
            # Not in the refreshed list (concurrent delete or failed refresh)
            self._notes.insert(0, result.data)
            self._recompute()
            self.select_note(result.data.id)
        return result

    async def delete_selected_note(self) -> ActionResult[Note]:
        """Delete the selected note; pending autosave for it is left alone."""
        if self._selected is None:
            return self._record(Failure(NO_SELECTION))
        result = await note_actions.delete_note(self._gateway, self._selected.id)
        if not result.ok:
            return self._record(result)
        self.clear_selection()
        await self.refresh_notes()
        return result

    async def toggle_note_tag(self, tag_id: str) -> ActionResult[None]:
        """Add or remove a tag on the selected note right away (no debounce)."""
        if self._selected is None:
            return self._record(Failure(NO_SELECTION))
        current = self._selected.tag_ids
        new_ids = [t for t in current if t != tag_id] if tag_id in current else [*current, tag_id]
        result = await tag_actions.replace_tags(self._gateway, self._selected.id, new_ids)
        if not result.ok:
            self._record(result)
        await self.refresh_notes()
        return result

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def toggle_tag_filter(self, tag_id: str) -> None:
        if tag_id in self._selected_tag_ids:
            self._selected_tag_ids.remove(tag_id)
        else:
            self._selected_tag_ids.append(tag_id)
        self._recompute()

    def clear_tag_filters(self) -> None:
        self._selected_tag_ids = []
        self._recompute()

    def select_date(self, day: date | None) -> None:
        self._selected_date = day
        self._recompute()

    def _recompute(self) -> None:
        self._filtered = filter_notes(
            self._notes,
            self._selected_tag_ids,
            self._selected_date,
            self._tz,
        )

    # ------------------------------------------------------------------
    # Tag management
    # ------------------------------------------------------------------

    async def create_tag(self, name: str, color: str) -> ActionResult[Tag]:
        result = await tag_actions.create_tag(self._gateway, {"name": name, "color": color})
        return await self._after_tag_change(result)

    async def update_tag(self, tag_id: str, **changes: Any) -> ActionResult[Tag]:
        result = await tag_actions.update_tag(self._gateway, tag_id, changes)
        return await self._after_tag_change(result)

    async def delete_tag(self, tag_id: str) -> ActionResult[TagDeletion]:
        result = await tag_actions.delete_tag(self._gateway, tag_id)
        if result.ok and tag_id in self._selected_tag_ids:
            self._selected_tag_ids.remove(tag_id)
        return await self._after_tag_change(result)

    async def _after_tag_change(self, result: Any) -> Any:
        if not result.ok:
            return self._record(result)
        await self.refresh_tags()
        await self.refresh_notes()
        return result

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _editors(self) -> Sequence[Autosaver]:
        if self._editor is None:
            return [*self._retired]
        return [*self._retired, self._editor]

    async def wait_idle(self) -> None:
        """Wait for every in-flight save, including retired editors'."""
        await asyncio.gather(*(e.wait_idle() for e in self._editors()))
        self._retired = [e for e in self._retired if e.pending]

    async def close(self) -> None:
        """
        Write every pending draft now, then wait for all saves.

        Armed debounce timers are flushed rather than dropped, so no
        timer is left to fire once the gateway is gone.
        """
        for editor in self._editors():
            editor.flush()
        await self.wait_idle()

    def _find_note(self, note_id: str) -> Note | None:
        return next((n for n in self._notes if n.id == note_id), None)

    def _record(self, result: Failure) -> Failure:
        self.last_error = result.error
        logger.warning("Session operation failed: %s", result.error)
        return result
