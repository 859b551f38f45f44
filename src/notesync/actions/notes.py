"""
Note Actions

Stateless request/response functions over the persistence gateway.
Each one validates its input, calls the gateway and shapes the outcome
into a ``Success`` or ``Failure``; no exception escapes.
"""

from __future__ import annotations

import logging
from typing import Any

from notesync.actions.results import ActionResult, Success, failure_from
from notesync.core.errors import NotFoundError
from notesync.repositories.gateway import NotesGateway
from notesync.schemas.notes import Note
from notesync.services.validation import (
    validate_id,
    validate_note_create,
    validate_note_filters,
    validate_note_update,
)

logger = logging.getLogger(__name__)


async def create_note(gateway: NotesGateway, data: Any) -> ActionResult[Note]:
    """Create a note with optional title, content and tags."""
    try:
        validated = validate_note_create(data)
        note = await gateway.create_note(
            title=validated.title,
            content=validated.content,
            tag_ids=validated.tag_ids,
        )
        return Success(note)
    except Exception as e:
        return failure_from(e, "Failed to create note", logger)


async def list_notes(gateway: NotesGateway, filters: Any = None) -> ActionResult[list[Note]]:
    """All notes with tags, newest first, optionally filtered by tags (OR) and date range."""
    try:
        validated = validate_note_filters(filters)
        notes = await gateway.list_notes(
            tag_ids=validated.tag_ids,
            date_from=validated.date_from,
            date_to=validated.date_to,
        )
        return Success(notes)
    except Exception as e:
        return failure_from(e, "Failed to fetch notes", logger)


async def get_note(gateway: NotesGateway, note_id: str) -> ActionResult[Note]:
    try:
        validate_id(note_id)
        note = await gateway.get_note(note_id)
        if note is None:
            raise NotFoundError("Note", note_id)
        return Success(note)
    except Exception as e:
        return failure_from(e, "Failed to fetch note", logger)


async def update_note(gateway: NotesGateway, note_id: str, data: Any) -> ActionResult[Note]:
    """Update note title and/or content."""
    try:
        validate_id(note_id)
        validated = validate_note_update(data)
        note = await gateway.update_note(note_id, validated.changes())
        return Success(note)
    except Exception as e:
        return failure_from(e, "Failed to update note", logger)


async def delete_note(gateway: NotesGateway, note_id: str) -> ActionResult[Note]:
    """Delete a note and all its tag associations."""
    try:
        validate_id(note_id)
        note = await gateway.delete_note(note_id)
        return Success(note)
    except Exception as e:
        return failure_from(e, "Failed to delete note", logger)
