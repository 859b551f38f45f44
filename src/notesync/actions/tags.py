"""
Tag Actions

Tag CRUD plus the three NoteTag operations. Create and update check
name uniqueness (case-insensitive, excluding self on update) before any
write reaches the gateway.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from notesync.actions.results import ActionResult, Success, failure_from
from notesync.core.errors import ConflictError
from notesync.repositories.gateway import NotesGateway
from notesync.schemas.tags import Tag, TagDeletion
from notesync.services.validation import (
    validate_id,
    validate_tag_assignment,
    validate_tag_create,
    validate_tag_update,
)

logger = logging.getLogger(__name__)


async def create_tag(gateway: NotesGateway, data: Any) -> ActionResult[Tag]:
    try:
        validated = validate_tag_create(data)
        if await gateway.find_tag_by_name(validated.name) is not None:
            raise ConflictError()
        tag = await gateway.create_tag(name=validated.name, color=validated.color)
        return Success(tag)
    except Exception as e:
        return failure_from(e, "Failed to create tag", logger)


async def list_tags(gateway: NotesGateway) -> ActionResult[list[Tag]]:
    """All tags sorted by name."""
    try:
        return Success(await gateway.list_tags())
    except Exception as e:
        return failure_from(e, "Failed to fetch tags", logger)


async def update_tag(gateway: NotesGateway, tag_id: str, data: Any) -> ActionResult[Tag]:
    try:
        validate_id(tag_id)
        validated = validate_tag_update(data)
        if validated.name is not None:
            if await gateway.find_tag_by_name(validated.name, exclude_id=tag_id) is not None:
                raise ConflictError()
        tag = await gateway.update_tag(tag_id, validated.changes())
        return Success(tag)
    except Exception as e:
        return failure_from(e, "Failed to update tag", logger)


async def delete_tag(gateway: NotesGateway, tag_id: str) -> ActionResult[TagDeletion]:
    """Delete a tag; notes are kept, their links to it removed."""
    try:
        validate_id(tag_id)
        return Success(await gateway.delete_tag(tag_id))
    except Exception as e:
        return failure_from(e, "Failed to delete tag", logger)


async def assign_tags(
    gateway: NotesGateway, note_id: str, tag_ids: Iterable[str]
) -> ActionResult[None]:
    """Link tags to a note. Already-linked tags are a no-op."""
    try:
        validated = validate_tag_assignment(note_id, tag_ids)
        await gateway.assign_tags(validated.note_id, validated.tag_ids)
        return Success(None)
    except Exception as e:
        return failure_from(e, "Failed to assign tags", logger)


async def remove_tags(
    gateway: NotesGateway, note_id: str, tag_ids: Iterable[str]
) -> ActionResult[None]:
    try:
        validated = validate_tag_assignment(note_id, tag_ids)
        await gateway.remove_tags(validated.note_id, validated.tag_ids)
        return Success(None)
    except Exception as e:
        return failure_from(e, "Failed to remove tags", logger)


async def replace_tags(
    gateway: NotesGateway, note_id: str, tag_ids: Iterable[str]
) -> ActionResult[None]:
    """Replace every tag on a note with ``tag_ids`` (empty list clears them)."""
    try:
        validated = validate_tag_assignment(note_id, tag_ids)
        await gateway.replace_tags(validated.note_id, validated.tag_ids)
        return Success(None)
    except Exception as e:
        return failure_from(e, "Failed to replace tags", logger)
