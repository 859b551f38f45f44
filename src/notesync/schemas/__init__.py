"""Schemas package."""

from notesync.schemas.common import EntityId, is_valid_id
from notesync.schemas.notes import Note, NoteCreate, NoteFilters, NoteUpdate
from notesync.schemas.tags import Tag, TagAssignment, TagCreate, TagDeletion, TagUpdate

__all__ = [
    "EntityId",
    "is_valid_id",
    "Note",
    "NoteCreate",
    "NoteFilters",
    "NoteUpdate",
    "Tag",
    "TagAssignment",
    "TagCreate",
    "TagDeletion",
    "TagUpdate",
]
