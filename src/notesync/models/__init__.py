"""Models package - re-exports all models for convenient imports."""

from notesync.models.base import Base, IdMixin, TimestampMixin, new_id
from notesync.models.note import NoteRecord, NoteTagRecord
from notesync.models.tag import TagRecord

__all__ = [
    "Base",
    "IdMixin",
    "TimestampMixin",
    "new_id",
    "NoteRecord",
    "NoteTagRecord",
    "TagRecord",
]
