"""Repositories package."""

from notesync.repositories.base import BaseRepository
from notesync.repositories.gateway import NotesGateway, SqlGateway
from notesync.repositories.notes import NoteRepository
from notesync.repositories.tags import TagRepository

__all__ = [
    "BaseRepository",
    "NotesGateway",
    "SqlGateway",
    "NoteRepository",
    "TagRepository",
]
