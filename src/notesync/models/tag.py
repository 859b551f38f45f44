"""
Tag Model

Named, colored label. Names are unique case-insensitively, enforced by a
functional unique index on ``lower(name)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Index, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notesync.models.base import Base, IdMixin

if TYPE_CHECKING:
    from notesync.models.note import NoteTagRecord

TAG_NAME_MAX_LENGTH: int = 50


class TagRecord(Base, IdMixin):
    """
    Tag entity.

    Attributes:
        id: UUID string primary key.
        name: Trimmed display name (1-50 chars).
        color: HEX color code, e.g. ``#3B82F6``.
    """

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(TAG_NAME_MAX_LENGTH), nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False)

    note_tags: Mapped[list[NoteTagRecord]] = relationship(back_populates="tag")

    def __repr__(self) -> str:
        return f"<TagRecord(id={self.id:.8}, name='{self.name}')>"


Index("uq_tags_name_lower", func.lower(TagRecord.name), unique=True)
