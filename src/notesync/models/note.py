"""
Note and NoteTag Models

Notes hold rich-text content serialized as HTML. NoteTag is the
many-to-many association with tags; its composite primary key makes a
given (note_id, tag_id) pair occur at most once.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notesync.models.base import ID_LENGTH, Base, IdMixin, TimestampMixin, utcnow

if TYPE_CHECKING:
    from notesync.models.tag import TagRecord

TITLE_MAX_LENGTH: int = 500
CONTENT_MAX_LENGTH: int = 50_000


class NoteRecord(Base, IdMixin, TimestampMixin):
    """
    Note entity.

    Attributes:
        id: UUID string primary key.
        title: Optional title (max 500 chars).
        content: HTML content (max 50,000 chars, enforced by validation).
        note_tags: Associations, most recent first.
    """

    __tablename__ = "notes"

    title: Mapped[str | None] = mapped_column(String(TITLE_MAX_LENGTH), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    note_tags: Mapped[list[NoteTagRecord]] = relationship(
        back_populates="note",
        order_by="NoteTagRecord.created_at.desc()",
    )

    def __repr__(self) -> str:
        return f"<NoteRecord(id={self.id:.8}, title='{(self.title or '')[:20]}')>"


class NoteTagRecord(Base):
    """Join row between a note and a tag."""

    __tablename__ = "note_tags"

    note_id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        ForeignKey("notes.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    note: Mapped[NoteRecord] = relationship(back_populates="note_tags")
    tag: Mapped[TagRecord] = relationship(back_populates="note_tags")

    def __repr__(self) -> str:
        return f"<NoteTagRecord(note={self.note_id:.8}, tag={self.tag_id:.8})>"
