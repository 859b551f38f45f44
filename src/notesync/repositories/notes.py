"""
Note Repository

Data access layer for notes and their NoteTag associations.
Extends BaseRepository with tag-aware loading, filtered listing and
link management.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from notesync.models import NoteRecord, NoteTagRecord
from notesync.repositories.base import BaseRepository


def _with_tags():
    return selectinload(NoteRecord.note_tags).selectinload(NoteTagRecord.tag)


class NoteRepository(BaseRepository[NoteRecord]):
    """
    Repository for Note entities.

    Inherits standard CRUD from BaseRepository and adds:
        - get_with_tags / list_filtered: eager-load tags (no lazy I/O in async)
        - link_ids / add_links / remove_links / clear_links: NoteTag rows
    """

    def __init__(self) -> None:
        super().__init__(NoteRecord)

    async def get_with_tags(self, session: AsyncSession, note_id: str) -> NoteRecord | None:
        """Load a note with tags, overwriting any stale copy in the identity map."""
        stmt = (
            select(NoteRecord)
            .where(NoteRecord.id == note_id)
            .options(_with_tags())
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_filtered(
        self,
        session: AsyncSession,
        tag_ids: Sequence[str] | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> Sequence[NoteRecord]:
        """
        List notes newest first.

        Args:
            tag_ids: Match notes linked to ANY of these tags (OR).
            date_from: Inclusive lower bound on created_at.
            date_to: Exclusive upper bound on created_at.
        """
        stmt = (
            select(NoteRecord)
            .options(_with_tags())
            .order_by(NoteRecord.created_at.desc(), NoteRecord.id)
            .execution_options(populate_existing=True)
        )
        if tag_ids:
            stmt = stmt.where(NoteRecord.note_tags.any(NoteTagRecord.tag_id.in_(tag_ids)))
        if date_from is not None:
            stmt = stmt.where(NoteRecord.created_at >= date_from)
        if date_to is not None:
            stmt = stmt.where(NoteRecord.created_at < date_to)
        result = await session.execute(stmt)
        return result.scalars().all()

    # ------------------------------------------------------------------
    # NoteTag links
    # ------------------------------------------------------------------

    async def link_ids(self, session: AsyncSession, note_id: str) -> set[str]:
        result = await session.execute(
            select(NoteTagRecord.tag_id).where(NoteTagRecord.note_id == note_id)
        )
        return set(result.scalars().all())

    async def add_links(
        self,
        session: AsyncSession,
        note_id: str,
        tag_ids: Iterable[str],
    ) -> int:
        """Insert links that do not exist yet. Returns the number inserted."""
        existing = await self.link_ids(session, note_id)
        added = 0
        for tag_id in tag_ids:
            if tag_id in existing:
                continue
            session.add(NoteTagRecord(note_id=note_id, tag_id=tag_id))
            existing.add(tag_id)
            added += 1
        await session.flush()
        return added

    async def remove_links(
        self,
        session: AsyncSession,
        note_id: str,
        tag_ids: Iterable[str],
    ) -> None:
        await session.execute(
            delete(NoteTagRecord).where(
                NoteTagRecord.note_id == note_id,
                NoteTagRecord.tag_id.in_(list(tag_ids)),
            )
        )

    async def clear_links(self, session: AsyncSession, note_id: str) -> None:
        await session.execute(delete(NoteTagRecord).where(NoteTagRecord.note_id == note_id))
