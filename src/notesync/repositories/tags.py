"""
Tag Repository

Data access layer for tags: case-insensitive name lookup, alphabetical
listing and the per-tag side of NoteTag maintenance.
"""

from collections.abc import Iterable, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from notesync.models import NoteTagRecord, TagRecord
from notesync.repositories.base import BaseRepository


class TagRepository(BaseRepository[TagRecord]):
    """Repository for Tag entities."""

    def __init__(self) -> None:
        super().__init__(TagRecord)

    async def find_by_name(
        self,
        session: AsyncSession,
        name: str,
        exclude_id: str | None = None,
    ) -> TagRecord | None:
        """Case-insensitive exact name match, optionally ignoring one tag."""
        stmt = select(TagRecord).where(func.lower(TagRecord.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(TagRecord.id != exclude_id)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_by_name(self, session: AsyncSession) -> Sequence[TagRecord]:
        result = await session.execute(select(TagRecord).order_by(TagRecord.name.asc()))
        return result.scalars().all()

    async def existing_ids(self, session: AsyncSession, tag_ids: Iterable[str]) -> set[str]:
        ids = list(tag_ids)
        if not ids:
            return set()
        result = await session.execute(select(TagRecord.id).where(TagRecord.id.in_(ids)))
        return set(result.scalars().all())

    async def count_links(self, session: AsyncSession, tag_id: str) -> int:
        """Number of notes currently carrying this tag."""
        result = await session.execute(
            select(func.count()).select_from(NoteTagRecord).where(NoteTagRecord.tag_id == tag_id)
        )
        return result.scalar_one()

    async def clear_links(self, session: AsyncSession, tag_id: str) -> None:
        await session.execute(delete(NoteTagRecord).where(NoteTagRecord.tag_id == tag_id))
