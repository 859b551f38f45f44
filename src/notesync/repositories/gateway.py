"""
Persistence Gateway

``NotesGateway`` is the contract the mutation actions and the sync core
depend on. ``SqlGateway`` implements it on top of the repositories, one
session and one transaction per operation, and returns detached pydantic
read models so callers never touch ORM state.

Error mapping:
    - Unknown note/tag id           -> NotFoundError
    - Tag name collision            -> ConflictError
    - Any other SQLAlchemy failure  -> GatewayError (generic message)
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any, Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notesync.core.errors import ConflictError, GatewayError, NotFoundError
from notesync.repositories.notes import NoteRepository
from notesync.repositories.tags import TagRepository
from notesync.schemas.common import as_utc
from notesync.schemas.notes import Note
from notesync.schemas.tags import Tag, TagDeletion

logger = logging.getLogger(__name__)


class NotesGateway(Protocol):
    """Create/read/update/delete over Note, Tag and the NoteTag join."""

    async def create_note(
        self,
        *,
        title: str | None = None,
        content: str = "",
        tag_ids: Sequence[str] | None = None,
    ) -> Note: ...

    async def list_notes(
        self,
        *,
        tag_ids: Sequence[str] | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[Note]: ...

    async def get_note(self, note_id: str) -> Note | None: ...

    async def update_note(self, note_id: str, changes: dict[str, Any]) -> Note: ...

    async def delete_note(self, note_id: str) -> Note: ...

    async def create_tag(self, *, name: str, color: str) -> Tag: ...

    async def list_tags(self) -> list[Tag]: ...

    async def find_tag_by_name(self, name: str, exclude_id: str | None = None) -> Tag | None: ...

    async def update_tag(self, tag_id: str, changes: dict[str, Any]) -> Tag: ...

    async def delete_tag(self, tag_id: str) -> TagDeletion: ...

    async def assign_tags(self, note_id: str, tag_ids: Sequence[str]) -> None: ...

    async def remove_tags(self, note_id: str, tag_ids: Sequence[str]) -> None: ...

    async def replace_tags(self, note_id: str, tag_ids: Sequence[str]) -> None: ...


def _unique(ids: Sequence[str]) -> list[str]:
    """Drop duplicates, keep first-seen order."""
    return list(dict.fromkeys(ids))


def _utc(value: datetime | None) -> datetime | None:
    return as_utc(value).astimezone(UTC) if value is not None else None


class SqlGateway:
    """
    SQLAlchemy implementation of ``NotesGateway``.

    Usage::

        gateway = SqlGateway(get_session_factory())
        note = await gateway.create_note(title="Groceries", content="<p>milk</p>")
        await gateway.replace_tags(note.id, [tag.id])
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self.notes = NoteRepository()
        self.tags = TagRepository()

    @asynccontextmanager
    async def _transaction(
        self,
        failure: str,
        *,
        conflict_on_integrity: bool = False,
    ) -> AsyncIterator[AsyncSession]:
        """Session scoped to one operation; commits on success."""
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                if conflict_on_integrity:
                    raise ConflictError() from e
                logger.exception(failure)
                raise GatewayError(failure) from e
            except SQLAlchemyError as e:
                await session.rollback()
                logger.exception(failure)
                raise GatewayError(failure) from e

    async def _require_note(self, session: AsyncSession, note_id: str) -> None:
        if await self.notes.get_by_id(session, note_id) is None:
            raise NotFoundError("Note", note_id)

    async def _require_tags(self, session: AsyncSession, tag_ids: Sequence[str]) -> None:
        found = await self.tags.existing_ids(session, tag_ids)
        for tag_id in tag_ids:
            if tag_id not in found:
                raise NotFoundError("Tag", tag_id)

    async def _load_note(self, session: AsyncSession, note_id: str) -> Note:
        record = await self.notes.get_with_tags(session, note_id)
        if record is None:
            raise NotFoundError("Note", note_id)
        return Note.from_record(record)

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    async def create_note(
        self,
        *,
        title: str | None = None,
        content: str = "",
        tag_ids: Sequence[str] | None = None,
    ) -> Note:
        tag_ids = _unique(tag_ids or [])
        async with self._transaction("Failed to create note") as session:
            await self._require_tags(session, tag_ids)
            record = await self.notes.create(session, {"title": title, "content": content})
            if tag_ids:
                await self.notes.add_links(session, record.id, tag_ids)
            note = await self._load_note(session, record.id)
        logger.info("Created note %s with %d tags", note.id, len(tag_ids))
        return note

    async def list_notes(
        self,
        *,
        tag_ids: Sequence[str] | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[Note]:
        async with self._transaction("Failed to fetch notes") as session:
            records = await self.notes.list_filtered(
                session,
                tag_ids=tag_ids,
                date_from=_utc(date_from),
                date_to=_utc(date_to),
            )
            return [Note.from_record(r) for r in records]

    async def get_note(self, note_id: str) -> Note | None:
        async with self._transaction("Failed to fetch note") as session:
            record = await self.notes.get_with_tags(session, note_id)
            return Note.from_record(record) if record is not None else None

    async def update_note(self, note_id: str, changes: dict[str, Any]) -> Note:
        async with self._transaction("Failed to update note") as session:
            record = await self.notes.get_by_id(session, note_id)
            if record is None:
                raise NotFoundError("Note", note_id)
            await self.notes.update(session, record, changes)
            note = await self._load_note(session, note_id)
        logger.debug("Updated note %s (%s)", note_id, ", ".join(changes))
        return note

    async def delete_note(self, note_id: str) -> Note:
        async with self._transaction("Failed to delete note") as session:
            note = await self._load_note(session, note_id)
            await self.notes.clear_links(session, note_id)
            await self.notes.delete(session, note_id)
        logger.info("Deleted note %s", note_id)
        return note

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    async def create_tag(self, *, name: str, color: str) -> Tag:
        async with self._transaction("Failed to create tag", conflict_on_integrity=True) as session:
            if await self.tags.find_by_name(session, name) is not None:
                raise ConflictError()
            record = await self.tags.create(session, {"name": name, "color": color})
            tag = Tag.model_validate(record)
        logger.info("Created tag %s ('%s')", tag.id, tag.name)
        return tag

    async def list_tags(self) -> list[Tag]:
        async with self._transaction("Failed to fetch tags") as session:
            return [Tag.model_validate(r) for r in await self.tags.list_by_name(session)]

    async def find_tag_by_name(self, name: str, exclude_id: str | None = None) -> Tag | None:
        async with self._transaction("Failed to fetch tags") as session:
            record = await self.tags.find_by_name(session, name, exclude_id)
            return Tag.model_validate(record) if record is not None else None

    async def update_tag(self, tag_id: str, changes: dict[str, Any]) -> Tag:
        async with self._transaction("Failed to update tag", conflict_on_integrity=True) as session:
            record = await self.tags.get_by_id(session, tag_id)
            if record is None:
                raise NotFoundError("Tag", tag_id)
            name = changes.get("name")
            if name is not None and await self.tags.find_by_name(session, name, tag_id):
                raise ConflictError()
            await self.tags.update(session, record, changes)
            tag = Tag.model_validate(record)
        return tag

    async def delete_tag(self, tag_id: str) -> TagDeletion:
        async with self._transaction("Failed to delete tag") as session:
            record = await self.tags.get_by_id(session, tag_id)
            if record is None:
                raise NotFoundError("Tag", tag_id)
            tag = Tag.model_validate(record)
            count = await self.tags.count_links(session, tag_id)
            await self.tags.clear_links(session, tag_id)
            await self.tags.delete(session, tag_id)
        logger.info("Deleted tag %s ('%s'), removed from %d notes", tag.id, tag.name, count)
        return TagDeletion(tag=tag, affected_note_count=count)

    # ------------------------------------------------------------------
    # NoteTag
    # ------------------------------------------------------------------

    async def assign_tags(self, note_id: str, tag_ids: Sequence[str]) -> None:
        """Link tags to a note; pairs that already exist are skipped."""
        tag_ids = _unique(tag_ids)
        async with self._transaction("Failed to assign tags") as session:
            await self._require_note(session, note_id)
            await self._require_tags(session, tag_ids)
            added = await self.notes.add_links(session, note_id, tag_ids)
        logger.debug("Assigned %d new tags to note %s", added, note_id)

    async def remove_tags(self, note_id: str, tag_ids: Sequence[str]) -> None:
        if not tag_ids:
            return
        async with self._transaction("Failed to remove tags") as session:
            await self.notes.remove_links(session, note_id, tag_ids)

    async def replace_tags(self, note_id: str, tag_ids: Sequence[str]) -> None:
        """
        Delete every link of the note, then insert the new set.

        Both steps run in one transaction, so readers never observe the
        intermediate empty tag list.
        """
        tag_ids = _unique(tag_ids)
        async with self._transaction("Failed to replace tags") as session:
            await self._require_note(session, note_id)
            await self._require_tags(session, tag_ids)
            await self.notes.clear_links(session, note_id)
            if tag_ids:
                await self.notes.add_links(session, note_id, tag_ids)
        logger.debug("Replaced tags of note %s with %d tags", note_id, len(tag_ids))
