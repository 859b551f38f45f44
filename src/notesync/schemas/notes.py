"""
Note Schemas

Pydantic models for note input validation and detached read models.
Separates concerns: NoteCreate (input), NoteUpdate (partial input),
NoteFilters (list query), Note (output).
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from notesync.core.text import UNTITLED, get_preview
from notesync.models.note import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH
from notesync.schemas.common import EntityId, as_utc
from notesync.schemas.tags import Tag

if TYPE_CHECKING:
    from notesync.models import NoteRecord


class NoteCreate(BaseModel):
    """Input for creating a note. Content defaults to an empty string."""

    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    content: str = Field(default="", max_length=CONTENT_MAX_LENGTH)
    tag_ids: list[EntityId] | None = None

    model_config = ConfigDict(extra="ignore")


class NoteUpdate(BaseModel):
    """
    Partial update of title and/or content.

    An explicit ``title=None`` counts as provided (clears the title);
    ``content=None`` is treated as absent.
    """

    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(default=None, max_length=CONTENT_MAX_LENGTH)

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="after")
    def require_one_field(self) -> NoteUpdate:
        if "title" not in self.model_fields_set and self.content is None:
            raise PydanticCustomError(
                "at_least_one_field",
                "At least one field (title or content) must be provided",
            )
        return self

    def changes(self) -> dict[str, Any]:
        """Column values to write."""
        data: dict[str, Any] = {}
        if "title" in self.model_fields_set:
            data["title"] = self.title
        if self.content is not None:
            data["content"] = self.content
        return data


class NoteFilters(BaseModel):
    """
    Server-side list filters.

    tag_ids use OR semantics; date_from is inclusive, date_to exclusive.
    """

    tag_ids: list[EntityId] | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None


class Note(BaseModel):
    """Note with its tags, most recently assigned first."""

    id: str
    title: str | None = None
    content: str = ""
    created_at: datetime
    updated_at: datetime
    tags: list[Tag] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, value: datetime) -> datetime:
        return as_utc(value)

    @classmethod
    def from_record(cls, record: NoteRecord) -> Note:
        """Build from an ORM record whose note_tags/tag are loaded."""
        return cls(
            id=record.id,
            title=record.title,
            content=record.content,
            created_at=record.created_at,
            updated_at=record.updated_at,
            tags=[Tag.model_validate(nt.tag) for nt in record.note_tags],
        )

    @property
    def tag_ids(self) -> list[str]:
        return [tag.id for tag in self.tags]

    @property
    def preview(self) -> str:
        return get_preview(self.content, 80)

    @property
    def display_title(self) -> str:
        return self.title or self.preview or UNTITLED
