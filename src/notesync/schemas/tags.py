"""
Tag Schemas

Pydantic models for tag input validation and the detached Tag read model.
Tag names are trimmed before any length or format rule is checked.
"""

from __future__ import annotations

from typing import Annotated, Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator
from pydantic_core import PydanticCustomError

from notesync.models.tag import TAG_NAME_MAX_LENGTH
from notesync.schemas.common import EntityId

TAG_NAME_PATTERN = r"^[A-Za-z0-9\s_-]+$"
COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

# Only the name is trimmed; a padded color is rejected
TagName = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=1,
        max_length=TAG_NAME_MAX_LENGTH,
        pattern=TAG_NAME_PATTERN,
    ),
]


class TagCreate(BaseModel):
    """Input for creating a tag. Both fields are required."""

    name: TagName
    color: str = Field(pattern=COLOR_PATTERN)

    model_config = ConfigDict(extra="ignore")


class TagUpdate(BaseModel):
    """Partial update of name and/or color."""

    name: TagName | None = None
    color: str | None = Field(default=None, pattern=COLOR_PATTERN)

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="after")
    def require_one_field(self) -> TagUpdate:
        if self.name is None and self.color is None:
            raise PydanticCustomError(
                "at_least_one_field",
                "At least one field (name or color) must be provided",
            )
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class TagAssignment(BaseModel):
    """A note id and the tag ids to link, unlink or replace with."""

    note_id: EntityId
    tag_ids: list[EntityId]


class Tag(BaseModel):
    """Tag as returned by the gateway."""

    id: str
    name: str
    color: str

    model_config = ConfigDict(from_attributes=True, frozen=True)


class TagDeletion(NamedTuple):
    """Return value of a tag deletion."""

    tag: Tag
    affected_note_count: int
