"""
Validation Layer

Checks and normalizes incoming field data before it reaches the
persistence gateway. Each rule lives on a pydantic input schema; the
functions here run the schema and translate any pydantic failure into a
``ValidationError`` that lists every violated field and constraint with a
user-facing message.

Standalone predicates (``is_valid_id``, ``is_valid_tag_name``,
``is_valid_color``) are exposed for callers that only need a yes/no.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from notesync.core.errors import FieldIssue, ValidationError
from notesync.models.tag import TAG_NAME_MAX_LENGTH
from notesync.schemas.common import is_valid_id
from notesync.schemas.notes import NoteCreate, NoteFilters, NoteUpdate
from notesync.schemas.tags import (
    COLOR_PATTERN,
    TAG_NAME_PATTERN,
    TagAssignment,
    TagCreate,
    TagUpdate,
)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# pydantic error type -> constraint name reported in FieldIssue
_CONSTRAINTS: dict[str, str] = {
    "missing": "required",
    "string_type": "type",
    "list_type": "type",
    "string_too_short": "min_length",
    "string_too_long": "max_length",
    "string_pattern_mismatch": "pattern",
}

# (field, constraint) -> message shown to the user
_MESSAGES: dict[tuple[str, str], str] = {
    ("title", "max_length"): "Title cannot exceed 500 characters",
    ("content", "max_length"): "Content cannot exceed 50,000 characters",
    ("name", "required"): "Tag name is required",
    ("name", "min_length"): "Tag name is required",
    ("name", "max_length"): "Tag name cannot exceed 50 characters",
    ("name", "pattern"): (
        "Tag name can only contain letters, numbers, spaces, hyphens, and underscores"
    ),
    ("color", "required"): "Color is required",
    ("color", "pattern"): "Color must be a valid HEX code (e.g., #3B82F6)",
}


def _to_issues(exc: PydanticValidationError) -> list[FieldIssue]:
    issues = []
    for err in exc.errors():
        # Drop list indexes so "tag_ids.0" reports as "tag_ids"
        parts = [str(p) for p in err["loc"] if not isinstance(p, int)]
        field = ".".join(parts) or "input"
        constraint = _CONSTRAINTS.get(err["type"], err["type"])
        message = _MESSAGES.get((field, constraint), err["msg"])
        issues.append(FieldIssue(field, constraint, message))
    return issues


def _validate(schema: type[SchemaT], data: Any) -> SchemaT:
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data if data is not None else {})
    except PydanticValidationError as e:
        raise ValidationError(_to_issues(e)) from e


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_valid_tag_name(name: object) -> bool:
    """Trimmed name is 1-50 chars of letters, digits, spaces, hyphens, underscores."""
    if not isinstance(name, str):
        return False
    trimmed = name.strip()
    return (
        1 <= len(trimmed) <= TAG_NAME_MAX_LENGTH
        and re.fullmatch(TAG_NAME_PATTERN, trimmed) is not None
    )


def is_valid_color(color: object) -> bool:
    return isinstance(color, str) and re.fullmatch(COLOR_PATTERN, color) is not None


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


def validate_note_create(data: Any) -> NoteCreate:
    return _validate(NoteCreate, data)


def validate_note_update(data: Any) -> NoteUpdate:
    return _validate(NoteUpdate, data)


def validate_note_filters(data: Any) -> NoteFilters:
    return _validate(NoteFilters, data)


def validate_tag_create(data: Any) -> TagCreate:
    return _validate(TagCreate, data)


def validate_tag_update(data: Any) -> TagUpdate:
    return _validate(TagUpdate, data)


def validate_tag_assignment(note_id: Any, tag_ids: Iterable[Any]) -> TagAssignment:
    return _validate(TagAssignment, {"note_id": note_id, "tag_ids": list(tag_ids)})


def validate_id(value: Any, field: str = "id") -> str:
    """Return ``value`` if it has the gateway's id shape, else raise."""
    if not is_valid_id(value):
        raise ValidationError([FieldIssue(field, "id_format", "Invalid ID format")])
    return value


def validate_tag_ids(values: Iterable[Any]) -> list[str]:
    ids = list(values)
    bad = [v for v in ids if not is_valid_id(v)]
    if bad:
        raise ValidationError([FieldIssue("tag_ids", "id_format", "Invalid tag ID")])
    return ids


__all__ = [
    "is_valid_id",
    "is_valid_tag_name",
    "is_valid_color",
    "validate_note_create",
    "validate_note_update",
    "validate_note_filters",
    "validate_tag_create",
    "validate_tag_update",
    "validate_tag_assignment",
    "validate_id",
    "validate_tag_ids",
]
