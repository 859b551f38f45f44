"""Shared schema types."""

import re
from datetime import UTC, datetime
from typing import Annotated

from pydantic import AfterValidator
from pydantic_core import PydanticCustomError

# Canonical lowercase UUID string, as produced by ``notesync.models.new_id``
ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$"
)


def is_valid_id(value: object) -> bool:
    return isinstance(value, str) and ID_PATTERN.fullmatch(value) is not None


def _check_id(value: str) -> str:
    if not is_valid_id(value):
        raise PydanticCustomError("id_format", "Invalid ID format")
    return value


EntityId = Annotated[str, AfterValidator(_check_id)]


def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes (e.g. from SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
