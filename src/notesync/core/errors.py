"""
Error Taxonomy

Exceptions raised by the validation layer and the persistence gateway.
The mutation actions catch every one of them and turn it into a
``Failure`` result, so none of these reach readers of the session state.
"""

from __future__ import annotations

from typing import NamedTuple


class FieldIssue(NamedTuple):
    """One violated rule: which field, which constraint, readable message."""

    field: str
    constraint: str
    message: str


class NotesyncError(Exception):
    """Base exception for all notesync errors."""

    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class ValidationError(NotesyncError):
    """Input failed shape, length or format checks. Surfaced verbatim."""

    def __init__(self, issues: list[FieldIssue]):
        self.issues = list(issues)
        super().__init__("; ".join(issue.message for issue in self.issues))

    @property
    def fields(self) -> list[str]:
        return [issue.field for issue in self.issues]


class ConflictError(NotesyncError):
    """Tag name collides case-insensitively with an existing tag."""

    def __init__(self, message: str = "A tag with this name already exists"):
        super().__init__(message)


class NotFoundError(NotesyncError):
    """Operation on an id that does not exist."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found", detail=entity_id)


class GatewayError(NotesyncError):
    """Underlying persistence failure. Shown with a generic message."""
