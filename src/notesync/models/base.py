"""
SQLAlchemy Base Models

Provides the declarative base and reusable mixins for all ORM models.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Length of a canonical UUID string (8-4-4-4-12)
ID_LENGTH: int = 36


def new_id() -> str:
    """Generate a new entity id (UUID4, canonical string form)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative base class for all SQLAlchemy ORM models."""

    pass


class IdMixin:
    """String UUID primary key generated Python-side."""

    id: Mapped[str] = mapped_column(
        String(ID_LENGTH),
        primary_key=True,
        default=new_id,
    )


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at timestamp fields.

    Behavior:
        - created_at: Set Python-side on INSERT
        - updated_at: Set on INSERT, refreshed on every UPDATE

    Note:
        Python-side defaults keep microsecond precision on every backend,
        which the newest-first ordering relies on.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
