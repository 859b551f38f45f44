"""
Action Results

Uniform tagged result returned by every mutation action: either a
``Success`` carrying the payload or a ``Failure`` carrying a
human-readable message.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

from notesync.core.errors import (
    ConflictError,
    GatewayError,
    NotesyncError,
    NotFoundError,
    ValidationError,
)

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    data: T
    ok: Literal[True] = True


@dataclass(frozen=True)
class Failure:
    error: str
    ok: Literal[False] = False


ActionResult = Success[T] | Failure


def failure_from(exc: Exception, fallback: str, logger: logging.Logger) -> Failure:
    """
    Convert an exception caught at the action boundary into a Failure.

    Validation, conflict and not-found messages are surfaced verbatim;
    gateway and unexpected errors get ``fallback``.
    """
    if isinstance(exc, ValidationError):
        logger.info("%s: %s", fallback, exc.message)
        return Failure(exc.message)
    if isinstance(exc, (ConflictError, NotFoundError)):
        logger.warning("%s: %s", fallback, exc.message)
        return Failure(exc.message)
    if isinstance(exc, GatewayError):
        # Already logged with traceback by the gateway
        logger.error("%s: %s", fallback, exc.message)
        return Failure(fallback)
    if isinstance(exc, NotesyncError):
        logger.error("%s: %s", fallback, exc.message)
        return Failure(exc.message)
    logger.exception(fallback)
    return Failure(fallback)
