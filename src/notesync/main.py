"""
notesync Application Entry

Async lifespan that wires configuration, logging, the database and the
SQL gateway into a loaded ``NotesSession``.

Usage::

    async with open_session() as session:
        await session.create_note()
        session.edit_title("Standup")
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from notesync.core.config import settings
from notesync.core.database import dispose_engine, get_session_factory, wait_for_db
from notesync.core.logging import setup_logging
from notesync.repositories.gateway import SqlGateway
from notesync.sync.session import NotesSession

logger = logging.getLogger(__name__)


@asynccontextmanager
async def open_session() -> AsyncIterator[NotesSession]:
    """
    Application lifespan handler.

    Startup:
        - Validates database connectivity (required, raises on failure)
        - Loads notes and tags into a fresh session

    Shutdown:
        - Flushes pending drafts: armed autosave timers fire immediately
          instead of after the debounce delay, so none can fire after the
          engine is disposed
        - Waits for every save to finish
        - Disposes the database engine
    """
    setup_logging()
    logger.info("Starting %s...", settings.PROJECT_NAME)
    logger.info(f"Log Level: {settings.LOG_LEVEL}")

    if not await wait_for_db():
        logger.critical("Could not connect to the database. Shutting down.")
        raise RuntimeError("Database connection failed")

    session = NotesSession(SqlGateway(get_session_factory()))
    await session.load()
    try:
        yield session
    finally:
        await session.close()
        await dispose_engine()
        logger.info("Shutting down %s...", settings.PROJECT_NAME)
