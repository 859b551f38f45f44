"""
Pytest Configuration and Fixtures

Gateway and action tests run against a real SQLite database (aiosqlite)
created per test; sync-core tests use the in-memory fakes.
"""

import os

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Test environment defaults: MUST be set before any notesync imports.
#
# 1. Load .env first so local credentials are available.
# 2. setdefault fills in anything still missing (CI runners, fresh clones
#    without a .env file) so that pydantic Settings validation doesn't crash.
# ---------------------------------------------------------------------------
load_dotenv()  # .env → os.environ (no-op if file is missing)

_test_env = {
    "POSTGRES_USER": "notesync",
    "POSTGRES_PASSWORD": "notesync_password",
    "POSTGRES_HOST": "localhost",
    "POSTGRES_PORT": "5432",
    "POSTGRES_DB": "notesync_db",
}
for _key, _value in _test_env.items():
    os.environ.setdefault(_key, _value)

# ---------------------------------------------------------------------------
# Imports (safe now that env vars are set)
# ---------------------------------------------------------------------------
from collections.abc import AsyncGenerator  # noqa: E402
from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from notesync.core.database import init_models  # noqa: E402
from notesync.repositories.gateway import SqlGateway  # noqa: E402
from tests.fakes import InMemoryGateway, ManualClock  # noqa: E402


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh SQLite database file with all tables created."""
    db_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")
    await init_models(db_engine)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def gateway(session_factory: async_sessionmaker[AsyncSession]) -> SqlGateway:
    return SqlGateway(session_factory)


@pytest.fixture
def fake_gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()
