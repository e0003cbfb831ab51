"""
Test fixtures for the leasing engine.

Each test gets a fresh SQLite database file (aiosqlite driver) with the full
schema, a session factory bound to it and a frozen clock.
"""
import os

# Must be set before leasing.main is imported (it validates the environment)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("RECONCILIATION_ENABLED", "false")

from datetime import date, datetime, timedelta

import pytest
import pytest_asyncio

from leasing.core.clock import FrozenClock
from leasing.core.config import get_settings
from leasing.core.database import Base, create_engine, create_session_factory
import leasing.models  # noqa: F401


# ── Reference instants ─────────────────────────────────────────────────

NOW = datetime(2026, 3, 15, 12, 0, 0)
TODAY = NOW.date()
YESTERDAY = TODAY - timedelta(days=1)
TOMORROW = TODAY + timedelta(days=1)
NEXT_YEAR = date(2027, 3, 14)
LAST_YEAR = date(2025, 3, 15)


# ── Fixtures ───────────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def engine(tmp_path):
    """Async engine on a throwaway SQLite file with all tables created."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'leasing.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def clock():
    return FrozenClock(NOW)


@pytest.fixture
def fresh_settings():
    """Clear the settings cache around tests that tweak the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
