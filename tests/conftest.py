"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for Settings validation
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SESSION_TIMEZONE", "UTC")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from collections.abc import AsyncIterator
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.models import Base
from session_clock import SessionClock


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """SQLite engine on a fresh database file, tables created."""
    db_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'network.db'}")
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db_engine
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await db_engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Database session for one test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def clock() -> SessionClock:
    """Session clock on the default UTC schedule."""
    return SessionClock()


@pytest.fixture
def day() -> datetime:
    """Midnight of a fixed test day."""
    return datetime(2025, 3, 10, tzinfo=UTC)


@pytest.fixture
def mock_redis_client():
    """Mock Redis client whose lock() hands out an acquirable lock."""
    redis_lock = AsyncMock()
    redis_lock.acquire = AsyncMock(return_value=True)
    redis_lock.release = AsyncMock(return_value=None)
    client = AsyncMock()
    client.lock = MagicMock(return_value=redis_lock)
    return client
