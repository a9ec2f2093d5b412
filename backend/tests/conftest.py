"""
Tagboard Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the whole suite.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:  AsyncMock session for service unit tests
    ├── db_engine:        In-memory aiosqlite engine with all tables created
    ├── db_session:       Real AsyncSession bound to db_engine
    └── test_client:      HTTPX AsyncClient talking to a fresh app whose
                          session dependency and health-check engine point
                          at db_engine
"""

import os

# Must run before any tagboard import: settings and the engine are built at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ORIGINS"] = "http://localhost:3000"

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from tagboard import database  # noqa: E402
from tagboard.database import Base  # noqa: E402
from tagboard.models import grad, message  # noqa: E402,F401


# ══════════════════════════════════════════════════════════════════════════
# Mocked persistence
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A MagicMock standing in for AsyncSession.

    Usage:
        result = MagicMock()
        result.mappings.return_value.all.return_value = [{"id": 1, ...}]
        mock_db_session.execute.return_value = result
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


def mapping_result(rows):
    """Build a mock execute() result whose .mappings().all() returns `rows`."""
    result = MagicMock()
    result.mappings.return_value.all.return_value = rows
    return result


@pytest.fixture
def make_mapping_result():
    return mapping_result


# ══════════════════════════════════════════════════════════════════════════
# Real in-memory database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """One in-memory database per test; StaticPool keeps a single shared connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(db_engine, monkeypatch):
    """
    HTTPX client routed straight into the ASGI app.

    Mirrors get_db_session (commit on success, rollback on error) against the
    test engine so data persists across requests within one test.
    """
    from tagboard.main import create_app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[database.get_db_session] = override_get_db_session
    monkeypatch.setattr(database, "engine", db_engine)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
