"""
Microblog Backend: Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── db_engine: in-memory SQLite engine with the schema created
    ├── db_session: AsyncSession on db_engine (repository tests)
    ├── test_client: HTTPX AsyncClient wired to the app, with
    │                get_db_session overridden to use db_engine
    ├── mock_account_repository / mock_message_repository: AsyncMock
    │                repositories for service unit tests
    └── sample_account / sample_message: detached entities
"""

import os

# Override settings for testing BEFORE any microblog imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CREATE_SCHEMA_ON_STARTUP"] = "false"

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from microblog.database import Base, build_engine, get_db_session
from microblog.models.account import Account
from microblog.models.message import Message
from microblog.repositories.account_repository import AccountRepository
from microblog.repositories.message_repository import MessageRepository


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    Fresh in-memory database per test.

    StaticPool keeps a single connection, so every session opened on this
    engine sees the same in-memory database.
    """
    engine = build_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    Provides an async HTTP test client for endpoint testing.

    Uses ASGITransport to route requests directly to the app; each request
    gets its own session on the test engine and commits on success, like
    the production dependency.
    """
    from microblog.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# ══════════════════════════════════════════════════════════════════════════
# Service Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_account_repository():
    """AccountRepository double; every method is an AsyncMock."""
    return AsyncMock(spec=AccountRepository)


@pytest.fixture
def mock_message_repository():
    """MessageRepository double; every method is an AsyncMock."""
    return AsyncMock(spec=MessageRepository)


@pytest.fixture
def sample_account():
    return Account(account_id=1, username="alice", password="pass1")


@pytest.fixture
def sample_message():
    return Message(
        message_id=10,
        posted_by=1,
        message_text="hello",
        time_posted_epoch=1000,
    )
