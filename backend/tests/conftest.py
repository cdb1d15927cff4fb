"""
Blog Backend: Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for gateway failure paths
    ├── database: in-memory SQLite Database with the schema created
    ├── db_session: a session on that database for seeding rows
    ├── author: one persisted Author
    └── test_client: HTTPX AsyncClient bound to an app built around `database`
"""

import os

# Settings are read at import time; point them at SQLite before any app import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool

from blog_app.database import Database
from blog_app.models import Author, Post


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        async def test_find(mock_db_session):
            mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))
            await PostGateway(mock_db_session).find_post_by_id(1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def database():
    """
    A fresh in-memory SQLite database per test.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    db = Database("sqlite+aiosqlite://", poolclass=StaticPool)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def author(db_session):
    """Author{id: 1, name: "A", email: "a@x.com"}."""
    row = Author(name="A", email="a@x.com")
    db_session.add(row)
    await db_session.commit()
    return row


@pytest.fixture
def make_post(db_session):
    """Insert a post directly, with an explicit created_at, bypassing the API."""

    async def _make_post(author_id: int, title: str, created_at: datetime, **fields) -> Post:
        post = Post(
            title=title,
            content=fields.pop("content", f"{title} body"),
            author_id=author_id,
            created_at=created_at,
            **fields,
        )
        db_session.add(post)
        await db_session.commit()
        # Detach so later reads go through the gateway query, not the identity map
        db_session.expunge(post)
        return post

    return _make_post


@pytest.fixture
def utc():
    """Shorthand for building aware datetimes: utc(2025, 5, 10, 12)."""

    def _utc(*args) -> datetime:
        return datetime(*args, tzinfo=timezone.utc)

    return _utc


@pytest_asyncio.fixture
async def test_app(database):
    from blog_app.main import create_app
    app = create_app(database)
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient routed straight to the ASGI app (no server).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
