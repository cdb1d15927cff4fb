"""
Blog Backend: Database Handle
==============================

What:  The async SQLAlchemy engine and session factory, wrapped in a `Database`
       handle, plus the FastAPI dependency that hands out one session per request.
How:   The application factory receives (or builds) one `Database`, stores it on
       `app.state.database`, and the lifespan handler disposes it at shutdown.
       Request handlers reach it through `get_db_session`, never through a
       module-level global.
Who:   Used by `main.create_app`, the health route, the gateway dependency and
       the seed command.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings for server
    databases. SQLite URLs skip them; the dialect picks its own pool.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from blog_app.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for migrations and
    tests use to create the schema.
    """
    pass


class Database:
    """
    Process-wide persistence handle: one engine, one session factory.

    Constructed once at startup and passed to the application factory.
    Every request opens its own `AsyncSession` from `session_factory`;
    the engine (and its pool) lives until `dispose()` is awaited.

    Args:
        url: Async SQLAlchemy URL (postgresql+asyncpg://..., sqlite+aiosqlite://...)
        echo: Log every SQL statement (used when LOG_LEVEL=DEBUG)
        **engine_options: Passed through to `create_async_engine`
    """

    def __init__(self, url: str, echo: bool = False, **engine_options: Any):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_options)
        # expire_on_commit=False keeps attributes readable after the gateway commits
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a handle from application settings, applying pool options where they make sense."""
        options: dict = {"echo": settings.log_level == "DEBUG"}
        if not settings.is_sqlite:
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(settings.database_url, **options)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Open a session, roll back on error, always close.

        Writes are committed by the gateway itself, one statement at a time;
        anything left uncommitted when an exception escapes is discarded.
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> bool:
        """Run `SELECT 1`; False if the database cannot be reached."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def create_all(self) -> None:
        """Create every mapped table. Used for SQLite runs and tests; Alembic owns real schemas."""
        # Models register themselves on Base.metadata when imported
        from blog_app import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
        logger.info("Database engine disposed")


# ── Request-scoped dependencies ───────────────────────────────────────────

def get_database(request: Request) -> Database:
    """FastAPI dependency returning the handle owned by the running app."""
    return request.app.state.database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Example usage in a route:
        @router.get("/posts")
        async def list_posts(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database = get_database(request)
    async with database.session() as session:
        yield session
