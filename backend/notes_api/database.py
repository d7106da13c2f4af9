"""
Notes API — Database Handle & Session Management
==================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   A `Database` object owns the engine and session factory. The app
       lifespan creates it, stores it on `app.state.database`, and the
       request dependency opens one session per request from it.
Who:   Created by notes_api.main (lifespan) and scripts/reset_db.py.
When:  Engine is created at startup; sessions are created per-request.

Architecture Decision:
    The handle is passed explicitly instead of living in a module-level
    global. Tests build their own handle against a temporary SQLite file,
    and nothing connects to a database merely by importing this module.

Connection Pooling Strategy:
    pool_size / max_overflow come from settings for server databases.
    SQLite (tests, local runs) uses SQLAlchemy's default pool for the
    driver, so the pool arguments are not passed.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notes_api.config import Settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers models with a shared metadata object, used both by
    `Database.connect(create_schema=True)` and by Alembic autogenerate.
    """
    pass


class Database:
    """
    Explicit handle over the async engine and its session factory.

    Lifecycle:
        1. Database.from_settings(settings)  → engine created (no I/O yet)
        2. await connect()                   → SELECT 1, optional create_all
        3. session()                         → per-request AsyncSession
        4. await dispose()                   → pool closed on shutdown
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        # expire_on_commit=False: objects stay readable after commit, which
        # the service relies on when building responses
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        kwargs = {"echo": settings.log_level == "DEBUG"}
        if not settings.database_url.startswith("sqlite"):
            kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return cls(create_async_engine(settings.database_url, **kwargs))

    async def connect(self, create_schema: bool = False) -> None:
        """
        Verify connectivity and optionally create missing tables.

        Raises whatever the driver raises. The lifespan lets it propagate,
        so an unreachable database stops the server from starting.
        """
        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if create_schema:
                # Import registers the Note mapping with Base.metadata
                from notes_api.models import note  # noqa: F401
                await conn.run_sync(Base.metadata.create_all)
        logger.info("Database connection established (%s)", self.engine.url.render_as_string())

    def session(self) -> AsyncSession:
        return self._session_factory()

    async def ping(self) -> bool:
        """Lightweight connectivity probe used by the health endpoint."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Gracefully closes all connections in the pool."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The service commits its own writes; this dependency only guarantees
    that a failed request leaves no open transaction behind and that the
    connection returns to the pool.

    Example usage in a route:
        @router.get("/notes")
        async def list_notes(db: AsyncSession = Depends(get_db_session)):
            return await note_service.list_active(db)
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
