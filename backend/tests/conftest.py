"""
Notes API — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file under tmp_path (through aiosqlite),
       so tests never share rows and never need a running PostgreSQL.

Fixture Hierarchy (all function-scoped):
    test_settings   → Settings pointing at tmp_path/notes_test.db
    └── database    → connected Database handle with the schema created
        ├── db_session   → AsyncSession for service-level tests
        └── test_client  → HTTPX AsyncClient wired to a fresh app
    mock_db_session → AsyncMock session for store-failure paths
"""

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

# Set before notes_api.main is imported: it builds a module-level app
# from environment-driven settings.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./notes_test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ENVIRONMENT"] = "test"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from notes_api.config import Settings
from notes_api.database import Database
from notes_api.main import create_app
from notes_api.models.note import Note, NoteCategory


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings isolated from the developer's .env and environment."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'notes_test.db'}",
        log_level="WARNING",
        environment="test",
        db_create_schema=True,
    )


@pytest_asyncio.fixture
async def database(test_settings):
    db = Database.from_settings(test_settings)
    await db.connect(create_schema=True)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(test_settings, database):
    """
    HTTPX AsyncClient talking to a fresh app over ASGITransport.

    ASGITransport does not run the lifespan, so the already-connected
    test database is published on app.state directly.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    app = create_app(test_settings)
    app.state.database = database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_db_session():
    """
    Mock async session for exercising store-failure handling.

    Usage:
        mock_db_session.commit.side_effect = OperationalError("INSERT", {}, Exception("down"))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.delete = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_note():
    """
    Factory for Note rows with explicit timestamps.

    Lets ordering tests control created_at instead of relying on
    the clock advancing between inserts.
    """
    base = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def _make(
        content: str = "sample content",
        minutes: int = 0,
        title: str = "",
        category: NoteCategory = NoteCategory.PERSONAL,
        archived: bool = False,
    ) -> Note:
        stamp = base + timedelta(minutes=minutes)
        return Note(
            title=title,
            content=content,
            category=category,
            archived=archived,
            created_at=stamp,
            updated_at=stamp,
        )

    return _make
