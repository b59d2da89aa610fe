"""
NoteApp Backend — Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite +
       StaticPool, so all sessions share one connection) with the schema
       created from the ORM metadata.

Fixture Hierarchy:
    ├── db_engine:        in-memory async engine with tables created
    ├── db_session:       AsyncSession bound to db_engine
    ├── note_repository:  NoteRepository over db_session
    ├── note_service:     NoteService over note_repository
    ├── mock_repository:  NoteRepository stand-in for failure injection
    └── test_client:      HTTPX AsyncClient with get_db_session overridden
"""

import os
import tempfile

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = (
    "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(prefix="noteapp_test_"), "test.db")
)
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from noteapp.database import Base, get_db_session
from noteapp.models.note import Note  # noqa: F401
from noteapp.repositories.note_repository import NoteRepository
from noteapp.services.note_service import NoteService


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def note_repository(db_session):
    return NoteRepository(db_session)


@pytest.fixture
def note_service(note_repository):
    return NoteService(note_repository)


@pytest.fixture
def mock_repository():
    """
    A NoteRepository stand-in whose methods are AsyncMocks.

    Usage:
        mock_repository.insert.side_effect = OperationalError(...)
        await NoteService(mock_repository).add(...)
    """
    repository = MagicMock(spec=NoteRepository)
    for name in (
        "insert",
        "commit",
        "save",
        "find_by_id",
        "find_all",
        "delete",
        "find_by_subject_containing",
        "find_by_likes_greater_than",
        "count",
    ):
        setattr(repository, name, AsyncMock())
    return repository


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Each request gets its own session on the test engine and commits on
    success, the same way get_db_session behaves in production.
    """
    from noteapp.main import app

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
