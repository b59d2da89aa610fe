"""
NoteApp Backend — Database Session Management
==============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI session dependency.
How:   One pooled async engine per process; one AsyncSession per request that
       commits on success and rolls back on error.
Who:   Route dependencies (get_db_session), the app lifespan (init_models,
       dispose_engine) and the health check (engine).

Schema management:
    Tables are created from the ORM metadata at startup (create_all is a no-op
    for tables that already exist). There is no migration tool.
"""

import logging
from pathlib import Path
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from noteapp.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    """Engine keyword arguments for the configured backend."""
    options: Dict[str, Any] = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.db_echo or settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        # SQLite uses a file- or memory-bound pool that rejects sizing arguments
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: returned ORM objects stay readable after the
# request's commit, when the response model is serialized.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models; owns the shared metadata."""
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route (services commit their own writes)
        3. On success: commits anything still pending
        4. On error: rolls back and re-raises for the global error handler
        5. Always: closes the session (returns connection to pool)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
def ensure_sqlite_directory(database_url: str) -> None:
    """Creates the parent directory of a file-backed SQLite database."""
    url = make_url(database_url)
    if not url.drivername.startswith("sqlite"):
        return
    if not url.database or url.database == ":memory:":
        return
    directory = Path(url.database).parent
    directory.mkdir(parents=True, exist_ok=True)
    logger.info("SQLite data directory: %s", directory.resolve())


async def init_models() -> None:
    """Creates every table registered on Base.metadata that does not exist yet."""
    # Import models so they register with Base before create_all runs
    from noteapp.models.note import Note  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")


async def dispose_engine() -> None:
    """Closes all pooled connections. Called during application shutdown."""
    await engine.dispose()
