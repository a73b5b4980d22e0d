# fieldplan/db/base.py

from __future__ import annotations

import contextlib
import logging
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    AsyncSession,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from fieldplan.config import settings

log = logging.getLogger(__name__)


# --- Declarative Base ---
class Base(DeclarativeBase):
    pass


# --- Engine & Session factory ---
if settings.ENVIRONMENT == "test":
    log.info("Using in-memory SQLite database (aiosqlite) for tests.")
    engine: AsyncEngine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
else:
    log.info("Using ASYNC PostgreSQL database: %s", settings.DATABASE_URL)
    if not settings.DATABASE_URL.startswith("postgresql+asyncpg://"):
        log.warning("DATABASE_URL does not start with 'postgresql+asyncpg://'.")
        raise ValueError("DATABASE_URL must use 'asyncpg' driver for async operations.")

    engine = create_async_engine(
        settings.DATABASE_URL, echo=(settings.ENVIRONMENT == "dev"), pool_pre_ping=True
    )

async_session_factory = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


@contextlib.asynccontextmanager
async def async_session_context(
    factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncIterator[AsyncSession]:
    """
    One unit of work: commit when the block exits cleanly, roll back otherwise.

    Planning stores only flush, so this is where every transaction ends.
    Cancellation (a dropped request) also rolls back.
    """
    session = (factory or async_session_factory)()
    log.debug("Session %s opened", id(session))
    try:
        yield session
    except BaseException as exc:
        await session.rollback()
        if isinstance(exc, SQLAlchemyError):
            log.exception("Database error in session %s, rolled back", id(session))
        else:
            log.info("Session %s rolled back after %s", id(session), exc.__class__.__name__)
        raise
    else:
        await session.commit()
        log.debug("Session %s committed", id(session))
    finally:
        await session.close()


async def get_async_db_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one unit of work per request."""
    async with async_session_context() as session:
        yield session


async def create_db_and_tables(bind: AsyncEngine | None = None) -> None:
    """Create every table registered on ``Base.metadata`` (tests and local dev)."""
    # models must be imported so their tables are registered
    import fieldplan.core.planning.models  # noqa: F401

    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("Database tables created.")


async def drop_db_and_tables(bind: AsyncEngine | None = None) -> None:
    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    log.info("Database tables dropped.")


__all__ = [
    "Base", "engine", "async_session_factory", "AsyncSession",
    "get_async_db_session", "async_session_context",
    "create_db_and_tables", "drop_db_and_tables",
]
