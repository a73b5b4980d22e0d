# alembic/env.py

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

# --- Configuration ---
config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# --- Model metadata ---
from fieldplan.config import settings
from fieldplan.db.base import Base

import fieldplan.core.planning.models  # noqa: F401

target_metadata = Base.metadata


def _database_url() -> str:
    """``sqlalchemy.url`` from alembic.ini when present, otherwise ``DATABASE_URL``."""
    return config.get_main_option("sqlalchemy.url") or settings.DATABASE_URL


def run_migrations_offline() -> None:
    """Emit SQL without connecting to the database."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    db_url = _database_url()
    if db_url.startswith("postgresql://"):
        async_db_url = db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif db_url.startswith("postgresql+psycopg2://"):
        async_db_url = db_url.replace("postgresql+psycopg2://", "postgresql+asyncpg://", 1)
    elif db_url.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
        async_db_url = db_url
    else:
        raise ValueError(f"Unsupported DB URL scheme for async operation: {db_url}")

    # NullPool: migrations are short-lived
    connectable = create_async_engine(async_db_url, poolclass=pool.NullPool)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
