"""
Alembic Migration Environment
===============================

What:  Runs the `songs` revisions against DATABASE_URL.
Who:   `alembic upgrade head` for deployments with STORAGE_BACKEND=sql and
       DB_AUTO_CREATE off.

Differences from the application engine:
    - NullPool: a migration opens one connection and exits
    - Same TLS rule as the app: ENVIRONMENT=prod encrypts without
      certificate verification
    - Autogenerate only considers tables mapped in mchic.models, so other
      tables living in the same database are never proposed for DROP
"""

import asyncio
import logging
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context

from mchic.config import Settings
from mchic.database import Base, _tls_context

# Registers the songs table on Base.metadata
from mchic.models.song import SongRecord  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

settings = Settings()
target_metadata = Base.metadata


def include_object(obj, name, type_, reflected, compare_to):
    # Reflected tables we don't map belong to someone else
    if type_ == "table" and reflected and compare_to is None:
        return False
    return True


def _configure(**options) -> None:
    context.configure(
        target_metadata=target_metadata,
        include_object=include_object,
        compare_type=True,
        **options,
    )


def run_migrations_offline() -> None:
    """Print the SQL for `alembic upgrade --sql` instead of executing it."""
    _configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_on_connection(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    connect_args = {"ssl": _tls_context()} if settings.db_requires_tls else {}
    engine = create_async_engine(
        settings.database_url,
        poolclass=pool.NullPool,
        connect_args=connect_args,
    )
    logger.info(
        "Migrating %s",
        make_url(settings.database_url).render_as_string(hide_password=True),
    )
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_on_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
