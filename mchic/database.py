"""
Mchic Setlist — Database Engine & Session Factory
===================================================

What:  Async SQLAlchemy engine construction, session factory, and ORM base.
Why:   Centralizes all relational connection logic in one place.
How:   `create_database_engine(settings)` builds the engine from explicit
       settings; the SQL song store owns the engine and its session factory.
Who:   Used by SqlSongStore and by Alembic (Base.metadata).
When:  Engine is created when the app factory selects the SQL backend;
       disposed during application shutdown.

Connection Pooling Strategy:
    pool_size / max_overflow come from settings (small defaults: the whole
    repertoire is a few dozen rows). SQLite URLs, used by the test suite,
    skip pool sizing because aiosqlite uses a different pool class.
"""

import ssl
from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from mchic.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers models with a single metadata object, which Alembic reads
    for the baseline revision and `create_schema()` uses in development.
    """
    pass


def _tls_context() -> ssl.SSLContext:
    """
    TLS context for hosted PostgreSQL.

    Managed providers present certificates that are not in the local trust
    store, so verification is disabled while transport encryption stays on.
    """
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def create_database_engine(settings: Settings) -> AsyncEngine:
    """
    Build the async engine for the configured database URL.

    What:    Creates the connection pool used by SqlSongStore.
    Returns: AsyncEngine (no connection is opened until the first query).
    """
    options: Dict[str, Any] = {
        # Echo SQL queries only in DEBUG mode (SQL logging is noisy)
        "echo": settings.log_level == "DEBUG",
    }

    if not settings.database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )

    if settings.db_requires_tls:
        options["connect_args"] = {"ssl": _tls_context()}

    return create_async_engine(settings.database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to an engine.

    expire_on_commit=False: returned records stay readable after commit
    without a second round-trip.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
