"""Async SQLAlchemy engine and session factory (SQLite).

Usage:
    engine = create_engine(settings.database_url)
    async with get_session(engine) as session:
        ...
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from matchday.db.models import Base

logger = logging.getLogger(__name__)


def create_engine(database_url: str) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    Enables WAL journal mode and a 15-second busy timeout so concurrent
    requests don't immediately fail with "database is locked". The driver's
    own transaction handling is switched off and SQLAlchemy emits BEGIN
    itself, which keeps SAVEPOINTs (used by standings rebuilds) correct.
    """
    connect_args: dict[str, object] = {"timeout": 15}

    engine = create_async_engine(database_url, echo=False, connect_args=connect_args)

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragmas(dbapi_conn: object, connection_record: object) -> None:
        dbapi_conn.isolation_level = None  # type: ignore[union-attr]
        cursor = dbapi_conn.cursor()  # type: ignore[union-attr]
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("PRAGMA busy_timeout=15000")
        # Without this every FK declaration (and ON DELETE CASCADE) is decorative.
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn: object) -> None:
        conn.exec_driver_sql("BEGIN")  # type: ignore[union-attr]

    return engine


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("schema_ready tables=%d", len(Base.metadata.tables))


# One session factory per engine instance, keyed by the sync engine identity
# so test engines stay isolated while production requests share a factory.
_session_factories: dict[int, async_sessionmaker[AsyncSession]] = {}


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Return a cached session factory bound to *engine*."""
    key = id(engine.sync_engine)
    if key not in _session_factories:
        _session_factories[key] = async_sessionmaker(engine, expire_on_commit=False)
    return _session_factories[key]


@asynccontextmanager
async def get_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session that auto-commits on success, rolls back on error."""
    factory = create_session_factory(engine)
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:  # re-raised; catch-all so any error rolls back
            await session.rollback()
            raise
