"""
Engine and session factory helpers.

``DATABASE_URL`` may be written the way hosting providers hand it out
(``postgres://...``); it is rewritten to the asyncpg driver. SQLite URLs are
used for local runs and tests, and in-memory SQLite needs a single shared
connection for every session to see the same tables.
"""

from __future__ import annotations

import re
from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .base import Base

_POSTGRES_SCHEME = re.compile(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://")


def normalize_database_url(db_url: str) -> str:
    """Point any Postgres URL at ``postgresql+asyncpg://``; leave other URLs alone."""
    return _POSTGRES_SCHEME.sub("postgresql+asyncpg://", db_url, count=1)


def create_engine(db_url: str) -> AsyncEngine:
    """
    Create the async engine for ``db_url``.

    Postgres engines ping pooled connections before use. SQLite engines allow
    cross-thread use, and in-memory SQLite is pinned to one connection.
    """
    url = normalize_database_url(db_url)
    options: Dict[str, Any] = {}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            options["poolclass"] = StaticPool
    else:
        options["pool_pre_ping"] = True
    return create_async_engine(url, **options)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory; objects stay readable after commit so services can return them."""
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create every missing table (tests and ``CREATE_TABLES_ON_STARTUP`` only; Alembic owns production)."""
    from . import entities  # noqa: F401  registers every table

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
