#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Database engine and session factory.

The render service loads page and override snapshots and writes revisions
and cache entries through the sessions handed out by :func:`get_db`.  An
in-memory SQLite URL gets a single shared connection so every session sees
the same database.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from .config import Settings, get_settings

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

class Base(DeclarativeBase):
    """Declarative base of the page, cache and override tables."""


# -----------------------------------------------------------------------------

def _engine_options(url: str, settings: Settings) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_size": settings.db_pool_size, "max_overflow": settings.db_max_overflow}

    options: dict = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
        options["poolclass"] = StaticPool
    return options


_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def init_db(url: Optional[str] = None, echo: Optional[bool] = None) -> None:
    """(Re)create the engine and session factory.  Called from the app lifespan."""
    global _engine, _session_factory
    settings = get_settings()
    db_url = url or settings.database_url

    _engine = create_async_engine(
        db_url,
        echo=settings.db_echo if echo is None else echo,
        **_engine_options(db_url, settings),
    )
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)
    log.info("Database engine ready: %s", _engine.url.render_as_string(hide_password=True))


def get_engine() -> AsyncEngine:
    if _engine is None:
        init_db()
    return _engine


async def dispose_db() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = _session_factory = None


# -----------------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed on success."""
    if _session_factory is None:
        init_db()
    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_all_tables() -> None:
    """Create any missing tables of the ORM models."""
    import wikirender.models  # noqa: F401  registers all ORM models on Base

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# -----------------------------------------------------------------------------
