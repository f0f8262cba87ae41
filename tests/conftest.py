#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pytest fixtures for WikiRender tests.
Uses an in-memory SQLite database so no external services are needed.

Renderer fixtures run the engine against in-memory snapshots of pages and
overrides, the same objects the render service builds from the database.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from wikirender.core.database import create_all_tables, dispose_db, get_engine, init_db
from wikirender.main import create_app
from wikirender.render import RenderContext, WikiRenderer
from wikirender.services.macros import MacroService
from wikirender.services.pages import PageIndex
from wikirender.services.toc import TOCRenderService


# -----------------------------------------------------------------------------

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

PAGES = {
    "":          "Home",
    "exists":    "This Page Exists",
    "ns:exists": "Namespaced Page",
}


# -----------------------------------------------------------------------------
# Renderer fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def page_index():
    return PageIndex(dict(PAGES))


@pytest.fixture
def make_renderer(page_index):
    """Build a renderer; keyword arguments replace the defaults."""
    def _make(**kw):
        kw.setdefault("pages", page_index)
        return WikiRenderer(**kw)
    return _make


@pytest.fixture
def renderer(make_renderer):
    return make_renderer()


@pytest.fixture
def toc_renderer(make_renderer):
    return make_renderer(toc_formatter=TOCRenderService())


@pytest.fixture
def macro_renderer(make_renderer):
    return make_renderer(macro_evaluator=MacroService())


@pytest.fixture
def context():
    return RenderContext("localhost", "default", "page", "tester")


@pytest.fixture
def do_render(renderer):
    def _render(source: str, user: str | None = None) -> str:
        return renderer.render_to_string(source, "localhost", "default", "page", user)
    return _render


# -----------------------------------------------------------------------------
# Database / HTTP fixtures
# -----------------------------------------------------------------------------

@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Fresh in-memory database behind the application's own session factory."""
    init_db(TEST_DB_URL)
    await create_all_tables()
    yield get_engine()
    await dispose_db()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine):
    """Direct DB session for test setup and inspection."""
    async with async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_engine):
    """HTTP client for the app; requests go through the real ``get_db``."""
    async with AsyncClient(transport=ASGITransport(app=create_app()), base_url="http://test") as ac:
        yield ac


# -----------------------------------------------------------------------------
