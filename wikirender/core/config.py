#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Application configuration.

All values can be overridden via environment variables or a .env file
(prefix ``WIKIRENDER_``).
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

from wikirender._version import __version__ as _pkg_version


# -----------------------------------------------------------------------------

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="WIKIRENDER_",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────────────

    app_name: str = "WikiRender"
    app_version: str = _pkg_version
    debug: bool = False
    log_level: str = "INFO"

    # ── Database ───────────────────────────────────────────────────────────

    database_url: str = "sqlite+aiosqlite:///./wikirender.db"
    db_echo: bool = False
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # ── Sites ──────────────────────────────────────────────────────────────

    default_site: str = "default"
    # hostname → logical site name
    sites: dict[str, str] = {}

    # ── Renderer ───────────────────────────────────────────────────────────

    page_prefix: str = "/page/"
    media_prefix: str = "/_media/"
    max_nesting_depth: int = 8
    # fewer headings than this and no ~~YESTOC~~ → no table of contents
    toc_min_headings: int = 1

    # ── CORS ───────────────────────────────────────────────────────────────

    cors_origins: list[str] = [
        "http://localhost:8000",
        "http://localhost:3000",
    ]


# -----------------------------------------------------------------------------

@lru_cache
def get_settings() -> Settings:
    return Settings()


# -----------------------------------------------------------------------------
