#!/usr/bin/env python
#
#
# ----------------------------------------------------------------------------
"""
ORM Models for WikiRender
=========================

Tables
------
pages            — one row per (site, path); tracks the current revision
page_revisions   — append-only source history with the metadata of each save
page_links       — outbound internal links of the current revision
page_cache       — structural HTML per (host, path), macros still as placeholders
link_overrides   — link target rewrites
media_overrides  — media name rewrites

All primary keys are UUIDs.  Timestamps stored in UTC.
"""
# ----------------------------------------------------------------------------

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON, Boolean, DateTime, ForeignKey, Index, Integer,
    String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wikirender.core.database import Base


# ----------------------------------------------------------------------------

def _uuid_col(primary_key=False, nullable=False, **kw):
    """UUID column stored as String(36), portable across SQLite and PostgreSQL."""
    return mapped_column(
        String(36),
        primary_key=primary_key,
        nullable=nullable,
        default=lambda: str(uuid.uuid4()),
        **kw,
    )


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# pages
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class Page(Base):
    __tablename__ = "pages"
    __table_args__ = (
        UniqueConstraint("site", "path", name="uq_pages_site_path"),
    )

    id:               Mapped[str]        = _uuid_col(primary_key=True)
    site:             Mapped[str]        = mapped_column(String(128), nullable=False, index=True)
    # "namespace:sub:page"; the empty path is the site's home page
    path:             Mapped[str]        = mapped_column(String(512), nullable=False, default="")
    title:            Mapped[str | None] = mapped_column(String(512), nullable=True)
    current_revision: Mapped[int]        = mapped_column(Integer, nullable=False, default=0)
    created_at:       Mapped[datetime]   = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at:       Mapped[datetime]   = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    revisions: Mapped[list["PageRevision"]] = relationship(
        back_populates="page",
        cascade="all, delete-orphan",
        order_by="PageRevision.revision",
    )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# page_revisions  (append-only)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class PageRevision(Base):
    __tablename__ = "page_revisions"
    __table_args__ = (
        UniqueConstraint("page_id", "revision", name="uq_page_revisions_page_rev"),
        Index("ix_page_revisions_page_latest", "page_id", "revision"),
    )

    id:         Mapped[str]        = _uuid_col(primary_key=True)
    page_id:    Mapped[str]        = mapped_column(String(36), ForeignKey("pages.id", ondelete="CASCADE"), nullable=False, index=True)
    revision:   Mapped[int]        = mapped_column(Integer, nullable=False)
    source:     Mapped[str]        = mapped_column(Text, nullable=False, default="")
    title:      Mapped[str | None] = mapped_column(String(512), nullable=True)
    links:      Mapped[list]       = mapped_column(JSON, nullable=False, default=list)
    images:     Mapped[list]       = mapped_column(JSON, nullable=False, default=list)
    author:     Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime]   = mapped_column(DateTime(timezone=True), default=_utcnow)

    page: Mapped["Page"] = relationship(back_populates="revisions")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# page_links
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class PageLink(Base):
    __tablename__ = "page_links"
    __table_args__ = (
        Index("ix_page_links_target", "site", "target_path"),
    )

    id:          Mapped[str] = _uuid_col(primary_key=True)
    site:        Mapped[str] = mapped_column(String(128), nullable=False)
    source_path: Mapped[str] = mapped_column(String(512), nullable=False, index=True)
    target_path: Mapped[str] = mapped_column(String(512), nullable=False)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# page_cache
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class PageCache(Base):
    __tablename__ = "page_cache"
    __table_args__ = (
        UniqueConstraint("host", "path", name="uq_page_cache_host_path"),
    )

    id:         Mapped[str]      = _uuid_col(primary_key=True)
    host:       Mapped[str]      = mapped_column(String(255), nullable=False)
    site:       Mapped[str]      = mapped_column(String(128), nullable=False, index=True)
    path:       Mapped[str]      = mapped_column(String(512), nullable=False)
    source:     Mapped[str]      = mapped_column(Text, nullable=False, default="")
    rendered:   Mapped[str]      = mapped_column(Text, nullable=False, default="")
    links:      Mapped[list]     = mapped_column(JSON, nullable=False, default=list)
    images:     Mapped[list]     = mapped_column(JSON, nullable=False, default=list)
    use_cache:  Mapped[bool]     = mapped_column(Boolean, nullable=False, default=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# link_overrides / media_overrides
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class _OverrideColumns:
    # source_page "" applies to every page of the site
    id:               Mapped[str]      = _uuid_col(primary_key=True)
    site:             Mapped[str]      = mapped_column(String(128), nullable=False, index=True)
    source_page:      Mapped[str]      = mapped_column(String(512), nullable=False, default="")
    source_namespace: Mapped[str]      = mapped_column(String(512), nullable=False, default="")
    source_target:    Mapped[str]      = mapped_column(String(512), nullable=False)
    target_namespace: Mapped[str]      = mapped_column(String(512), nullable=False, default="")
    target_target:    Mapped[str]      = mapped_column(String(512), nullable=False)
    created_at:       Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class LinkOverride(_OverrideColumns, Base):
    __tablename__ = "link_overrides"


class MediaOverride(_OverrideColumns, Base):
    __tablename__ = "media_overrides"
