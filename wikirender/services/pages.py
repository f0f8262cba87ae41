#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Page service
============
Revisioned page storage, the structural-HTML cache and the synchronous
page index handed to the renderer.

Every save appends a new PageRevision row; nothing is overwritten.  The
cache is keyed by (host, path) and holds phase-one HTML, so an entry stays
valid for every viewer until something it depends on changes.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from wikirender.models import Page, PageCache, PageLink, PageRevision
from wikirender.render import CacheEntry, RenderResult
from wikirender.render.context import apply_override_instances

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Page index (synchronous snapshot for the renderer)
# -----------------------------------------------------------------------------

@dataclass
class PageIndex:
    """path → title of every page of one site, loaded before a render."""
    titles: dict[str, Optional[str]] = field(default_factory=dict)

    def exists(self, host: str, path: str) -> bool:
        return path in self.titles

    def get_title(self, host: str, path: str) -> Optional[str]:
        return self.titles.get(path)


async def load_page_index(db: AsyncSession, site: str) -> PageIndex:
    result = await db.execute(select(Page.path, Page.title).where(Page.site == site))
    return PageIndex({path: title for path, title in result.all()})


# -----------------------------------------------------------------------------
# Pages and revisions
# -----------------------------------------------------------------------------

async def get_page(db: AsyncSession, site: str, path: str) -> Optional[Page]:
    result = await db.execute(select(Page).where(Page.site == site, Page.path == path))
    return result.scalar_one_or_none()


async def get_revision(
    db: AsyncSession,
    site: str,
    path: str,
    revision: Optional[int] = None,
) -> tuple[Page, PageRevision]:
    """Return (page, revision_row).  Defaults to the current revision."""
    page = await get_page(db, site, path)
    if not page:
        raise HTTPException(status_code=404, detail=f"Page '{path}' not found")

    wanted = page.current_revision if revision is None else revision
    result = await db.execute(
        select(PageRevision).where(PageRevision.page_id == page.id, PageRevision.revision == wanted)
    )
    rev = result.scalar_one_or_none()
    if not rev:
        raise HTTPException(status_code=404, detail=f"Revision {wanted} of '{path}' not found")
    return page, rev


async def _next_revision_number(db: AsyncSession, page_id: str) -> int:
    result = await db.execute(
        select(func.max(PageRevision.revision)).where(PageRevision.page_id == page_id)
    )
    current = result.scalar_one_or_none()
    return (current or 0) + 1


async def save_revision(
    db: AsyncSession,
    site: str,
    path: str,
    source: str,
    result: RenderResult,
    author: Optional[str] = None,
    expected_revision: Optional[int] = None,
    force: bool = False,
) -> tuple[Page, PageRevision, bool]:
    """Append a revision holding *source* and the metadata of its render.

    Returns ``(page, revision, created)``; *created* is true for a new page.
    With *expected_revision* set, saving over a newer revision is refused
    unless *force* is given.
    """
    page = await get_page(db, site, path)
    created = page is None
    if created:
        page = Page(site=site, path=path)
        db.add(page)
        await db.flush()
    elif expected_revision is not None and not force and expected_revision != page.current_revision:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Page '{path}' is at revision {page.current_revision}, edit was based on {expected_revision}",
        )

    links = sorted(result.links)
    rev = PageRevision(
        page_id=page.id,
        revision=await _next_revision_number(db, page.id),
        source=source,
        title=result.title,
        links=links,
        images=sorted(result.images),
        author=author,
    )
    db.add(rev)
    page.title = result.title
    page.current_revision = rev.revision

    await db.execute(delete(PageLink).where(PageLink.site == site, PageLink.source_path == path))
    db.add_all(PageLink(site=site, source_path=path, target_path=target) for target in links)
    await db.flush()

    log.info("Saved %s:%s revision %d (%d links, %d images)",
             site, path, rev.revision, len(links), len(rev.images))
    return page, rev, created


async def backlinks(db: AsyncSession, site: str, path: str) -> list[str]:
    result = await db.execute(
        select(PageLink.source_path)
        .where(PageLink.site == site, PageLink.target_path == path)
        .order_by(PageLink.source_path)
    )
    return list(result.scalars().all())


def adjust_source(source: str, result: RenderResult) -> str:
    """The page source as it reads with this render's overrides applied."""
    return apply_override_instances(source, result.override_instances)


# -----------------------------------------------------------------------------
# Structural HTML cache
# -----------------------------------------------------------------------------

async def get_cached_page(db: AsyncSession, host: str, path: str) -> Optional[CacheEntry]:
    result = await db.execute(select(PageCache).where(PageCache.host == host, PageCache.path == path))
    row = result.scalar_one_or_none()
    if row is None:
        return None
    return CacheEntry(source=row.source, rendered_html=row.rendered, use_cache=row.use_cache,
                      links=tuple(row.links or ()), images=tuple(row.images or ()))


async def save_cache(db: AsyncSession, host: str, site: str, path: str, source: str, result: RenderResult) -> None:
    """Store the structural render of *source* for *host*, with the links and images it recorded."""
    links, images = sorted(result.links), sorted(result.images)
    row = (await db.execute(
        select(PageCache).where(PageCache.host == host, PageCache.path == path)
    )).scalar_one_or_none()
    if row is None:
        db.add(PageCache(host=host, site=site, path=path, source=source,
                         rendered=result.rendered_text, links=links, images=images))
    else:
        row.source = source
        row.rendered = result.rendered_text
        row.links = links
        row.images = images
        row.use_cache = True
    await db.flush()


async def invalidate_cache(db: AsyncSession, site: str, paths: Optional[Iterable[str]] = None) -> int:
    """Mark cache entries of *site* stale; all of them when *paths* is None."""
    stmt = update(PageCache).where(PageCache.site == site)
    if paths is not None:
        paths = list(paths)
        if not paths:
            return 0
        stmt = stmt.where(PageCache.path.in_(paths))
    result = await db.execute(stmt.values(use_cache=False))
    log.debug("Invalidated %d cache entries of site %s", result.rowcount, site)
    return result.rowcount


# -----------------------------------------------------------------------------
