#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render service
==============
Page views, history views, saves and previews.

The database is only touched here, before and after a render: page titles
and override tables are loaded into snapshots, the synchronous renderer
runs against them, and the results (revision metadata, cache entry) are
written back afterwards.

Views go through the two-phase pipeline and the page cache.  History views
and previews are rendered in one go with macros expanded inline and an id
suffix, so their element ids cannot clash with the live page shown next to
them.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from wikirender.core.config import Settings, get_settings
from wikirender.models import LinkOverride, MediaOverride
from wikirender.render import (
    RenderContext,
    RenderPipeline,
    RenderResult,
    RenderStateKey,
    WikiParser,
    WikiRenderer,
    error_fragment,
)
from . import overrides as override_svc
from . import pages as page_svc
from .macros import MacroService
from .sites import site_for_host
from .toc import TOCRenderService

log = logging.getLogger(__name__)

HISTORY_SUFFIX = "_historyView"
PREVIEW_SUFFIX = "_previewPage"


# -----------------------------------------------------------------------------

@dataclass
class RenderedPage:
    site:     str
    path:     str
    source:   str
    rendered: str
    title:    Optional[str] = None
    revision: int = 0
    links:    list[str] = field(default_factory=list)
    images:   list[str] = field(default_factory=list)

    @classmethod
    def from_result(cls, site: str, path: str, source: str, html: str,
                    result: RenderResult, revision: int = 0, title: Optional[str] = None):
        return cls(site, path, source, html, result.title or title, revision,
                   sorted(result.links), sorted(result.images))


def _ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _render_safely(renderer: WikiRenderer, text: str, context: RenderContext) -> RenderResult:
    # a failed render comes back as the error page, with whatever state it collected
    return RenderResult(renderer.render_page_safely(text, context), context.render_state)


# -----------------------------------------------------------------------------

class RenderService:

    def __init__(
        self,
        settings: Optional[Settings] = None,
        macro_service: Optional[MacroService] = None,
        toc_service: Optional[TOCRenderService] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.macro_service = macro_service or MacroService()
        self.toc_service = toc_service or TOCRenderService(self.settings.toc_min_headings)
        self.parser = WikiParser(max_nesting=self.settings.max_nesting_depth)

    async def _renderer(self, db: AsyncSession, site: str) -> WikiRenderer:
        return WikiRenderer(
            pages=await page_svc.load_page_index(db, site),
            link_overrides=await override_svc.load_override_table(db, LinkOverride, site),
            media_overrides=await override_svc.load_override_table(db, MediaOverride, site),
            toc_formatter=self.toc_service,
            macro_evaluator=self.macro_service,
            parser=self.parser,
            page_prefix=self.settings.page_prefix,
            media_prefix=self.settings.media_prefix,
        )

    # ── page view ────────────────────────────────────────────────────────

    async def get_rendered_page(
        self,
        db: AsyncSession,
        host: str,
        path: str,
        user: Optional[str] = None,
    ) -> RenderedPage:
        start = time.perf_counter()
        site = site_for_host(host, self.settings)
        page, rev = await page_svc.get_revision(db, site, path)
        cached = await page_svc.get_cached_page(db, host, path)
        query_ms = _ms(start)

        renderer = None
        if cached is None or not cached.use_cache:
            renderer = await self._renderer(db, site)
        pipeline = RenderPipeline(renderer, self.macro_service)

        render_start = time.perf_counter()
        try:
            out = pipeline.render(rev.source, host, site, path, user, cached=cached)
        except Exception:
            log.error("Render failed! host=%s page=%s user=%s", host, path, user, exc_info=True)
            return RenderedPage(site, path, rev.source, error_fragment(rev.source), page.title, rev.revision)
        render_ms = _ms(render_start)

        log.info("Render %s took (%d,%d,%d)ms (Total,Query,%s)", path, _ms(start), query_ms,
                 render_ms, "Cached" if out.from_cache else "Render")
        if out.from_cache:
            return RenderedPage(site, path, rev.source, out.html, page.title, rev.revision,
                                list(cached.links), list(cached.images))

        await page_svc.save_cache(db, host, site, path, rev.source, out.structural)
        source = page_svc.adjust_source(rev.source, out.structural)
        return RenderedPage.from_result(site, path, source, out.html, out.structural,
                                        rev.revision, page.title)

    async def get_historical_rendered_page(
        self,
        db: AsyncSession,
        host: str,
        path: str,
        revision: int,
        user: Optional[str] = None,
    ) -> RenderedPage:
        site = site_for_host(host, self.settings)
        page, rev = await page_svc.get_revision(db, site, path, revision)
        renderer = await self._renderer(db, site)
        context = RenderContext(host, site, path, user, {RenderStateKey.ID_SUFFIX.value: HISTORY_SUFFIX})
        result = _render_safely(renderer, rev.source, context)
        return RenderedPage.from_result(site, path, rev.source, result.rendered_text, result,
                                        rev.revision, rev.title)

    # ── save / preview ───────────────────────────────────────────────────

    async def save_page(
        self,
        db: AsyncSession,
        host: str,
        path: str,
        text: str,
        user: Optional[str] = None,
        revision: Optional[int] = None,
        force: bool = False,
    ) -> RenderedPage:
        site = site_for_host(host, self.settings)
        renderer = await self._renderer(db, site)
        context = RenderContext(host, site, path, user, {RenderStateKey.FOR_CACHE.value: True})
        result = renderer.render_with_info(text, context)

        previous = await page_svc.get_page(db, site, path)
        old_title = previous.title if previous is not None else None
        page, rev, created = await page_svc.save_revision(db, site, path, text, result, user, revision, force)

        # every host of the site holds a copy of this page
        stale = [path]
        if created or rev.title != old_title:
            # pages linking here show it as missing or under its old title
            stale += await page_svc.backlinks(db, site, path)
        await page_svc.invalidate_cache(db, site, stale)
        await page_svc.save_cache(db, host, site, path, text, result)

        html = self.macro_service.post_render(result.rendered_text, RenderContext(host, site, path, user))
        return RenderedPage.from_result(site, path, text, html, result, rev.revision)

    async def preview_page(
        self,
        db: AsyncSession,
        host: str,
        path: str,
        text: str,
        user: Optional[str] = None,
    ) -> RenderedPage:
        site = site_for_host(host, self.settings)
        renderer = await self._renderer(db, site)
        context = RenderContext(host, site, path, user, {RenderStateKey.ID_SUFFIX.value: PREVIEW_SUFFIX})
        result = _render_safely(renderer, text, context)
        return RenderedPage.from_result(site, path, text, result.rendered_text, result)


# -----------------------------------------------------------------------------

_render_service: Optional[RenderService] = None


def get_render_service() -> RenderService:
    """FastAPI dependency returning the process-wide service."""
    global _render_service
    if _render_service is None:
        _render_service = RenderService()
    return _render_service


# -----------------------------------------------------------------------------
