#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Two-phase render pipeline
=========================
Phase 1 (structural) renders with ``FOR_CACHE`` set: the HTML is complete
except for macros, which stay as placeholders.  That output is what gets
cached.  Phase 2 (presentation) evaluates the placeholders for the current
viewer and is run on every view, whether phase 1 ran or the HTML came from
the cache.

Whether a cache entry may be used is decided by whoever loaded it; the
pipeline trusts ``CacheEntry.use_cache`` as given.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .collaborators import CacheEntry, MacroEvaluator
from .context import RenderContext, RenderResult, RenderStateKey
from .engine import WikiRenderer
from .macros import substitute_macros

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

@dataclass
class PipelineResult:
    html:       str
    structural: Optional[RenderResult] = None     # None when served from the cache

    @property
    def from_cache(self) -> bool:
        return self.structural is None


class RenderPipeline:

    def __init__(self, renderer: Optional[WikiRenderer], macro_evaluator: MacroEvaluator) -> None:
        self.renderer = renderer
        self.macro_evaluator = macro_evaluator

    def structural(self, text: str, context: RenderContext) -> RenderResult:
        if self.renderer is None:
            raise RuntimeError("Structural render requested but the pipeline has no renderer")
        context.render_state[RenderStateKey.FOR_CACHE.value] = True
        return self.renderer.render_with_info(text, context)

    def present(self, rendered: str, context: RenderContext) -> str:
        return substitute_macros(rendered, lambda body: self.macro_evaluator.evaluate(body, context))

    def render(
        self,
        text: str,
        host: str,
        site: str,
        page: str,
        user: Optional[str] = None,
        cached: Optional[CacheEntry] = None,
    ) -> PipelineResult:
        # macros see a context of their own, without the structural accumulators
        macro_context = RenderContext(host, site, page, user)

        if cached is not None and cached.use_cache:
            log.debug("Serving %s:%s from cache", site, page)
            return PipelineResult(self.present(cached.rendered_html, macro_context))

        result = self.structural(text, RenderContext(host, site, page, user))
        return PipelineResult(self.present(result.rendered_text, macro_context), result)


# -----------------------------------------------------------------------------
