#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Table-of-contents formatter.

Turns the heading records of one render into a nested ``<ol>`` inside
``<div id="lw_TOC">``.  Nesting follows heading level relative to the most
important heading present.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html
from typing import Sequence

from wikirender.render.context import HeadingRecord, RenderContext, RenderStateKey


# -----------------------------------------------------------------------------

class TOCRenderService:

    def __init__(self, min_headings: int = 1) -> None:
        self.min_headings = min_headings

    def render_toc(self, headings: Sequence[HeadingRecord], context: RenderContext) -> str:
        if not headings:
            return ""
        forced = context.render_state.get(RenderStateKey.TOC.value) == "YESTOC"
        if len(headings) < self.min_headings and not forced:
            return ""

        base_level = min(h.level for h in headings)
        lines = [f'<div id="lw_TOC{context.id_suffix}" class="toc">',
                 '<div class="toc-title">Contents</div>',
                 '<ol class="toc-list">']
        depth = 0

        for h in headings:
            rel = h.level - base_level
            while depth < rel:
                lines.append("<ol>")
                depth += 1
            while depth > rel:
                lines.append("</ol>")
                depth -= 1
            lines.append(f'<li><a href="#{html.escape(h.id)}">{html.escape(h.text, quote=False)}</a></li>')

        lines.extend("</ol>" for _ in range(depth))
        lines.append("</ol>")
        lines.append("</div>")
        return "\n".join(lines) + "\n"


# -----------------------------------------------------------------------------
