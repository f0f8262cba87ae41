#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Wiki renderer
=============
:class:`WikiRenderer` ties the parser, the dispatch table and the outside
collaborators together.  One renderer can be shared; everything that
changes during a render lives on the :class:`RenderContext` passed in.

Usage::

    renderer = WikiRenderer(pages=index, link_overrides=table)
    html = renderer.render_to_string(text, host, site, page, user)
    result = renderer.render_with_info(text, context)
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html
import logging
from typing import Iterable, Optional, Union

from .collaborators import (
    MacroEvaluator,
    NullOverrides,
    NullPages,
    NullTOCFormatter,
    OverrideProvider,
    PageMetadataProvider,
    TOCFormatter,
)
from .context import RenderContext, RenderResult
from .dispatch import get_renderer, unregistered_kinds
from .nodes import Node
from .parser import WikiParser
from .spans import resolve_spans

# Registers the per-kind renderers
from . import blocks, headings, links, lists, media, tables  # noqa: F401

_unhandled = unregistered_kinds()
if _unhandled:
    raise RuntimeError(f"No renderer registered for: {sorted(k.value for k in _unhandled)}")

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

ERROR_MESSAGE = "There was an error rendering this page! Please contact an admin, or correct the markup"


def error_fragment(source: str) -> str:
    """What a page shows instead of its content when rendering blew up."""
    return (f"<h1>Error</h1>\n<div>{ERROR_MESSAGE}</div>\n"
            f"<code>{html.escape(source, quote=False)}</code>")


# -----------------------------------------------------------------------------

class WikiRenderer:

    def __init__(
        self,
        pages: Optional[PageMetadataProvider] = None,
        link_overrides: Optional[OverrideProvider] = None,
        media_overrides: Optional[OverrideProvider] = None,
        toc_formatter: Optional[TOCFormatter] = None,
        macro_evaluator: Optional[MacroEvaluator] = None,
        parser: Optional[WikiParser] = None,
        page_prefix: str = "/page/",
        media_prefix: str = "/_media/",
    ) -> None:
        self.pages           = pages or NullPages()
        self.link_overrides  = link_overrides or NullOverrides()
        self.media_overrides = media_overrides or NullOverrides()
        self.toc_formatter   = toc_formatter or NullTOCFormatter()
        self.macro_evaluator = macro_evaluator
        self.parser          = parser or WikiParser()
        self.page_prefix     = page_prefix
        self.media_prefix    = media_prefix

    # ── urls ─────────────────────────────────────────────────────────────

    def page_href(self, path: str) -> str:
        return self.page_prefix + path if path else "/"

    def media_href(self, name: str) -> str:
        return self.media_prefix + name

    # ── tree walk ────────────────────────────────────────────────────────

    def render(self, node: Node, context: RenderContext) -> str:
        return get_renderer(node.kind)(self, node, context)

    def render_inline(self, tokens: Iterable[Node], context: RenderContext) -> str:
        """Resolve emphasis markers in *tokens*, then render the result."""
        return "".join(self.render(node, context) for node in resolve_spans(tokens))

    # ── entry points ─────────────────────────────────────────────────────

    def render_with_info(
        self,
        text: str,
        context: Union[RenderContext, str],
        site: Optional[str] = None,
        page: Optional[str] = None,
        user: Optional[str] = None,
    ) -> RenderResult:
        """Render *text* and return the HTML together with the filled-in render state.

        *context* is either a ready :class:`RenderContext` (possibly seeded with
        ``FOR_CACHE`` / ``ID_SUFFIX``) or the host name, in which case *site*,
        *page* and *user* complete the identity.
        """
        if not isinstance(context, RenderContext):
            context = RenderContext(context, site or "", page or "", user)
        tree = self.parser.parse(text)
        context.begin_walk()
        rendered = self.render(tree, context)
        return RenderResult(rendered, context.render_state)

    def render_to_string(
        self,
        text: str,
        context: Union[RenderContext, str],
        site: Optional[str] = None,
        page: Optional[str] = None,
        user: Optional[str] = None,
    ) -> str:
        return self.render_with_info(text, context, site, page, user).rendered_text

    def render_page_safely(self, text: str, context: RenderContext) -> str:
        """Like :meth:`render_with_info` but never raises; failures become an error page."""
        try:
            return self.render_with_info(text, context).rendered_text
        except Exception:
            log.error("Render failed! host=%s page=%s user=%s", context.host, context.page, context.user,
                      exc_info=True)
            return error_fragment(text)


# -----------------------------------------------------------------------------
