#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Macro service
=============
Evaluates ``~~MACRO~~name:args~~/MACRO~~`` bodies.  The body is split at the
first ``:`` into the macro name and its argument string; the name selects a
handler from the registry.

Built-ins
---------
user   the viewing user (``anonymous`` when nobody is logged in)
page   the page path being rendered
site   the logical site name
date   today's UTC date, ``args`` is an optional strftime format
echo   its arguments, escaped

Usage::

    macros = MacroService()
    html = macros.post_render(cached_html, context)
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from wikirender.render.context import RenderContext
from wikirender.render.macros import substitute_macros

log = logging.getLogger(__name__)

MacroHandler = Callable[[str, RenderContext], str]


# -----------------------------------------------------------------------------

class MacroRegistry:
    """Name → handler table.  Names are case-insensitive."""

    def __init__(self) -> None:
        self._handlers: dict[str, MacroHandler] = {}

    def register(self, name: str, handler: Optional[MacroHandler] = None):
        def _add(fn: MacroHandler) -> MacroHandler:
            self._handlers[name.lower()] = fn
            return fn
        return _add(handler) if handler is not None else _add

    def get(self, name: str) -> Optional[MacroHandler]:
        return self._handlers.get(name.lower())

    def names(self) -> list[str]:
        return sorted(self._handlers)


macro_registry = MacroRegistry()


# -----------------------------------------------------------------------------
# Built-in macros
# -----------------------------------------------------------------------------

@macro_registry.register("user")
def _user(args: str, context: RenderContext) -> str:
    return html.escape(context.user or "anonymous")


@macro_registry.register("page")
def _page(args: str, context: RenderContext) -> str:
    return html.escape(context.page)


@macro_registry.register("site")
def _site(args: str, context: RenderContext) -> str:
    return html.escape(context.site)


@macro_registry.register("date")
def _date(args: str, context: RenderContext) -> str:
    return html.escape(datetime.now(tz=timezone.utc).strftime(args or "%Y-%m-%d"))


@macro_registry.register("echo")
def _echo(args: str, context: RenderContext) -> str:
    return html.escape(args)


# -----------------------------------------------------------------------------

class MacroService:

    def __init__(self, registry: Optional[MacroRegistry] = None) -> None:
        self._registry = registry or macro_registry

    def evaluate(self, body: str, context: RenderContext) -> str:
        name, _, args = body.partition(":")
        name = name.strip()
        handler = self._registry.get(name)
        if handler is None:
            return f"<div>MACRO- Unknown Macro {html.escape(name)}</div>"
        try:
            return handler(args.strip(), context)
        except Exception:
            log.warning("Macro %r failed on %s:%s", name, context.site, context.page, exc_info=True)
            return f'<div class="macroError">MACRO- {html.escape(name)} failed</div>'

    def post_render(self, rendered: str, context: RenderContext) -> str:
        """Replace every macro placeholder in *rendered* with its output."""
        return substitute_macros(rendered, lambda body: self.evaluate(body, context))


# -----------------------------------------------------------------------------
