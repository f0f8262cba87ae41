#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Renderer error taxonomy.

``WikiParseError`` and ``UnrenderableNodeError`` propagate to the caller;
``MalformedReferenceError`` never leaves the link / media resolvers.
Per-span parse failures are not exceptions at all: the parser emits a
``PARSE_ERROR`` node instead.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations


# -----------------------------------------------------------------------------

class RenderError(Exception):
    """Base class for everything the rendering engine raises."""


class WikiParseError(RenderError):
    """The parser could not produce a tree at all."""


class UnrenderableNodeError(RenderError):
    """A node kind reached dispatch without a renderer able to handle it."""

    def __init__(self, kind, detail: str = "") -> None:
        self.kind = kind
        msg = f"Node kind {getattr(kind, 'value', kind)!r} is not renderable"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class MalformedReferenceError(RenderError):
    """A link or media reference that cannot be turned into a URL."""


# -----------------------------------------------------------------------------
