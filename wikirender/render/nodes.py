#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Syntax tree
===========
Node kinds produced by the parser and consumed by the renderer.

Every node records the ``start`` / ``stop`` offsets of the source text it
was produced from, so that renderers can report exact spans back to the
caller (override instances, parse errors).
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


# -----------------------------------------------------------------------------

class NodeKind(str, Enum):
    # ── structure ─────────────────────────────────────────────────────────
    DOCUMENT        = "document"
    PARAGRAPH       = "paragraph"
    INLINE          = "inline"          # one run of inline content / marker scope

    # ── blocks ────────────────────────────────────────────────────────────
    HEADER          = "header"
    LIST            = "list"
    LIST_ITEM       = "list_item"
    TABLE           = "table"
    ROW             = "row"
    CELL            = "cell"
    BLOCKQUOTE      = "blockquote"
    CODE_BLOCK      = "code_block"
    HORIZONTAL_RULE = "horizontal_rule"
    HIDDEN_BLOCK    = "hidden_block"
    DIRECTIVE       = "directive"
    PARSE_ERROR     = "parse_error"

    # ── inline ────────────────────────────────────────────────────────────
    PLAIN_TEXT      = "plain_text"
    MARKER          = "marker"          # unresolved emphasis token
    BOLD            = "bold"
    ITALIC          = "italic"
    UNDERLINE       = "underline"
    MONOSPACE       = "monospace"
    STRIKETHROUGH   = "strikethrough"
    SUPERSCRIPT     = "superscript"
    SUBSCRIPT       = "subscript"
    LINK            = "link"
    IMAGE           = "image"
    MACRO           = "macro"
    LINEBREAK       = "linebreak"


_EMPTY: Mapping[str, Any] = MappingProxyType({})


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Node:
    kind:     NodeKind
    start:    int = 0
    stop:     int = 0
    children: tuple["Node", ...] = ()
    attrs:    Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    text:     str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.attrs, MappingProxyType):
            object.__setattr__(self, "attrs", MappingProxyType(dict(self.attrs)))
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    def walk(self):
        """Yield this node and every descendant, depth first, in document order."""
        yield self
        for child in self.children:
            yield from child.walk()


# -----------------------------------------------------------------------------

def text_node(text: str, start: int = 0, stop: int | None = None) -> Node:
    return Node(NodeKind.PLAIN_TEXT, start, start + len(text) if stop is None else stop, text=text)


# -----------------------------------------------------------------------------
