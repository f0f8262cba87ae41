#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Renderer dispatch table
=======================
One renderer per :class:`NodeKind`, registered with :func:`renders`.

Kinds that only make sense inside their parent (table rows and cells, list
items, unresolved markers) are registered to the fatal renderer: reaching
them through dispatch means the tree is inconsistent, and the render fails
with :class:`UnrenderableNodeError` rather than emitting half-built HTML.
Kinds with no registration at all get the same treatment.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html
from typing import TYPE_CHECKING, Callable

from .exceptions import UnrenderableNodeError
from .nodes import Node, NodeKind

if TYPE_CHECKING:
    from .context import RenderContext
    from .engine import WikiRenderer


# -----------------------------------------------------------------------------

NodeRenderer = Callable[["WikiRenderer", Node, "RenderContext"], str]

_REGISTRY: dict[NodeKind, NodeRenderer] = {}

# Rendered by their parent's assembler, never on their own.
STRUCTURAL_ONLY = frozenset({
    NodeKind.ROW, NodeKind.CELL, NodeKind.LIST_ITEM, NodeKind.MARKER,
})


# -----------------------------------------------------------------------------

def renders(*kinds: NodeKind) -> Callable[[NodeRenderer], NodeRenderer]:
    def _register(fn: NodeRenderer) -> NodeRenderer:
        for kind in kinds:
            if kind in _REGISTRY:
                raise RuntimeError(f"Renderer for {kind.value!r} registered twice")
            _REGISTRY[kind] = fn
        return fn
    return _register


def render_unrenderable(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    raise UnrenderableNodeError(node.kind)


@renders(*STRUCTURAL_ONLY)
def render_structural_only(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    raise UnrenderableNodeError(node.kind, "only renderable by its enclosing node")


def get_renderer(kind) -> NodeRenderer:
    return _REGISTRY.get(kind, render_unrenderable)


def unregistered_kinds() -> set[NodeKind]:
    return {kind for kind in NodeKind if kind not in _REGISTRY}


# -----------------------------------------------------------------------------
# Escaping helpers shared by all renderers
# -----------------------------------------------------------------------------

def escape_text(text: str) -> str:
    return html.escape(text, quote=False)


def escape_attr(text: str) -> str:
    return html.escape(text, quote=True)


# -----------------------------------------------------------------------------
