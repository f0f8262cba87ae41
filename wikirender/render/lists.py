#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
List assembly
=============
A ``LIST`` node holds a flat run of ``LIST_ITEM`` nodes, each carrying its
indent depth and whether it is ordered.  The nesting is rebuilt here with a
stack of open lists: a deeper item opens one new list, a shallower one
closes lists until the depth fits, and a change of type at the same depth
closes the current list and opens one of the other type.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import TYPE_CHECKING

from .dispatch import renders
from .nodes import Node, NodeKind

if TYPE_CHECKING:
    from .context import RenderContext
    from .engine import WikiRenderer


# -----------------------------------------------------------------------------

def _tag(ordered: bool) -> str:
    return "ol" if ordered else "ul"


@renders(NodeKind.LIST)
def render_list(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    out: list[str] = []
    open_lists: list[tuple[int, bool]] = []     # (depth, ordered)

    for item in node.children:
        depth, ordered = item.attrs["depth"], item.attrs["ordered"]

        while open_lists and open_lists[-1][0] > depth:
            out.append(f"</{_tag(open_lists.pop()[1])}>")
        if open_lists and open_lists[-1][0] == depth and open_lists[-1][1] != ordered:
            out.append(f"</{_tag(open_lists.pop()[1])}>")
        if not open_lists or open_lists[-1][0] < depth:
            open_lists.append((depth, ordered))
            out.append(f"<{_tag(ordered)}>")

        value = item.attrs.get("value")
        li = f'<li value="{value}">' if value is not None else "<li>"
        content = "".join(renderer.render(child, context) for child in item.children)
        out.append(f"{li}{content}</li>")

    while open_lists:
        out.append(f"</{_tag(open_lists.pop()[1])}>")
    return "\n".join(out)


# -----------------------------------------------------------------------------
