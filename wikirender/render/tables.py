#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Table assembly
==============
Rows of ``^`` (header) and ``|`` (data) cells.  An empty data cell does not
produce a cell of its own; it widens the cell before it by one column.
Header cells are always emitted as they are, and cell content keeps its
surrounding whitespace.
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

def merge_cells(row: Node) -> list[list]:
    """Group a row's cells into ``[cell, colspan]`` pairs."""
    groups: list[list] = []
    for cell in row.children:
        if not cell.attrs["header"] and not cell.text.strip() and groups:
            groups[-1][1] += 1
        else:
            groups.append([cell, 1])
    return groups


def _render_row(renderer: "WikiRenderer", row: Node, context: "RenderContext") -> str:
    cells = []
    for cell, span in merge_cells(row):
        tag = "th" if cell.attrs["header"] else "td"
        colspan = f' colspan="{span}"' if span > 1 else ""
        content = renderer.render_inline(cell.children, context)
        cells.append(f"<{tag}{colspan}>{content}</{tag}>")
    return f"<tr>{''.join(cells)}</tr>\n"


@renders(NodeKind.TABLE)
def render_table(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    rows = "".join(_render_row(renderer, row, context) for row in node.children)
    return f'<table class="lazerTable"><tbody>{rows}</tbody></table>'


# -----------------------------------------------------------------------------
