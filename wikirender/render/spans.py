#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Inline span resolution
======================
Turns the flat token stream of one inline run (text, links, media and
``MARKER`` tokens) into properly nested ``BOLD`` / ``ITALIC`` / … nodes.

Pending spans live on an explicit stack.  A closing marker closes the most
recent open span of its kind; spans opened after it and still pending are
abandoned on the way, which means their opening marker is re-emitted as
literal text and their content is kept.  Whatever is still open when the
run ends is drained the same way, so an unmatched ``**`` shows up verbatim
and never as an unclosed tag.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .nodes import Node, NodeKind, text_node


# -----------------------------------------------------------------------------

@dataclass
class _Pending:
    span:     Optional[NodeKind]
    marker:   Optional[Node]
    children: list[Node] = field(default_factory=list)


def _literal(marker: Node) -> Node:
    return text_node(marker.text, marker.start, marker.stop)


def _abandon(stack: list[_Pending]) -> None:
    pending = stack.pop()
    parent = stack[-1].children
    parent.append(_literal(pending.marker))
    parent.extend(pending.children)


def _open_index(stack: list[_Pending], span: NodeKind) -> Optional[int]:
    for idx in range(len(stack) - 1, 0, -1):
        if stack[idx].span is span:
            return idx
    return None


def merge_text(nodes: Iterable[Node]) -> list[Node]:
    """Collapse adjacent PLAIN_TEXT nodes into one."""
    merged: list[Node] = []
    for node in nodes:
        if merged and node.kind is NodeKind.PLAIN_TEXT and merged[-1].kind is NodeKind.PLAIN_TEXT:
            prev = merged[-1]
            merged[-1] = text_node(prev.text + node.text, prev.start, node.stop)
        else:
            merged.append(node)
    return merged


# -----------------------------------------------------------------------------

def resolve_spans(tokens: Iterable[Node]) -> list[Node]:
    stack: list[_Pending] = [_Pending(None, None)]

    for tok in tokens:
        if tok.kind is not NodeKind.MARKER:
            stack[-1].children.append(tok)
            continue

        span, role = tok.attrs["span"], tok.attrs["role"]
        idx = _open_index(stack, span)

        if role == "open" or (role == "toggle" and idx is None):
            stack.append(_Pending(span, tok))
            continue
        if idx is None:
            # closing tag with nothing to close
            stack[-1].children.append(_literal(tok))
            continue

        while len(stack) - 1 > idx:
            _abandon(stack)
        pending = stack.pop()
        stack[-1].children.append(
            Node(span, pending.marker.start, tok.stop, children=merge_text(pending.children))
        )

    while len(stack) > 1:
        _abandon(stack)
    return merge_text(stack[0].children)


# -----------------------------------------------------------------------------
