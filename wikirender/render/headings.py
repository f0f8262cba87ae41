#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Headings and table of contents
==============================
Each heading gets a document-unique anchor id (``header_<slug>`` plus the
context's id suffix), is recorded in the ``HEADERS`` accumulator and, if it
is the first heading of the walk, supplies the page ``TITLE``.

After the whole document has been rendered :func:`finish_document` decides
whether a table of contents goes in and splices the formatter's fragment in
front of the first heading.  ``NOTOC`` anywhere in the page wins over
``YESTOC``; with neither, a TOC is produced whenever there is a heading.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html as _html
import logging
import re
from typing import TYPE_CHECKING

from .context import HeadingRecord, RenderStateKey
from .dispatch import escape_attr, renders
from .nodes import Node, NodeKind

if TYPE_CHECKING:
    from .context import RenderContext
    from .engine import WikiRenderer

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

_STRIP_TAGS_RE = re.compile(r"<[^>]+>")
_SLUG_RE       = re.compile(r"[\W_]+")

TOC_ON  = "YESTOC"
TOC_OFF = "NOTOC"


def plain_text(rendered: str) -> str:
    """Visible text of an HTML fragment, entities decoded."""
    return _html.unescape(_STRIP_TAGS_RE.sub("", rendered)).strip()


def slugify(text: str) -> str:
    return _SLUG_RE.sub("_", text).strip("_") or "section"


def unique_heading_id(text: str, context: "RenderContext") -> str:
    used = context.walk.used_ids
    base = f"header_{slugify(text)}"
    suffix = context.id_suffix
    anchor = f"{base}{suffix}"
    n = 1
    while anchor in used:
        anchor = f"{base}_{n}{suffix}"
        n += 1
    used.add(anchor)
    return anchor


# -----------------------------------------------------------------------------

@renders(NodeKind.HEADER)
def render_header(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    level = node.attrs["level"]
    inner = "".join(renderer.render(child, context) for child in node.children)
    text = plain_text(inner)
    anchor = unique_heading_id(text, context)

    record = HeadingRecord(level, anchor, text)
    walk = context.walk
    walk.headings.append(record)
    context.add_heading(record)

    tag = f'<h{level} id="{escape_attr(anchor)}">'
    if walk.first_heading is None:
        walk.first_heading = tag
        context.render_state[RenderStateKey.TITLE.value] = text
    return f"{tag}{inner}</h{level}>"


def record_toc_directive(name: str, context: "RenderContext") -> None:
    state = context.render_state
    key = RenderStateKey.TOC.value
    if name == TOC_OFF:
        state[key] = TOC_OFF
    elif name == TOC_ON and state.get(key) != TOC_OFF:
        state[key] = TOC_ON


def finish_document(renderer: "WikiRenderer", body: str, context: "RenderContext") -> str:
    walk = context.walk
    if walk.first_heading is None:
        return body
    if context.render_state.get(RenderStateKey.TOC.value) == TOC_OFF:
        return body

    fragment = renderer.toc_formatter.render_toc(list(walk.headings), context)
    if not fragment:
        return body

    pos = body.find(walk.first_heading)
    if pos < 0:
        log.warning("First heading %r missing from output of %s", walk.first_heading, context.page)
        return body
    return body[:pos] + fragment + body[pos:]


# -----------------------------------------------------------------------------
