#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Media resolution
================
``{{ name?opt&opt|title }}`` → ``<img>`` (or ``<a>`` with ``linkonly``).

Whitespace inside the braces sets the alignment: leading only → right,
trailing only → left, both → centre.  Options after ``?`` are split on
``&``: ``nolink``, ``linkonly``, ``fulllink``, a size (``200`` or
``200x100``) and ``left`` / ``right`` / ``center``.  Other word-like
options are passed through as extra CSS classes; anything else is ignored.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .collaborators import Override, split_path
from .context import OverrideInstance
from .dispatch import escape_attr, escape_text, renders
from .links import is_external, override_map, safe_url
from .nodes import Node, NodeKind

if TYPE_CHECKING:
    from .context import RenderContext
    from .engine import WikiRenderer


# -----------------------------------------------------------------------------

_SIZE_RE  = re.compile(r"^\d+(?:x\d+)?$")
_CLASS_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_\-]*$")

_FLAGS  = {"nolink", "linkonly", "fulllink"}
_ALIGNS = {"left": "medialeft", "right": "mediaright", "center": "mediacenter"}


@dataclass
class MediaRef:
    name:        str
    name_offset: int
    title:       str = ""
    align:       Optional[str] = None
    size:        Optional[str] = None
    flags:       set[str] = field(default_factory=set)
    classes:     list[str] = field(default_factory=list)

    @property
    def css_class(self) -> str:
        parts = [_ALIGNS[self.align] if self.align else "media"]
        if "fulllink" in self.flags:
            parts.append("fullLink")
        parts.extend(self.classes)
        return " ".join(parts)


def parse_media(raw: str, offset: int = 0) -> MediaRef:
    """Split the text between ``{{`` and ``}}`` into its parts.

    *offset* is the source position of *raw*, used to locate the name so an
    override can be written back into the page text.
    """
    target, sep, title = raw.partition("|")
    lead = len(target) - len(target.lstrip())
    left_pad, right_pad = lead > 0, target.rstrip() != target

    name, _, options = target.strip().partition("?")
    ref = MediaRef(name=name, name_offset=offset + lead, title=title.strip() if sep else "")

    if left_pad and right_pad:
        ref.align = "center"
    elif left_pad:
        ref.align = "right"
    elif right_pad:
        ref.align = "left"

    for option in filter(None, options.split("&")):
        lowered = option.lower()
        if lowered in _FLAGS:
            ref.flags.add(lowered)
        elif lowered in _ALIGNS:
            ref.align = lowered
        elif _SIZE_RE.match(option):
            ref.size = option
        elif _CLASS_RE.match(option):
            ref.classes.append(option)
    return ref


# -----------------------------------------------------------------------------

def find_media_override(renderer: "WikiRenderer", name: str, context: "RenderContext") -> Optional[Override]:
    walk = context.walk
    if walk.media_overrides is None:
        walk.media_overrides = override_map(renderer.media_overrides, context)
    return walk.media_overrides.get(split_path(name))


@renders(NodeKind.IMAGE)
def render_image(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    ref = parse_media(node.attrs["raw"], node.attrs["offset"])
    name = ref.name

    if is_external(name):
        href = src = safe_url(name)
    else:
        override = find_media_override(renderer, name, context)
        if override is not None:
            context.add_override(OverrideInstance(ref.name_offset, ref.name_offset + len(name),
                                                  override.target_path))
            name = override.target_path
        context.add_image(name)
        href = renderer.media_href(name)
        src = f"{href}?{ref.size}" if ref.size else href

    if "linkonly" in ref.flags:
        return (f'<a href="{escape_attr(href)}" class="media linkOnly" target="_blank">'
                f'{escape_text(ref.title or name)}</a>')

    title = f' title="{escape_attr(ref.title)}"' if ref.title else ""
    return f'<img src="{escape_attr(src)}" class="{escape_attr(ref.css_class)}"{title} loading="lazy">'


# -----------------------------------------------------------------------------
