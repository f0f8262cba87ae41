#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Link resolution
===============
``[[target]]`` / ``[[target|display]]`` → ``<a>``.

* External targets (anything with a ``scheme://``) are validated; a URL that
  does not parse is replaced by a harmless placeholder instead of being
  echoed into the ``href``.
* Internal targets are reduced to the page-name alphabet, looked up in the
  link override table of the current page, recorded in ``LINKS`` and
  classed by whether the page exists.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional
from urllib.parse import urlsplit

from .collaborators import Override, split_path
from .context import OverrideInstance
from .dispatch import escape_attr, escape_text, renders
from .exceptions import MalformedReferenceError
from .nodes import Node, NodeKind

if TYPE_CHECKING:
    from .context import RenderContext
    from .engine import WikiRenderer


# -----------------------------------------------------------------------------

MALFORMED_URL = "http://malformed.invalid"

_SCHEME_RE     = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")
_URL_CHARS_RE  = re.compile(r"^[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+$")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_PAGE_CHARS_RE = re.compile(r"[^A-Za-z0-9_.:\-]+")


def is_external(target: str) -> bool:
    return bool(_SCHEME_RE.match(target))


def validate_url(url: str) -> str:
    if not _URL_CHARS_RE.match(url) or _BAD_ESCAPE_RE.search(url):
        raise MalformedReferenceError(url)
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise MalformedReferenceError(url) from exc
    if not parts.scheme or not parts.netloc:
        raise MalformedReferenceError(url)
    return url


def safe_url(url: str) -> str:
    try:
        return validate_url(url)
    except MalformedReferenceError:
        return MALFORMED_URL


def clean_page_path(target: str) -> str:
    """Reduce a link target to ``[A-Za-z0-9_.:-]``, runs of anything else → ``_``."""
    return _PAGE_CHARS_RE.sub("_", target).strip("_")


# -----------------------------------------------------------------------------
# Override lookup
# -----------------------------------------------------------------------------

def override_map(provider, context: "RenderContext") -> dict[tuple[str, str], Override]:
    table: dict[tuple[str, str], Override] = {}
    for override in provider.get_overrides(context.site, context.page):
        # later rows win
        table[(override.source_namespace, override.source_target)] = override
    return table


def find_link_override(renderer: "WikiRenderer", path: str, context: "RenderContext") -> Optional[Override]:
    walk = context.walk
    if walk.link_overrides is None:
        walk.link_overrides = override_map(renderer.link_overrides, context)
    return walk.link_overrides.get(split_path(path))


# -----------------------------------------------------------------------------

@renders(NodeKind.LINK)
def render_link(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    target = node.attrs["target"]
    has_display = node.attrs["has_display"]

    if is_external(target):
        url = safe_url(target)
        text = renderer.render_inline(node.children, context) if has_display else escape_text(url)
        return (f'<a class="wikiLinkExternal" href="{escape_attr(url)}" '
                f'target="_blank" rel="noopener noreferrer">{text}</a>')

    path = clean_page_path(target)
    override = find_link_override(renderer, path, context)
    if override is not None:
        path = override.target_path
        context.add_override(OverrideInstance(node.attrs["target_start"], node.attrs["target_stop"], path))

    context.add_link(path)
    exists = renderer.pages.exists(context.host, path)
    href = renderer.page_href(path)

    if has_display:
        text = renderer.render_inline(node.children, context)
    else:
        title = renderer.pages.get_title(context.host, path) if exists else None
        text = escape_text(title or path or href)

    css = "wikiLink" if exists else "wikiLinkMissing"
    return f'<a class="{css}" href="{escape_attr(href)}">{text}</a>'


# -----------------------------------------------------------------------------
