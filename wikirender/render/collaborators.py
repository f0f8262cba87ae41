#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Collaborator interfaces
=======================
Everything the engine asks of the outside world during a render.  All calls
are synchronous; the service layer hands in snapshots loaded beforehand.

The ``Null*`` classes are the defaults of :class:`~wikirender.render.engine.WikiRenderer`
so the engine can run standalone (no pages exist, no overrides, no TOC).
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from .context import HeadingRecord, RenderContext


# -----------------------------------------------------------------------------
# Page paths
# -----------------------------------------------------------------------------

def join_path(namespace: str, page: str) -> str:
    return f"{namespace}:{page}" if namespace else page


def split_path(path: str) -> tuple[str, str]:
    """``"a:b:page"`` → ``("a:b", "page")``; no namespace gives ``""``."""
    namespace, _, page = path.rpartition(":")
    return namespace, page


# -----------------------------------------------------------------------------
# Data shapes
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Override:
    """One row of a link or media override table."""
    source_namespace: str
    source_target:    str
    target_namespace: str
    target_target:    str

    @property
    def target_path(self) -> str:
        return join_path(self.target_namespace, self.target_target)


@dataclass(frozen=True)
class CacheEntry:
    source:        str
    rendered_html: str
    use_cache:     bool = True
    links:         tuple[str, ...] = ()
    images:        tuple[str, ...] = ()


# -----------------------------------------------------------------------------
# Protocols
# -----------------------------------------------------------------------------

class PageMetadataProvider(Protocol):
    def exists(self, host: str, path: str) -> bool: ...

    def get_title(self, host: str, path: str) -> Optional[str]: ...


class OverrideProvider(Protocol):
    def get_overrides(self, site: str, source_path: str) -> Sequence[Override]: ...


class TOCFormatter(Protocol):
    def render_toc(self, headings: Sequence["HeadingRecord"], context: "RenderContext") -> str: ...


class MacroEvaluator(Protocol):
    def evaluate(self, body: str, context: "RenderContext") -> str: ...


# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

class NullPages:
    def exists(self, host: str, path: str) -> bool:
        return False

    def get_title(self, host: str, path: str) -> Optional[str]:
        return None


class NullOverrides:
    def get_overrides(self, site: str, source_path: str) -> Sequence[Override]:
        return ()


class NullTOCFormatter:
    def render_toc(self, headings, context) -> str:
        return ""


# -----------------------------------------------------------------------------
