#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render context
==============
Request-scoped identity (host, site, page, user) plus the accumulator map
that a single tree walk fills in.

The accumulator is exposed to callers as ``render_state`` under the key
names of :class:`RenderStateKey`.  Keys already present when the walk
starts are kept; accumulators are created with ``setdefault`` so a context
seeded by an earlier stage is extended rather than replaced.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional


# -----------------------------------------------------------------------------

class RenderStateKey(str, Enum):
    LINKS          = "LINKS"
    IMAGES         = "IMAGES"
    TITLE          = "TITLE"
    HEADERS        = "HEADERS"
    OVERRIDE_STATS = "OVERRIDE_STATS"
    FOR_CACHE      = "FOR_CACHE"
    ID_SUFFIX      = "ID_SUFFIX"
    TOC            = "TOC"


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class OverrideInstance:
    """A link or media target rewritten by an override table.

    ``start`` / ``stop`` delimit the replaced text in the original source and
    ``override`` is the text that should stand there instead.
    """
    start:    int
    stop:     int
    override: str


@dataclass(frozen=True)
class HeadingRecord:
    level: int
    id:    str
    text:  str


@dataclass
class WalkState:
    """Scratch state for one tree walk; not part of ``render_state``."""
    used_ids:        set[str] = field(default_factory=set)
    headings:        list[HeadingRecord] = field(default_factory=list)
    first_heading:   Optional[str] = None
    sequences:       dict[str, int] = field(default_factory=dict)
    link_overrides:  Optional[dict] = None
    media_overrides: Optional[dict] = None


# -----------------------------------------------------------------------------

class RenderContext:

    def __init__(
        self,
        host: str,
        site: str,
        page: str,
        user: Optional[str] = None,
        render_state: Optional[dict[str, Any]] = None,
    ) -> None:
        self._host = host
        self._site = site
        self._page = page
        self._user = user
        self.render_state: dict[str, Any] = render_state if render_state is not None else {}
        self._walk = WalkState()

    @property
    def host(self) -> str:
        return self._host

    @property
    def site(self) -> str:
        return self._site

    @property
    def page(self) -> str:
        return self._page

    @property
    def user(self) -> Optional[str]:
        return self._user

    def __repr__(self) -> str:
        return f"RenderContext(host={self._host!r}, site={self._site!r}, page={self._page!r}, user={self._user!r})"

    # ── flags ────────────────────────────────────────────────────────────

    @property
    def for_cache(self) -> bool:
        return bool(self.render_state.get(RenderStateKey.FOR_CACHE.value, False))

    @property
    def id_suffix(self) -> str:
        return self.render_state.get(RenderStateKey.ID_SUFFIX.value) or ""

    # ── accumulators ──────────────────────────────────────────────────────

    def add_link(self, path: str) -> None:
        self.render_state.setdefault(RenderStateKey.LINKS.value, set()).add(path)

    def add_image(self, path: str) -> None:
        self.render_state.setdefault(RenderStateKey.IMAGES.value, set()).add(path)

    def add_override(self, instance: OverrideInstance) -> None:
        self.render_state.setdefault(RenderStateKey.OVERRIDE_STATS.value, []).append(instance)

    def add_heading(self, record: HeadingRecord) -> None:
        self.render_state.setdefault(RenderStateKey.HEADERS.value, []).append(record)

    # ── per-walk scratch ──────────────────────────────────────────────────

    @property
    def walk(self) -> WalkState:
        return self._walk

    def begin_walk(self) -> WalkState:
        self._walk = WalkState()
        return self._walk

    def next_sequence(self, name: str) -> int:
        """Per-render counter, used for element ids that have no natural slug."""
        value = self._walk.sequences.get(name, 0) + 1
        self._walk.sequences[name] = value
        return value


# -----------------------------------------------------------------------------

@dataclass
class RenderResult:
    rendered_text: str
    render_state:  dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> Optional[str]:
        return self.render_state.get(RenderStateKey.TITLE.value)

    @property
    def links(self) -> set[str]:
        return self.render_state.get(RenderStateKey.LINKS.value, set())

    @property
    def images(self) -> set[str]:
        return self.render_state.get(RenderStateKey.IMAGES.value, set())

    @property
    def headers(self) -> list[HeadingRecord]:
        return self.render_state.get(RenderStateKey.HEADERS.value, [])

    @property
    def override_instances(self) -> list[OverrideInstance]:
        return self.render_state.get(RenderStateKey.OVERRIDE_STATS.value, [])


# -----------------------------------------------------------------------------

def apply_override_instances(source: str, instances: Iterable[OverrideInstance]) -> str:
    """Rewrite *source* so every recorded override span holds its replacement.

    Spans are applied from the end of the text backwards so earlier offsets
    stay valid.
    """
    for inst in sorted(instances, key=lambda i: i.start, reverse=True):
        source = source[:inst.start] + inst.override + source[inst.stop:]
    return source


# -----------------------------------------------------------------------------
