#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Wiki markup parser
==================
Turns DokuWiki-flavoured markup into a tree of :class:`~wikirender.render.nodes.Node`.

Supported syntax
----------------
====== H1 ====== … == H5 ==                  — headers (level = 7 - number of '=')
----                                        — horizontal rule (4 or more dashes)
 * item / ' - item' / '  -{{5}} item'       — lists, depth = leading spaces
  indented text                             — code box (2 spaces stripped)
<code lang> … </code>                       — code block, highlighted when lang given
^ head ^ head ^ / | cell | cell |           — tables
> quote / >> deeper                         — blockquotes
<hidden label> … </hidden>                  — collapsible block
~~NOTOC~~ / ~~YESTOC~~                      — TOC directives
**b** //i// __u__ ''mono'' <del> <sup> <sub>— emphasis markers (resolved later)
%%raw%% / <nowiki>raw</nowiki>              — verbatim text
[[target|display]] / {{media?opts|title}}   — links and media
~~MACRO~~body~~/MACRO~~                     — macro call
text \\ text                                — forced line break

A line that cannot be interpreted becomes a ``PARSE_ERROR`` node; the rest
of the document still parses.  Emphasis markers are emitted as flat
``MARKER`` tokens: matching them up is the renderer's job.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .exceptions import WikiParseError
from .nodes import Node, NodeKind, text_node


# -----------------------------------------------------------------------------

DEFAULT_MAX_NESTING = 8

_DIRECTIVE_LINE_RE = re.compile(r"^[ \t]*~~(NOTOC|YESTOC)~~[ \t]*$")
_CODE_OPEN_RE      = re.compile(r"^[ \t]*<code(?:[ \t]+([\w+#.-]+))?[ \t]*>", re.IGNORECASE)
_CODE_CLOSE_RE     = re.compile(r"</code>", re.IGNORECASE)
_HIDDEN_OPEN_RE    = re.compile(r"^[ \t]*<hidden(?:[ \t]+([^>]*))?>", re.IGNORECASE)
_HIDDEN_TAG_RE     = re.compile(r"<hidden(?:[ \t]+[^>]*)?>|</hidden>", re.IGNORECASE)
_HEADER_RE         = re.compile(r"^[ \t]*(={2,6})(.+?)(={2,6})[ \t]*$")
_RULE_RE           = re.compile(r"^[ \t]*-{4,}[ \t]*$")
_BROKEN_RULE_RE    = re.compile(r"^[ \t]*-{2,3}[ \t]*$")
_LIST_RE           = re.compile(r"^( +)([*-])[ \t]*")
_LIST_VALUE_RE     = re.compile(r"\{\{(\d+)\}\}[ \t]*")
_QUOTE_RE          = re.compile(r"^(>+)")
_TABLE_RE          = re.compile(r"^[|^]")

_INLINE_RE = re.compile(
    r"""
      %%(?P<unformat>.*?)%%
    | <nowiki>(?P<nowiki>.*?)</nowiki>
    | ~~MACRO~~(?P<macro>.*?)~~/MACRO~~
    | ~~(?P<directive>NOTOC|YESTOC)~~
    | \[\[(?P<link>[^\n]*?)\]\]
    | \{\{(?P<media>[^\n{}]*)\}\}
    | (?P<linebreak>[ \t]+\\\\)(?=\s|$)
    | (?P<marker>\*\*|//|__|''|</?del>|</?sup>|</?sub>)
    """,
    re.DOTALL | re.VERBOSE,
)

# token → (span kind, role)
_MARKERS: dict[str, tuple[NodeKind, str]] = {
    "**":     (NodeKind.BOLD,          "toggle"),
    "//":     (NodeKind.ITALIC,        "toggle"),
    "__":     (NodeKind.UNDERLINE,     "toggle"),
    "''":     (NodeKind.MONOSPACE,     "toggle"),
    "<del>":  (NodeKind.STRIKETHROUGH, "open"),
    "</del>": (NodeKind.STRIKETHROUGH, "close"),
    "<sup>":  (NodeKind.SUPERSCRIPT,   "open"),
    "</sup>": (NodeKind.SUPERSCRIPT,   "close"),
    "<sub>":  (NodeKind.SUBSCRIPT,     "open"),
    "</sub>": (NodeKind.SUBSCRIPT,     "close"),
}


# -----------------------------------------------------------------------------

@dataclass
class _Line:
    start: int
    text:  str

    @property
    def stop(self) -> int:
        return self.start + len(self.text)


def _split_lines(source: str, start: int, stop: int) -> list[_Line]:
    lines: list[_Line] = []
    pos = start
    while pos < stop:
        nl = source.find("\n", pos, stop)
        end = stop if nl == -1 else nl
        text = source[pos:end]
        if text.endswith("\r"):
            text = text[:-1]
        lines.append(_Line(pos, text))
        pos = end + 1
    return lines


# -----------------------------------------------------------------------------
# Inline tokenizer
# -----------------------------------------------------------------------------

def tokenize_inline(text: str, offset: int = 0) -> list[Node]:
    """Split one inline run into flat tokens, offsets relative to the full source."""
    tokens: list[Node] = []
    buf: list[str] = []
    span = [0, 0]   # source span of the pending text buffer

    def _text(value: str, start: int, stop: int) -> None:
        if not buf:
            span[0] = start
        buf.append(value)
        span[1] = stop

    def _flush() -> None:
        if buf:
            tokens.append(text_node("".join(buf), span[0], span[1]))
            buf.clear()

    last = 0
    for m in _INLINE_RE.finditer(text):
        if m.start() > last:
            _text(text[last:m.start()], offset + last, offset + m.start())
        last = m.end()
        start, stop = offset + m.start(), offset + m.end()

        kind = m.lastgroup
        if kind in ("unformat", "nowiki"):
            _text(m.group(kind), start, stop)
            continue
        if kind == "marker" and m.group("marker") == "//" and m.start() > 0 and text[m.start() - 1] == ":":
            # "scheme://" inside plain text is not italics
            _text("//", start, stop)
            continue

        _flush()
        if kind == "macro":
            tokens.append(Node(NodeKind.MACRO, start, stop, attrs={"body": m.group("macro")}))
        elif kind == "directive":
            tokens.append(Node(NodeKind.DIRECTIVE, start, stop, attrs={"name": m.group("directive")}))
        elif kind == "link":
            tokens.append(_link_node(m, offset))
        elif kind == "media":
            tokens.append(Node(NodeKind.IMAGE, start, stop,
                               attrs={"raw": m.group("media"), "offset": offset + m.start("media")}))
        elif kind == "linebreak":
            tokens.append(Node(NodeKind.LINEBREAK, start, stop))
        else:
            token = m.group("marker")
            span_kind, role = _MARKERS[token]
            tokens.append(Node(NodeKind.MARKER, start, stop, attrs={"span": span_kind, "role": role}, text=token))

    if last < len(text):
        _text(text[last:], offset + last, offset + len(text))
    _flush()
    return tokens


def _link_node(m: re.Match, offset: int) -> Node:
    raw = m.group("link")
    raw_start = offset + m.start("link")
    target_raw, sep, display = raw.partition("|")
    target = target_raw.strip()
    target_start = raw_start + (len(target_raw) - len(target_raw.lstrip()))
    attrs = {
        "target":       target,
        "target_start": target_start,
        "target_stop":  target_start + len(target),
        "has_display":  bool(sep) and bool(display.strip()),
    }
    children: list[Node] = []
    if attrs["has_display"]:
        children = tokenize_inline(display, raw_start + len(target_raw) + 1)
    return Node(NodeKind.LINK, offset + m.start(), offset + m.end(), children=children, attrs=attrs)


def _inline(source: str, start: int, stop: int, **attrs) -> Node:
    return Node(NodeKind.INLINE, start, stop,
                children=tokenize_inline(source[start:stop], start), attrs=attrs)


# -----------------------------------------------------------------------------
# Block parser
# -----------------------------------------------------------------------------

class WikiParser:
    """Line-oriented block parser.  One instance can parse many documents."""

    def __init__(self, max_nesting: int = DEFAULT_MAX_NESTING) -> None:
        self.max_nesting = max_nesting

    def parse(self, source: str) -> Node:
        if not isinstance(source, str):
            raise WikiParseError(f"Cannot parse object of type {type(source).__name__}")
        blocks = self._parse_blocks(source, _split_lines(source, 0, len(source)), depth=0)
        return Node(NodeKind.DOCUMENT, 0, len(source), children=blocks)

    # ----------------------------------------------------------------- blocks

    def _parse_blocks(self, source: str, lines: list[_Line], depth: int) -> list[Node]:
        blocks: list[Node] = []
        limit = lines[-1].stop if lines else 0
        para: list[tuple[str, _Line, Optional[re.Match]]] = []
        i = 0

        def _flush_para() -> None:
            if para:
                blocks.append(self._paragraph(source, para))
                para.clear()

        while i < len(lines):
            line = lines[i]
            text = line.text

            if not text.strip():
                _flush_para()
                i += 1
                continue

            m = _DIRECTIVE_LINE_RE.match(text)
            if m:
                _flush_para()
                blocks.append(Node(NodeKind.DIRECTIVE, line.start, line.stop, attrs={"name": m.group(1)}))
                i += 1
                continue

            m = _CODE_OPEN_RE.match(text)
            if m:
                close = _CODE_CLOSE_RE.search(source, line.start + m.end(), limit)
                if close:
                    _flush_para()
                    body = source[line.start + m.end():close.start()]
                    if body.startswith("\n"):
                        body = body[1:]
                    blocks.append(Node(NodeKind.CODE_BLOCK, line.start, close.end(),
                                       attrs={"lang": (m.group(1) or "").lower()}, text=body))
                    i = self._resume_after(source, lines, i, close.end())
                    continue

            m = _HIDDEN_OPEN_RE.match(text)
            if m:
                close = self._find_hidden_close(source, line.start + m.end(), limit)
                if close is not None:
                    _flush_para()
                    if depth + 1 > self.max_nesting:
                        raise WikiParseError(f"Hidden blocks nested deeper than {self.max_nesting}")
                    inner_start, inner_stop = line.start + m.end(), close.start()
                    inner = self._parse_blocks(source, _split_lines(source, inner_start, inner_stop), depth + 1)
                    label = (m.group(1) or "").strip()
                    blocks.append(Node(NodeKind.HIDDEN_BLOCK, line.start, close.end(),
                                       children=inner, attrs={"label": label}))
                    i = self._resume_after(source, lines, i, close.end())
                    continue

            m = _HEADER_RE.match(text)
            if m:
                _flush_para()
                inner = m.group(2)
                lead = len(inner) - len(inner.lstrip())
                inner_start = line.start + m.start(2) + lead
                inner_stop = inner_start + len(inner.strip())
                blocks.append(Node(NodeKind.HEADER, line.start, line.stop,
                                   children=(_inline(source, inner_start, inner_stop),),
                                   attrs={"level": 7 - len(m.group(1))}))
                i += 1
                continue

            if _RULE_RE.match(text):
                _flush_para()
                blocks.append(Node(NodeKind.HORIZONTAL_RULE, line.start, line.stop))
                i += 1
                continue

            if _BROKEN_RULE_RE.match(text):
                _flush_para()
                blocks.append(Node(NodeKind.PARSE_ERROR, line.start, line.stop, text=text))
                i += 1
                continue

            m = _LIST_RE.match(text)
            if m:
                para.append(("list", line, m))
                i += 1
                continue

            if text.startswith("  "):
                _flush_para()
                i = self._code_box(blocks, lines, i)
                continue

            if _QUOTE_RE.match(text):
                _flush_para()
                i = self._blockquote(blocks, source, lines, i)
                continue

            if _TABLE_RE.match(text):
                _flush_para()
                i = self._table(blocks, source, lines, i)
                continue

            para.append(("text", line, None))
            i += 1

        _flush_para()
        return blocks

    @staticmethod
    def _resume_after(source: str, lines: list[_Line], i: int, pos: int) -> int:
        """Skip the lines consumed up to *pos*; leftover text on the last line is re-queued."""
        while i < len(lines) and lines[i].stop < pos:
            i += 1
        if i < len(lines):
            rest = source[pos:lines[i].stop]
            i += 1
            if rest.strip():
                lines.insert(i, _Line(pos, rest))
        return i

    @staticmethod
    def _find_hidden_close(source: str, pos: int, limit: int) -> Optional[re.Match]:
        level = 1
        for m in _HIDDEN_TAG_RE.finditer(source, pos, limit):
            level += -1 if m.group(0).startswith("</") else 1
            if level == 0:
                return m
        return None

    # ----------------------------------------------------------------- paragraph

    def _paragraph(self, source: str, items) -> Node:
        children: list[Node] = []
        run: list[_Line] = []
        list_items: list[Node] = []

        def _flush_run() -> None:
            if run:
                children.append(_inline(source, run[0].start, run[-1].stop))
                run.clear()

        def _flush_list() -> None:
            if list_items:
                children.append(Node(NodeKind.LIST, list_items[0].start, list_items[-1].stop,
                                     children=list(list_items)))
                list_items.clear()

        for kind, line, m in items:
            if kind == "text":
                _flush_list()
                run.append(line)
                continue
            _flush_run()
            content_start = line.start + m.end()
            attrs = {"depth": len(m.group(1)), "ordered": m.group(2) == "-", "value": None}
            if attrs["ordered"]:
                vm = _LIST_VALUE_RE.match(line.text, m.end())
                if vm:
                    attrs["value"] = int(vm.group(1))
                    content_start = line.start + vm.end()
            list_items.append(Node(NodeKind.LIST_ITEM, line.start, line.stop,
                                   children=(_inline(source, content_start, line.stop),), attrs=attrs))
        _flush_run()
        _flush_list()
        return Node(NodeKind.PARAGRAPH, items[0][1].start, items[-1][1].stop, children=children)

    # ----------------------------------------------------------------- code box

    @staticmethod
    def _code_box(blocks: list[Node], lines: list[_Line], i: int) -> int:
        body: list[str] = []
        first = lines[i]
        last = first
        while i < len(lines):
            text = lines[i].text
            if not text.startswith("  ") or _LIST_RE.match(text) or _DIRECTIVE_LINE_RE.match(text):
                break
            body.append(text[2:] + "\n")
            last = lines[i]
            i += 1
        blocks.append(Node(NodeKind.CODE_BLOCK, first.start, last.stop, attrs={"lang": ""}, text="".join(body)))
        return i

    # ----------------------------------------------------------------- blockquote

    @staticmethod
    def _blockquote(blocks: list[Node], source: str, lines: list[_Line], i: int) -> int:
        rows: list[Node] = []
        first = lines[i]
        while i < len(lines):
            m = _QUOTE_RE.match(lines[i].text)
            if not m:
                break
            line = lines[i]
            rows.append(_inline(source, line.start + m.end(), line.stop, depth=len(m.group(1))))
            i += 1
        blocks.append(Node(NodeKind.BLOCKQUOTE, first.start, lines[i - 1].stop, children=rows))
        return i

    # ----------------------------------------------------------------- table

    def _table(self, blocks: list[Node], source: str, lines: list[_Line], i: int) -> int:
        rows: list[Node] = []

        def _flush_table() -> None:
            if rows:
                blocks.append(Node(NodeKind.TABLE, rows[0].start, rows[-1].stop, children=list(rows)))
                rows.clear()

        while i < len(lines) and _TABLE_RE.match(lines[i].text):
            line = lines[i]
            row = self._row(source, line)
            if row is None:
                _flush_table()
                blocks.append(Node(NodeKind.PARSE_ERROR, line.start, line.stop, text=line.text))
            else:
                rows.append(row)
            i += 1
        _flush_table()
        return i

    @staticmethod
    def _row(source: str, line: _Line) -> Optional[Node]:
        text = line.text.rstrip()
        if len(text) < 2 or text[-1] not in "|^":
            return None

        cells: list[Node] = []
        cell_start, header = 1, text[0] == "^"
        pos = 1
        while pos < len(text):
            if text.startswith("[[", pos):
                end = text.find("]]", pos + 2)
                if end != -1:
                    pos = end + 2
                    continue
            if text.startswith("{{", pos):
                end = text.find("}}", pos + 2)
                if end != -1:
                    pos = end + 2
                    continue
            if text.startswith("%%", pos):
                end = text.find("%%", pos + 2)
                if end != -1:
                    pos = end + 2
                    continue
            ch = text[pos]
            if ch in "|^":
                content = text[cell_start:pos]
                abs_start = line.start + cell_start
                cells.append(Node(NodeKind.CELL, abs_start, abs_start + len(content),
                                  children=tokenize_inline(content, abs_start),
                                  attrs={"header": header}, text=content))
                cell_start, header = pos + 1, ch == "^"
            pos += 1

        if cell_start != len(text):
            # closing delimiter swallowed by an unterminated link / media / verbatim span
            return None
        return Node(NodeKind.ROW, line.start, line.stop, children=cells)


# -----------------------------------------------------------------------------

_default_parser = WikiParser()


def parse(source: str) -> Node:
    return _default_parser.parse(source)


# -----------------------------------------------------------------------------
