#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Block and inline leaf renderers
===============================
Everything that is not a link, media reference, list, table or heading:
document and paragraph containers, text, emphasis spans, rules, code,
blockquotes, hidden blocks, directives, macros and parse-error fragments.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import TYPE_CHECKING

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from .dispatch import escape_attr, escape_text, renders
from .headings import finish_document, record_toc_directive
from .macros import macro_placeholder
from .nodes import Node, NodeKind

if TYPE_CHECKING:
    from .context import RenderContext
    from .engine import WikiRenderer


# -----------------------------------------------------------------------------
# Containers
# -----------------------------------------------------------------------------

def join_blocks(rendered) -> str:
    """Join ``(node, html)`` pairs with newlines; code blocks attach to what precedes them."""
    out: list[str] = []
    for node, html in rendered:
        if not html:
            continue
        if out and node.kind is not NodeKind.CODE_BLOCK:
            out.append("\n")
        out.append(html)
    return "".join(out)


def render_blocks(renderer: "WikiRenderer", nodes, context: "RenderContext") -> str:
    return join_blocks((node, renderer.render(node, context)) for node in nodes)


@renders(NodeKind.DOCUMENT)
def render_document(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    return finish_document(renderer, render_blocks(renderer, node.children, context), context)


@renders(NodeKind.PARAGRAPH)
def render_paragraph(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    return f"<div>{render_blocks(renderer, node.children, context)}</div>"


@renders(NodeKind.INLINE)
def render_inline_run(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    return renderer.render_inline(node.children, context)


# -----------------------------------------------------------------------------
# Inline leaves
# -----------------------------------------------------------------------------

_SPAN_TAGS = {
    NodeKind.BOLD:          ('<span class="bold">', "</span>"),
    NodeKind.ITALIC:        ('<span class="italic">', "</span>"),
    NodeKind.UNDERLINE:     ('<span class="underline">', "</span>"),
    NodeKind.MONOSPACE:     ('<span class="monospace">', "</span>"),
    NodeKind.STRIKETHROUGH: ("<del>", "</del>"),
    NodeKind.SUPERSCRIPT:   ("<sup>", "</sup>"),
    NodeKind.SUBSCRIPT:     ("<sub>", "</sub>"),
}


@renders(*_SPAN_TAGS)
def render_span(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    open_tag, close_tag = _SPAN_TAGS[node.kind]
    inner = "".join(renderer.render(child, context) for child in node.children)
    return f"{open_tag}{inner}{close_tag}"


@renders(NodeKind.PLAIN_TEXT)
def render_text(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    return escape_text(node.text)


@renders(NodeKind.LINEBREAK)
def render_linebreak(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    return "<br>"


@renders(NodeKind.MACRO)
def render_macro(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    body = node.attrs["body"]
    if context.for_cache or renderer.macro_evaluator is None:
        return macro_placeholder(body)
    return renderer.macro_evaluator.evaluate(body, context)


@renders(NodeKind.DIRECTIVE)
def render_directive(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    record_toc_directive(node.attrs["name"], context)
    return ""


# -----------------------------------------------------------------------------
# Block leaves
# -----------------------------------------------------------------------------

@renders(NodeKind.HORIZONTAL_RULE)
def render_rule(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    return "<hr>"


@renders(NodeKind.PARSE_ERROR)
def render_parse_error(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    return f'<div class="parseError"><b>ERROR:</b> Cannot parse: [{escape_text(node.text)}]</div>'


def highlight_code(code: str, lang: str) -> str:
    """Highlight *code* with Pygments; unknown languages come out as plain text."""
    try:
        lexer = get_lexer_by_name(lang.strip(), stripall=True) if lang.strip() else TextLexer()
    except ClassNotFound:
        lexer = TextLexer()
    return highlight(code, lexer, HtmlFormatter(nowrap=False, cssclass="highlight"))


@renders(NodeKind.CODE_BLOCK)
def render_code(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    lang = node.attrs.get("lang") or ""
    if lang:
        return highlight_code(node.text, lang)
    return f'<pre class="code">{escape_text(node.text)}</pre>'


@renders(NodeKind.BLOCKQUOTE)
def render_blockquote(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    """Nest ``<blockquote>`` by depth.

    Every line after the first at a level is preceded by ``<br>``, and so is
    a deeper level opened below a level that already has content.
    """
    out: list[str] = []
    has_content = [False]

    for row in node.children:
        depth = row.attrs["depth"]
        while len(has_content) - 1 > depth:
            has_content.pop()
            out.append("</blockquote>")
        while len(has_content) - 1 < depth:
            if has_content[-1]:
                out.append("<br>")
            has_content.append(False)
            out.append("<blockquote>")
        if has_content[-1]:
            out.append("<br>")
        out.append(renderer.render(row, context) + "\n")
        has_content[-1] = True

    out.extend("</blockquote>" for _ in has_content[1:])
    return "".join(out)


@renders(NodeKind.HIDDEN_BLOCK)
def render_hidden(renderer: "WikiRenderer", node: Node, context: "RenderContext") -> str:
    """Collapsible block; its last paragraph is emitted without the ``<div>`` wrapper."""
    toggle = f"hiddenToggle{context.next_sequence('hidden')}{context.id_suffix}"
    label = escape_text(node.attrs.get("label") or "Hidden")
    rendered = [(child, renderer.render(child, context)) for child in node.children[:-1]]
    if node.children:
        last = node.children[-1]
        if last.kind is NodeKind.PARAGRAPH:
            rendered.append((last, render_blocks(renderer, last.children, context)))
        else:
            rendered.append((last, renderer.render(last, context)))
    inner = join_blocks(rendered)
    return (f'<div class="hidden"><input id="{escape_attr(toggle)}" class="toggle" type="checkbox">'
            f'<label for="{escape_attr(toggle)}" class="hdn-toggle">{label}</label>'
            f'<div class="collapsible">{inner}</div></div>')


# -----------------------------------------------------------------------------
