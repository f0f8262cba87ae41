#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for inline formatting: emphasis spans, verbatim text, line breaks."""
# -----------------------------------------------------------------------------

from __future__ import annotations

from wikirender.render.nodes import NodeKind
from wikirender.render.parser import tokenize_inline
from wikirender.render.spans import resolve_spans


# ── Simple spans ──────────────────────────────────────────────────────────────

def test_bold(do_render):
    assert do_render("**bold**") == '<div><span class="bold">bold</span></div>'


def test_all_toggle_spans(do_render):
    assert do_render("//i// __u__ ''m''") == (
        '<div><span class="italic">i</span> <span class="underline">u</span> '
        '<span class="monospace">m</span></div>'
    )


def test_tag_spans(do_render):
    assert do_render("<sup>2</sup> and <sub>x</sub> and <del>gone</del>") == (
        "<div><sup>2</sup> and <sub>x</sub> and <del>gone</del></div>"
    )


def test_nesting_keeps_lexical_order(do_render):
    assert do_render("//**__''all''__**//") == (
        '<div><span class="italic"><span class="bold"><span class="underline">'
        '<span class="monospace">all</span></span></span></span></div>'
    )


# ── Unbalanced markers ────────────────────────────────────────────────────────

def test_unclosed_marker_is_literal(do_render):
    assert do_render("**unclosed") == "<div>**unclosed</div>"


def test_crossing_spans_abandon_inner(do_render):
    assert do_render("**bold //italic** tail//") == (
        '<div><span class="bold">bold //italic</span> tail//</div>'
    )


def test_stray_close_tag_is_escaped_text(do_render):
    assert do_render("</del>stray") == "<div>&lt;/del&gt;stray</div>"


def test_unclosed_tag_span(do_render):
    assert do_render("<sup>never closed") == "<div>&lt;sup&gt;never closed</div>"


def test_no_unclosed_tags_for_random_markers(do_render):
    html = do_render("** // __ '' ** <del> //")
    assert html.count("<span") == html.count("</span>")
    assert "<del>" not in html


# ── Verbatim ──────────────────────────────────────────────────────────────────

def test_percent_verbatim(do_render):
    assert do_render("%%**not bold**%%") == "<div>**not bold**</div>"


def test_nowiki(do_render):
    assert do_render("<nowiki>//x// [[exists]]</nowiki>") == "<div>//x// [[exists]]</div>"


def test_url_slashes_are_not_italic(do_render):
    assert do_render("see http://example.com/path now") == "<div>see http://example.com/path now</div>"


def test_text_is_escaped(do_render):
    assert do_render("a <b>tag</b> & more") == "<div>a &lt;b&gt;tag&lt;/b&gt; &amp; more</div>"


# ── Line breaks / paragraphs ──────────────────────────────────────────────────

def test_forced_line_break(do_render):
    assert do_render("line one \\\\ line two") == "<div>line one<br> line two</div>"


def test_line_break_at_end_of_line(do_render):
    assert do_render("end \\\\") == "<div>end<br></div>"


def test_backslashes_without_space_are_text(do_render):
    assert do_render("a\\\\b") == "<div>a\\\\b</div>"


def test_lines_of_one_paragraph(do_render):
    assert do_render("one\ntwo") == "<div>one\ntwo</div>"


def test_blank_line_separates_paragraphs(do_render):
    assert do_render("one\n\ntwo") == "<div>one</div>\n<div>two</div>"


# ── Resolver directly ─────────────────────────────────────────────────────────

def test_resolver_merges_text_and_keeps_offsets():
    nodes = resolve_spans(tokenize_inline("a **b", 10))
    assert len(nodes) == 1
    node = nodes[0]
    assert (node.kind, node.text, node.start, node.stop) == (NodeKind.PLAIN_TEXT, "a **b", 10, 15)


def test_resolver_builds_span_over_marker_range():
    nodes = resolve_spans(tokenize_inline("x **b** y"))
    bold = nodes[1]
    assert bold.kind is NodeKind.BOLD
    assert (bold.start, bold.stop) == (2, 7)
    assert bold.children[0].text == "b"


# -----------------------------------------------------------------------------
