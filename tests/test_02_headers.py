#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for headings: levels, anchor ids, page title."""
# -----------------------------------------------------------------------------

from __future__ import annotations

from wikirender.render import HeadingRecord, RenderContext, RenderStateKey
from wikirender.render.headings import slugify


# ── Levels and ids ────────────────────────────────────────────────────────────

def test_header_levels(do_render):
    assert do_render("====== Big header ======\n ==== Smaller Header ====") == (
        '<h1 id="header_Big_header">Big header</h1>\n'
        '<h3 id="header_Smaller_Header">Smaller Header</h3>'
    )


def test_smallest_header(do_render):
    assert do_render("== tiny ==") == '<h5 id="header_tiny">tiny</h5>'


def test_duplicate_headers_get_numbered_ids(do_render):
    assert do_render("== Same ==\n== Same ==\n== Same ==") == (
        '<h5 id="header_Same">Same</h5>\n'
        '<h5 id="header_Same_1">Same</h5>\n'
        '<h5 id="header_Same_2">Same</h5>'
    )


def test_punctuation_collapses_in_id(do_render):
    assert do_render("====== Header with space. ======") == (
        '<h1 id="header_Header_with_space">Header with space.</h1>'
    )


def test_id_for_header_without_word_characters(do_render):
    assert do_render("====== !!! ======") == '<h1 id="header_section">!!!</h1>'


def test_slugify():
    assert slugify("Here's a title") == "Here_s_a_title"
    assert slugify("  ") == "section"


def test_header_with_line_break(do_render):
    assert do_render("== This is \\\\ a header ==") == (
        '<h5 id="header_This_is_a_header">This is<br> a header</h5>'
    )


def test_id_suffix_is_appended():
    from wikirender.render import WikiRenderer

    context = RenderContext("localhost", "default", "page", None,
                            {RenderStateKey.ID_SUFFIX.value: "_previewPage"})
    html = WikiRenderer().render_with_info("== A ==\n== A ==", context).rendered_text
    assert html == '<h5 id="header_A_previewPage">A</h5>\n<h5 id="header_A_1_previewPage">A</h5>'


# ── Title and heading records ─────────────────────────────────────────────────

def test_first_header_is_title(renderer, context):
    result = renderer.render_with_info("text\n===== Here's a title =====\n== Second ==", context)
    assert result.title == "Here's a title"


def test_no_header_no_title(renderer, context):
    assert renderer.render_with_info("just text", context).title is None


def test_title_is_plain_text_of_links(renderer, context):
    result = renderer.render_with_info("==== A [[exists]] link ====", context)
    assert result.title == "A This Page Exists link"
    assert result.rendered_text == (
        '<h3 id="header_A_This_Page_Exists_link">A '
        '<a class="wikiLink" href="/page/exists">This Page Exists</a> link</h3>'
    )


def test_heading_records(renderer, context):
    result = renderer.render_with_info("====== One ======\n=== Two ===", context)
    assert result.headers == [
        HeadingRecord(1, "header_One", "One"),
        HeadingRecord(4, "header_Two", "Two"),
    ]


def test_escaped_title_text(renderer, context):
    result = renderer.render_with_info("== a < b ==", context)
    assert result.title == "a < b"
    assert result.rendered_text == '<h5 id="header_a_b">a &lt; b</h5>'


# -----------------------------------------------------------------------------
