#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for list assembly from indented ``*`` / ``-`` items."""
# -----------------------------------------------------------------------------

from __future__ import annotations


def test_unordered_list(do_render):
    assert do_render("  * one\n  * two") == "<div><ul>\n<li>one</li>\n<li>two</li>\n</ul></div>"


def test_nested_mixed_list(do_render):
    assert do_render("  - A\n    - B\n      * C") == (
        "<div><ol>\n<li>A</li>\n<ol>\n<li>B</li>\n<ul>\n<li>C</li>\n</ul>\n</ol>\n</ol></div>"
    )


def test_back_to_shallower_level(do_render):
    assert do_render("  * a\n    * b\n  * c") == (
        "<div><ul>\n<li>a</li>\n<ul>\n<li>b</li>\n</ul>\n<li>c</li>\n</ul></div>"
    )


def test_type_change_at_same_depth(do_render):
    assert do_render("  * a\n  - b") == "<div><ul>\n<li>a</li>\n</ul>\n<ol>\n<li>b</li>\n</ol></div>"


def test_ordered_item_value(do_render):
    assert do_render("  - {{3}} three\n  - four") == (
        '<div><ol>\n<li value="3">three</li>\n<li>four</li>\n</ol></div>'
    )


def test_item_content_is_formatted(do_render):
    assert do_render("  * **b** [[exists]]") == (
        '<div><ul>\n<li><span class="bold">b</span> '
        '<a class="wikiLink" href="/page/exists">This Page Exists</a></li>\n</ul></div>'
    )


def test_list_then_text_in_same_paragraph(do_render):
    assert do_render("before\n  * a\nafter") == "<div>before\n<ul>\n<li>a</li>\n</ul>\nafter</div>"


def test_tags_balance_for_ragged_indents(do_render):
    html = do_render("      * deep\n  * shallow\n    - mid\n * top")
    for tag in ("ul", "ol"):
        assert html.count(f"<{tag}>") == html.count(f"</{tag}>")


# -----------------------------------------------------------------------------
