#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for link resolution: internal, external, sanitising and overrides."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from wikirender.render import MalformedReferenceError, Override, OverrideInstance, RenderContext
from wikirender.render.links import MALFORMED_URL, clean_page_path, validate_url
from wikirender.services.overrides import OverrideTable
from wikirender.services.pages import adjust_source

EXTERNAL = 'class="wikiLinkExternal" href="{}" target="_blank" rel="noopener noreferrer"'


# ── Internal links ────────────────────────────────────────────────────────────

def test_existing_page_uses_title(do_render):
    assert do_render("[[exists]]") == '<div><a class="wikiLink" href="/page/exists">This Page Exists</a></div>'


def test_missing_page_keeps_display_text(do_render):
    assert do_render("[[missing|This link is missing]]") == (
        '<div><a class="wikiLinkMissing" href="/page/missing">This link is missing</a></div>'
    )


def test_missing_page_without_display_uses_target(do_render):
    assert do_render("[[missing]]") == '<div><a class="wikiLinkMissing" href="/page/missing">missing</a></div>'


def test_namespaced_page(do_render):
    assert do_render("[[ns:exists]]") == '<div><a class="wikiLink" href="/page/ns:exists">Namespaced Page</a></div>'


def test_empty_target_is_home_page(do_render):
    assert do_render("[[]]") == '<div><a class="wikiLink" href="/">Home</a></div>'


def test_display_text_is_formatted(do_render):
    assert do_render("[[exists|**bold** text]]") == (
        '<div><a class="wikiLink" href="/page/exists"><span class="bold">bold</span> text</a></div>'
    )


def test_blank_display_falls_back_to_title(do_render):
    assert do_render("[[exists| ]]") == '<div><a class="wikiLink" href="/page/exists">This Page Exists</a></div>'


def test_unterminated_link_is_text(do_render):
    assert do_render("[[missing") == "<div>[[missing</div>"


def test_links_are_recorded(renderer, context):
    result = renderer.render_with_info("[[exists]] [[missing|x]] [[https://example.com]] [[exists]]", context)
    assert result.links == {"exists", "missing"}


# ── Sanitising ────────────────────────────────────────────────────────────────

def test_quotes_in_target_cannot_break_out(do_render):
    html = do_render('[[what " onclick="doEvil]]')
    assert html == '<div><a class="wikiLinkMissing" href="/page/what_onclick_doEvil">what_onclick_doEvil</a></div>'
    assert 'onclick="' not in html


def test_markup_in_display_is_escaped(do_render):
    html = do_render("[[missing|<script>alert(1)</script>]]")
    assert "<script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html


def test_clean_page_path():
    assert clean_page_path("a b/c:d") == "a_b_c:d"
    assert clean_page_path("  ") == ""


# ── External links ────────────────────────────────────────────────────────────

def test_external_link(do_render):
    html = do_render("[[https://example.com/x?a=1&b=2]]")
    href = "https://example.com/x?a=1&amp;b=2"
    assert html == f"<div><a {EXTERNAL.format(href)}>{href}</a></div>"


def test_external_link_with_display(do_render):
    assert do_render("[[http://example.com|Example]]") == (
        f'<div><a {EXTERNAL.format("http://example.com")}>Example</a></div>'
    )


def test_malformed_url_is_replaced(do_render):
    assert do_render("[[http://bad url|label]]") == f"<div><a {EXTERNAL.format(MALFORMED_URL)}>label</a></div>"


def test_malformed_url_with_quotes(do_render):
    html = do_render('[[https://x.com" onclick="evil()]]')
    assert MALFORMED_URL in html
    assert "onclick" not in html


@pytest.mark.parametrize("url", ["http://", "https://a.com/%zz", "ftp://[::1"])
def test_validate_url_rejects(url):
    with pytest.raises(MalformedReferenceError):
        validate_url(url)


# ── Overrides ─────────────────────────────────────────────────────────────────

def test_override_rewrites_target(make_renderer, context):
    table = OverrideTable({"": [Override("", "overridden", "ns", "target")]})
    renderer = make_renderer(link_overrides=table)
    source = "[[overridden|x]]"
    result = renderer.render_with_info(source, context)

    assert result.rendered_text == '<div><a class="wikiLinkMissing" href="/page/ns:target">x</a></div>'
    assert result.override_instances == [OverrideInstance(2, 12, "ns:target")]
    assert result.links == {"ns:target"}
    assert adjust_source(source, result) == "[[ns:target|x]]"


def test_override_span_excludes_padding(make_renderer, context):
    table = OverrideTable({"": [Override("ns1", "wns", "ns2", "wns2")]})
    renderer = make_renderer(link_overrides=table)
    source = "Go [[ ns1:wns |wtitle]] and [[ns1:wns]]"
    result = renderer.render_with_info(source, context)

    assert len(result.override_instances) == 2
    assert adjust_source(source, result) == "Go [[ ns2:wns2 |wtitle]] and [[ns2:wns2]]"


def test_override_to_existing_page_uses_its_title(make_renderer, context):
    table = OverrideTable({"": [Override("", "old", "", "exists")]})
    html = make_renderer(link_overrides=table).render_with_info("[[old]]", context).rendered_text
    assert html == '<div><a class="wikiLink" href="/page/exists">This Page Exists</a></div>'


def test_last_override_wins(make_renderer, context):
    table = OverrideTable({"": [Override("", "a", "", "first"), Override("", "a", "", "second")]})
    result = make_renderer(link_overrides=table).render_with_info("[[a]]", context)
    assert result.links == {"second"}


def test_override_for_other_page_does_not_apply(make_renderer):
    table = OverrideTable({"other": [Override("", "a", "", "b")]})
    renderer = make_renderer(link_overrides=table)

    result = renderer.render_with_info("[[a]]", RenderContext("h", "default", "page"))
    assert result.links == {"a"}
    assert result.override_instances == []

    result = renderer.render_with_info("[[a]]", RenderContext("h", "default", "other"))
    assert result.links == {"b"}


def test_external_links_ignore_overrides(make_renderer, context):
    table = OverrideTable({"": [Override("", "http", "", "nope")]})
    result = make_renderer(link_overrides=table).render_with_info("[[http://example.com]]", context)
    assert result.override_instances == []


# -----------------------------------------------------------------------------
