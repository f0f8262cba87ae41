#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the macro service and its built-in macros."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest

from wikirender.render import RenderContext
from wikirender.services.macros import MacroRegistry, MacroService, macro_registry


@pytest.fixture
def macros():
    return MacroService()


# ── Built-ins ─────────────────────────────────────────────────────────────────

def test_builtin_names():
    assert {"user", "page", "site", "date", "echo"} <= set(macro_registry.names())


def test_user_macro(macros, context):
    assert macros.evaluate("user", context) == "tester"
    assert macros.evaluate("user", RenderContext("h", "s", "p")) == "anonymous"


def test_page_and_site_macros(macros):
    context = RenderContext("h", "docs", "ns:start")
    assert macros.evaluate("page", context) == "ns:start"
    assert macros.evaluate("site", context) == "docs"


def test_date_macro_with_format(macros, context):
    assert macros.evaluate("date:%Y", context) == str(datetime.now(tz=timezone.utc).year)


def test_echo_escapes(macros, context):
    assert macros.evaluate("echo: <i>hi</i> ", context) == "&lt;i&gt;hi&lt;/i&gt;"


def test_names_are_case_insensitive(macros, context):
    assert macros.evaluate("USER", context) == "tester"


# ── Failures ──────────────────────────────────────────────────────────────────

def test_unknown_macro(macros, context):
    assert macros.evaluate("nope:1", context) == "<div>MACRO- Unknown Macro nope</div>"


def test_unknown_macro_name_is_escaped(macros, context):
    assert macros.evaluate("<x>", context) == "<div>MACRO- Unknown Macro &lt;x&gt;</div>"


def test_failing_macro_is_contained(context, caplog):
    registry = MacroRegistry()

    @registry.register("boom")
    def _boom(args, ctx):
        raise ValueError(args)

    with caplog.at_level(logging.WARNING, logger="wikirender.services.macros"):
        html = MacroService(registry).evaluate("boom:bad", context)

    assert html == '<div class="macroError">MACRO- boom failed</div>'
    assert any("boom" in r.getMessage() for r in caplog.records)


# ── post_render ───────────────────────────────────────────────────────────────

def test_post_render_replaces_every_placeholder(macros, context):
    html = "<div><!--wr-macro:user--> on <!--wr-macro:page--></div>"
    assert macros.post_render(html, context) == "<div>tester on page</div>"


# -----------------------------------------------------------------------------
