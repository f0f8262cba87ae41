#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for table assembly: header / data cells and column spans."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from wikirender.render.parser import parse
from wikirender.render.tables import merge_cells


@pytest.mark.parametrize("source, expected", [
    ("| First | Line |\n|Second | Line|",
     '<table class="lazerTable"><tbody><tr><td> First </td><td> Line </td></tr>\n'
     "<tr><td>Second </td><td> Line</td></tr>\n</tbody></table>"),
    ("^ Header ^ Line ^\n|Second | Line|",
     '<table class="lazerTable"><tbody><tr><th> Header </th><th> Line </th></tr>\n'
     "<tr><td>Second </td><td> Line</td></tr>\n</tbody></table>"),
    ("^ Header | Line |\n|Second | Line|",
     '<table class="lazerTable"><tbody><tr><th> Header </th><td> Line </td></tr>\n'
     "<tr><td>Second </td><td> Line</td></tr>\n</tbody></table>"),
    ("^ Header | Line |\n|Second ||",
     '<table class="lazerTable"><tbody><tr><th> Header </th><td> Line </td></tr>\n'
     '<tr><td colspan="2">Second </td></tr>\n</tbody></table>'),
])
def test_render_table(do_render, source, expected):
    assert do_render(source) == expected


def test_cell_whitespace_is_kept(do_render):
    assert "<td>  padded  </td>" in do_render("|  padded  |")


def test_empty_cell_widens_previous(do_render):
    assert do_render("| a || b |") == (
        '<table class="lazerTable"><tbody><tr><td colspan="2"> a </td><td> b </td></tr>\n</tbody></table>'
    )


def test_two_empty_cells(do_render):
    assert '<td colspan="3"> a </td>' in do_render("| a |||")


def test_empty_header_cell_is_kept(do_render):
    assert "<tr><th> a </th><th></th></tr>" in do_render("^ a ^^")


def test_cell_with_piped_link(do_render):
    assert do_render("| [[exists|Label]] | x |") == (
        '<table class="lazerTable"><tbody><tr>'
        '<td> <a class="wikiLink" href="/page/exists">Label</a> </td><td> x </td>'
        "</tr>\n</tbody></table>"
    )


def test_cell_formatting(do_render):
    assert "<td> <span class=\"bold\">b</span> </td>" in do_render("| **b** |")


def test_row_without_closing_delimiter_is_parse_error(do_render):
    html = do_render("| a | b |\n| c | d")
    assert "<td> a </td>" in html
    assert '<div class="parseError"><b>ERROR:</b> Cannot parse: [| c | d]</div>' in html


def test_merge_cells_groups():
    table = parse("| a || b |").children[0]
    groups = merge_cells(table.children[0])
    assert [(cell.text, span) for cell, span in groups] == [(" a ", 2), (" b ", 1)]


# -----------------------------------------------------------------------------
