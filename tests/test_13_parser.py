#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the block parser and inline tokenizer: node kinds and source spans."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest

from wikirender.render import WikiParseError, WikiParser
from wikirender.render.nodes import Node, NodeKind, text_node
from wikirender.render.parser import parse, tokenize_inline


def _kinds(nodes):
    return [node.kind for node in nodes]


# ── Blocks ────────────────────────────────────────────────────────────────────

def test_document_spans_source():
    doc = parse("a\n\nb")
    assert doc.kind is NodeKind.DOCUMENT
    assert (doc.start, doc.stop) == (0, 4)
    assert _kinds(doc.children) == [NodeKind.PARAGRAPH, NodeKind.PARAGRAPH]


def test_block_kinds():
    doc = parse("== H ==\n----\n  code\n>quote\n| a |\n~~NOTOC~~\n<hidden>\nx\n</hidden>")
    assert _kinds(doc.children) == [
        NodeKind.HEADER, NodeKind.HORIZONTAL_RULE, NodeKind.CODE_BLOCK, NodeKind.BLOCKQUOTE,
        NodeKind.TABLE, NodeKind.DIRECTIVE, NodeKind.HIDDEN_BLOCK,
    ]


def test_header_inline_span():
    source = "text\n===  Title  ==="
    header = parse(source).children[1]
    assert header.attrs["level"] == 4
    inline = header.children[0]
    assert source[inline.start:inline.stop] == "Title"


def test_code_tag_language_and_trailing_text():
    doc = parse("<code Python>\nx\n</code> tail")
    code, para = doc.children
    assert code.attrs["lang"] == "python"
    assert code.text == "x\n"
    assert para.kind is NodeKind.PARAGRAPH


def test_list_items_carry_depth_and_type():
    para = parse("  * a\n    - b").children[0]
    items = para.children[0].children
    assert [(i.attrs["depth"], i.attrs["ordered"]) for i in items] == [(2, False), (4, True)]


def test_table_row_cells():
    table = parse("^ h | d |").children[0]
    cells = table.children[0].children
    assert [(c.text, c.attrs["header"]) for c in cells] == [(" h ", True), (" d ", False)]


def test_custom_nesting_limit():
    source = "<hidden>\n<hidden>\nx\n</hidden>\n</hidden>"
    assert parse(source).children[0].kind is NodeKind.HIDDEN_BLOCK
    with pytest.raises(WikiParseError):
        WikiParser(max_nesting=1).parse(source)


def test_every_node_lies_inside_its_parent():
    source = "== H ==\n  * [[a|**b**]]\n| x | {{m.png}} |\n<hidden>\n>q\n</hidden>"

    def _check(node):
        assert 0 <= node.start <= node.stop <= len(source)
        for child in node.children:
            assert node.start <= child.start and child.stop <= node.stop
            _check(child)

    doc = parse(source)
    _check(doc)
    assert NodeKind.IMAGE in {node.kind for node in doc.walk()}


def test_node_defaults_are_shared_and_read_only():
    first, second = Node(NodeKind.LINEBREAK), Node(NodeKind.HORIZONTAL_RULE)
    assert dict(first.attrs) == {} and first.attrs is second.attrs
    with pytest.raises(TypeError):
        first.attrs["x"] = 1


def test_node_attrs_are_copied():
    attrs = {"level": 1}
    node = Node(NodeKind.HEADER, attrs=attrs, children=[text_node("a")])
    attrs["level"] = 2
    assert node.attrs["level"] == 1
    assert isinstance(node.children, tuple)


def test_non_string_rejected():
    with pytest.raises(WikiParseError):
        parse(None)


# ── Inline tokens ─────────────────────────────────────────────────────────────

def test_link_target_span_skips_padding():
    source = "x [[  ns:page  |Label]]"
    link = tokenize_inline(source)[1]
    assert link.kind is NodeKind.LINK
    assert link.attrs["target"] == "ns:page"
    assert source[link.attrs["target_start"]:link.attrs["target_stop"]] == "ns:page"
    assert source[link.children[0].start:link.children[0].stop] == "Label"


def test_inline_offsets_are_absolute():
    tokens = tokenize_inline("**b**", 100)
    assert [(t.kind, t.start, t.stop) for t in tokens] == [
        (NodeKind.MARKER, 100, 102),
        (NodeKind.PLAIN_TEXT, 102, 103),
        (NodeKind.MARKER, 103, 105),
    ]


def test_macro_and_directive_tokens():
    tokens = tokenize_inline("~~MACRO~~user~~/MACRO~~~~YESTOC~~")
    assert _kinds(tokens) == [NodeKind.MACRO, NodeKind.DIRECTIVE]
    assert tokens[0].attrs["body"] == "user"
    assert tokens[1].attrs["name"] == "YESTOC"


# -----------------------------------------------------------------------------
