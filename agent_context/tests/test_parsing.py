import pytest

from agent_context.core.parse.markdown_parser import MarkdownParser, parse_document
from agent_context.core.parse.section_locator import find_heading, headings_match, section_span
from agent_context.core.parse.serializer import render_document
from agent_context.errors import DocumentParseError
from agent_context.models.document import DocumentNode, NodeKind

SAMPLE = (
    "# Title\n"
    "\n"
    "Para one\n"
    "line two\n"
    "\n"
    "- a\n"
    "- b\n"
    "\n"
    "```python\n"
    "# not a heading\n"
    "```\n"
    "\n"
    "[ref]: http://example.com\n"
)

def test_parse_top_level_blocks():
    document = parse_document(SAMPLE)
    kinds = [node.kind for node in document.nodes]

    assert kinds == [NodeKind.heading, NodeKind.paragraph, NodeKind.list, NodeKind.other, NodeKind.other]
    assert document.nodes[0].level == 1
    assert document.nodes[0].text == "Title"
    assert document.nodes[1].raw == "Para one\nline two"
    assert document.nodes[3].raw.startswith("```python")

def test_fenced_hash_lines_are_not_headings():
    document = parse_document(SAMPLE)
    assert [n.text for n in document.nodes if n.is_heading] == ["Title"]

def test_round_trip_is_byte_for_byte():
    assert render_document(parse_document(SAMPLE)) == SAMPLE

def test_round_trip_keeps_irregular_spacing():
    text = "# A\nno blank line after heading\n\n\n\n## B\n\n  indented para\n"
    assert render_document(parse_document(text)) == text

def test_round_trip_keeps_leading_blank_lines():
    text = "\n\n  \n# A\n\nbody\n"
    document = parse_document(text)

    assert document.lead == "\n\n  \n"
    assert document.nodes[0].raw == "# A"
    assert render_document(document) == text
    assert parse_document(SAMPLE).lead == ""

def test_setext_and_closed_atx_headings():
    document = parse_document("Title\n=====\n\n## Section ##\n\nSub\n---\n")
    headings = [(n.level, n.text, n.raw) for n in document.nodes if n.is_heading]

    assert headings == [(1, "Title", "Title\n====="), (2, "Section", "## Section ##"), (2, "Sub", "Sub\n---")]

def test_empty_and_absent_documents():
    assert parse_document(None).nodes == []
    assert parse_document("").nodes == []
    assert parse_document("  \n\n").nodes == []
    assert render_document(parse_document(None)) == ""

def test_bytes_are_decoded_as_utf8():
    document = parse_document("# Café\n".encode("utf-8"))
    assert document.nodes[0].text == "Café"

def test_invalid_utf8_is_a_parse_error():
    with pytest.raises(DocumentParseError):
        parse_document(b"# Agent\n\n\xff\xfe broken\n")

def test_unencodable_text_is_a_parse_error():
    with pytest.raises(DocumentParseError):
        MarkdownParser().parse("# Agent\n\n\udcff\n")

def test_crlf_documents_parse_like_lf():
    document = parse_document("# Agent\r\n\r\n## Context\r\n")
    assert [n.text for n in document.nodes] == ["Agent", "Context"]

def test_synthesized_heading_renders_atx():
    node = DocumentNode.heading("  Context ", 2)
    assert node.raw == "## Context"
    assert node.text == "Context"
    assert node.gap is None

def test_headings_match_is_case_insensitive_and_level_exact():
    node = parse_document("##   conTEXT  \n").nodes[0]

    assert headings_match(node, "Context", 2)
    assert headings_match(node, "  CONTEXT ", 2)
    assert not headings_match(node, "Context", 3)

def test_find_heading_returns_first_match_in_range():
    nodes = parse_document("# Agent\n\none\n\n# Agent\n\ntwo\n").nodes

    assert find_heading(nodes, "agent", 1) == 0
    assert find_heading(nodes, "agent", 1, begin=1) == 2
    assert find_heading(nodes, "agent", 1, begin=1, end=2) is None
    assert find_heading(nodes, "agent", 2) is None

def test_section_span_stops_at_equal_or_higher_heading():
    nodes = parse_document(
        "# Agent\n\n## Context\n\nbody\n\n### Deeper\n\nmore\n\n## Build\n\nmake\n\n# Other\n"
    ).nodes
    # 0 Agent, 1 Context, 2 body, 3 Deeper, 4 more, 5 Build, 6 make, 7 Other

    assert section_span(nodes, 1, 2) == (2, 5)
    assert section_span(nodes, 0, 1) == (1, 7)
    assert section_span(nodes, 5, 2) == (6, 7)
    assert section_span(nodes, 7, 1) == (8, 8)
    assert section_span(nodes, 1, 2, limit=3) == (2, 3)

def test_section_span_before_first_node():
    nodes = parse_document("intro\n\n# Project\n").nodes
    assert section_span(nodes, -1, 1) == (0, 1)
