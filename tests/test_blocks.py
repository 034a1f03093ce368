# tests/test_blocks.py
from __future__ import annotations

from ashstudio.parsers.blocks import BlockExtractor, extract_generic, extract_modules
from ashstudio.parsers.declarations import find_use_declarations, identify_configured_modules
from ashstudio.parsers.lines import CLOSE, OPEN, scan_lines
from ashstudio.registry import ASH_RESOURCE, DEFAULT_REGISTRY


# ---- line scanner ----
def test_block_words_in_literals_and_comments_are_ignored():
    lines = scan_lines('  x "do end" # end\n  y ~s(do) :do, do: 1\n  fn x -> x end')
    assert lines[0].events == ()
    assert lines[1].events == ()
    assert lines[2].events == (OPEN, CLOSE)


def test_heredoc_state_is_carried():
    lines = scan_lines('@doc """\nattributes do\n"""\nactions do')
    assert [ln.starts_in_literal for ln in lines] == [False, True, True, False]
    assert lines[1].events == ()
    assert lines[3].events == (OPEN,)


def test_continuation_and_brackets():
    lines = scan_lines("attribute :a,\n  :string\nfoo [\n  1\n]")
    assert lines[0].continues
    assert not lines[1].continues
    assert lines[2].brackets == 1
    assert lines[4].brackets == -1


# ---- extraction ----
def test_configured_extraction(ticket_source):
    matched = identify_configured_modules(find_use_declarations(ticket_source), DEFAULT_REGISTRY)
    sections = extract_modules(ticket_source, matched)
    # `postgres` is only reachable through an option list, so it is not configured
    assert [s.keyword for s in sections] == ["actions", "attributes", "relationships"]

    actions = sections[0]
    assert (actions.span.line, actions.span.column, actions.span.end_line) == (11, 3, 23)
    assert [(d.keyword, d.name) for d in actions.children] == [
        ("defaults", ""), ("create", ":open"), ("read", "get_by_subject"),
    ]
    create = actions.children[1]
    # `accept` is not a configured child of an action
    assert [(d.keyword, d.name) for d in create.children] == [("change", "")]
    read = actions.children[2]
    assert [(d.keyword, d.name) for d in read.children] == [("argument", ":subject"), ("filter", "")]


def test_nested_blocks_are_not_read_as_outer_details(ticket_source):
    shapes = {s.name: s for s in ASH_RESOURCE.sections}
    attributes = BlockExtractor(ticket_source).extract(shapes).sections[1]
    assert [(d.keyword, d.name) for d in attributes.children] == [
        ("uuid_primary_key", ":id"), ("attribute", ":subject"), ("attribute", ":status"),
    ]
    subject = attributes.children[1]
    assert subject.children == []
    assert (subject.span.line, subject.span.end_line) == (28, 30)
    assert "allow_nil? false" in subject.raw


def test_multi_line_statement_is_one_detail():
    source = (
        "attributes do\n"
        "  attribute :email, :string,\n"
        "    allow_nil?: false\n"
        "  attribute :name, :string\n"
        "end\n"
    )
    shapes = {s.name: s for s in ASH_RESOURCE.sections}
    (attributes,) = BlockExtractor(source).extract(shapes).sections
    assert [d.name for d in attributes.children] == [":email", ":name"]
    assert attributes.children[0].span.end_line == 3


def test_generic_extraction_takes_any_block(ticket_source):
    extraction = extract_generic(ticket_source)
    assert [s.keyword for s in extraction.sections] == [
        "postgres", "actions", "attributes", "relationships",
    ]
    postgres = extraction.sections[0]
    assert [(d.keyword, d.name) for d in postgres.children] == [("table", "tickets"), ("repo", "Helpdesk")]
    assert extraction.issues == []


def test_unclosed_block_is_recovered(unclosed_source):
    extraction = extract_generic(unclosed_source)
    (attributes,) = extraction.sections
    assert [d.name for d in attributes.children] == [":email", ":name"]
    assert attributes.span.end_line == len(unclosed_source.split("\n"))
    assert extraction.issues
    issue = extraction.issues[0]
    assert issue.severity == "warning"
    assert "unclosed block" in issue.message
