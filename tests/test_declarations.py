# tests/test_declarations.py
from __future__ import annotations

from ashstudio.parsers.declarations import (
    declaration_target, find_use_declarations, identify_configured_modules,
    iter_use_declarations, marker_kind, type_marker_kind,
)
from ashstudio.registry import DEFAULT_REGISTRY


def test_find_use_declarations_joins_option_lines(ticket_source):
    decls = find_use_declarations(ticket_source)
    assert len(decls) == 1
    assert decls[0].startswith("use Ash.Resource,")
    assert "data_layer: AshPostgres.DataLayer" in decls[0]


def test_declaration_position(ticket_source):
    (d,) = list(iter_use_declarations(ticket_source))
    assert (d.target, d.line, d.column, d.end_line) == ("Ash.Resource", 2, 3, 4)


def test_declaration_target():
    assert declaration_target("use Ash.Resource, extensions: [AshAuthentication]") == "Ash.Resource"
    assert declaration_target("import Ecto.Query") is None


def test_option_lists_are_ignored():
    decls = ["use Ash.Resource, extensions: [AshAuthentication], data_layer: AshPostgres.DataLayer"]
    matched = identify_configured_modules(decls, DEFAULT_REGISTRY)
    assert [m.declaration_pattern for m in matched] == ["Ash.Resource"]


def test_duplicates_keep_first():
    decls = ["use Ash.Resource, domain: A", "use AshOban", "use Ash.Resource, domain: B"]
    matched = identify_configured_modules(decls, DEFAULT_REGISTRY)
    assert [m.declaration_pattern for m in matched] == ["Ash.Resource", "AshOban"]
    assert matched[0].display_name == "Ash.Resource"
    assert matched[0].configuration is DEFAULT_REGISTRY.lookup("Ash.Resource")


def test_superstrings_do_not_match():
    decls = ["use Ash.ResourceX", "use MyApp.Ash.Resource", "use Ash"]
    assert identify_configured_modules(decls, DEFAULT_REGISTRY) == []


def test_unrelated_declarations_are_dropped(phoenix_source):
    decls = find_use_declarations(phoenix_source)
    assert decls == ["use HelpdeskWeb, :controller"]
    assert identify_configured_modules(decls, DEFAULT_REGISTRY) == []


def test_use_inside_strings_is_not_a_declaration():
    source = 'defmodule A do\n  @doc """\n  use Ash.Resource\n  """\nend\n'
    assert find_use_declarations(source) == []


def test_marker_kinds():
    assert marker_kind("Ash.Resource") == "resource"
    assert marker_kind("Ash.Domain") == "domain"
    assert marker_kind("Ash.Type.Enum") == "type"
    assert marker_kind("Ash.Type.Enumerable") is None
    assert marker_kind("Ecto.Schema") is None
    assert type_marker_kind("Ash.Type.NewType") == "NewType"
