# tests/test_ash_grammar.py
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from ashstudio.errors import ParseError
from ashstudio.grammar.ash import AshGrammar, default_grammar, is_atom, parse

AMBIGUOUS = """\
defmodule Helpdesk.Support.Ticket do
  actions do
    read get_by_subject do
    end
  end
end
"""


@pytest.mark.parametrize("text", [":ok", ":my_atom", ":integer?", ":save!", ":ISO8601", ":foo@bar", ':"quoted atom"'])
def test_atoms_accepted(text):
    assert is_atom(text)


@pytest.mark.parametrize("text", [":My.Atom", ":123", ":@foo", "ok", "", ": ok"])
def test_atoms_rejected(text):
    assert not is_atom(text)


def test_resource_parses_to_one_tree(grammar_resource_source):
    trees = parse(grammar_resource_source)
    assert len(trees) == 1
    (module,) = trees[0].subtrees("ModuleDef")
    assert module.children[1].text == "Helpdesk.Support.Representative"
    assert len(trees[0].find_all("UseDecl")) == 1
    assert len(trees[0].find_all("ModuleAttr")) == 1
    sections = [s.children[0].text for s in trees[0].find_all("Section")]
    assert sections == ["attributes", "actions"]


@pytest.mark.parametrize("statement", [
    "use Ash.Resource, domain: Helpdesk.Support, extensions: [AshAuthentication]",
    "require Ash.Query",
    "alias Helpdesk.Support.{Ticket, Representative}",
    "import Ash.Expr",
    "@default_status :open",
    "timestamps()",
    "Logger.info(\"hi\")",
    "defaults [:read, update: []]",
    "def name(%{first: first}, _), do: first",
    "calculate :full_name, :string, expr(first <> \" \" <> last)",
    "validate fn changeset, _ -> :ok end",
    "filter expr(status != :closed and not is_nil(^arg(:owner)))",
    "constraints one_of: [:a, :b], max_length: 10",
    "x = {:ok, 'charlist', ~w(a b c)a, 1_000, -1.5, nil, true}",
])
def test_statement_forms(statement):
    source = f"defmodule A do\n  {statement}\nend\n"
    assert parse(source)


def test_nested_modules_and_else():
    source = (
        "defmodule A do\n"
        "  defmodule B do\n"
        "    if x do\n"
        "      y()\n"
        "    else\n"
        "      z()\n"
        "    end\n"
        "  end\n"
        "end\n"
    )
    trees = parse(source)
    # `if x do` also reads as `if` followed by an `x do ... end` section
    assert len(trees) == 2
    tree = trees[0]
    assert tree.find_all("MacroBlock")[0].children[0].text == "if"
    assert len(tree.find_all("ModuleDef")) == 2
    assert len(tree.find_all("ElseClause")) == 1


def test_ambiguous_statement_yields_both_readings():
    trees = parse(AMBIGUOUS)
    assert len(trees) == 2
    # greedy reading first: one macro with a block
    assert len(trees[0].find_all("MacroBlock")) == 1
    # then `read` followed by a `get_by_subject do ... end` section
    assert trees[1].find_all("MacroBlock") == []
    assert [s.children[0].text for s in trees[1].find_all("Section")] == ["actions", "get_by_subject"]


def test_max_trees():
    grammar = AshGrammar.from_file(max_trees=1)
    assert len(grammar.parse(AMBIGUOUS)) == 1
    assert len(default_grammar().parse(AMBIGUOUS, max_trees=1)) == 1


def test_incomplete_input_has_no_trees():
    assert parse("defmodule A do\n  attributes do\n  end\n") == []
    assert parse("") == []


def test_unexpected_token_error():
    source = "defmodule Foo do\n  attributes do\n    attribute :email, ]\n  end\nend\n"
    with pytest.raises(ParseError) as exc:
        parse(source)
    e = exc.value
    assert e.token == "]"
    assert (e.line, e.column) == (3, 23)
    assert e.position == source.index("]")
    assert "ATOM" in e.expected
    assert "[" in e.expected
    assert e.snippet.endswith("^")


def test_lexing_error_is_a_parse_error():
    with pytest.raises(ParseError) as exc:
        parse("defmodule A do\n  x = $\nend\n")
    assert exc.value.token == "$"
    assert exc.value.line == 2


def test_parse_from_a_sub_rule():
    grammar = default_grammar()
    (tree,) = grammar.parse("attribute :email, :string", start="MacroCall")
    assert tree.rule == "MacroCall"
    assert [t.type for t in tree.tokens()] == ["IDENT", "ATOM", ",", "ATOM"]


ATOM_ANSWERS = {":foo@bar": True, ":123": False, ":my_atom_that_is_long": True, ":@foo": False}


def test_is_atom_from_many_threads():
    def check(_):
        wrong = []
        for _ in range(100):
            for text, expected in ATOM_ANSWERS.items():
                if is_atom(text) != expected:
                    wrong.append(text)
        return wrong

    with ThreadPoolExecutor(max_workers=8) as pool:
        wrong = [w for ws in pool.map(check, range(8)) for w in ws]
    assert wrong == []


def test_parse_from_many_threads(grammar_resource_source):
    small = "defmodule A do\n  attributes do\n    attribute :name, :string\n  end\nend\n"
    big = grammar_resource_source
    sources = [big, small, small, small, small] * 4
    expected = {s: parse(s)[0].pretty() for s in (big, small)}

    def run(source):
        return default_grammar().parse(source)[0].pretty()

    with ThreadPoolExecutor(max_workers=5) as pool:
        results = list(pool.map(run, sources))
    assert results == [expected[s] for s in sources]
