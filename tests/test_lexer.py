# tests/test_lexer.py
from __future__ import annotations

import pytest

from ashstudio.errors import ParseError
from ashstudio.grammar.ash import tokenize
from ashstudio.grammar.parser import parse_grammar
from ashstudio.lex import SimpleLexer


def _types(text):
    return [t.type for t in tokenize(text)]


def test_macro_call_tokens():
    toks = tokenize("attribute :email, :string")
    assert [(t.type, t.text) for t in toks] == [
        ("IDENT", "attribute"), ("ATOM", ":email"), (",", ","), ("ATOM", ":string"),
    ]
    assert [(t.line, t.col, t.pos) for t in toks] == [(1, 1, 0), (1, 11, 10), (1, 17, 16), (1, 19, 18)]
    assert toks[1].end == 16


def test_keywords_respect_word_boundaries():
    assert _types("do done end ending") == ["do", "IDENT", "end", "IDENT"]
    assert _types("def a, do: :ok") == ["IDENT", "IDENT", ",", "do:", "ATOM"]


def test_keyword_pairs_and_modules():
    assert _types("allow_nil?: false") == ["KEY", "false"]
    assert _types("data_layer: AshPostgres.DataLayer") == ["KEY", "MODULE"]


def test_literals():
    assert _types('"a # not a comment" ~r/x#y/i \'cl\' 1_000 -2.5 @doc') == [
        "STRING", "SIGIL", "CHARLIST", "NUMBER", "NUMBER", "ATTRIBUTE",
    ]
    assert _types('"""\nheredoc "with" quotes\n"""') == ["TRIPLE_STRING"]


def test_operators_and_comments():
    assert _types("a |> b != c # trailing\n!d") == ["IDENT", "OPERATOR", "IDENT", "!=", "IDENT", "!", "IDENT"]


def test_lexing_error_position():
    with pytest.raises(ParseError) as exc:
        tokenize("attribute :a,\n  $oops")
    e = exc.value
    assert (e.token, e.line, e.column, e.position) == ("$", 2, 3, 16)
    assert "^" in e.snippet
    assert isinstance(e, SyntaxError)


def test_longest_regex_match_wins():
    g = parse_grammar('%ignore /\\s+/; %token INT /\\d+/; %token FLOAT /\\d+\\.\\d+/; S : INT | FLOAT ;')
    lx = SimpleLexer.from_grammar(g)
    assert [t.type for t in lx.tokenize("1 2.5")] == ["INT", "FLOAT"]


def test_peek_does_not_consume():
    g = parse_grammar('%ignore /\\s+/; %token W /\\w+/; S : W+ ;')
    lx = SimpleLexer.from_grammar(g)
    lx.reset("a b")
    assert lx.peek().text == "a"
    assert lx.next().text == "a"
    assert lx.next().text == "b"
    assert lx.next() is None


def test_tokenize_leaves_the_stream_cursor_alone():
    g = parse_grammar('%ignore /\\s+/; %token W /\\w+/; S : W+ ;')
    lx = SimpleLexer.from_grammar(g)
    lx.reset("a b")
    assert lx.next().text == "a"
    assert [t.text for t in lx.tokenize("x y z")] == ["x", "y", "z"]
    assert lx.next().text == "b"
