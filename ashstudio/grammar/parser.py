# ashstudio/grammar/parser.py
r"""Reader for the ``.g`` files that describe Elixir source (``ash.g``).

A grammar file has two halves. The lexical half says how Elixir text is cut
into tokens::

    %ignore /#[^\n]*/;                      // comments
    %token  ATOM /:[a-zA-Z_][a-zA-Z0-9_]*/;  // `:email`
    %keywords "defmodule" "do" "end";

The syntactic half is EBNF over those tokens, one rule per nonterminal::

    Section   : IDENT DoBlock ;             // `attributes do ... end`
    MacroCall : IDENT CallArgs ;            // `attribute :email, :string`

``%start`` names the entry rule (default: the first rule). A lone
``"lit" : "lit";`` declares a single keyword. Every declaration ends in ``;``
and ``//`` or ``/* */`` comments may appear anywhere. Mistakes raise
``SyntaxError`` with a caret under the offending spot.
"""

from __future__ import annotations
import regex as re
from dataclasses import dataclass
from typing import List, Optional, Tuple
import ast as _pyast

from .ast import (
    Atom, Expr, Grammar, Group, IgnoreDecl, KeywordDecl, Lit, Name, Rule, Seq, Span,
    Suffix, TokenDecl,
)
from ..errors import caret_snippet

# ---- DSL tokens ----
_TOKEN_SPEC = [
    ("WS",       r"[ \t\f\r]+"),
    ("NEWLINE",  r"\n"),
    ("COMMENT",  r"//[^\n]*"),
    ("MCOMMENT", r"/\*.*?\*/"),
    ("PERCENT",  r"%"),
    ("COLON",    r":"),
    ("SEMI",     r";"),
    ("OR",       r"\|"),
    ("LPAREN",   r"\("),
    ("RPAREN",   r"\)"),
    ("QMARK",    r"\?"),
    ("STAR",     r"\*"),
    ("PLUS",     r"\+"),
    ("REGEX",    r"/(?:\\.|[^/])+/[imxsA]*"),
    ("STRING",   r'"(?:\\.|[^"\\])*"'),
    ("SSTRING",  r"'(?:\\.|[^'\\])*'"),
    ("IDENT",    r"[A-Za-z_][A-Za-z0-9_]*"),
]
MASTER_RE = re.compile("|".join(f"(?P<{n}>{p})" for n, p in _TOKEN_SPEC), re.S)

_SKIP = ("WS", "COMMENT", "MCOMMENT", "NEWLINE")


@dataclass
class Tok:
    kind: str
    lexeme: str
    start: int
    end: int
    line: int
    col: int

    def span(self) -> Span:
        return Span(self.start, self.end, self.line, self.col)


def _scan(src: str) -> List[Tok]:
    """Newlines only move line/col; they are not emitted."""
    toks: List[Tok] = []
    line = col = 1
    i = 0
    while i < len(src):
        m = MASTER_RE.match(src, i)
        if not m:
            snippet = caret_snippet(src, i)
            raise SyntaxError(f"Unexpected char {src[i]!r} at {line}:{col}\n{snippet}")
        kind = m.lastgroup or ""
        lex = m.group(0)
        if kind not in _SKIP:
            toks.append(Tok(kind, lex, i, m.end(), line, col))
        nl_count = lex.count("\n")
        if nl_count:
            line += nl_count
            col = len(lex) - lex.rfind("\n")
        else:
            col += len(lex)
        i = m.end()

    toks.append(Tok("EOF", "", len(src), len(src), line, col))
    return toks


# ---- token stream ----
class _TS:
    def __init__(self, toks: List[Tok], src: str):
        self.toks = toks
        self.i = 0
        self.src = src

    def la(self) -> Tok:
        return self.toks[self.i]

    def prev(self) -> Tok:
        return self.toks[self.i - 1] if self.i > 0 else self.toks[0]

    def eat(self, kind: str) -> Tok:
        t = self.la()
        if t.kind != kind:
            snippet = caret_snippet(self.src, t.start)
            raise SyntaxError(
                f"Expected {kind}, got {t.kind} at {t.line}:{t.col}\n{snippet}"
            )
        self.i += 1
        return t

    def match(self, kind: str) -> Optional[Tok]:
        if self.la().kind == kind:
            return self.eat(kind)
        return None


def _unquote_string(s: str) -> str:
    # token text still has its quotes; literal_eval restores escapes exactly
    return _pyast.literal_eval(s)


def _strip_regex(s: str) -> Tuple[str, str]:
    last = s.rfind("/")
    return s[1:last], s[last + 1:]


def _require_semi(ts: _TS, context: str, example: str, anchor: Optional[Tok] = None) -> None:
    """Consume ';' or fail with the caret placed right after ``anchor``."""
    if ts.match("SEMI"):
        return
    got = ts.la()
    where = f"{got.line}:{got.col}"
    found = "EOF" if got.kind == "EOF" else got.kind
    pos = anchor.end if anchor is not None else got.start
    msg = (
        f"Missing ';' after {context} (semicolon is mandatory).\n"
        f"- Found: {found} at {where}\n"
        f"- Example: {example}\n\n"
        f"{caret_snippet(ts.src, pos)}"
    )
    raise SyntaxError(msg)


# ---- directives ----
def _parse_token_decl(ts: _TS, g: Grammar) -> None:
    name_tok = ts.eat("IDENT")
    nxt = ts.la()
    if nxt.kind != "REGEX":
        snippet = caret_snippet(ts.src, nxt.start)
        raise SyntaxError(f"Expected /regex/ after %token {name_tok.lexeme}, got {nxt.kind}\n{snippet}")
    regex_tok = ts.eat("REGEX")
    pat, flags = _strip_regex(regex_tok.lexeme)
    if name_tok.lexeme in g.token_names():
        snippet = caret_snippet(ts.src, name_tok.start)
        raise SyntaxError(f"Duplicate %token {name_tok.lexeme} at {name_tok.line}:{name_tok.col}\n{snippet}")
    g.decl_tokens.append(TokenDecl(name_tok.lexeme, pat, flags, span=name_tok.span()))
    _require_semi(ts, "%token declaration", '%token NAME /regex/;', anchor=regex_tok)


def _parse_keywords_decl(ts: _TS, g: Grammar) -> None:
    """%keywords "do" "end" "," ... ;"""
    count = 0
    while ts.la().kind in ("STRING", "SSTRING"):
        t = ts.eat(ts.la().kind)
        g.decl_keywords.append(KeywordDecl(_unquote_string(t.lexeme), span=t.span()))
        count += 1
    if count == 0:
        t = ts.la()
        snippet = caret_snippet(ts.src, t.start)
        raise SyntaxError(f"%keywords requires at least one literal at {t.line}:{t.col}\n{snippet}")
    _require_semi(ts, "%keywords declaration", '%keywords "do" "end";', anchor=ts.prev())


# --- Grammar Parsing ---
def parse_grammar(src: str) -> Grammar:
    ts = _TS(_scan(src), src)
    g = Grammar()

    # declarations
    while True:
        t = ts.la()
        if t.kind == "PERCENT":
            ts.eat("PERCENT")
            ident_tok = ts.eat("IDENT")
            ident = ident_tok.lexeme
            if ident == "token":
                _parse_token_decl(ts, g)
            elif ident == "ignore":
                regex_tok = ts.eat("REGEX")
                pat, flags = _strip_regex(regex_tok.lexeme)
                g.decl_ignores.append(IgnoreDecl(pat, flags, span=regex_tok.span()))
                _require_semi(ts, "%ignore declaration", r'%ignore /\s+/;', anchor=regex_tok)
            elif ident == "start":
                start_tok = ts.eat("IDENT")
                g.start = start_tok.lexeme
                _require_semi(ts, "%start declaration", '%start StartSymbol;', anchor=start_tok)
            elif ident == "keywords":
                _parse_keywords_decl(ts, g)
            else:
                snippet = caret_snippet(src, ident_tok.start)
                raise SyntaxError(
                    f"Unknown directive %{ident} at {ident_tok.line}:{ident_tok.col}\n{snippet}"
                )

        elif t.kind in ("STRING", "SSTRING"):
            # keyword mapping: "lit" : "lit" ;
            lit1_tok = ts.eat(t.kind)
            lit1 = _unquote_string(lit1_tok.lexeme)
            ts.eat("COLON")
            lit2_tok = ts.eat("SSTRING" if ts.la().kind == "SSTRING" else "STRING")
            lit2 = _unquote_string(lit2_tok.lexeme)
            if lit1 != lit2:
                snippet = caret_snippet(src, lit1_tok.start)
                raise SyntaxError(
                    f'Keyword mapping must be identical on both sides: "{lit1}" : "{lit2}"\n{snippet}'
                )
            g.decl_keywords.append(KeywordDecl(lit1, span=lit1_tok.span()))
            _require_semi(ts, 'keyword literal mapping (e.g. "do" : "do")', '"do" : "do";', anchor=lit2_tok)
        else:
            break

    # rules
    while ts.la().kind != "EOF":
        lhs_tok = ts.eat("IDENT")
        lhs = lhs_tok.lexeme
        ts.eat("COLON")
        expr = _parse_expr(ts)
        _require_semi(ts, f"rule '{lhs}'", f"{lhs} : ... ;", anchor=ts.prev())
        if g.rule(lhs) is not None:
            snippet = caret_snippet(src, lhs_tok.start)
            raise SyntaxError(
                f"Rule '{lhs}' defined twice at {lhs_tok.line}:{lhs_tok.col}; "
                f"merge the alternatives with '|'\n{snippet}"
            )
        g.rules.append(Rule(lhs, expr, span=lhs_tok.span()))

    if not g.start and g.rules:
        g.start = g.rules[0].name

    return g


def _parse_expr(ts: _TS) -> Expr:
    alts = [_parse_seq(ts)]
    while ts.match("OR"):
        alts.append(_parse_seq(ts))
    return Expr(alts)


def _parse_seq(ts: _TS) -> Seq:
    """Sequence: (IDENT | STRING | "(" expr ")")*  -- empty means epsilon."""
    items: List[Atom] = []
    while ts.la().kind in ("IDENT", "STRING", "SSTRING", "LPAREN"):
        items.append(_parse_atom(ts))
    return Seq(items)


def _parse_atom(ts: _TS) -> Atom:
    t = ts.la()
    if t.kind == "IDENT":
        node = Name(ts.eat("IDENT").lexeme, span=t.span())
    elif t.kind in ("STRING", "SSTRING"):
        node = Lit(_unquote_string(ts.eat(t.kind).lexeme), span=t.span())
    elif t.kind == "LPAREN":
        ts.eat("LPAREN")
        node = Group(_parse_expr(ts), span=t.span())
        ts.eat("RPAREN")
    else:
        snippet = caret_snippet(ts.src, t.start)
        raise SyntaxError(f"Unexpected token {t.kind} at {t.line}:{t.col}\n{snippet}")

    # EBNF suffix
    suf = Suffix.NONE
    if ts.match("QMARK"):
        suf = Suffix.OPT
    elif ts.match("STAR"):
        suf = Suffix.STAR
    elif ts.match("PLUS"):
        suf = Suffix.PLUS
    return Atom(node, suf, span=t.span())
