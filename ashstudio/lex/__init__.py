# ashstudio/lex/__init__.py
"""Grammar-driven tokenizer.

Builds a token stream from the declaration part of a grammar
(``%token``, ``%ignore``, keyword literals).

Matching order at each position:
  1) skip ``%ignore`` patterns as long as they match
  2) keyword literals, longest first; keywords containing identifier
     characters must sit on identifier boundaries (``do`` never matches
     inside ``do_thing``)
  3) ``%token`` regexes, longest match wins, ties go to the first declared
  4) nothing matches -> ParseError

Token ``type`` is the grammar symbol name: the literal itself for keywords
(``"do"``, ``","``) and the token name for ``%token`` (``ATOM``).

API
---
- ``LexTok(type, text, line, col, pos)``
- ``Lexer`` protocol: ``peek()``, ``next()``
- ``SimpleLexer.from_grammar(g)`` and ``SimpleLexer.tokenize(text)``
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple, Optional, Pattern
import regex as re

from ..errors import ParseError, caret_snippet


_RE_XID_CONT = re.compile(r"\p{XID_Continue}")


def _is_ident_continue(ch: str) -> bool:
    return bool(_RE_XID_CONT.fullmatch(ch))


def _is_word_keyword(s: str) -> bool:
    """True when the literal contains identifier characters (needs boundary checks)."""
    return any(_is_ident_continue(c) for c in s)


# --------- Public datatypes ---------

@dataclass(frozen=True)
class LexTok:
    type: str   # grammar symbol (keyword literal or %token name)
    text: str   # source lexeme
    line: int   # 1-based
    col: int    # 1-based
    pos: int = 0  # 0-based offset into the input

    @property
    def end(self) -> int:
        return self.pos + len(self.text)


class Lexer:
    """Minimal interface the runtimes rely on."""
    def peek(self) -> Optional[LexTok]:
        raise NotImplementedError

    def next(self) -> Optional[LexTok]:
        raise NotImplementedError


# --------- Helpers ---------

_FLAG_MAP = {
    'i': re.IGNORECASE,
    'm': re.MULTILINE,
    's': re.DOTALL,
    'x': re.VERBOSE,
    'A': re.ASCII,
}


def _compile_regex(pat: str, flags: str) -> Pattern[str]:
    f = 0
    for ch in flags:
        f |= _FLAG_MAP.get(ch, 0)
    try:
        return re.compile(pat, f)
    except re.error as e:
        raise SyntaxError(f"Invalid token regex /{pat}/{flags}: {e}")


# --------- Core implementation ---------

class SimpleLexer(Lexer):
    """Reference lexer over a grammar's declarations (keywords, then regexes)."""

    def __init__(self,
                 keywords: List[str],
                 tokens: List[Tuple[str, Pattern[str]]],
                 ignores: List[Pattern[str]]):
        self._keywords = keywords[:]         # literal strings, longest first
        self._tokens = tokens[:]             # (name, compiled regex)
        self._ignores = ignores[:]
        self._text = ""
        self._i = 0
        self._line = 1
        self._col = 1
        self._peek_cache: Optional[LexTok] = None

    # ---- Constructors ----
    @classmethod
    def from_grammar(cls, g) -> "SimpleLexer":
        # keywords: first declaration wins, then longest first (declaration order on ties)
        seen = set()
        kws_pairs = []
        for idx, kw in enumerate(g.decl_keywords):
            if kw.lexeme in seen:
                continue
            seen.add(kw.lexeme)
            kws_pairs.append((kw.lexeme, idx))
        kws_pairs.sort(key=lambda p: (-len(p[0]), p[1]))
        keywords = [lit for (lit, _idx) in kws_pairs]

        tokens = [(td.name, _compile_regex(td.pattern, td.flags or "")) for td in g.decl_tokens]
        ignores = [_compile_regex(ig.pattern, ig.flags or "") for ig in g.decl_ignores]
        return cls(keywords, tokens, ignores)

    # ---- Input binding ----
    def reset(self, text: str, *, line: int = 1, col: int = 1) -> None:
        self._text = text
        self._i = 0
        self._line = line
        self._col = col
        self._peek_cache = None

    def fresh(self) -> "SimpleLexer":
        """Lexer sharing the compiled tables, with its own cursor."""
        return type(self)(self._keywords, self._tokens, self._ignores)

    def tokenize(self, text: str) -> List[LexTok]:
        """Whole-input token list (raises ParseError on the first bad character).

        Runs on a fresh cursor: the instance's own ``reset``/``next`` state is
        left alone, so one lexer can serve concurrent callers.
        """
        lx = self.fresh()
        lx.reset(text)
        out: List[LexTok] = []
        while True:
            t = lx.next()
            if t is None:
                return out
            out.append(t)

    # ---- Public API ----
    def peek(self) -> Optional[LexTok]:
        if self._peek_cache is None:
            self._peek_cache = self._next_token()
        return self._peek_cache

    def next(self) -> Optional[LexTok]:
        if self._peek_cache is not None:
            t = self._peek_cache
            self._peek_cache = None
            return t
        return self._next_token()

    # ---- Internals ----
    def _advance_text(self, consumed: str) -> None:
        nl = consumed.count("\n")
        if nl:
            self._line += nl
            self._col = len(consumed) - consumed.rfind("\n")
        else:
            self._col += len(consumed)
        self._i += len(consumed)

    def _skip_ignores(self) -> None:
        while self._i < len(self._text):
            progressed = False
            for rgx in self._ignores:
                m = rgx.match(self._text, self._i)
                if m and m.end() > self._i:
                    self._advance_text(m.group(0))
                    progressed = True
                    break
            if not progressed:
                return

    def _make(self, type_: str, text: str) -> LexTok:
        return LexTok(type=type_, text=text, line=self._line, col=self._col, pos=self._i)

    def _match_keyword(self) -> Optional[LexTok]:
        s = self._text
        i = self._i
        for lit in self._keywords:
            if not s.startswith(lit, i):
                continue
            if lit and _is_word_keyword(lit):
                if i > 0 and _is_ident_continue(s[i - 1]) and _is_ident_continue(lit[0]):
                    continue
                j = i + len(lit)
                if j < len(s) and _is_ident_continue(s[j]) and _is_ident_continue(lit[-1]):
                    continue
            return self._make(lit, lit)
        return None

    def _match_token_regex(self) -> Optional[LexTok]:
        best_name = None
        best_text = ""
        for name, rgx in self._tokens:
            m = rgx.match(self._text, self._i)
            if not m:
                continue
            txt = m.group(0)
            if len(txt) > len(best_text):
                best_name = name
                best_text = txt
        if best_name is not None:
            return self._make(best_name, best_text)
        return None

    def _next_token(self) -> Optional[LexTok]:
        self._skip_ignores()
        if self._i >= len(self._text):
            return None

        kw = self._match_keyword()
        if kw is not None:
            self._advance_text(kw.text)
            return kw

        tk = self._match_token_regex()
        if tk is not None:
            self._advance_text(tk.text)
            return tk

        ch = self._text[self._i]
        raise ParseError(
            f"Lexing error: unexpected character {ch!r} at {self._line}:{self._col}",
            token=ch,
            line=self._line,
            column=self._col,
            position=self._i,
            snippet=caret_snippet(self._text, self._i),
        )

