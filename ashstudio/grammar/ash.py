# ashstudio/grammar/ash.py
"""Ready-to-use grammar for Ash DSL sources (``ash.g``).

>>> trees = parse('defmodule Post do\\n  attributes do\\n  end\\nend')
>>> len(trees)
1
"""

from __future__ import annotations
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
import logging

from ..earley.runtime import DEFAULT_MAX_TREES, EarleyParser
from ..earley.tree import ParseTree
from ..errors import ParseError
from ..lex import LexTok, SimpleLexer
from .ast import Grammar
from .loader import load_grammar
from .transform import BNF, to_bnf

logger = logging.getLogger(__name__)

ASH_GRAMMAR_PATH = Path(__file__).with_name("ash.g")


class AshGrammar:
    """Grammar AST, its BNF, a lexer and an Earley parser bundled together."""

    def __init__(self, grammar: Grammar, *, max_trees: int = DEFAULT_MAX_TREES):
        self.grammar = grammar
        self.bnf: BNF = to_bnf(grammar)
        self.parser = EarleyParser(self.bnf, max_trees=max_trees)
        self._lexer = SimpleLexer.from_grammar(grammar)

    @classmethod
    def from_file(cls, path=ASH_GRAMMAR_PATH, *, max_trees: int = DEFAULT_MAX_TREES) -> "AshGrammar":
        logger.debug("loading grammar from %s", path)
        return cls(load_grammar(path), max_trees=max_trees)

    def tokenize(self, text: str) -> List[LexTok]:
        return self._lexer.tokenize(text)

    def parse(self,
              text: str,
              *,
              start: Optional[str] = None,
              max_trees: Optional[int] = None) -> List[ParseTree]:
        """Every parse tree of ``text`` (capped), ``[]`` when nothing matches.

        Raises ParseError for input that cannot be tokenized or that stops
        matching partway.
        """
        tokens = self.tokenize(text)
        return self.parser.parse_tokens(tokens, text, start=start, max_trees=max_trees)

    def is_atom(self, text: str) -> bool:
        """True when ``text`` is exactly one atom literal (``:ok``, ``:foo@bar``)."""
        try:
            return bool(self.parse(text, start="AtomLiteral", max_trees=1))
        except ParseError:
            return False


@lru_cache(maxsize=None)
def default_grammar() -> AshGrammar:
    return AshGrammar.from_file()


def parse(text: str) -> List[ParseTree]:
    return default_grammar().parse(text)


def tokenize(text: str) -> List[LexTok]:
    return default_grammar().tokenize(text)


def is_atom(text: str) -> bool:
    return default_grammar().is_atom(text)
