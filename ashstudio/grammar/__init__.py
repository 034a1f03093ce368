# ashstudio/grammar/__init__.py
"""Grammar DSL (``.g`` files): AST, parser, loader, BNF lowering and the Ash grammar."""

from .ast import Grammar
from .loader import load_grammar, load_grammar_text
from .parser import parse_grammar
from .transform import BNF, Production, to_bnf
