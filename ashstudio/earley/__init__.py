# ashstudio/earley/__init__.py
"""Earley runtime over the BNF produced by ``grammar.transform``.

Unlike an LR table, the chart keeps every derivation, so ambiguous inputs
yield several parse trees instead of a conflict.
"""

from .first_follow import FirstSets, compute_nullable_first
from .runtime import DEFAULT_MAX_TREES, EarleyParser, parse_string
from .tree import ParseTree
