# ashstudio/grammar/loader.py
"""Read .g grammar files."""

from __future__ import annotations
from pathlib    import Path
from typing     import Union

from .ast       import Grammar
from .parser    import parse_grammar


def load_grammar_text(path: Union[str, Path]) -> str:
    """File contents with newlines normalized to ``\\n``."""
    text = Path(path).read_text(encoding="utf-8")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def load_grammar(path: Union[str, Path]) -> Grammar:
    try:
        return parse_grammar(load_grammar_text(path))
    except SyntaxError as e:
        raise SyntaxError(f"{path}: {e}") from e
