# ashstudio/errors.py
"""Error types shared by the lexer, the grammar runtime and the settings layer.

- ``ParseError`` is a ``SyntaxError`` so code written against plain syntax
  errors (the CLI, grammar DSL callers) keeps working, while callers that care
  get the offending token, its position and the expected terminals.
- ``ConfigurationError`` covers invalid settings and registry contents.
"""

from __future__ import annotations
from typing import Iterable, Tuple


# ---- snippet helpers ----
def line_bounds(src: str, pos: int) -> Tuple[int, int]:
    """[start, end) of the line that contains ``pos``."""
    start = src.rfind("\n", 0, pos)
    if start == -1:
        start = 0
    else:
        start += 1
    end = src.find("\n", pos)
    if end == -1:
        end = len(src)
    return start, end


def caret_snippet(src: str, pos: int) -> str:
    """Line holding ``pos`` with a caret underneath the column."""
    start, end = line_bounds(src, pos)
    col = (pos - start) + 1
    caret = " " * (col - 1) + "^"
    return f"{src[start:end]}\n{caret}"


# ---- exceptions ----
class ParseError(SyntaxError):
    """Ungrammatical input (or an unlexable character).

    Attributes
    ----------
    reason : str
        One line description without the snippet.
    token : str
        Text of the offending token ("" at end of input).
    line, column : int
        1-based position of the offending token.
    position : int
        0-based character offset of the offending token.
    expected : tuple of str
        Terminal names that would have been accepted there.
    snippet : str
        Source line with a caret, may be empty.
    """

    def __init__(self,
                 reason: str,
                 *,
                 token: str = "",
                 line: int = 0,
                 column: int = 0,
                 position: int = 0,
                 expected: Iterable[str] = (),
                 snippet: str = ""):
        super().__init__(f"{reason}\n{snippet}" if snippet else reason)
        self.reason = reason
        self.token = token
        self.line = line
        self.column = column
        self.position = position
        self.expected = tuple(expected)
        self.snippet = snippet


class ConfigurationError(ValueError):
    """Invalid settings value or registry entry."""
