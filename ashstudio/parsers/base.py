# ashstudio/parsers/base.py
"""Common parser interface."""

from __future__ import annotations
from typing import Optional
import regex as re

from ..model import ParseResult

_DEFMODULE_RE = re.compile(r"defmodule\s+([A-Za-z_][A-Za-z0-9_.]*)")


class Parser:
    """Every strategy turns source text into a normalized ParseResult."""
    name: str = "Parser"

    def parse(self, source: str) -> ParseResult:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


def module_name_of(source: str) -> Optional[str]:
    """Dotted name of the first ``defmodule``."""
    m = _DEFMODULE_RE.search(source)
    return m.group(1).rstrip(".") if m else None
