# ashstudio/parsers/names.py
"""Name extraction for DSL statements.

``attribute :email, :string`` -> ``:email``;  ``read get_by_subject do`` ->
``get_by_subject``;  ``magic_link do`` -> ``""``.

The name is the leftmost token matching the pattern; atoms keep their colon.
"""

from __future__ import annotations
from functools import lru_cache
from typing import Optional, Pattern, Union
import regex as re

from ..registry.types import PRIMITIVE_NAME

DEFAULT_NAME_PATTERN = PRIMITIVE_NAME

_TRAILING_DO_RE = re.compile(r"(?:^|\s)do\s*$")
_COMMENT_RE = re.compile(r"\s#[^\"']*$")


@lru_cache(maxsize=64)
def compile_name_pattern(pattern: str) -> Pattern[str]:
    return re.compile(pattern)


def strip_statement_tail(text: str) -> str:
    """Drop a trailing comment, a trailing block marker and anything after ';'."""
    s = _COMMENT_RE.sub("", text)
    s = s.split(";", 1)[0].strip()
    return _TRAILING_DO_RE.sub("", s).strip()


def extract_name(text: str, pattern: Optional[Union[str, Pattern[str]]] = None) -> str:
    """Leftmost match of ``pattern`` in the argument text, or ``""``."""
    if not text:
        return ""
    rgx = pattern if pattern is not None and not isinstance(pattern, str) \
        else compile_name_pattern(pattern or DEFAULT_NAME_PATTERN)
    m = rgx.search(strip_statement_tail(text))
    if not m:
        return ""
    return (m.group(1) if m.groups() else m.group(0)) or ""
