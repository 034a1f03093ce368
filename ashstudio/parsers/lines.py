# ashstudio/parsers/lines.py
"""Line-oriented view of Elixir source for the regex-based parsers.

Every line is reduced to its *code*: string, charlist, sigil and heredoc
contents are blanked to spaces (columns are preserved) and the trailing
comment is dropped. From the code we read:

- block events in order: ``do``/``fn`` open, ``end`` closes
  (``do:`` keyword syntax and ``:do``/``:end`` atoms are not events)
- net bracket balance of ``( [ {`` against ``) ] }``
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple
import regex as re

_BLOCK_WORD_RE = re.compile(r"(?<![\w:.@])(do|fn|end)(?![\w?!:])")
_STRING_RE = re.compile(r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\'')
_SIGIL_RE = re.compile(
    r'~[a-zA-Z](?:/(?:\\.|[^/\\])*/|"(?:\\.|[^"\\])*"|\((?:\\.|[^)\\])*\)'
    r'|\[(?:\\.|[^\]\\])*\]|\{(?:\\.|[^}\\])*\}|\|(?:\\.|[^|\\])*\|)[a-zA-Z]*'
)
_STRING_TAIL_RE = {
    '"': re.compile(r'(?:\\.|[^"\\])*"'),
    "'": re.compile(r"(?:\\.|[^'\\])*'"),
}
_HEREDOC_QUOTES = ('"""', "'''")

OPEN = "open"
CLOSE = "close"


@dataclass(frozen=True)
class CodeLine:
    number: int                 # 1-based
    text: str                   # original line
    code: str                   # literals blanked, comment dropped
    clean: str                  # original text minus comment, right-stripped
    events: Tuple[str, ...]     # OPEN / CLOSE in source order
    brackets: int               # net ( [ { minus ) ] }
    starts_in_literal: bool = False
    ends_in_literal: bool = False

    @property
    def indent(self) -> int:
        return len(self.text) - len(self.text.lstrip())

    @property
    def is_blank(self) -> bool:
        return not self.code.strip()

    @property
    def continues(self) -> bool:
        """The statement goes on on the next line (trailing comma or open literal)."""
        return self.ends_in_literal or self.code.rstrip().endswith(",")


def _blank(s: str) -> str:
    return " " * len(s)


def _close_of(line: str, i: int, delim: str) -> int:
    """End offset of the literal opened by ``delim`` that continues at ``i``; -1 if still open."""
    if len(delim) == 3:
        j = line.find(delim, i)
        return -1 if j == -1 else j + 3
    m = _STRING_TAIL_RE[delim].match(line, i)
    return m.end() if m else -1


def _code_of(line: str, open_delim: Optional[str]) -> Tuple[str, int, Optional[str]]:
    """(code, comment_at, delimiter-still-open) for one physical line.

    ``open_delim`` is the quote (``"``, ``'``, ``\"\"\"`` or ``'''``) of a
    literal carried over from the previous line.
    """
    out: List[str] = []
    i = 0
    n = len(line)
    comment_at = n
    while i < n:
        if open_delim is not None:
            end = _close_of(line, i, open_delim)
            if end == -1:
                out.append(_blank(line[i:]))
                i = n
                break
            out.append(_blank(line[i:end]))
            i = end
            open_delim = None
            continue
        ch = line[i]
        if line.startswith(_HEREDOC_QUOTES, i):
            open_delim = line[i:i + 3]
            out.append("   ")
            i += 3
            continue
        if ch == "#":
            comment_at = i
            break
        if ch in "\"'":
            m = _STRING_RE.match(line, i)
            if m is None:
                open_delim = ch
                out.append(_blank(line[i:]))
                i = n
                break
            out.append(ch + _blank(line[i + 1:m.end() - 1]) + ch)
            i = m.end()
            continue
        if ch == "~":
            m = _SIGIL_RE.match(line, i)
            if m:
                out.append(_blank(m.group(0)))
                i = m.end()
                continue
        if ch == "?" and i + 1 < n and (i == 0 or not (line[i - 1].isalnum() or line[i - 1] == "_")):
            # character literal such as ?# or ?"
            out.append("  ")
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out), comment_at, open_delim


def scan_lines(source: str) -> List[CodeLine]:
    lines: List[CodeLine] = []
    open_delim: Optional[str] = None
    for idx, text in enumerate(source.split("\n")):
        text = text.rstrip("\r")
        starts_in_literal = open_delim is not None
        code, comment_at, open_delim = _code_of(text, open_delim)
        events = tuple(
            CLOSE if m.group(1) == "end" else OPEN
            for m in _BLOCK_WORD_RE.finditer(code)
        )
        brackets = sum(code.count(c) for c in "([{") - sum(code.count(c) for c in ")]}")
        lines.append(CodeLine(
            number=idx + 1,
            text=text,
            code=code,
            clean=text[:comment_at].rstrip(),
            events=events,
            brackets=brackets,
            starts_in_literal=starts_in_literal,
            ends_in_literal=open_delim is not None,
        ))
    return lines
