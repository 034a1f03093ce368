# ashstudio/parsers/blocks.py
"""Multi-tier block extraction.

Tier 1 (sections) are ``<keyword> [args] do ... end`` blocks sitting directly
in a module body. Tier 2 and below (details) are statements inside a section
or inside another detail's block.

Two modes share the same scanner:

configured
    only keywords declared by the matched module configurations count, on
    every tier; names come from the shape's name pattern
generic
    any ``<bare-word> do`` block in a module body is a section and any
    identifier-led statement is a detail (used by the fallback parser)

A statement spans its continuation lines (trailing comma, open brackets or
an unterminated literal) and, when it opens a block, runs to the matching
``end``. Lines inside a nested block that is not recognised are never read
as details of the outer tier.

Unclosed blocks run to the end of the enclosing range (end of input on the
top tier); what was found is kept and a ParseIssue is recorded.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Union
import logging
import regex as re

from ..model import DslNode, ParseIssue, SourceSpan
from ..registry.types import DetailShape, SectionShape
from .declarations import MatchedModule
from .lines import OPEN, CodeLine, scan_lines
from .names import extract_name

logger = logging.getLogger(__name__)

_STATEMENT_RE = re.compile(r"^(\s*)([a-z_][a-zA-Z0-9_]*[?!]?)(?=[\s(]|$)(.*)$")
_SECTION_RE = re.compile(r"^(\s*)([a-z_][a-zA-Z0-9_]*[?!]?)(?:\s+(.*?))?\s+do\s*$")
_BARE_SECTION_RE = re.compile(r"^(\s*)([a-z_][a-zA-Z0-9_]*)\s+do\s*$")
_DEFMODULE_RE = re.compile(r"^\s*defmodule\s")

# words that continue or close a construct rather than start a statement
_RESERVED = frozenset({"do", "end", "else", "after", "rescue", "catch", "fn", "when"})

Shape = Union[SectionShape, DetailShape]


@dataclass
class Extraction:
    sections: List[DslNode] = field(default_factory=list)
    issues: List[ParseIssue] = field(default_factory=list)


@dataclass
class _Extent:
    first: int           # index of the statement's first line
    body_start: int      # index of the first line after the opening `do`/`fn` line
    last: int            # index of the closing line (or of the last line reached)
    opens_block: bool
    closed: bool

    @property
    def body_end(self) -> int:
        """Exclusive end of the block body."""
        return self.last if self.closed else self.last + 1


class BlockExtractor:
    """Line scanner plus nesting counter over one source text."""

    def __init__(self, source: str):
        self.source = source
        self.lines: List[CodeLine] = scan_lines(source)
        self.issues: List[ParseIssue] = []

    # ---- entry points ----
    def extract(self, shapes: Optional[Mapping[str, SectionShape]] = None) -> Extraction:
        """Sections of the source, configured by ``shapes`` or generic when ``None``."""
        self.issues = []
        sections = self._scan_sections(shapes)
        return Extraction(sections, list(self.issues))

    # ---- tier 1 ----
    def _scan_sections(self, shapes: Optional[Mapping[str, SectionShape]]) -> List[DslNode]:
        out: List[DslNode] = []
        stack: List[str] = []     # kinds of the blocks open at this point
        n = len(self.lines)
        i = 0
        while i < n:
            ln = self.lines[i]
            at_module_depth = not stack or stack[-1] == "module"
            if at_module_depth and not ln.starts_in_literal:
                hit = self._section_opener(ln, shapes)
                if hit is not None:
                    keyword, args, shape = hit
                    ext = self._extent(i, n)
                    out.append(self._node(keyword, args, ext, shape, shapes is None))
                    i = ext.last + 1
                    continue
            is_module = bool(_DEFMODULE_RE.match(ln.code))
            for ev in ln.events:
                if ev == OPEN:
                    stack.append("module" if is_module else "block")
                    is_module = False
                elif stack:
                    stack.pop()
            i += 1
        return out

    def _section_opener(self, ln: CodeLine, shapes: Optional[Mapping[str, SectionShape]]):
        if shapes is None:
            m = _BARE_SECTION_RE.match(ln.code)
            if m and m.group(2) not in _RESERVED and m.group(2) != "defmodule":
                return m.group(2), "", None
            return None
        m = _SECTION_RE.match(ln.code)
        if not m or m.group(2) not in shapes:
            return None
        args = _SECTION_RE.match(ln.clean)
        return m.group(2), (args.group(3) or "") if args else "", shapes[m.group(2)]

    # ---- tiers 2.. ----
    def _scan_details(self, lo: int, hi: int, shapes: Optional[Mapping[str, DetailShape]]) -> List[DslNode]:
        out: List[DslNode] = []
        i = lo
        while i < hi:
            ln = self.lines[i]
            if ln.is_blank or ln.starts_in_literal:
                i += 1
                continue
            ext = self._extent(i, hi)
            m = _STATEMENT_RE.match(ln.code)
            if m and m.group(2) not in _RESERVED:
                keyword = m.group(2)
                if shapes is None:
                    out.append(self._node(keyword, self._rest(ln, m), ext, None, True))
                elif keyword in shapes:
                    out.append(self._node(keyword, self._rest(ln, m), ext, shapes[keyword], False))
            i = ext.last + 1
        return out

    @staticmethod
    def _rest(ln: CodeLine, m) -> str:
        """Argument text of a statement, taken from the original line."""
        return ln.clean[m.end(2):].strip()

    # ---- nesting counter ----
    def _extent(self, i: int, hi: int) -> _Extent:
        depth = 0
        brackets = 0
        opened_at: Optional[int] = None
        j = i
        while j < hi:
            ln = self.lines[j]
            for ev in ln.events:
                if ev == OPEN:
                    depth += 1
                    if opened_at is None:
                        opened_at = j
                else:
                    depth -= 1
                if opened_at is not None and depth == 0:
                    break
            brackets += ln.brackets
            if opened_at is not None and depth <= 0:
                return _Extent(i, opened_at + 1, j, True, True)
            if opened_at is None and (depth < 0 or (brackets <= 0 and not ln.continues)):
                return _Extent(i, j + 1, j, False, True)
            j += 1

        # ran off the range: unclosed block or dangling continuation
        last = max(i, hi - 1)
        if opened_at is not None:
            first = self.lines[i]
            msg = f"unclosed block opened at line {first.number}: missing 'end'"
            logger.warning("%s", msg)
            self.issues.append(ParseIssue(
                message=msg,
                line=first.number,
                column=first.indent + 1,
                offset=self._offset(i) + first.indent,
                severity="warning",
            ))
            return _Extent(i, opened_at + 1, last, True, False)
        return _Extent(i, last + 1, last, False, True)

    def _offset(self, idx: int) -> int:
        return sum(len(ln.text) + 1 for ln in self.lines[:idx])

    # ---- nodes ----
    def _node(self, keyword: str, args: str, ext: _Extent, shape: Optional[Shape], generic: bool) -> DslNode:
        first = self.lines[ext.first]
        name_pattern = shape.name_pattern if shape is not None else None
        if generic:
            name = extract_name(args)
        elif name_pattern is not None:
            name = extract_name(args, name_pattern)
        else:
            name = ""

        children: List[DslNode] = []
        if ext.opens_block:
            child_shapes = None if generic else (shape.child_map() if shape is not None else {})
            if generic or child_shapes:
                children = self._scan_details(ext.body_start, ext.body_end, child_shapes)
            elif not ext.closed:
                # still walk the body so nested unclosed blocks are reported
                self._scan_details(ext.body_start, ext.body_end, {})

        raw = "\n".join(ln.text for ln in self.lines[ext.first:ext.last + 1])
        return DslNode(
            keyword=keyword,
            name=name,
            children=children,
            span=SourceSpan(first.number, first.indent + 1, self.lines[ext.last].number),
            raw=raw,
        )


# ---- module-level helpers ----
def merge_section_shapes(matched: Iterable[MatchedModule]) -> Dict[str, SectionShape]:
    """Section shapes of all matched modules; the first module to declare a section wins."""
    shapes: Dict[str, SectionShape] = {}
    for mm in matched:
        for s in mm.configuration.sections:
            shapes.setdefault(s.name, s)
    return shapes


def extract_modules(source: str, matched_modules: Iterable[MatchedModule]) -> List[DslNode]:
    """Configured extraction of every section the matched modules declare."""
    return BlockExtractor(source).extract(merge_section_shapes(matched_modules)).sections


def extract_generic(source: str) -> Extraction:
    return BlockExtractor(source).extract(None)
