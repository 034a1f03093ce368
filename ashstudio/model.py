# ashstudio/model.py
"""Result types returned by every parser, plus the normalizer that builds them.

Sections, details and child details share one recursive node type
(``DslNode``); the tier a node lives on is only a matter of depth.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional


@dataclass(frozen=True)
class SourceSpan:
    line: int = 0        # 1-based line of the opener
    column: int = 0      # 1-based column of the keyword
    end_line: int = 0    # line of the closer (same as line for one-liners)

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "column": self.column, "end_line": self.end_line}


@dataclass
class DslNode:
    """A section (`attributes do ... end`) or a detail (`attribute :email, :string`)."""
    keyword: str
    name: str = ""
    children: List["DslNode"] = field(default_factory=list)
    span: SourceSpan = field(default_factory=SourceSpan)
    raw: str = ""

    def walk(self) -> Iterator["DslNode"]:
        """Pre-order traversal, self first."""
        yield self
        for c in self.children:
            yield from c.walk()

    def find(self, keyword: str) -> List["DslNode"]:
        """All descendants (not self) with the given keyword, in source order."""
        return [n for c in self.children for n in c.walk() if n.keyword == keyword]

    def child(self, keyword: str, name: Optional[str] = None) -> Optional["DslNode"]:
        for c in self.children:
            if c.keyword == keyword and (name is None or c.name == name):
                return c
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keyword": self.keyword,
            "name": self.name,
            "span": self.span.to_dict(),
            "raw": self.raw,
            "children": [c.to_dict() for c in self.children],
        }


# Readable aliases for the tiers
Section = DslNode
Detail = DslNode


@dataclass(frozen=True)
class ParseIssue:
    message: str
    line: int = 0
    column: int = 0
    offset: int = 0
    severity: str = "error"   # "error" | "warning"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "line": self.line,
            "column": self.column,
            "offset": self.offset,
            "severity": self.severity,
        }


@dataclass
class ParseResult:
    is_ash_file: bool
    module_name: str = ""
    sections: List[DslNode] = field(default_factory=list)
    parser_name: str = ""
    errors: List[ParseIssue] = field(default_factory=list)

    def section(self, keyword: str) -> Optional[DslNode]:
        for s in self.sections:
            if s.keyword == keyword:
                return s
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_ash_file": self.is_ash_file,
            "module_name": self.module_name,
            "parser_name": self.parser_name,
            "sections": [s.to_dict() for s in self.sections],
            "errors": [e.to_dict() for e in self.errors],
        }


# ---- normalizer ----
def _position(node: DslNode):
    return (node.span.line, node.span.column)


def _normalize_node(node: DslNode) -> DslNode:
    children = [_normalize_node(c) for c in (node.children or [])]
    children.sort(key=_position)
    return DslNode(
        keyword=node.keyword,
        name=node.name or "",
        children=children,
        span=node.span or SourceSpan(),
        raw=node.raw or "",
    )


def normalize_result(*,
                     is_ash_file: bool,
                     module_name: Optional[str],
                     sections: Optional[Iterable[DslNode]],
                     parser_name: str,
                     errors: Optional[Iterable[ParseIssue]] = None) -> ParseResult:
    """Build a ParseResult that satisfies the result invariants.

    - non-Ash files never carry sections
    - names are ``""`` and children ``[]`` rather than ``None``
    - nodes are ordered by source position on every tier
    """
    if not is_ash_file:
        sections = []
    cleaned = [_normalize_node(s) for s in (sections or [])]
    cleaned.sort(key=_position)
    return ParseResult(
        is_ash_file=bool(is_ash_file),
        module_name=module_name or "",
        sections=cleaned,
        parser_name=parser_name,
        errors=list(errors or []),
    )


def empty_result(parser_name: str) -> ParseResult:
    return normalize_result(is_ash_file=False, module_name="", sections=[], parser_name=parser_name)
