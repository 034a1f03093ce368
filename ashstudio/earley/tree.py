# ashstudio/earley/tree.py
"""Parse trees produced by the Earley runtime."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from ..lex import LexTok

Child = Union["ParseTree", LexTok]


@dataclass(frozen=True)
class ParseTree:
    rule: str
    children: List[Child] = field(default_factory=list)

    # ---- traversal ----
    def iter_subtrees(self) -> Iterator["ParseTree"]:
        """Pre-order, self first."""
        yield self
        for c in self.children:
            if isinstance(c, ParseTree):
                yield from c.iter_subtrees()

    def find_all(self, rule: str) -> List["ParseTree"]:
        return [t for t in self.iter_subtrees() if t.rule == rule]

    def subtrees(self, rule: Optional[str] = None) -> List["ParseTree"]:
        """Direct subtree children, optionally filtered by rule."""
        return [c for c in self.children
                if isinstance(c, ParseTree) and (rule is None or c.rule == rule)]

    def subtree(self, rule: str) -> Optional["ParseTree"]:
        for c in self.subtrees(rule):
            return c
        return None

    def tokens(self) -> Iterator[LexTok]:
        for c in self.children:
            if isinstance(c, ParseTree):
                yield from c.tokens()
            else:
                yield c

    def first_token(self) -> Optional[LexTok]:
        for t in self.tokens():
            return t
        return None

    def last_token(self) -> Optional[LexTok]:
        last = None
        for t in self.tokens():
            last = t
        return last

    def text(self, source: str) -> str:
        """Source slice covered by this tree ("" for an empty derivation)."""
        a, b = self.first_token(), self.last_token()
        if a is None or b is None:
            return ""
        return source[a.pos:b.end]

    # ---- debugging ----
    def pretty(self, indent: str = "  ") -> str:
        lines: List[str] = []

        def _walk(node: Child, depth: int) -> None:
            pad = indent * depth
            if isinstance(node, ParseTree):
                lines.append(f"{pad}{node.rule}")
                for c in node.children:
                    _walk(c, depth + 1)
            else:
                lines.append(f"{pad}{node.type} {node.text!r} @{node.line}:{node.col}")

        _walk(self, 0)
        return "\n".join(lines)
