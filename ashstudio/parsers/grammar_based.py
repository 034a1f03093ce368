# ashstudio/parsers/grammar_based.py
"""Grammar-based parser: runs ``ash.g`` over the whole file and reads the
sections off the first parse tree."""

from __future__ import annotations
from typing import List, Optional
import logging

from ..earley.tree import ParseTree
from ..errors import ParseError
from ..grammar.ash import AshGrammar, default_grammar
from ..model import DslNode, ParseIssue, ParseResult, SourceSpan, normalize_result
from .base import Parser, module_name_of
from .declarations import DOMAIN, RESOURCE, iter_use_declarations, marker_kind
from .names import extract_name

logger = logging.getLogger(__name__)

# statements that carry a do-block
_BLOCK_RULES = ("Section", "MacroBlock")


class GrammarParser(Parser):
    name = "AshParser"

    def __init__(self, grammar: Optional[AshGrammar] = None):
        self._grammar = grammar

    @property
    def grammar(self) -> AshGrammar:
        if self._grammar is None:
            self._grammar = default_grammar()
        return self._grammar

    def parse(self, source: str) -> ParseResult:
        kinds = {marker_kind(d.target) for d in iter_use_declarations(source)}
        if not kinds & {RESOURCE, DOMAIN}:
            return normalize_result(is_ash_file=False, module_name=module_name_of(source),
                                    sections=[], parser_name=self.name)

        try:
            trees = self.grammar.parse(source)
        except ParseError as e:
            logger.debug("grammar rejected input: %s", e.reason)
            return self._failed(source, ParseIssue(e.reason, e.line, e.column, e.position))

        if not trees:
            return self._failed(source, ParseIssue("No valid parse found"))
        if len(trees) > 1:
            logger.debug("%d parse trees, keeping the first", len(trees))

        module = trees[0].subtree("ModuleDef")
        module_name = ""
        sections: List[DslNode] = []
        if module is not None:
            for c in module.children:
                if not isinstance(c, ParseTree) and c.type == "MODULE":
                    module_name = c.text
                    break
            for stmt in _statements(module.subtree("DoBlock")):
                if stmt.rule == "Section":
                    sections.append(self._node(source, stmt))

        return normalize_result(
            is_ash_file=True,
            module_name=module_name,
            sections=sections,
            parser_name=self.name,
        )

    def _failed(self, source: str, issue: ParseIssue) -> ParseResult:
        return normalize_result(
            is_ash_file=True,
            module_name=module_name_of(source),
            sections=[],
            parser_name=self.name,
            errors=[issue],
        )

    # ---- tree -> nodes ----
    def _node(self, source: str, stmt: ParseTree) -> DslNode:
        keyword, args = _head(stmt)
        children: List[DslNode] = []
        if stmt.rule in _BLOCK_RULES:
            for inner in _statements(stmt.subtree("DoBlock")):
                if _head(inner)[0]:
                    children.append(self._node(source, inner))
        first, last = stmt.first_token(), stmt.last_token()
        return DslNode(
            keyword=keyword,
            name=extract_name(args.text(source)) if args is not None else "",
            children=children,
            span=SourceSpan(first.line, first.col, last.line),
            raw=stmt.text(source),
        )


# ---- helpers ----
def _statements(block: Optional[ParseTree]) -> List[ParseTree]:
    """Statement bodies of a DoBlock, outside any else clause."""
    if block is None:
        return []
    out = []
    for st in block.subtrees("Statement"):
        out.extend(st.subtrees())
    return out


def _head(stmt: ParseTree):
    """(keyword, argument subtree) of a detail-shaped statement; keyword "" otherwise."""
    if stmt.rule in _BLOCK_RULES or stmt.rule == "MacroCall":
        return stmt.children[0].text, stmt.subtree("CallArgs")
    if stmt.rule == "StatementExpr" and len(stmt.children) == 1:
        head = stmt.subtree("Head")
        target = head.children[0] if head is not None and head.children else None
        if target is None:
            return "", None
        if not isinstance(target, ParseTree):
            return target.text, None
        if target.rule == "Call":
            return target.children[0].text, target.subtree("CallArgs")
    return "", None
