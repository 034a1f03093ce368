# ashstudio/parsers/simple.py
"""Regex fallback parser.

Works without configuration: a file is an Ash file when it uses
``Ash.Resource``, ``Ash.Domain`` or one of the ``Ash.Type.*`` behaviours, and
its sections are whatever ``name do ... end`` blocks the module body holds.
It never raises; anything unexpected ends up in ``ParseResult.errors``.
"""

from __future__ import annotations
from typing import List
import logging
import regex as re

from ..model import DslNode, ParseIssue, ParseResult, SourceSpan, normalize_result
from .base import Parser, module_name_of
from .blocks import extract_generic
from .declarations import TYPE, UseDeclaration, iter_use_declarations, marker_kind, type_marker_kind
from .lines import scan_lines

logger = logging.getLogger(__name__)

_VALUES_RE = re.compile(r"values:\s*\[(.*?)\]", re.S)
_VALUE_RE = re.compile(r"(:\w+[?!]?|\w+[?!]?)(?=:\s|\s*[,\]]|\s*$)")


class SimpleParser(Parser):
    name = "SimpleParser"

    def parse(self, source: str) -> ParseResult:
        try:
            return self._parse(source)
        except Exception as e:  # recovered into the result
            logger.warning("fallback parser failed: %s", e, exc_info=True)
            return normalize_result(
                is_ash_file=False,
                module_name=None,
                sections=[],
                parser_name=self.name,
                errors=[ParseIssue(f"fallback parser failed: {e}")],
            )

    def _parse(self, source: str) -> ParseResult:
        module_name = module_name_of(source)
        markers = [(marker_kind(d.target), d) for d in iter_use_declarations(source)]
        markers = [(k, d) for (k, d) in markers if k is not None]
        if not markers:
            return normalize_result(is_ash_file=False, module_name=module_name,
                                    sections=[], parser_name=self.name)

        type_marker = next((d for (k, d) in markers if k == TYPE), None)
        if type_marker is not None and all(k == TYPE for (k, _d) in markers):
            sections = [self._type_section(source, type_marker)]
            return normalize_result(is_ash_file=True, module_name=module_name,
                                    sections=sections, parser_name=self.name)

        extraction = extract_generic(source)
        return normalize_result(
            is_ash_file=True,
            module_name=module_name,
            sections=extraction.sections,
            parser_name=self.name,
            errors=extraction.issues,
        )

    # ---- Ash.Type.* ----
    def _type_section(self, source: str, decl: UseDeclaration) -> DslNode:
        kind = type_marker_kind(decl.target) or "type"
        lines = scan_lines(source)
        last_line = len(lines)
        while last_line > decl.line and not lines[last_line - 1].text.strip():
            last_line -= 1
        options = decl.text.split(",", 1)[1].strip() if "," in decl.text else ""
        return DslNode(
            keyword=f"{kind.lower()}_definition",
            name="",
            children=self._enum_values(decl) if kind == "Enum" else [],
            span=SourceSpan(decl.line, decl.column, last_line),
            raw=options,
        )

    @staticmethod
    def _enum_values(decl: UseDeclaration) -> List[DslNode]:
        """``value`` details for each entry of ``values: [...]`` in the use options."""
        m = _VALUES_RE.search(decl.text)
        if not m:
            return []
        out: List[DslNode] = []
        for vm in _VALUE_RE.finditer(m.group(1)):
            value = vm.group(1)
            line = decl.line + decl.text.count("\n", 0, m.start(1) + vm.start(1))
            out.append(DslNode(
                keyword="value",
                name=value.lstrip(":"),
                span=SourceSpan(line, 0, line),
                raw=value,
            ))
        return out
