# ashstudio/parsers/declarations.py
"""``use`` declaration discovery and registry matching.

Matching is exact on the dotted target right after ``use``: option lists
(``otp_app:``, ``data_layer:``, ``extensions:`` ...) are ignored entirely and
``Ash.Resource`` never matches ``Ash.ResourceX`` or ``MyApp.Ash.Resource``.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional
import logging
import regex as re

from ..registry.types import ModuleConfiguration
from .lines import scan_lines

logger = logging.getLogger(__name__)

_USE_RE = re.compile(r"^\s*use\s+([A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)")
_TYPE_MARKER_RE = re.compile(r"^Ash\.Type\.(Enum|Union|NewType)$")

RESOURCE = "resource"
DOMAIN = "domain"
TYPE = "type"

_MARKERS = {"Ash.Resource": RESOURCE, "Ash.Domain": DOMAIN}


@dataclass(frozen=True)
class UseDeclaration:
    text: str       # whole statement, continuation lines joined with "\n"
    target: str     # dotted module path
    line: int       # 1-based line of `use`
    column: int     # 1-based column of `use`
    end_line: int


@dataclass(frozen=True)
class MatchedModule:
    declaration_pattern: str
    display_name: str
    configuration: ModuleConfiguration


def iter_use_declarations(source: str) -> Iterator[UseDeclaration]:
    lines = scan_lines(source)
    i = 0
    while i < len(lines):
        ln = lines[i]
        m = None if ln.starts_in_literal else _USE_RE.match(ln.code)
        if m is None:
            i += 1
            continue
        start = i
        depth = ln.brackets
        cont = ln.continues
        while (depth > 0 or cont) and i + 1 < len(lines):
            i += 1
            depth += lines[i].brackets
            cont = lines[i].continues
        parts = [lines[k].clean.strip() for k in range(start, i + 1)]
        column = ln.code.index("use") + 1
        # the target is read from the original text (code has literals blanked, not names)
        target = _USE_RE.match(ln.clean).group(1)
        yield UseDeclaration("\n".join(p for p in parts if p), target, ln.number, column, lines[i].number)
        i += 1


def find_use_declarations(source: str) -> List[str]:
    """Every ``use`` statement in the source, option lists included."""
    return [d.text for d in iter_use_declarations(source)]


def declaration_target(statement: str) -> Optional[str]:
    """Dotted path right after ``use`` (``None`` when the text is not a use statement)."""
    m = _USE_RE.match(statement)
    return m.group(1) if m else None


def identify_configured_modules(declarations: Iterable[str],
                                registry: Iterable[ModuleConfiguration]) -> List[MatchedModule]:
    """Registry entries whose pattern equals a declaration's target.

    Declaration order is kept and each pattern is reported once (first wins).
    Declarations that match nothing are dropped without comment.
    """
    index = {}
    for cfg in registry:
        index.setdefault(cfg.declaration_pattern, cfg)
    matched: List[MatchedModule] = []
    seen = set()
    for decl in declarations:
        target = declaration_target(decl)
        if target is None:
            continue
        cfg = index.get(target)
        if cfg is None or cfg.declaration_pattern in seen:
            continue
        seen.add(cfg.declaration_pattern)
        matched.append(MatchedModule(cfg.declaration_pattern, cfg.display_name, cfg))
    logger.debug("matched modules: %s", [m.declaration_pattern for m in matched])
    return matched


def marker_kind(target: str) -> Optional[str]:
    """``resource``/``domain``/``type`` for Ash marker modules, else ``None``."""
    if target in _MARKERS:
        return _MARKERS[target]
    if _TYPE_MARKER_RE.match(target):
        return TYPE
    return None


def type_marker_kind(target: str) -> Optional[str]:
    """``Enum``/``Union``/``NewType`` for ``Ash.Type.*`` markers."""
    m = _TYPE_MARKER_RE.match(target)
    return m.group(1) if m else None
