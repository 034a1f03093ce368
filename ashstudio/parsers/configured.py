# ashstudio/parsers/configured.py
"""Configuration-driven parser.

Finds the registry configurations a file declares (``use <Module>``) and
extracts exactly the sections and detail keywords they describe.
"""

from __future__ import annotations
from typing import Iterable
import logging

from ..model import ParseResult, normalize_result
from ..registry import DEFAULT_REGISTRY
from ..registry.types import ModuleConfiguration
from .base import Parser, module_name_of
from .blocks import BlockExtractor, merge_section_shapes
from .declarations import find_use_declarations, identify_configured_modules

logger = logging.getLogger(__name__)


class ConfigurationDrivenParser(Parser):
    name = "ModuleParser"

    def __init__(self, registry: Iterable[ModuleConfiguration] = DEFAULT_REGISTRY):
        self.registry = registry

    def parse(self, source: str) -> ParseResult:
        matched = identify_configured_modules(find_use_declarations(source), self.registry)
        if not matched:
            logger.debug("no configured module declared")
            return normalize_result(is_ash_file=False, module_name=module_name_of(source),
                                    sections=[], parser_name=self.name)

        extraction = BlockExtractor(source).extract(merge_section_shapes(matched))
        logger.debug("%d section(s) from %s", len(extraction.sections),
                     ", ".join(m.declaration_pattern for m in matched))
        return normalize_result(
            is_ash_file=True,
            module_name=module_name_of(source),
            sections=extraction.sections,
            parser_name=self.name,
            errors=extraction.issues,
        )
