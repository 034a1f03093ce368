# ashstudio/parsers/__init__.py
"""Parsing strategies and the service that chains them.

- ``ConfigurationDrivenParser`` ("ModuleParser"): registry-driven extraction
- ``GrammarParser`` ("AshParser"): ``ash.g`` over the whole file
- ``SimpleParser``: regex fallback, never raises
"""

from .base import Parser, module_name_of
from .blocks import BlockExtractor, Extraction, extract_generic, extract_modules, merge_section_shapes
from .configured import ConfigurationDrivenParser
from .declarations import (
    MatchedModule, UseDeclaration, declaration_target, find_use_declarations,
    identify_configured_modules, iter_use_declarations, marker_kind,
)
from .grammar_based import GrammarParser
from .names import DEFAULT_NAME_PATTERN, extract_name
from .service import ParserService
from .simple import SimpleParser
