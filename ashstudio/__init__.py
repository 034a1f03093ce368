# ashstudio/__init__.py
"""ashstudio: structural parsing of Ash Framework DSL sources.

    >>> from ashstudio import ParserService
    >>> result = ParserService().parse(source)
    >>> [s.keyword for s in result.sections]
    ['attributes', 'actions']

Three strategies share one result shape (``ParseResult``):

- configuration-driven extraction over the module registry
- a grammar (``grammar/ash.g``) run by an ambiguity-aware Earley parser
- a regex fallback that needs no configuration
"""

from .config import Settings
from .errors import ConfigurationError, ParseError
from .model import DslNode, ParseIssue, ParseResult, SourceSpan, normalize_result
from .parsers import (
    ConfigurationDrivenParser, GrammarParser, ParserService, SimpleParser,
    extract_modules, extract_name, find_use_declarations, identify_configured_modules,
)
from .registry import DEFAULT_REGISTRY, Registry, get_all_available_configurations

__version__ = "0.1.0"
