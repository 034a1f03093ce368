# ashstudio/parsers/service.py
"""Parser chain with a small result cache.

The first strategy that recognises the file as an Ash file wins; when none
does, the last strategy's (non-Ash) result is returned. A strategy that
raises is skipped.
"""

from __future__ import annotations
from collections import OrderedDict
from typing import Hashable, Iterable, List, Optional, Sequence, Tuple
import logging
import threading

from ..earley.runtime import DEFAULT_MAX_TREES
from ..grammar.ash import AshGrammar
from ..model import ParseResult, empty_result
from ..registry import DEFAULT_REGISTRY
from ..registry.types import ModuleConfiguration
from .base import Parser
from .configured import ConfigurationDrivenParser
from .grammar_based import GrammarParser
from .simple import SimpleParser

logger = logging.getLogger(__name__)

EMPTY_FALLBACK = "EmptyFallback"

CacheKey = Tuple[Hashable, Hashable]


class ParserService:
    def __init__(self,
                 parsers: Optional[Sequence[Parser]] = None,
                 *,
                 registry: Iterable[ModuleConfiguration] = DEFAULT_REGISTRY,
                 cache_size: int = 64,
                 max_trees: int = DEFAULT_MAX_TREES):
        if parsers is None:
            parsers = default_parsers(registry, max_trees=max_trees)
        self.parsers: List[Parser] = list(parsers)
        self.cache_size = cache_size
        self._cache: "OrderedDict[CacheKey, ParseResult]" = OrderedDict()
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings, *, registry: Iterable[ModuleConfiguration] = DEFAULT_REGISTRY) -> "ParserService":
        available = {
            "configuration": lambda: ConfigurationDrivenParser(registry),
            "grammar": lambda: GrammarParser(_grammar(settings.max_trees)),
            "simple": SimpleParser,
        }
        parsers = [available[name]() for name in settings.parsers]
        return cls(parsers, registry=registry, cache_size=settings.cache_size,
                   max_trees=settings.max_trees)

    # ---- parsing ----
    def parse(self, source: str, *, key: Optional[Hashable] = None, version: Optional[Hashable] = None) -> ParseResult:
        """Run the chain; results are cached when ``key`` is given."""
        if key is not None:
            hit = self.cached(key, version)
            if hit is not None:
                logger.debug("cache hit for %r@%r", key, version)
                return hit

        result = self._run(source)
        if key is not None and self.cache_size > 0:
            with self._lock:
                self._cache[(key, version)] = result
                self._cache.move_to_end((key, version))
                while len(self._cache) > self.cache_size:
                    self._cache.popitem(last=False)
        return result

    def _run(self, source: str) -> ParseResult:
        last: Optional[ParseResult] = None
        for p in self.parsers:
            try:
                result = p.parse(source)
            except Exception as e:  # next strategy
                logger.warning("%s failed: %s", p.name, e)
                continue
            if result.is_ash_file:
                logger.debug("%s recognised the file", p.name)
                return result
            last = result
        if last is None:
            logger.error("every parser failed; returning an empty result")
            return empty_result(EMPTY_FALLBACK)
        return last

    # ---- cache ----
    def cached(self, key: Hashable, version: Optional[Hashable] = None) -> Optional[ParseResult]:
        with self._lock:
            hit = self._cache.get((key, version))
            if hit is not None:
                self._cache.move_to_end((key, version))
        return hit

    def clear_cache(self, key: Optional[Hashable] = None) -> None:
        """Drop every entry, or every version of one key."""
        with self._lock:
            if key is None:
                self._cache.clear()
                return
            for k in [k for k in self._cache if k[0] == key]:
                del self._cache[k]


def default_parsers(registry: Iterable[ModuleConfiguration] = DEFAULT_REGISTRY,
                    *,
                    max_trees: int = DEFAULT_MAX_TREES) -> List[Parser]:
    return [
        ConfigurationDrivenParser(registry),
        GrammarParser(_grammar(max_trees)),
        SimpleParser(),
    ]


def _grammar(max_trees: int) -> Optional[AshGrammar]:
    # the shared default grammar is loaded lazily by GrammarParser
    if max_trees == DEFAULT_MAX_TREES:
        return None
    return AshGrammar.from_file(max_trees=max_trees)
