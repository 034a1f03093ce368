# ashstudio/config.py
"""Runtime settings.

Settings come from a mapping (already-parsed CLI options, a test fixture) or
from ``ASHSTUDIO_*`` environment variables:

    ASHSTUDIO_LOG_LEVEL   DEBUG | INFO | WARNING | ERROR   (default WARNING)
    ASHSTUDIO_PARSERS     comma list of configuration,grammar,simple
    ASHSTUDIO_CACHE_SIZE  result cache entries, 0 disables  (default 64)
    ASHSTUDIO_MAX_TREES   grammar ambiguity cap, >= 1      (default 16)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple
import logging
import os

from .errors import ConfigurationError

PARSER_CHOICES = ("configuration", "grammar", "simple")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    parsers: Tuple[str, ...] = PARSER_CHOICES
    cache_size: int = 64
    max_trees: int = 16

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Settings":
        """Validate raw values; keys that are missing keep their defaults."""
        d = cls()
        level = str(values.get("log_level", d.log_level)).upper()
        if level not in LOG_LEVELS:
            raise ConfigurationError(f"log_level: unknown level {level!r}")

        parsers = values.get("parsers", d.parsers)
        if isinstance(parsers, str):
            parsers = [p.strip() for p in parsers.split(",") if p.strip()]
        parsers = tuple(parsers)
        if not parsers:
            raise ConfigurationError("parsers: at least one parser is required")
        for p in parsers:
            if p not in PARSER_CHOICES:
                raise ConfigurationError(
                    f"parsers: unknown parser {p!r} (choose from {', '.join(PARSER_CHOICES)})")

        cache_size = _int(values, "cache_size", d.cache_size, minimum=0)
        max_trees = _int(values, "max_trees", d.max_trees, minimum=1)
        return cls(log_level=level, parsers=parsers, cache_size=cache_size, max_trees=max_trees)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, prefix: str = "ASHSTUDIO_") -> "Settings":
        env = os.environ if environ is None else environ
        values = {}
        for key in ("log_level", "parsers", "cache_size", "max_trees"):
            name = prefix + key.upper()
            if name in env:
                values[key] = env[name]
        return cls.from_mapping(values)

    def configure_logging(self, *, debug: bool = False) -> None:
        """Root handler for command-line use; the library itself never calls this."""
        level = logging.DEBUG if debug else getattr(logging, self.log_level)
        logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def _int(values: Mapping[str, Any], key: str, default: int, *, minimum: int) -> int:
    raw = values.get(key, default)
    try:
        n = int(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key}: expected an integer, got {raw!r}") from None
    if n < minimum:
        raise ConfigurationError(f"{key}: must be >= {minimum}, got {n}")
    return n
