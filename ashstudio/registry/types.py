# ashstudio/registry/types.py
"""Registry value types.

A ``ModuleConfiguration`` says which sections a ``use <Module>`` declaration
brings into a file and which detail keywords live inside each section. The
``Registry`` holding them is an immutable value: "changing" it returns a new
registry with a bumped ``version``.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Iterator, Optional, Tuple

from ..errors import ConfigurationError

# ---- name patterns (group 1 is the name) ----
PRIMITIVE_NAME = r"(:\w+|\w+)"
NOT_BOOLEAN_NAME = r"(:\w++|\w++)(?![?!])"
BOOLEAN_NAME = r"(:\w+\?|\w+\?)"
EVERYTHING_UP_TO_DO = r"(.+?)\s*$"


@dataclass(frozen=True)
class DetailShape:
    keyword: str
    name_pattern: Optional[str] = None     # None: details of this kind are unnamed
    children: Tuple["DetailShape", ...] = ()

    def child_map(self) -> Dict[str, "DetailShape"]:
        return _first_wins((c.keyword, c) for c in self.children)


@dataclass(frozen=True)
class SectionShape:
    name: str
    children: Tuple[DetailShape, ...] = ()
    name_pattern: Optional[str] = None

    def child_map(self) -> Dict[str, DetailShape]:
        return _first_wins((c.keyword, c) for c in self.children)


@dataclass(frozen=True)
class DiagramSpec:
    name: str
    keyword: str              # section the diagram is offered on
    mix_command: str
    file_pattern: str
    type: Optional[str] = None


@dataclass(frozen=True)
class ModuleConfiguration:
    declaration_pattern: str  # dotted module path, compared exactly
    display_name: str
    sections: Tuple[SectionShape, ...] = ()
    diagrams: Tuple[DiagramSpec, ...] = ()

    def section_map(self) -> Dict[str, SectionShape]:
        return _first_wins((s.name, s) for s in self.sections)


def _first_wins(pairs) -> Dict:
    out: Dict = {}
    for k, v in pairs:
        out.setdefault(k, v)
    return out


# helpers used by the configuration tables
def detail(keyword: str, name_pattern: Optional[str] = None, *children: DetailShape) -> DetailShape:
    return DetailShape(keyword, name_pattern, tuple(children))


def section(name: str, *children: DetailShape, name_pattern: Optional[str] = None) -> SectionShape:
    return SectionShape(name, tuple(children), name_pattern)


@dataclass(frozen=True)
class Registry:
    """Immutable collection of module configurations, keyed by declaration pattern."""
    configurations: Tuple[ModuleConfiguration, ...] = ()
    version: int = 0
    _index: Dict[str, ModuleConfiguration] = field(default_factory=dict, init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        index: Dict[str, ModuleConfiguration] = {}
        for cfg in self.configurations:
            if not cfg.declaration_pattern:
                raise ConfigurationError(f"Configuration {cfg.display_name!r} has an empty declaration pattern")
            if cfg.declaration_pattern in index:
                raise ConfigurationError(f"Duplicate declaration pattern {cfg.declaration_pattern!r}")
            index[cfg.declaration_pattern] = cfg
        object.__setattr__(self, "_index", index)

    def __iter__(self) -> Iterator[ModuleConfiguration]:
        return iter(self.configurations)

    def __len__(self) -> int:
        return len(self.configurations)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._index

    def lookup(self, target: str) -> Optional[ModuleConfiguration]:
        """Exact match on the declaration pattern."""
        return self._index.get(target)

    def with_configuration(self, cfg: ModuleConfiguration) -> "Registry":
        """New registry with ``cfg`` added, or replacing the entry with the same pattern."""
        kept = [c for c in self.configurations if c.declaration_pattern != cfg.declaration_pattern]
        return replace(self, configurations=tuple(kept) + (cfg,), version=self.version + 1)

    def without(self, declaration_pattern: str) -> "Registry":
        kept = tuple(c for c in self.configurations if c.declaration_pattern != declaration_pattern)
        return replace(self, configurations=kept, version=self.version + 1)


def build_registry(configs: Iterable[ModuleConfiguration]) -> Registry:
    return Registry(tuple(configs))