# ashstudio/registry/__init__.py
"""Module configuration registry.

``DEFAULT_REGISTRY`` knows the core Ash modules and the common extensions.
Pass a different ``Registry`` to the parsers to add or replace entries:

    reg = DEFAULT_REGISTRY.with_configuration(my_cfg)
"""

from __future__ import annotations
from typing import Iterable, List

from .ash import ASH_DOMAIN, ASH_RESOURCE, CORE_CONFIGURATIONS
from .extensions import ASH_AUTHENTICATION, ASH_OBAN, ASH_PUB_SUB, EXTENSION_CONFIGURATIONS
from .types import (
    BOOLEAN_NAME, EVERYTHING_UP_TO_DO, NOT_BOOLEAN_NAME, PRIMITIVE_NAME,
    DetailShape, DiagramSpec, ModuleConfiguration, Registry, SectionShape,
    build_registry, detail, section,
)

DEFAULT_REGISTRY = build_registry(CORE_CONFIGURATIONS + EXTENSION_CONFIGURATIONS)


def get_all_available_configurations(registry: Iterable[ModuleConfiguration] = DEFAULT_REGISTRY) -> List[ModuleConfiguration]:
    """Every configuration in registration order."""
    return list(registry)


__all__ = [
    "ASH_AUTHENTICATION", "ASH_DOMAIN", "ASH_OBAN", "ASH_PUB_SUB", "ASH_RESOURCE",
    "BOOLEAN_NAME", "DEFAULT_REGISTRY", "EVERYTHING_UP_TO_DO", "NOT_BOOLEAN_NAME",
    "PRIMITIVE_NAME", "DetailShape", "DiagramSpec", "ModuleConfiguration", "Registry",
    "SectionShape", "build_registry", "detail", "get_all_available_configurations", "section",
]
