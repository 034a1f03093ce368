# ashstudio/registry/ash.py
"""Configurations for the core Ash modules (resources and domains)."""

from __future__ import annotations

from .types import (
    BOOLEAN_NAME, EVERYTHING_UP_TO_DO, NOT_BOOLEAN_NAME, PRIMITIVE_NAME,
    DiagramSpec, ModuleConfiguration, detail, section,
)

# children shared by every action kind
_ACTION_BODY = (
    detail("argument", PRIMITIVE_NAME),
    detail("change"),
    detail("validate"),
    detail("prepare"),
    detail("filter"),
)


def _action(keyword: str):
    return detail(keyword, PRIMITIVE_NAME, *_ACTION_BODY)


ASH_RESOURCE = ModuleConfiguration(
    declaration_pattern="Ash.Resource",
    display_name="Ash.Resource",
    sections=(
        section(
            "actions",
            _action("create"),
            _action("read"),
            _action("update"),
            _action("destroy"),
            _action("action"),
            detail("defaults"),
        ),
        section(
            "aggregates",
            detail("count", NOT_BOOLEAN_NAME),
            detail("first", NOT_BOOLEAN_NAME),
            detail("sum", NOT_BOOLEAN_NAME),
            detail("list", NOT_BOOLEAN_NAME),
            detail("max", NOT_BOOLEAN_NAME),
            detail("min", NOT_BOOLEAN_NAME),
            detail("avg", NOT_BOOLEAN_NAME),
            detail("exists", BOOLEAN_NAME),
            detail("custom"),
        ),
        section(
            "attributes",
            detail("attribute", PRIMITIVE_NAME),
            detail("uuid_primary_key", PRIMITIVE_NAME),
            detail("integer_primary_key", PRIMITIVE_NAME),
            detail("create_timestamp", PRIMITIVE_NAME),
            detail("update_timestamp", PRIMITIVE_NAME),
        ),
        section("calculations", detail("calculate", PRIMITIVE_NAME)),
        section("changes", detail("change")),
        section(
            "code_interface",
            detail("define", PRIMITIVE_NAME),
            detail("define_calculation", PRIMITIVE_NAME),
        ),
        section("identities", detail("identity", PRIMITIVE_NAME)),
        section(
            "policies",
            detail("bypass", EVERYTHING_UP_TO_DO,
                   detail("authorize_if", EVERYTHING_UP_TO_DO),
                   detail("forbid_if", EVERYTHING_UP_TO_DO)),
            detail("policy", EVERYTHING_UP_TO_DO,
                   detail("authorize_if", EVERYTHING_UP_TO_DO),
                   detail("forbid_if", EVERYTHING_UP_TO_DO)),
        ),
        section("preparations", detail("prepare")),
        section(
            "relationships",
            detail("belongs_to", PRIMITIVE_NAME),
            detail("has_many", PRIMITIVE_NAME),
            detail("has_one", PRIMITIVE_NAME),
            detail("many_to_many", PRIMITIVE_NAME),
        ),
        section("resource"),
        section("validations", detail("validate", PRIMITIVE_NAME)),
    ),
    diagrams=(
        DiagramSpec(
            name="Policy Flowchart",
            keyword="policies",
            mix_command="ash.generate_policy_charts",
            file_pattern="-policy-flowchart.mmd",
        ),
    ),
)

ASH_DOMAIN = ModuleConfiguration(
    declaration_pattern="Ash.Domain",
    display_name="Ash Domain",
    sections=(
        section("resources", detail("resource", EVERYTHING_UP_TO_DO)),
    ),
    diagrams=(
        DiagramSpec(
            name="Class Diagram",
            keyword="resources",
            mix_command="ash.generate_resource_diagrams",
            file_pattern="-mermaid-class-diagram.mmd",
            type="class",
        ),
        DiagramSpec(
            name="Entity Relationship Diagram",
            keyword="resources",
            mix_command="ash.generate_resource_diagrams",
            file_pattern="-mermaid-er-diagram.mmd",
            type="er",
        ),
    ),
)

CORE_CONFIGURATIONS = (ASH_RESOURCE, ASH_DOMAIN)
