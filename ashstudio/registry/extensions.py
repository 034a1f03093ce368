# ashstudio/registry/extensions.py
"""Configurations for Ash extension libraries."""

from __future__ import annotations

from .types import PRIMITIVE_NAME, ModuleConfiguration, detail, section

ASH_PUB_SUB = ModuleConfiguration(
    declaration_pattern="Ash.Notifier.PubSub",
    display_name="Ash PubSub",
    sections=(
        section(
            "pub_sub",
            detail("publish", PRIMITIVE_NAME),
            detail("publish_all", PRIMITIVE_NAME),
        ),
    ),
)

ASH_AUTHENTICATION = ModuleConfiguration(
    declaration_pattern="AshAuthentication",
    display_name="Ash Authentication",
    sections=(
        section(
            "authentication",
            detail(
                "strategies", None,
                detail("password", PRIMITIVE_NAME),
                detail("magic_link", PRIMITIVE_NAME),
                detail("oauth2", PRIMITIVE_NAME),
                detail("api_key", PRIMITIVE_NAME),
            ),
            detail("tokens"),
            detail(
                "add_ons", None,
                detail("confirmation", PRIMITIVE_NAME),
                detail("log_out_everywhere"),
            ),
        ),
    ),
)

ASH_OBAN = ModuleConfiguration(
    declaration_pattern="AshOban",
    display_name="Ash Oban",
    sections=(
        section(
            "oban",
            detail("triggers", None, detail("trigger", PRIMITIVE_NAME)),
            detail("scheduled_actions", None, detail("schedule", PRIMITIVE_NAME)),
        ),
    ),
)


def _plain(pattern: str, display_name: str, *section_names: str) -> ModuleConfiguration:
    return ModuleConfiguration(
        declaration_pattern=pattern,
        display_name=display_name,
        sections=tuple(section(n) for n in section_names),
    )


EXTENSION_CONFIGURATIONS = (
    ASH_PUB_SUB,
    ASH_AUTHENTICATION,
    _plain("AshPostgres.DataLayer", "Postgres", "postgres"),
    _plain("AshJason.Resource", "Jason", "jason"),
    ASH_OBAN,
    _plain("AshAdmin.Domain", "Ash Admin", "admin"),
    _plain("AshAdmin.Resource", "Ash Admin", "admin"),
    _plain("AshGraphql.Resource", "GraphQL", "graphql"),
    _plain("AshJsonApi.Resource", "JSON Api", "json_api"),
    _plain("AshNeo4j.DataLayer", "Neo4j", "neo4j"),
    _plain("AshOutstanding.Resource", "Outstanding", "outstanding"),
    _plain("AshPaperTrail.Resource", "Ash Paper Trail", "paper_trail"),
)
