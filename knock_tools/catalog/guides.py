"""Guides tools.

Guides are in-app experiences (banners, modals, tours) whose steps conform to
a message type variant.
"""

from typing import Any

from knock_tools.api.exceptions import KnockValidationError
from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import (
    GetGuideInput,
    GuideStepSummary,
    GuideSummary,
    ListGuidesInput,
    UpsertGuideInput,
)
from knock_tools.utils import response_field


def serialize_guide(guide: dict[str, Any]) -> dict[str, Any]:
    key = response_field(guide, "key", "guide")
    return GuideSummary(
        key=key,
        name=guide.get("name") or key,
        description=guide.get("description"),
        type=guide.get("type"),
        active=guide.get("active"),
        steps=[
            GuideStepSummary(
                ref=response_field(step, "ref", "guide step"),
                name=step.get("name"),
                schema_key=step.get("schema_key"),
                schema_variant_key=step.get("schema_variant_key"),
                schema_content=step.get("values"),
            )
            for step in guide.get("steps") or []
        ],
    ).model_dump()


def _list_guides(client, config):
    async def run(ctx: dict[str, Any], params: ListGuidesInput) -> list[dict[str, Any]]:
        environment = config.resolve_environment(params.environment)
        return [
            serialize_guide(guide)
            async for guide in client.list_guides(environment, params.page_size)
        ]

    return run


def _get_guide(client, config):
    async def run(ctx: dict[str, Any], params: GetGuideInput) -> dict[str, Any]:
        guide = await client.get_guide(
            params.guide_key,
            config.resolve_environment(params.environment),
            params.hide_uncommitted_changes,
        )
        return serialize_guide(guide)

    return run


def _upsert_guide(client, config):
    async def run(ctx: dict[str, Any], params: UpsertGuideInput) -> dict[str, Any]:
        environment = config.resolve_environment(params.environment)
        step = params.step

        # The step must reference an existing message type variant.
        message_type = await client.get_message_type(step.schema_key, environment)
        variant = next(
            (
                v
                for v in message_type.get("variants") or []
                if v.get("key") == step.schema_variant_key
            ),
            None,
        )
        if variant is None:
            raise KnockValidationError(
                f"Schema variant {step.schema_variant_key} not found in message type "
                f"{message_type['key']}",
                status_code=422,
            )

        guide = {
            "name": params.name,
            "description": params.description,
            "channel_key": params.channel_key,
            "steps": [
                {
                    "ref": step.ref,
                    "schema_key": message_type["key"],
                    "schema_semver": message_type.get("semver"),
                    "schema_variant_key": variant["key"],
                    "values": step.schema_content,
                }
            ],
            "target_property_conditions": params.target_property_conditions,
            "activation_location_rules": (
                [rule.model_dump() for rule in params.activation_location_rules]
                if params.activation_location_rules
                else None
            ),
        }

        result = await client.upsert_guide(
            params.guide_key, environment, {k: v for k, v in guide.items() if v is not None}
        )
        return serialize_guide(response_field(result, "guide", "upsert_guide"))

    return run


list_guides = ToolDescriptor(
    method="list_guides",
    name="List guides",
    description="""
    List all guides available for the given environment. Returns structural
    information about the guides, including the key, name, description, type,
    and status.

    Use this tool when you need to understand which guides are available in the environment.
    """,
    parameters=ListGuidesInput,
    execute=_list_guides,
)

get_guide = ToolDescriptor(
    method="get_guide",
    name="Get guide",
    description="""
    Get a guide by its key. Returns structural information about the guide,
    including the key, name, description, type, and status.
    """,
    parameters=GetGuideInput,
    execute=_get_guide,
)

upsert_guide = ToolDescriptor(
    method="upsert_guide",
    name="Upsert guide",
    description="""
    Create or update a guide. A guide defines an in-app experience that can be
    displayed to users based on priority and other conditions.

    Each step references a message type schema with `schema_key` and
    `schema_variant_key`. Use the `list_message_types` tool to find the available
    message types and variants. You **must** supply a `schema_content` that sets a
    value for each of the fields of the selected variant.

    Use `target_property_conditions` to limit which users see the guide, and
    `activation_location_rules` to limit where in the application it may appear.

    Note: guides can only be changed in the development environment.
    """,
    parameters=UpsertGuideInput,
    execute=_upsert_guide,
)

TOOLS = [list_guides, get_guide, upsert_guide]

PERMISSIONS = {
    "read": ["list_guides", "get_guide"],
    "manage": ["upsert_guide"],
}
