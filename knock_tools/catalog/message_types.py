"""Message types tools.

A message type is the schema an in-app guide step's content conforms to.
"""

from typing import Any

from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import EnvironmentInput, UpsertMessageTypeInput

DEFAULT_PREVIEW = "<div></div>"


def _list_message_types(client, config):
    async def run(ctx: dict[str, Any], params: EnvironmentInput) -> list[dict[str, Any]]:
        environment = config.resolve_environment(params.environment)
        return [message_type async for message_type in client.list_message_types(environment)]

    return run


def _upsert_message_type(client, config):
    async def run(ctx: dict[str, Any], params: UpsertMessageTypeInput) -> dict[str, Any]:
        return await client.upsert_message_type(
            params.message_type_key,
            config.resolve_environment(params.environment),
            {
                "name": params.name,
                "variants": [variant.model_dump(exclude_none=True) for variant in params.variants],
                "description": params.description or "",
                "preview": params.preview or DEFAULT_PREVIEW,
            },
        )

    return run


list_message_types = ToolDescriptor(
    method="list_message_types",
    name="List message types",
    description="""
    List all message types available for the environment, including their
    variants and the fields of each variant.

    Use this tool before creating a guide, to find the schema key and variant the
    guide step's content must conform to.
    """,
    parameters=EnvironmentInput,
    execute=_list_message_types,
)

upsert_message_type = ToolDescriptor(
    method="upsert_message_type",
    name="Create or update message type",
    description="""
    Create or update a message type. A message type is a schema that defines fields
    available to an editor. Message types always have at least one variant, that
    MUST be named "default".

    You must pass the FULL message type when updating an existing message type.

    The preview is a string of HTML rendered as a representation of the message
    type, shared across all variants. It supports liquid, where each field is
    available as a variable, so a field named "text" is rendered with {{ text }}.
    """,
    parameters=UpsertMessageTypeInput,
    execute=_upsert_message_type,
)

TOOLS = [list_message_types, upsert_message_type]

PERMISSIONS = {
    "read": ["list_message_types"],
    "manage": ["upsert_message_type"],
}
