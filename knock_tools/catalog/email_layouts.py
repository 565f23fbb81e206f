"""Email layouts tools."""

from typing import Any

from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import EnvironmentInput


def _list_email_layouts(client, config):
    async def run(ctx: dict[str, Any], params: EnvironmentInput) -> list[dict[str, Any]]:
        environment = config.resolve_environment(params.environment)
        return [
            {"key": layout["key"], "name": layout.get("name")}
            async for layout in client.list_email_layouts(environment)
        ]

    return run


list_email_layouts = ToolDescriptor(
    method="list_email_layouts",
    name="List email layouts",
    description="""
    List all email layouts within the environment given. Returns the name and the
    key of each email layout.

    Use this tool when building an email notification and you need to know the
    available email layouts.
    """,
    parameters=EnvironmentInput,
    execute=_list_email_layouts,
)

TOOLS = [list_email_layouts]

PERMISSIONS = {"read": ["list_email_layouts"]}
