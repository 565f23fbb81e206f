"""Partials tools."""

from typing import Any

from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import EnvironmentInput, PartialSummary


def _list_partials(client, config):
    async def run(ctx: dict[str, Any], params: EnvironmentInput) -> list[dict[str, Any]]:
        environment = config.resolve_environment(params.environment)
        return [
            PartialSummary.model_validate(partial).model_dump()
            async for partial in client.list_partials(environment)
        ]

    return run


list_partials = ToolDescriptor(
    method="list_partials",
    name="List partials",
    description="""
    List all partials within the environment given. Returns information about the
    partial, including the name, key and type.

    Use this tool when you need to know the available partials, like when
    building an email template that reuses shared content.
    """,
    parameters=EnvironmentInput,
    execute=_list_partials,
)

TOOLS = [list_partials]

PERMISSIONS = {"read": ["list_partials"]}
