"""Environments tools."""

from typing import Any

from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import EnvironmentSummary


def _list_environments(client, config):
    async def run(ctx: dict[str, Any], params: Any) -> list[dict[str, Any]]:
        return [
            EnvironmentSummary.model_validate(environment).model_dump()
            async for environment in client.list_environments()
        ]

    return run


list_environments = ToolDescriptor(
    method="list_environments",
    name="List environments",
    description="""
    Lists all environments available, returning the slug and name of each
    environment. Use this tool when you need to see what environments are available.
    """,
    execute=_list_environments,
)

TOOLS = [list_environments]

PERMISSIONS = {"read": ["list_environments"]}
