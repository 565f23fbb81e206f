"""Channels tools."""

from typing import Any

from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import ChannelSummary


def _list_channels(client, config):
    async def run(ctx: dict[str, Any], params: Any) -> list[dict[str, Any]]:
        return [
            ChannelSummary.model_validate(channel).model_dump()
            async for channel in client.list_channels()
        ]

    return run


list_channels = ToolDescriptor(
    method="list_channels",
    name="List channels",
    description="""
    Lists all channels configured in the account, returning the key, name, type and
    provider of each. Use this tool when you need to know which channels a
    workflow step can send through.
    """,
    execute=_list_channels,
)

TOOLS = [list_channels]

PERMISSIONS = {"read": ["list_channels"]}
