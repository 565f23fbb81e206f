"""Broadcasts tools.

Broadcasts send a one-time message to every member of an audience. They are
drafted, then sent immediately or scheduled, and can be canceled while
scheduled.
"""

from typing import Any

from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import (
    BroadcastInput,
    BroadcastSummary,
    EnvironmentInput,
    SendBroadcastInput,
    UpsertBroadcastInput,
)
from knock_tools.utils import response_field


def serialize_broadcast(broadcast: dict[str, Any], include_steps: bool = False) -> dict[str, Any]:
    key = response_field(broadcast, "key", "broadcast")
    summary = BroadcastSummary(
        key=key,
        name=broadcast.get("name") or key,
        status=broadcast.get("status"),
        description=broadcast.get("description"),
        categories=broadcast.get("categories"),
        steps=broadcast.get("steps") if include_steps else None,
    )
    return summary.model_dump(exclude_none=True)


def _list_broadcasts(client, config):
    async def run(ctx: dict[str, Any], params: EnvironmentInput) -> list[dict[str, Any]]:
        environment = config.resolve_environment(params.environment)
        return [
            serialize_broadcast(broadcast)
            async for broadcast in client.list_broadcasts(environment)
        ]

    return run


def _get_broadcast(client, config):
    async def run(ctx: dict[str, Any], params: BroadcastInput) -> dict[str, Any]:
        broadcast = await client.get_broadcast(
            params.broadcast_key, config.resolve_environment(params.environment)
        )
        return serialize_broadcast(broadcast, include_steps=True)

    return run


def _upsert_broadcast(client, config):
    async def run(ctx: dict[str, Any], params: UpsertBroadcastInput) -> dict[str, Any]:
        broadcast = params.model_dump(
            include={"name", "description", "categories", "target_audience_key", "steps", "settings"},
            exclude_none=True,
        )
        result = await client.upsert_broadcast(
            params.broadcast_key, config.resolve_environment(params.environment), broadcast
        )
        return serialize_broadcast(
            response_field(result, "broadcast", "broadcast"), include_steps=True
        )

    return run


def _send_broadcast(client, config):
    async def run(ctx: dict[str, Any], params: SendBroadcastInput) -> dict[str, Any]:
        result = await client.send_broadcast(
            params.broadcast_key, config.resolve_environment(params.environment), params.send_at
        )
        return serialize_broadcast(response_field(result, "broadcast", "broadcast"))

    return run


def _cancel_broadcast(client, config):
    async def run(ctx: dict[str, Any], params: BroadcastInput) -> dict[str, Any]:
        result = await client.cancel_broadcast(
            params.broadcast_key, config.resolve_environment(params.environment)
        )
        return serialize_broadcast(response_field(result, "broadcast", "broadcast"))

    return run


list_broadcasts = ToolDescriptor(
    method="list_broadcasts",
    name="List broadcasts",
    description="""
    List all broadcasts for the given environment. Returns the key, name, status,
    description and categories of each broadcast.
    """,
    parameters=EnvironmentInput,
    execute=_list_broadcasts,
)

get_broadcast = ToolDescriptor(
    method="get_broadcast",
    name="Get broadcast",
    description="Get a broadcast by its key, including its steps.",
    parameters=BroadcastInput,
    execute=_get_broadcast,
)

upsert_broadcast = ToolDescriptor(
    method="upsert_broadcast",
    name="Upsert broadcast",
    description="""
    Create or update a broadcast. Broadcasts only support channel, branch and delay
    steps, and are sent to the members of the target audience.

    Creating or updating a broadcast never sends it; use the `send_broadcast` tool
    for that.
    """,
    parameters=UpsertBroadcastInput,
    execute=_upsert_broadcast,
)

send_broadcast = ToolDescriptor(
    method="send_broadcast",
    name="Send broadcast",
    description="""
    Send a broadcast now, or schedule it when `send_at` is given. Only use this tool
    when you are explicitly asked to send a broadcast.
    """,
    parameters=SendBroadcastInput,
    execute=_send_broadcast,
)

cancel_broadcast = ToolDescriptor(
    method="cancel_broadcast",
    name="Cancel broadcast",
    description="Cancel a scheduled broadcast, returning it to draft.",
    parameters=BroadcastInput,
    execute=_cancel_broadcast,
)

TOOLS = [list_broadcasts, get_broadcast, upsert_broadcast, send_broadcast, cancel_broadcast]

PERMISSIONS = {
    "read": ["list_broadcasts", "get_broadcast"],
    "manage": ["upsert_broadcast", "send_broadcast", "cancel_broadcast"],
}
