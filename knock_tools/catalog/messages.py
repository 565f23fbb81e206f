"""Messages tools.

Read-only lookups for a single message: its status, rendered content,
delivery logs and engagement events.
"""

from typing import Any

from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import MessageInput
from knock_tools.utils import serialize_message_response


def _get_message(client, config):
    async def run(ctx: dict[str, Any], params: MessageInput) -> dict[str, Any]:
        public = await client.public_api(config.resolve_environment(params.environment))
        message = await public.get_message(params.message_id)
        return serialize_message_response(message)

    return run


def _get_message_content(client, config):
    async def run(ctx: dict[str, Any], params: MessageInput) -> dict[str, Any]:
        public = await client.public_api(config.resolve_environment(params.environment))
        return await public.get_message_content(params.message_id)

    return run


def _get_message_delivery_logs(client, config):
    async def run(ctx: dict[str, Any], params: MessageInput) -> list[dict[str, Any]]:
        public = await client.public_api(config.resolve_environment(params.environment))
        response = await public.list_message_delivery_logs(params.message_id)
        return response.get("items", [])

    return run


def _get_message_events(client, config):
    async def run(ctx: dict[str, Any], params: MessageInput) -> list[dict[str, Any]]:
        public = await client.public_api(config.resolve_environment(params.environment))
        response = await public.list_message_events(params.message_id)
        return response.get("items", [])

    return run


get_message = ToolDescriptor(
    method="get_message",
    name="Get message",
    description="""
    Retrieves a single message by its ID, including its delivery status and
    engagement statuses (seen, read, interacted, archived).
    """,
    parameters=MessageInput,
    execute=_get_message,
)

get_message_content = ToolDescriptor(
    method="get_message_content",
    name="Get message content",
    description="""
    Retrieves the rendered content that was sent for a message. Use this tool when
    you need to know exactly what the recipient received.
    """,
    parameters=MessageInput,
    execute=_get_message_content,
)

get_message_delivery_logs = ToolDescriptor(
    method="get_message_delivery_logs",
    name="Get message delivery logs",
    description="""
    Retrieves the requests and responses exchanged with the downstream provider
    when delivering a message. Use this tool to debug why a message failed to send.
    """,
    parameters=MessageInput,
    execute=_get_message_delivery_logs,
)

get_message_events = ToolDescriptor(
    method="get_message_events",
    name="Get message events",
    description="Retrieves the status change events recorded for a message.",
    parameters=MessageInput,
    execute=_get_message_events,
)

TOOLS = [get_message, get_message_content, get_message_delivery_logs, get_message_events]

PERMISSIONS = {
    "read": [
        "get_message",
        "get_message_content",
        "get_message_delivery_logs",
        "get_message_events",
    ],
}
