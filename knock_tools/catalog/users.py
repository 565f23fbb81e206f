"""Users tools.

Read and manage users, their preferences and the messages sent to them.
Every tool falls back to the configured `user_id` when none is passed.
"""

from typing import Any

from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import (
    GetUserInput,
    GetUserMessagesInput,
    GetUserPreferencesInput,
    SetUserPreferencesInput,
    UpsertUserInput,
)
from knock_tools.utils import maybe_hide_user_data, require, serialize_message_response


def _get_user(client, config):
    async def run(ctx: dict[str, Any], params: GetUserInput) -> dict[str, Any]:
        user_id = require(params.user_id or config.user_id, "user_id", "get_user")
        public = await client.public_api(config.resolve_environment(params.environment))
        user = await public.get_user(user_id)
        return maybe_hide_user_data(user, config.hide_user_data)

    return run


def _upsert_user(client, config):
    async def run(ctx: dict[str, Any], params: UpsertUserInput) -> dict[str, Any]:
        user_id = require(params.user_id or config.user_id, "user_id", "upsert_user")
        public = await client.public_api(config.resolve_environment(params.environment))
        user = await public.identify_user(
            user_id,
            {
                "email": params.email,
                "name": params.name,
                "phone_number": params.phone_number,
                **(params.custom_properties or {}),
            },
        )
        return maybe_hide_user_data(user, config.hide_user_data)

    return run


def _get_user_preferences(client, config):
    async def run(ctx: dict[str, Any], params: GetUserPreferencesInput) -> dict[str, Any]:
        user_id = require(params.user_id or config.user_id, "user_id", "get_user_preferences")
        public = await client.public_api(config.resolve_environment(params.environment))
        return await public.get_user_preferences(user_id, params.preference_set_id)

    return run


def _set_user_preferences(client, config):
    async def run(ctx: dict[str, Any], params: SetUserPreferencesInput) -> dict[str, Any]:
        user_id = require(params.user_id or config.user_id, "user_id", "set_user_preferences")
        public = await client.public_api(config.resolve_environment(params.environment))

        # Partial update: merge into the current default set.
        existing = await public.get_user_preferences(user_id)
        preferences = {
            "workflows": {**(existing.get("workflows") or {}), **(params.workflows or {})},
            "categories": {**(existing.get("categories") or {}), **(params.categories or {})},
            "channel_types": {
                **(existing.get("channel_types") or {}),
                **(params.channel_types or {}),
            },
        }
        return await public.set_user_preferences(user_id, preferences)

    return run


def _get_user_messages(client, config):
    async def run(ctx: dict[str, Any], params: GetUserMessagesInput) -> list[dict[str, Any]]:
        user_id = require(params.user_id or config.user_id, "user_id", "get_user_messages")
        public = await client.public_api(config.resolve_environment(params.environment))
        response = await public.get_user_messages(user_id, params.workflow_run_id)
        return [serialize_message_response(message) for message in response.get("items", [])]

    return run


get_user = ToolDescriptor(
    method="get_user",
    name="Get user",
    description="""
    Retrieves the complete user object for the given user_id, including email, name,
    phone number, and any custom properties. Use this tool when you need to retrieve
    a user's complete profile.

    If the user_id is not provided, it will use the user_id from the config.
    """,
    parameters=GetUserInput,
    execute=_get_user,
)

upsert_user = ToolDescriptor(
    method="upsert_user",
    name="Upsert user",
    description="""
    Creates or updates a user using the provided properties. Use this tool when you
    need to set the email, name, phone number or custom properties of a user.

    If the user_id is not provided, it will use the user_id from the config.
    """,
    parameters=UpsertUserInput,
    execute=_upsert_user,
)

get_user_preferences = ToolDescriptor(
    method="get_user_preferences",
    name="Get user preferences",
    description="""
    Retrieves the user's notification preferences for the given preference set.
    Preferences are keyed by workflow, category and channel type.
    """,
    parameters=GetUserPreferencesInput,
    execute=_get_user_preferences,
)

set_user_preferences = ToolDescriptor(
    method="set_user_preferences",
    name="Set user preferences",
    description="""
    Updates the user's default preference set. Only the workflows, categories and
    channel types passed are changed; everything else is kept as is.

    Use this tool to opt a user in or out of a workflow, a category, or an entire
    channel type.
    """,
    parameters=SetUserPreferencesInput,
    execute=_set_user_preferences,
)

get_user_messages = ToolDescriptor(
    method="get_user_messages",
    name="Get user messages",
    description="""
    Retrieves the messages that this user has received from the service. Use this
    tool when you need information about the notifications sent to the user.

    Pass a workflow_run_id to only see the messages produced by one workflow run.
    """,
    parameters=GetUserMessagesInput,
    execute=_get_user_messages,
)

TOOLS = [get_user, get_user_messages, get_user_preferences, upsert_user, set_user_preferences]

PERMISSIONS = {
    "read": ["get_user", "get_user_messages", "get_user_preferences"],
    "manage": ["upsert_user", "set_user_preferences"],
}
