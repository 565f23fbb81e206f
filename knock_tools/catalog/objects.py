"""Objects tools.

Objects are non-user recipients (projects, channels, devices) grouped in
collections. Users subscribe to objects to receive the notifications sent to
them.
"""

from typing import Any

from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import (
    ListObjectsInput,
    ObjectInput,
    ObjectSubscriptionsInput,
    SetObjectInput,
)
from knock_tools.utils import require


def _subscribers(params: ObjectSubscriptionsInput, config, method: str) -> list[str]:
    if params.user_ids:
        return params.user_ids
    return [require(config.user_id, "user_ids", method)]


def _list_objects(client, config):
    async def run(ctx: dict[str, Any], params: ListObjectsInput) -> list[dict[str, Any]]:
        public = await client.public_api(config.resolve_environment(params.environment))
        response = await public.list_objects(params.collection)
        return response.get("entries", [])

    return run


def _get_object(client, config):
    async def run(ctx: dict[str, Any], params: ObjectInput) -> dict[str, Any]:
        public = await client.public_api(config.resolve_environment(params.environment))
        return await public.get_object(params.collection, params.object_id)

    return run


def _create_or_update_object(client, config):
    async def run(ctx: dict[str, Any], params: SetObjectInput) -> dict[str, Any]:
        public = await client.public_api(config.resolve_environment(params.environment))
        return await public.set_object(params.collection, params.object_id, params.properties)

    return run


def _delete_object(client, config):
    async def run(ctx: dict[str, Any], params: ObjectInput) -> dict[str, Any]:
        public = await client.public_api(config.resolve_environment(params.environment))
        await public.delete_object(params.collection, params.object_id)
        return {"deleted": True, "collection": params.collection, "object_id": params.object_id}

    return run


def _subscribe_users_to_object(client, config):
    async def run(ctx: dict[str, Any], params: ObjectSubscriptionsInput) -> Any:
        recipients = _subscribers(params, config, "subscribe_users_to_object")
        public = await client.public_api(config.resolve_environment(params.environment))
        return await public.add_subscriptions(params.collection, params.object_id, recipients)

    return run


def _unsubscribe_users_from_object(client, config):
    async def run(ctx: dict[str, Any], params: ObjectSubscriptionsInput) -> Any:
        recipients = _subscribers(params, config, "unsubscribe_users_from_object")
        public = await client.public_api(config.resolve_environment(params.environment))
        return await public.delete_subscriptions(params.collection, params.object_id, recipients)

    return run


list_objects = ToolDescriptor(
    method="list_objects",
    name="List objects",
    description="List all objects in a single collection.",
    parameters=ListObjectsInput,
    execute=_list_objects,
)

get_object = ToolDescriptor(
    method="get_object",
    name="Get object",
    description="""
    Retrieves a single object by its collection and ID, including its custom properties.
    """,
    parameters=ObjectInput,
    execute=_get_object,
)

create_or_update_object = ToolDescriptor(
    method="create_or_update_object",
    name="Create or update object",
    description="""
    Creates or updates an object in a collection with the given properties. Use this
    tool to model non-user recipients, like a project or a team channel.
    """,
    parameters=SetObjectInput,
    execute=_create_or_update_object,
)

delete_object = ToolDescriptor(
    method="delete_object",
    name="Delete object",
    description="Deletes an object from a collection. This cannot be undone.",
    parameters=ObjectInput,
    execute=_delete_object,
)

subscribe_users_to_object = ToolDescriptor(
    method="subscribe_users_to_object",
    name="Subscribe users to object",
    description="""
    Subscribes one or more users to an object. Subscribed users receive the
    notifications triggered for the object. When no user IDs are given, the
    current user from the config is subscribed.
    """,
    parameters=ObjectSubscriptionsInput,
    execute=_subscribe_users_to_object,
)

unsubscribe_users_from_object = ToolDescriptor(
    method="unsubscribe_users_from_object",
    name="Unsubscribe users from object",
    description="""
    Removes one or more users' subscriptions to an object. When no user IDs are
    given, the current user from the config is unsubscribed.
    """,
    parameters=ObjectSubscriptionsInput,
    execute=_unsubscribe_users_from_object,
)

TOOLS = [
    list_objects,
    get_object,
    create_or_update_object,
    delete_object,
    subscribe_users_to_object,
    unsubscribe_users_from_object,
]

PERMISSIONS = {
    "read": ["list_objects", "get_object"],
    "manage": [
        "create_or_update_object",
        "delete_object",
        "subscribe_users_to_object",
        "unsubscribe_users_from_object",
    ],
}
