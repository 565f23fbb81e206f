"""Toolkit Tests."""

import pytest

from knock_config.models import ToolkitConfig
from knock_config.settings import Settings
from knock_tools.exceptions import CategoryNotFoundError, ToolNotFoundError
from knock_tools.human_in_the_loop import DeferredToolCall
from knock_tools.toolkit import create_toolkit


@pytest.fixture
def settings():
    return Settings(_env_file=None)


def grant(permissions, **kwargs):
    return ToolkitConfig(
        service_token="sk_test", user_id="user_1", permissions=permissions, **kwargs
    )


@pytest.mark.asyncio
async def test_tools_follow_grant(mock_client, settings):
    toolkit = await create_toolkit(
        grant({"users": {"read": True}, "workflows": {"trigger": ["order-shipped"]}}),
        client=mock_client,
        settings=settings,
    )

    assert [tool.method for tool in toolkit.get_all_tools()] == [
        "get_user",
        "get_user_messages",
        "get_user_preferences",
        "trigger_order_shipped_workflow",
    ]
    assert [tool.method for tool in toolkit.get_tools("workflows")] == [
        "trigger_order_shipped_workflow"
    ]
    assert toolkit.get_tools("tenants") == []


@pytest.mark.asyncio
async def test_unregistered_category(mock_client, settings):
    toolkit = await create_toolkit(grant({}), client=mock_client, settings=settings)

    with pytest.raises(CategoryNotFoundError):
        toolkit.get_tools("billing")


@pytest.mark.asyncio
async def test_strict_settings_reject_unknown_categories(mock_client):
    with pytest.raises(CategoryNotFoundError):
        await create_toolkit(
            grant({"billing": {"read": True}}),
            client=mock_client,
            settings=Settings(_env_file=None, KNOCK_STRICT_PERMISSIONS=True),
        )


@pytest.mark.asyncio
async def test_execute_granted_tool(mock_client, mock_public, settings):
    mock_public.get_user.return_value = {"id": "user_1", "email": "jane@example.com"}
    toolkit = await create_toolkit(
        grant({"users": {"read": True}}), client=mock_client, settings=settings
    )

    result = await toolkit.execute("get_user", {})

    assert result == {"id": "user_1", "email": "jane@example.com"}
    mock_public.get_user.assert_awaited_once_with("user_1")


@pytest.mark.asyncio
async def test_execute_ungranted_tool(mock_client, settings):
    toolkit = await create_toolkit(
        grant({"users": {"read": True}}), client=mock_client, settings=settings
    )

    with pytest.raises(ToolNotFoundError):
        await toolkit.execute("upsert_user", {"user_id": "u1"})


@pytest.mark.asyncio
async def test_require_human_input_replaces_tools(mock_client, mock_public, settings):
    toolkit = await create_toolkit(
        grant({"users": {"read": True}}), client=mock_client, settings=settings
    )

    wrapped = toolkit.require_human_input(
        [toolkit.get_tool_map()["get_user"]],
        {"workflow": "approve-tool-call", "recipients": ["admin_1"]},
    )

    assert [tool.method for tool in wrapped] == ["get_user"]
    assert toolkit.get_tool_map()["get_user"] is wrapped[0]

    pending = await toolkit.execute("get_user", {"user_id": "u1"}, {"tool_call_id": "call_1"})
    assert pending["status"] == "pending"
    mock_public.get_user.assert_not_awaited()

    mock_public.get_user.return_value = {"id": "u1"}
    completed = await toolkit.resume_tool_call(
        DeferredToolCall(method="get_user", args={"user_id": "u1"}, extra={"tool_call_id": "call_1"})
    )

    assert completed["status"] == "completed"
    assert completed["tool_call_id"] == "call_1"
    assert completed["result"] == {"id": "u1"}
    mock_public.get_user.assert_awaited_once_with("u1")
