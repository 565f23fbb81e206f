"""Unit tests for the OpenAI adapter.

Tool calls are built with SimpleNamespace; no OpenAI client is involved.
"""

import json
from types import SimpleNamespace

import pytest

from knock_config.models import ToolkitConfig
from knock_config.settings import Settings
from knock_tools.adapters.openai import (
    create_knock_toolkit,
    tool_to_chat_completion_tool,
)
from knock_tools.exceptions import ToolNotFoundError
from knock_tools.human_in_the_loop import DeferredToolCall


def tool_call(call_id, name, arguments):
    return SimpleNamespace(
        id=call_id,
        type="function",
        function=SimpleNamespace(name=name, arguments=json.dumps(arguments)),
    )


def test_converter_shape(tool_factory):
    tool, _ = tool_factory("get_user")
    converted = tool_to_chat_completion_tool(tool)

    assert converted["type"] == "function"
    assert converted["function"]["name"] == "get_user"
    assert converted["function"]["description"] == "Runs get_user"
    assert converted["function"]["parameters"]["required"] == ["user_id"]


@pytest.mark.asyncio
async def test_get_tools(mock_client):
    toolkit = await create_knock_toolkit(
        ToolkitConfig(
            service_token="sk_test",
            permissions={"users": {"read": True}, "workflows": {"trigger": ["welcome"]}},
        ),
        client=mock_client,
        settings=Settings(_env_file=None),
    )

    names = [tool["function"]["name"] for tool in toolkit.get_all_tools()]
    assert names == [
        "get_user",
        "get_user_messages",
        "get_user_preferences",
        "trigger_welcome_workflow",
    ]
    assert [tool["function"]["name"] for tool in toolkit.get_tools("workflows")] == [
        "trigger_welcome_workflow"
    ]
    assert set(toolkit.get_tool_map()) == set(names)


@pytest.mark.asyncio
async def test_handle_tool_call_returns_tool_message(mock_client, mock_public):
    mock_public.get_user.return_value = {"id": "user_1", "name": "Jane"}
    toolkit = await create_knock_toolkit(
        ToolkitConfig(service_token="sk_test", permissions={"users": {"read": True}}),
        client=mock_client,
        settings=Settings(_env_file=None),
    )

    message = await toolkit.handle_tool_call(tool_call("call_1", "get_user", {"user_id": "user_1"}))

    assert message["role"] == "tool"
    assert message["tool_call_id"] == "call_1"
    assert json.loads(message["content"]) == {"id": "user_1", "name": "Jane"}


@pytest.mark.asyncio
async def test_handle_tool_calls_in_order(mock_client, mock_public):
    mock_public.get_user.return_value = {"id": "user_1"}
    toolkit = await create_knock_toolkit(
        ToolkitConfig(
            service_token="sk_test",
            user_id="user_1",
            permissions={"workflows": {"trigger": ["welcome"]}, "users": {"read": True}},
        ),
        client=mock_client,
        settings=Settings(_env_file=None),
    )
    completion = SimpleNamespace(
        choices=[
            SimpleNamespace(
                message=SimpleNamespace(
                    tool_calls=[
                        tool_call("call_1", "trigger_welcome_workflow", {}),
                        tool_call("call_2", "get_user", {}),
                    ]
                )
            )
        ]
    )

    messages = await toolkit.handle_tool_calls(completion)

    assert [m["tool_call_id"] for m in messages] == ["call_1", "call_2"]
    assert json.loads(messages[0]["content"]) == "run_123"


@pytest.mark.asyncio
async def test_no_tool_calls(mock_client):
    toolkit = await create_knock_toolkit(
        ToolkitConfig(service_token="sk_test"), client=mock_client, settings=Settings(_env_file=None)
    )
    completion = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(tool_calls=None))])

    assert await toolkit.handle_tool_calls(completion) == []


@pytest.mark.asyncio
async def test_unknown_function(mock_client):
    toolkit = await create_knock_toolkit(
        ToolkitConfig(service_token="sk_test"), client=mock_client, settings=Settings(_env_file=None)
    )

    with pytest.raises(ToolNotFoundError):
        await toolkit.handle_tool_call(tool_call("call_1", "delete_everything", {}))


@pytest.mark.asyncio
async def test_human_input_round_trip(mock_client, mock_public):
    mock_public.get_user.return_value = {"id": "user_9"}
    toolkit = await create_knock_toolkit(
        ToolkitConfig(service_token="sk_test", permissions={"users": {"read": True}}),
        client=mock_client,
        settings=Settings(_env_file=None),
    )

    wrapped = toolkit.require_human_input(
        ["get_user", "not_granted"], {"workflow": "approve-tool-call", "recipients": ["admin_1"]}
    )
    assert [tool["function"]["name"] for tool in wrapped] == ["get_user"]

    pending = await toolkit.handle_tool_call(tool_call("call_7", "get_user", {"user_id": "user_9"}))
    assert json.loads(pending["content"])["status"] == "pending"
    mock_public.get_user.assert_not_awaited()

    message = await toolkit.resume_tool_call(
        DeferredToolCall(method="get_user", args={"user_id": "user_9"}, extra={"tool_call_id": "call_7"})
    )

    assert message == {"role": "tool", "tool_call_id": "call_7", "content": '{"id": "user_9"}'}
