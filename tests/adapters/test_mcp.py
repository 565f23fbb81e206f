"""Unit tests for the MCP adapter.

Handlers are exercised directly; no stdio transport is started.
"""

import json
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

import mcp.types as types
import pytest

from knock_tools.adapters.mcp import KnockMcpServer, create_knock_mcp_server
from knock_tools.adapters.mcp.local_server import build_parser
from knock_tools.exceptions import ToolNotFoundError
from knock_tools.filters import filter_tools_by_patterns


@pytest.mark.asyncio
async def test_list_tools_exposes_schema(tool_factory, mock_client, config):
    tool, _ = tool_factory("get_user")
    server = KnockMcpServer(mock_client, config, [tool])

    [listed] = await server.list_tools()

    assert listed.name == "get_user"
    assert listed.description == "Runs get_user"
    assert listed.inputSchema["required"] == ["user_id"]


@pytest.mark.asyncio
async def test_call_tool_returns_json_text(tool_factory, mock_client, config):
    tool, calls = tool_factory("get_user", result={"id": "u1"})
    server = KnockMcpServer(mock_client, config, [tool])

    [content] = await server.call_tool("get_user", {"user_id": "u1"}, tool_call_id="7")

    assert content.type == "text"
    assert json.loads(content.text) == {"id": "u1"}
    assert calls[0][0] == {"tool_call_id": "7"}


@pytest.mark.asyncio
async def test_call_tool_invalid_arguments(tool_factory, mock_client, config):
    tool, calls = tool_factory("get_user")
    server = KnockMcpServer(mock_client, config, [tool])

    [content] = await server.call_tool("get_user", {})

    assert json.loads(content.text)["error"]["type"] == "ToolValidationError"
    assert calls == []


@pytest.mark.asyncio
async def test_call_unknown_tool(tool_factory, mock_client, config):
    tool, _ = tool_factory("get_user")
    server = KnockMcpServer(mock_client, config, [tool])

    with pytest.raises(ToolNotFoundError):
        await server.call_tool("delete_user", {})


@pytest.mark.asyncio
async def test_listing_workflows_adds_trigger_tools(registry, mock_client, config):
    tools = filter_tools_by_patterns(registry, ["workflows.list_workflows"])

    server = await create_knock_mcp_server(mock_client, config, tools)

    assert list(server.tools) == [
        "list_workflows",
        "trigger_order_shipped_workflow",
        "trigger_welcome_workflow",
        "trigger_password_reset_v2_workflow",
    ]


@pytest.mark.asyncio
async def test_without_list_workflows_no_listing(registry, mock_client, config):
    tools = filter_tools_by_patterns(registry, ["users.*"])

    server = await create_knock_mcp_server(mock_client, config, tools)

    assert "get_user" in server.tools
    mock_client.list_workflows.assert_not_called()


def test_parser_collects_tool_patterns():
    parser = build_parser(["users", "workflows"])

    args = parser.parse_args(
        ["--tools", "users.*", "-t", "workflows.trigger_workflow", "-e", "production", "-u", "u1"]
    )

    assert args.tools == ["users.*", "workflows.trigger_workflow"]
    assert args.environment == "production"
    assert args.user_id == "u1"
    assert args.service_token is None


def test_parser_without_tools():
    args = build_parser([]).parse_args(["--service-token", "sk_test"])

    assert args.tools is None
    assert args.service_token == "sk_test"


def test_handlers_registered_on_sdk_server(tool_factory, mock_client, config):
    tool, _ = tool_factory("get_user")
    server = KnockMcpServer(mock_client, config, [tool])

    assert types.ListToolsRequest in server.server.request_handlers
    assert types.CallToolRequest in server.server.request_handlers


@pytest.mark.asyncio
async def test_run_stdio_sets_up_logging_before_serving(tool_factory, mock_client, config):
    tool, _ = tool_factory("get_user")
    server = KnockMcpServer(mock_client, config, [tool])

    @asynccontextmanager
    async def fake_stdio_server():
        yield "read", "write"

    with (
        patch("knock_tools.adapters.mcp.server.ensure_logging") as ensure_logging,
        patch("knock_tools.adapters.mcp.server.stdio_server", fake_stdio_server),
        patch.object(server.server, "run", AsyncMock()) as run,
    ):
        await server.run_stdio()

    ensure_logging.assert_called_once_with()
    assert run.await_args.args[:2] == ("read", "write")
