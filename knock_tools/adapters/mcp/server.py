"""Knock MCP server.

Exposes descriptors through the MCP SDK's low-level server: each tool is
listed with its method, description and JSON Schema, and every call returns
the JSON-serialized result as text content.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from knock_obs.logging import ensure_logging, get_logger
from knock_tools import __version__
from knock_tools.base import ToolDescriptor, to_json
from knock_tools.catalog import build_default_registry
from knock_tools.exceptions import ToolNotFoundError
from knock_tools.utils import get_tool_map
from knock_tools.workflows_as_tools import create_workflow_tools

if TYPE_CHECKING:
    from knock_config.models import Config
    from knock_tools.api.client import KnockClient

logger = get_logger(__name__)

SERVER_NAME = "Knock"


class KnockMcpServer:
    """MCP server over a fixed set of descriptors bound to one client and config."""

    def __init__(self, client: "KnockClient", config: "Config", tools: Iterable[ToolDescriptor]):
        self.client = client
        self.config = config
        self.tools = get_tool_map(tools)
        self._bound = {
            method: tool.bind_execute(client, config) for method, tool in self.tools.items()
        }

        self.server: Server = Server(SERVER_NAME, version=__version__)
        self._register_handlers()

    def _register_handlers(self) -> None:
        @self.server.list_tools()
        async def handle_list_tools() -> list[types.Tool]:
            return await self.list_tools()

        @self.server.call_tool()
        async def handle_call_tool(
            name: str, arguments: dict[str, Any] | None
        ) -> list[types.TextContent]:
            request_id = self.server.request_context.request_id
            return await self.call_tool(name, arguments, tool_call_id=str(request_id))

    async def list_tools(self) -> list[types.Tool]:
        return [
            types.Tool(
                name=tool.method,
                description=tool.description,
                inputSchema=tool.json_schema(),
            )
            for tool in self.tools.values()
        ]

    async def call_tool(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
        tool_call_id: str | None = None,
    ) -> list[types.TextContent]:
        """
        Execute a tool.

        Raises:
            ToolNotFoundError: No tool with that method is served
        """
        bound = self._bound.get(name)
        if bound is None:
            raise ToolNotFoundError(name)

        ctx = {"tool_call_id": tool_call_id} if tool_call_id else {}
        result = await bound(arguments or {}, ctx)
        return [types.TextContent(type="text", text=to_json(result))]

    async def run_stdio(self) -> None:
        """Serve over stdin/stdout until the client disconnects.

        Logging is sent to stderr when the host has not configured it.
        """
        ensure_logging()
        logger.info("mcp_server_starting", transport="stdio", tools=len(self.tools))
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream, write_stream, self.server.create_initialization_options()
            )


async def create_knock_mcp_server(
    client: "KnockClient",
    config: "Config",
    tools: list[ToolDescriptor] | None = None,
) -> KnockMcpServer:
    """
    Create a Knock MCP server.

    Args:
        client: Management client
        config: Caller config
        tools: Tools to serve; every catalog tool when None

    When `list_workflows` is served, a trigger tool for every workflow in the
    config's environment is added as well.
    """
    base_tools = (
        list(tools) if tools is not None else list(build_default_registry().all_descriptors().values())
    )

    if any(tool.method == "list_workflows" for tool in base_tools):
        base_tools += await create_workflow_tools(client, config)

    return KnockMcpServer(client, config, base_tools)
