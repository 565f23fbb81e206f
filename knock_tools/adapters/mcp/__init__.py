"""Model Context Protocol adapter."""

from .server import KnockMcpServer, create_knock_mcp_server

__all__ = ["KnockMcpServer", "create_knock_mcp_server"]
