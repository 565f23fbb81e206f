"""Framework adapters.

Available adapters:
- openai: Chat Completions function tools
- mcp: Model Context Protocol server (and the `local-mcp` CLI)
"""

__all__ = ["openai", "mcp"]
