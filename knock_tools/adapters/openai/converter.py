"""Descriptor -> OpenAI Chat Completions function tool."""

from typing import Any

from knock_tools.base import ToolDescriptor


def tool_to_chat_completion_tool(tool: ToolDescriptor) -> dict[str, Any]:
    """
    Convert a descriptor to a `ChatCompletionToolParam`-shaped dict.

    Example:
        {
            "type": "function",
            "function": {
                "name": "get_user",
                "description": "Retrieves the complete user object...",
                "parameters": {"type": "object", "properties": {...}},
            },
        }
    """
    return {
        "type": "function",
        "function": {
            "name": tool.method,
            "description": tool.description,
            "parameters": tool.json_schema(),
        },
    }
