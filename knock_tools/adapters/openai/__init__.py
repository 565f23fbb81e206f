"""OpenAI adapter."""

from .converter import tool_to_chat_completion_tool
from .toolkit import KnockOpenAIToolkit, create_knock_toolkit

__all__ = ["KnockOpenAIToolkit", "create_knock_toolkit", "tool_to_chat_completion_tool"]
