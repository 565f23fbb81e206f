"""Knock Agent Toolkit.

Tool descriptors, category registry, permission resolver and pattern filter
for exposing Knock to LLM agent frameworks.
"""

__version__ = "0.1.0"

from knock_tools.base import ToolDescriptor
from knock_tools.filters import filter_tools, filter_tools_by_patterns
from knock_tools.permissions import PermissionResolver
from knock_tools.registry import CategoryRegistry
from knock_tools.toolkit import KnockToolkit, create_toolkit

__all__ = [
    "CategoryRegistry",
    "KnockToolkit",
    "PermissionResolver",
    "ToolDescriptor",
    "create_toolkit",
    "filter_tools",
    "filter_tools_by_patterns",
]
