"""Knock tool catalog.

One module per category, each exporting `TOOLS` (declaration order) and
`PERMISSIONS` (bucket -> methods).
"""

from knock_tools.registry import CategoryRegistry

from . import (
    broadcasts,
    channels,
    commits,
    documentation,
    email_layouts,
    environments,
    guides,
    message_types,
    messages,
    objects,
    partials,
    tenants,
    users,
    workflows,
)

CATEGORIES = {
    "broadcasts": broadcasts,
    "channels": channels,
    "commits": commits,
    "documentation": documentation,
    "email_layouts": email_layouts,
    "environments": environments,
    "guides": guides,
    "messages": messages,
    "message_types": message_types,
    "objects": objects,
    "partials": partials,
    "tenants": tenants,
    "users": users,
    "workflows": workflows,
}


def build_default_registry() -> CategoryRegistry:
    """Registry of every catalog category, with per-workflow trigger synthesis."""
    from knock_tools.workflows_as_tools import create_workflow_tools

    registry = CategoryRegistry()
    for category, module in CATEGORIES.items():
        synthesizers = {"trigger": create_workflow_tools} if category == "workflows" else None
        registry.register_category(category, module.TOOLS, module.PERMISSIONS, synthesizers)
    return registry


__all__ = ["CATEGORIES", "build_default_registry"]
