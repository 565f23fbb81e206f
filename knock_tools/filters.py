"""Pattern Filter.

Resolves tool-selection patterns against a registry, independent of
permissions. Used for explicit opt-in selection such as `local-mcp --tools`.

Supports:
- All: "*" or "*.*"
- Category: "users.*" or "users"
- Single tool: "users.get_user"
"""

from collections.abc import Iterable

from knock_tools.base import ToolDescriptor
from knock_tools.exceptions import CategoryNotFoundError, NoPatternProvidedError, ToolNotFoundError
from knock_tools.registry import CategoryRegistry


def filter_tools(registry: CategoryRegistry, pattern: str | None) -> list[ToolDescriptor]:
    """
    Resolve one pattern to a list of descriptors.

    Args:
        registry: Registry to resolve against
        pattern: Selection pattern

    Returns:
        Matching descriptors, in category declaration order

    Raises:
        NoPatternProvidedError: Empty or missing pattern
        CategoryNotFoundError: Category is not registered
        ToolNotFoundError: Category exists but the method does not

    Example:
        filter_tools(registry, "users.*")  # every users tool
        filter_tools(registry, "users.get_user")  # [get_user]
    """
    if not pattern:
        raise NoPatternProvidedError()

    if pattern == "*":
        return list(registry.all_descriptors().values())

    category, _, tool = pattern.partition(".")

    if category == "*" and tool == "*":
        return list(registry.all_descriptors().values())

    if category not in registry:
        raise CategoryNotFoundError(category)

    if not tool or tool == "*":
        return registry.descriptors_for(category)

    descriptor = registry.get(category, tool)
    if descriptor is None:
        raise ToolNotFoundError(pattern)

    return [descriptor]


def filter_tools_by_patterns(
    registry: CategoryRegistry, patterns: Iterable[str]
) -> list[ToolDescriptor]:
    """Concatenate the matches of several patterns. Duplicates are kept."""
    return [tool for pattern in patterns for tool in filter_tools(registry, pattern)]
