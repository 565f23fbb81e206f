"""Category Registry.

Owns the static partition of tool descriptors into categories, the
per-category permission buckets, and the synthesizers that build tools from
live account data (e.g. one trigger tool per workflow).
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Protocol

from knock_obs.logging import get_logger
from knock_tools.base import ToolDescriptor
from knock_tools.exceptions import (
    CategoryNotFoundError,
    DuplicateToolError,
    RegistryIntegrityError,
)

if TYPE_CHECKING:
    from knock_config.models import Config
    from knock_tools.api.client import KnockClient

logger = get_logger(__name__)


class ToolSynthesizer(Protocol):
    """Builds descriptors for the resource keys listed in a grant."""

    async def __call__(
        self, client: "KnockClient", config: "Config", keys: list[str]
    ) -> list[ToolDescriptor]: ...


class CategoryRegistry:
    """Tool registry with category and permission-bucket lookup.

    Integrity is checked on registration: a method may only be registered
    once across all categories, and every bucket entry must name a method
    of its own category.
    """

    def __init__(self):
        self._categories: dict[str, dict[str, ToolDescriptor]] = {}
        self._buckets: dict[str, dict[str, list[str]]] = {}
        self._synthesizers: dict[tuple[str, str], ToolSynthesizer] = {}
        self._owners: dict[str, str] = {}

    def register_category(
        self,
        category: str,
        tools: Iterable[ToolDescriptor],
        permissions: Mapping[str, Sequence[str]],
        synthesizers: Mapping[str, ToolSynthesizer] | None = None,
    ) -> None:
        """Register a category, its buckets and optional bucket synthesizers.

        Raises:
            DuplicateToolError: A method is already registered
            RegistryIntegrityError: A bucket names an unknown method
        """
        if category in self._categories:
            raise RegistryIntegrityError(f"Tool category {category} is already registered")

        by_method: dict[str, ToolDescriptor] = {}
        for tool in tools:
            owner = self._owners.get(tool.method) or (category if tool.method in by_method else None)
            if owner:
                logger.error(
                    "duplicate_tool_method", method=tool.method, category=category, owner=owner
                )
                raise DuplicateToolError(tool.method, category, owner)
            by_method[tool.method] = tool

        buckets: dict[str, list[str]] = {}
        for bucket, methods in permissions.items():
            missing = [m for m in methods if m not in by_method]
            if missing:
                raise RegistryIntegrityError(
                    f"Bucket {category}.{bucket} references unknown tools: {', '.join(missing)}"
                )
            buckets[bucket] = list(dict.fromkeys(methods))

        for bucket in (synthesizers or {}):
            if bucket not in buckets:
                raise RegistryIntegrityError(
                    f"Synthesizer for {category}.{bucket} has no matching permission bucket"
                )

        self._categories[category] = by_method
        self._buckets[category] = buckets
        for method in by_method:
            self._owners[method] = category
        for bucket, synthesizer in (synthesizers or {}).items():
            self._synthesizers[(category, bucket)] = synthesizer

    def categories(self) -> list[str]:
        return list(self._categories)

    def __contains__(self, category: object) -> bool:
        return category in self._categories

    def all_descriptors(self) -> dict[str, ToolDescriptor]:
        """Every descriptor across all categories, keyed by method."""
        return {
            method: tool
            for tools in self._categories.values()
            for method, tool in tools.items()
        }

    def descriptors_for(self, category: str) -> list[ToolDescriptor]:
        """Descriptors of one category in declaration order.

        Raises:
            CategoryNotFoundError: Unknown category
        """
        return list(self._category(category).values())

    def buckets_for(self, category: str) -> dict[str, list[str]]:
        self._category(category)
        return {bucket: list(methods) for bucket, methods in self._buckets[category].items()}

    def get(self, category: str, method: str) -> ToolDescriptor | None:
        return self._category(category).get(method)

    def find(self, method: str) -> ToolDescriptor | None:
        """Look a descriptor up by method alone."""
        category = self._owners.get(method)
        return self._categories[category][method] if category else None

    def category_of(self, method: str) -> str | None:
        return self._owners.get(method)

    def synthesizer_for(self, category: str, bucket: str) -> ToolSynthesizer | None:
        return self._synthesizers.get((category, bucket))

    def _category(self, category: str) -> dict[str, ToolDescriptor]:
        try:
            return self._categories[category]
        except KeyError:
            raise CategoryNotFoundError(category) from None
