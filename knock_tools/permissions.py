"""Permission Resolver.

Turns a permission grant into the concrete, de-duplicated tool list for each
granted category.

Grant shape:
    {
        "users": {"read": True, "manage": False},
        "objects": {"manage": ["create_or_update_object"]},   # allow-list
        "workflows": {"trigger": ["order-shipped"]},          # resource keys
    }

Bucket values:
- True: every method in the bucket
- False / None / []: nothing (absent categories and buckets are denied)
- list of strings on a bucket with a synthesizer: resource keys; one tool is
  synthesized per key from live account data
- list of strings on any other bucket: an allow-list of that bucket's methods
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from knock_obs.logging import get_logger
from knock_tools.base import ToolDescriptor
from knock_tools.exceptions import (
    CategoryNotFoundError,
    ConfigurationError,
    InvalidPermissionGrantError,
)
from knock_tools.registry import CategoryRegistry
from knock_tools.utils import get_tool_map

if TYPE_CHECKING:
    from knock_config.models import ToolkitConfig
    from knock_tools.api.client import KnockClient

logger = get_logger(__name__)


def _grant_keys(category: str, bucket: str, value: Any) -> list[str] | None:
    """Normalize a bucket value: None means denied, [] means the whole bucket."""
    if value is None or value is False:
        return None
    if value is True:
        return []
    if isinstance(value, (list, tuple)):
        if not all(isinstance(item, str) for item in value):
            raise InvalidPermissionGrantError(
                f"Permission {category}.{bucket} must be a boolean or a list of strings"
            )
        return list(dict.fromkeys(value)) or None
    raise InvalidPermissionGrantError(
        f"Permission {category}.{bucket} must be a boolean or a list of strings, "
        f"got {type(value).__name__}"
    )


class PermissionResolver:
    """Resolves permission grants against a CategoryRegistry."""

    def __init__(self, registry: CategoryRegistry, strict: bool = False):
        """
        Args:
            registry: Registry of categories, buckets and synthesizers
            strict: Raise CategoryNotFoundError for unknown grant categories
                instead of skipping them with a warning
        """
        self.registry = registry
        self.strict = strict

    async def resolve(
        self,
        client: "KnockClient | None",
        config: "ToolkitConfig",
    ) -> dict[str, list[ToolDescriptor]]:
        """
        Resolve `config.permissions` into tools per category.

        Ordering within a category: static tools in declaration order, then
        synthesized tools in the order the account listing returned them.

        Raises:
            InvalidPermissionGrantError: Malformed grant
            CategoryNotFoundError: Unknown category (strict mode only)
            ConfigurationError: Synthesis needed but no client given
        """
        grant = config.permissions or {}
        if not isinstance(grant, Mapping):
            raise InvalidPermissionGrantError("Permissions must be a mapping of category to buckets")

        resolved: dict[str, list[ToolDescriptor]] = {}

        for category, category_grant in grant.items():
            if category not in self.registry:
                if self.strict:
                    raise CategoryNotFoundError(category)
                logger.warning("permission_category_skipped", category=category)
                continue

            static_tools, synthesis = self.resolve_category(category, category_grant or {})
            tools = list(static_tools)
            seen = {tool.method for tool in tools}

            for bucket, keys in synthesis.items():
                if client is None:
                    raise ConfigurationError(
                        f"A Knock client is required to resolve {category}.{bucket}"
                    )
                synthesizer = self.registry.synthesizer_for(category, bucket)
                for tool in await synthesizer(client, config, keys):
                    if tool.method not in seen:
                        seen.add(tool.method)
                        tools.append(tool)

            resolved[category] = tools
            logger.debug("permission_category_resolved", category=category, tools=len(tools))

        return resolved

    def resolve_category(
        self, category: str, category_grant: Any
    ) -> tuple[list[ToolDescriptor], dict[str, list[str]]]:
        """
        Resolve the static part of one category grant.

        Returns:
            (static tools in declaration order, {bucket: resource keys to synthesize})
        """
        if not isinstance(category_grant, Mapping):
            raise InvalidPermissionGrantError(
                f"Permissions for {category} must be a mapping of bucket to boolean or list"
            )

        buckets = self.registry.buckets_for(category)
        granted: set[str] = set()
        synthesis: dict[str, list[str]] = {}

        for bucket, value in category_grant.items():
            keys = _grant_keys(category, bucket, value)
            if keys is None:
                continue

            if bucket not in buckets:
                raise InvalidPermissionGrantError(f"Unknown permission {category}.{bucket}")

            if not keys:
                granted.update(buckets[bucket])
            elif self.registry.synthesizer_for(category, bucket) is not None:
                synthesis[bucket] = keys
            else:
                unknown = [key for key in keys if key not in buckets[bucket]]
                if unknown:
                    raise InvalidPermissionGrantError(
                        f"Permission {category}.{bucket} does not include: {', '.join(unknown)}"
                    )
                granted.update(keys)

        tools = [tool for tool in self.registry.descriptors_for(category) if tool.method in granted]
        return tools, synthesis

    @staticmethod
    def flatten(tools_by_category: Mapping[str, list[ToolDescriptor]]) -> dict[str, ToolDescriptor]:
        """Method-keyed index over every resolved category."""
        return get_tool_map(tool for tools in tools_by_category.values() for tool in tools)
