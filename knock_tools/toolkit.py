"""Knock Toolkit.

The framework-neutral entry point: resolves a permission grant into tools
bound to one client and config, and routes calls (including deferred,
human-approved calls) to them. Framework adapters build on this.
"""

from collections.abc import Iterable
from typing import Any

from knock_config.models import ToolkitConfig
from knock_config.settings import Settings
from knock_obs.logging import get_logger
from knock_tools.api.client import ClientCache, KnockClient, create_knock_client
from knock_tools.base import BoundExecutor, ToolDescriptor
from knock_tools.catalog import build_default_registry
from knock_tools.exceptions import CategoryNotFoundError, ToolNotFoundError
from knock_tools.human_in_the_loop import (
    DeferredToolCall,
    DeferredToolCallConfig,
    DeferredToolCallInteractionResult,
    HumanInTheLoop,
)
from knock_tools.permissions import PermissionResolver
from knock_tools.registry import CategoryRegistry
from knock_tools.utils import get_tool_map

logger = get_logger(__name__)


class KnockToolkit:
    """Permission-scoped tools bound to one client and config."""

    def __init__(
        self,
        client: KnockClient,
        config: ToolkitConfig,
        registry: CategoryRegistry,
        tools_by_category: dict[str, list[ToolDescriptor]],
    ):
        self.client = client
        self.config = config
        self.registry = registry
        self.human_in_the_loop = HumanInTheLoop()
        self._tools = {category: list(tools) for category, tools in tools_by_category.items()}

    def get_all_tools(self) -> list[ToolDescriptor]:
        """Every resolved tool, category by category."""
        return [tool for tools in self._tools.values() for tool in tools]

    def get_tools(self, category: str) -> list[ToolDescriptor]:
        """Resolved tools of one category; empty when the category was not granted.

        Raises:
            CategoryNotFoundError: Category is not registered
        """
        if category not in self.registry:
            raise CategoryNotFoundError(category)
        return list(self._tools.get(category, []))

    def get_tool_map(self) -> dict[str, ToolDescriptor]:
        return get_tool_map(self.get_all_tools())

    def bind(self, method: str) -> BoundExecutor:
        """Bound executor for a resolved tool.

        Raises:
            ToolNotFoundError: The method was not granted
        """
        tool = self.get_tool_map().get(method)
        if tool is None:
            raise ToolNotFoundError(method)
        return tool.bind_execute(self.client, self.config)

    async def execute(
        self,
        method: str,
        args: dict[str, Any] | str | None = None,
        ctx: dict[str, Any] | None = None,
    ) -> Any:
        return await self.bind(method)(args, ctx)

    def require_human_input(
        self,
        tools: Iterable[ToolDescriptor],
        hitl_config: DeferredToolCallConfig | dict[str, Any],
    ) -> list[ToolDescriptor]:
        """Defer the given tools behind an approval workflow.

        The toolkit's own tool lists are updated in place, so later calls
        through `bind`/`execute` or an adapter go through approval too.
        """
        if not isinstance(hitl_config, DeferredToolCallConfig):
            hitl_config = DeferredToolCallConfig.model_validate(hitl_config)

        wrapped = get_tool_map(self.human_in_the_loop.wrap(tools, hitl_config))
        for category, tools_in_category in self._tools.items():
            self._tools[category] = [wrapped.get(tool.method, tool) for tool in tools_in_category]

        logger.info(
            "human_input_required",
            methods=sorted(wrapped),
            workflow=hitl_config.workflow,
        )
        return list(wrapped.values())

    async def resume_tool_call(
        self, tool_call: DeferredToolCall | DeferredToolCallInteractionResult
    ) -> dict[str, Any]:
        """Run a deferred call once approved. See `HumanInTheLoop.resume`."""
        return await self.human_in_the_loop.resume(self.client, self.config, tool_call)


async def create_toolkit(
    config: ToolkitConfig,
    registry: CategoryRegistry | None = None,
    client: KnockClient | None = None,
    settings: Settings | None = None,
    client_cache: ClientCache | None = None,
) -> KnockToolkit:
    """
    Build a toolkit for a caller.

    Args:
        config: Caller config with the permission grant
        registry: Category registry, the full catalog when omitted
        client: Management client, built from config/settings when omitted
        settings: Environment settings (strict permissions, endpoints)
        client_cache: Public API client cache shared across toolkits

    Raises:
        ConfigurationError: No service token available
        InvalidPermissionGrantError: Malformed grant
        CategoryNotFoundError: Unknown grant category (strict mode only)

    Example:
        toolkit = await create_toolkit(
            ToolkitConfig(
                service_token="sk_...",
                user_id="user_123",
                permissions={"users": {"read": True}},
            )
        )
        await toolkit.execute("get_user", {})
    """
    settings = settings or Settings()
    registry = registry or build_default_registry()
    client = client or create_knock_client(config, settings=settings, client_cache=client_cache)

    resolver = PermissionResolver(registry, strict=settings.KNOCK_STRICT_PERMISSIONS)
    tools_by_category = await resolver.resolve(client, config)

    logger.info(
        "toolkit_created",
        categories=list(tools_by_category),
        tools=sum(len(tools) for tools in tools_by_category.values()),
    )
    return KnockToolkit(client, config, registry, tools_by_category)
