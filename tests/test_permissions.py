"""Permission Resolver Tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from knock_config.models import ToolkitConfig
from knock_tools.exceptions import (
    CategoryNotFoundError,
    ConfigurationError,
    InvalidPermissionGrantError,
)
from knock_tools.permissions import PermissionResolver


def grant(permissions):
    return ToolkitConfig(service_token="sk_test", user_id="user_1", permissions=permissions)


def methods(tools):
    return [tool.method for tool in tools]


async def aiter_entries(entries):
    for entry in entries:
        yield entry


class TestStaticBuckets:
    @pytest.mark.asyncio
    async def test_read_grants_only_read_bucket(self, registry):
        """{users: {read: true}} -> the users read tools, nothing from manage."""
        resolved = await PermissionResolver(registry).resolve(None, grant({"users": {"read": True}}))

        assert methods(resolved["users"]) == [
            "get_user",
            "get_user_messages",
            "get_user_preferences",
        ]
        assert "upsert_user" not in methods(resolved["users"])

    @pytest.mark.asyncio
    async def test_overlapping_buckets_union_without_duplicates(self, small_registry):
        resolved = await PermissionResolver(small_registry).resolve(
            None, grant({"users": {"read": True, "manage": True}})
        )

        assert methods(resolved["users"]) == ["get_user", "upsert_user", "list_users"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [False, None, []])
    async def test_denied_buckets_give_empty_category(self, small_registry, value):
        resolved = await PermissionResolver(small_registry).resolve(
            None, grant({"users": {"read": value, "manage": False}})
        )

        assert resolved == {"users": []}

    @pytest.mark.asyncio
    async def test_absent_categories_are_denied(self, small_registry):
        resolved = await PermissionResolver(small_registry).resolve(
            None, grant({"tenants": {"read": True}})
        )

        assert list(resolved) == ["tenants"]
        assert PermissionResolver.flatten(resolved).keys() == {"get_tenant"}

    @pytest.mark.asyncio
    async def test_none_category_grant(self, small_registry):
        resolved = await PermissionResolver(small_registry).resolve(None, grant({"users": None}))
        assert resolved == {"users": []}

    @pytest.mark.asyncio
    async def test_allow_list_selects_methods(self, small_registry):
        resolved = await PermissionResolver(small_registry).resolve(
            None, grant({"users": {"read": ["list_users"]}})
        )

        assert methods(resolved["users"]) == ["list_users"]

    @pytest.mark.asyncio
    async def test_allow_list_with_unknown_method(self, small_registry):
        with pytest.raises(InvalidPermissionGrantError, match="upsert_user"):
            await PermissionResolver(small_registry).resolve(
                None, grant({"users": {"read": ["upsert_user"]}})
            )


class TestInvalidGrants:
    @pytest.mark.asyncio
    async def test_unknown_bucket(self, small_registry):
        with pytest.raises(InvalidPermissionGrantError, match="users.admin"):
            await PermissionResolver(small_registry).resolve(
                None, grant({"users": {"admin": True}})
            )

    @pytest.mark.asyncio
    async def test_unknown_bucket_denied_is_ignored(self, small_registry):
        resolved = await PermissionResolver(small_registry).resolve(
            None, grant({"users": {"admin": False}})
        )
        assert resolved == {"users": []}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["yes", 1, {"a": True}, [1, 2]])
    async def test_bucket_value_type(self, small_registry, value):
        with pytest.raises(InvalidPermissionGrantError):
            await PermissionResolver(small_registry).resolve(
                None, grant({"users": {"read": value}})
            )

    @pytest.mark.asyncio
    async def test_category_grant_must_be_mapping(self, small_registry):
        with pytest.raises(InvalidPermissionGrantError):
            await PermissionResolver(small_registry).resolve(None, grant({"users": True}))


class TestUnknownCategory:
    @pytest.mark.asyncio
    async def test_skipped_by_default(self, small_registry):
        resolved = await PermissionResolver(small_registry).resolve(
            None, grant({"billing": {"read": True}, "tenants": {"read": True}})
        )

        assert "billing" not in resolved
        assert methods(resolved["tenants"]) == ["get_tenant"]

    @pytest.mark.asyncio
    async def test_strict_mode_raises(self, small_registry):
        with pytest.raises(CategoryNotFoundError, match="billing"):
            await PermissionResolver(small_registry, strict=True).resolve(
                None, grant({"billing": {"read": True}})
            )


class TestWorkflowSynthesis:
    @pytest.mark.asyncio
    async def test_trigger_keys_synthesize_one_tool_each(self, registry):
        """Keys [k1, k2] against a listing of {k1, k2, k3} -> exactly two tools."""
        client = MagicMock()
        client.list_workflows = MagicMock(
            side_effect=lambda environment: aiter_entries(
                [
                    {"key": "k1", "name": "K1"},
                    {"key": "k2", "name": "K2"},
                    {"key": "k3", "name": "K3"},
                ]
            )
        )

        resolved = await PermissionResolver(registry).resolve(
            client, grant({"workflows": {"trigger": ["k1", "k2"]}})
        )

        assert methods(resolved["workflows"]) == ["trigger_k1_workflow", "trigger_k2_workflow"]

    @pytest.mark.asyncio
    async def test_order_shipped_trigger(self, registry, mock_client):
        resolved = await PermissionResolver(registry).resolve(
            mock_client, grant({"workflows": {"trigger": ["order-shipped"]}})
        )

        assert methods(resolved["workflows"]) == ["trigger_order_shipped_workflow"]

    @pytest.mark.asyncio
    async def test_static_tools_precede_synthesized(self, registry, mock_client):
        resolved = await PermissionResolver(registry).resolve(
            mock_client, grant({"workflows": {"read": True, "trigger": ["welcome"]}})
        )

        assert methods(resolved["workflows"]) == [
            "list_workflows",
            "get_workflow",
            "trigger_welcome_workflow",
        ]

    @pytest.mark.asyncio
    async def test_trigger_true_grants_generic_tool_without_listing(self, registry, mock_client):
        resolved = await PermissionResolver(registry).resolve(
            mock_client, grant({"workflows": {"trigger": True}})
        )

        assert methods(resolved["workflows"]) == ["trigger_workflow"]
        mock_client.list_workflows.assert_not_called()

    @pytest.mark.asyncio
    async def test_synthesis_without_client(self, registry):
        with pytest.raises(ConfigurationError):
            await PermissionResolver(registry).resolve(
                None, grant({"workflows": {"trigger": ["welcome"]}})
            )

    @pytest.mark.asyncio
    async def test_synthesizer_receives_config_and_keys(self, small_registry, tool_factory):
        synthesized, _ = tool_factory("trigger_welcome_workflow")
        synthesizer = AsyncMock(return_value=[synthesized, synthesized])
        trigger_generic, _ = tool_factory("trigger_workflow")
        small_registry.register_category(
            "workflows",
            [trigger_generic],
            {"trigger": ["trigger_workflow"]},
            {"trigger": synthesizer},
        )
        config = grant({"workflows": {"trigger": ["welcome", "welcome"]}})
        client = MagicMock()

        resolved = await PermissionResolver(small_registry).resolve(client, config)

        synthesizer.assert_awaited_once_with(client, config, ["welcome"])
        assert methods(resolved["workflows"]) == ["trigger_welcome_workflow"]
