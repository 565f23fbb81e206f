"""Category Registry Tests."""

import pytest

from knock_tools.catalog import CATEGORIES
from knock_tools.exceptions import (
    CategoryNotFoundError,
    DuplicateToolError,
    RegistryIntegrityError,
)
from knock_tools.registry import CategoryRegistry


def test_register_and_retrieve_tool(small_registry):
    """Test tool registration and retrieval."""
    tool = small_registry.get("users", "get_user")

    assert tool is not None
    assert tool.method == "get_user"
    assert small_registry.find("get_tenant").method == "get_tenant"
    assert small_registry.category_of("upsert_user") == "users"


def test_descriptors_keep_declaration_order(small_registry):
    methods = [tool.method for tool in small_registry.descriptors_for("users")]
    assert methods == ["get_user", "upsert_user", "list_users"]


def test_all_descriptors_flattens_categories(small_registry):
    assert set(small_registry.all_descriptors()) == {
        "get_user",
        "upsert_user",
        "list_users",
        "get_tenant",
    }


def test_unknown_category_raises(small_registry):
    with pytest.raises(CategoryNotFoundError, match="Tool category billing not found"):
        small_registry.descriptors_for("billing")

    with pytest.raises(CategoryNotFoundError):
        small_registry.buckets_for("billing")


def test_unknown_method_lookups_return_none(small_registry):
    assert small_registry.get("users", "delete_user") is None
    assert small_registry.find("delete_user") is None
    assert small_registry.category_of("delete_user") is None


def test_duplicate_method_across_categories(small_registry, tool_factory):
    duplicate, _ = tool_factory("get_user")

    with pytest.raises(DuplicateToolError) as exc_info:
        small_registry.register_category("people", [duplicate], {"read": ["get_user"]})

    assert exc_info.value.method == "get_user"
    assert "people" not in small_registry


def test_duplicate_method_within_category(tool_factory):
    first, _ = tool_factory("get_user")
    second, _ = tool_factory("get_user")

    with pytest.raises(DuplicateToolError):
        CategoryRegistry().register_category("users", [first, second], {})


def test_bucket_must_reference_category_methods(tool_factory):
    get_user, _ = tool_factory("get_user")

    with pytest.raises(RegistryIntegrityError, match="delete_user"):
        CategoryRegistry().register_category(
            "users", [get_user], {"read": ["get_user"], "manage": ["delete_user"]}
        )


def test_synthesizer_needs_matching_bucket(tool_factory):
    get_user, _ = tool_factory("get_user")

    async def synthesize(client, config, keys):
        return []

    with pytest.raises(RegistryIntegrityError, match="users.trigger"):
        CategoryRegistry().register_category(
            "users", [get_user], {"read": ["get_user"]}, {"trigger": synthesize}
        )


def test_category_registered_twice(small_registry):
    with pytest.raises(RegistryIntegrityError):
        small_registry.register_category("tenants", [], {})


class TestDefaultRegistry:
    """The shipped catalog must satisfy the registry's integrity checks."""

    def test_every_catalog_category_registered(self, registry):
        assert registry.categories() == list(CATEGORIES)

    def test_method_count_matches_catalog(self, registry):
        expected = sum(len(module.TOOLS) for module in CATEGORIES.values())
        assert len(registry.all_descriptors()) == expected

    def test_workflows_trigger_has_synthesizer(self, registry):
        assert registry.synthesizer_for("workflows", "trigger") is not None
        assert registry.synthesizer_for("workflows", "read") is None
        assert registry.synthesizer_for("users", "trigger") is None

    def test_users_buckets(self, registry):
        assert registry.buckets_for("users") == {
            "read": ["get_user", "get_user_messages", "get_user_preferences"],
            "manage": ["upsert_user", "set_user_preferences"],
        }

    def test_every_tool_has_object_schema(self, registry):
        for tool in registry.all_descriptors().values():
            schema = tool.json_schema()
            assert schema["type"] == "object", tool.method
