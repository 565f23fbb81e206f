"""Pytest fixtures."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import BaseModel, Field

from knock_config.models import ToolkitConfig
from knock_tools.base import ToolDescriptor
from knock_tools.catalog import build_default_registry
from knock_tools.registry import CategoryRegistry


async def aiter_entries(entries):
    for entry in entries:
        yield entry


WORKFLOWS = [
    {
        "key": "order-shipped",
        "name": "Order shipped",
        "description": "Sent when an order leaves the warehouse",
        "categories": ["orders"],
        "trigger_data_json_schema": {
            "type": "object",
            "properties": {"order_id": {"type": "string"}},
            "required": ["order_id"],
        },
    },
    {"key": "welcome", "name": "Welcome", "description": None, "categories": []},
    {"key": "password.reset-v2", "name": "Password reset"},
]


@pytest.fixture
def config():
    """Caller config acting as a default user."""
    return ToolkitConfig(
        service_token="sk_test_123",
        user_id="user_1",
        tenant_id="tenant_1",
        environment="development",
    )


@pytest.fixture
def mock_public():
    """Public API client; every method is an AsyncMock."""
    public = AsyncMock()
    public.trigger_workflow = AsyncMock(return_value={"workflow_run_id": "run_123"})
    return public


@pytest.fixture
def mock_client(mock_public):
    """Management client with canned listings."""
    client = MagicMock()
    client.public_api = AsyncMock(return_value=mock_public)
    client.list_workflows = MagicMock(side_effect=lambda environment: aiter_entries(WORKFLOWS))
    client.list_channels = MagicMock(
        side_effect=lambda: aiter_entries(
            [
                {"key": "sms-twilio", "name": "Twilio", "type": "sms", "provider": "twilio"},
                {"key": "postmark", "name": "Postmark", "type": "email", "provider": "postmark"},
            ]
        )
    )
    return client


class UserLookupInput(BaseModel):
    user_id: str = Field(..., description="(string): The user to look up.")


def make_tool(method: str, result: Any = None, parameters: type[BaseModel] | None = None):
    """Descriptor whose executor records calls and returns `result`."""
    calls = []

    def factory(client, config):
        async def run(ctx, params):
            calls.append((ctx, params))
            return result if result is not None else {"method": method}

        return run

    tool = ToolDescriptor(
        method=method,
        name=method.replace("_", " ").capitalize(),
        description=f"Runs {method}",
        parameters=parameters or UserLookupInput,
        execute=factory,
    )
    return tool, calls


@pytest.fixture
def small_registry():
    """Two categories with overlapping buckets."""
    registry = CategoryRegistry()
    get_user, _ = make_tool("get_user")
    upsert_user, _ = make_tool("upsert_user")
    list_users, _ = make_tool("list_users")
    get_tenant, _ = make_tool("get_tenant")
    registry.register_category(
        "users",
        [get_user, upsert_user, list_users],
        {
            "read": ["get_user", "list_users"],
            "manage": ["upsert_user", "get_user"],
        },
    )
    registry.register_category("tenants", [get_tenant], {"read": ["get_tenant"]})
    return registry


@pytest.fixture
def registry():
    """Full catalog registry."""
    return build_default_registry()


@pytest.fixture
def tool_factory():
    """`make_tool(method, result=None, parameters=None) -> (descriptor, calls)`."""
    return make_tool


@pytest.fixture
def workflows():
    return WORKFLOWS
