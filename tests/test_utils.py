"""Tool helper tests."""

import pytest

from knock_tools.api.exceptions import KnockAPIError
from knock_tools.exceptions import ToolValidationError
from knock_tools.utils import (
    collect,
    get_tool_map,
    maybe_hide_user_data,
    require,
    response_field,
    serialize_message_response,
)


def test_serialize_message_keeps_only_llm_fields():
    message = {
        "id": "msg_1",
        "status": "delivered",
        "engagement_statuses": ["seen"],
        "data": {"order_id": "o1"},
        "metadata": {"external_id": "x"},
        "extraField": "dropped",
        "recipient": "user_1",
    }

    assert serialize_message_response(message) == {
        "id": "msg_1",
        "status": "delivered",
        "engagement_statuses": ["seen"],
        "data": {"order_id": "o1"},
        "metadata": {"external_id": "x"},
    }


def test_hide_user_data():
    user = {"id": "user_1", "email": "jane@example.com", "name": "Jane"}

    assert maybe_hide_user_data(user, hide_user_data=True) == {"id": "user_1"}
    assert maybe_hide_user_data(user) is user


def test_get_tool_map_later_entries_win(tool_factory):
    first, _ = tool_factory("get_user")
    second, _ = tool_factory("get_user", parameters=None)
    other, _ = tool_factory("get_tenant")

    tool_map = get_tool_map([first, other, second])

    assert list(tool_map) == ["get_user", "get_tenant"]
    assert tool_map["get_user"] is second


@pytest.mark.parametrize("value", [None, ""])
def test_require_missing(value):
    with pytest.raises(ToolValidationError) as exc_info:
        require(value, "user_id", "get_user")

    assert exc_info.value.errors == ["user_id: Field required"]


def test_require_present():
    assert require("user_1", "user_id", "get_user") == "user_1"


@pytest.mark.asyncio
async def test_collect_drains_async_iterator():
    async def entries():
        for i in range(3):
            yield {"key": f"k{i}"}

    assert await collect(entries()) == [{"key": "k0"}, {"key": "k1"}, {"key": "k2"}]


def test_response_field_present():
    assert response_field({"guide": {"key": "g"}}, "guide", "upsert_guide") == {"key": "g"}


@pytest.mark.parametrize("response", [{"unexpected": 1}, None, ["guide"], "guide"])
def test_response_field_missing(response):
    with pytest.raises(KnockAPIError, match="Unexpected upsert_guide response: missing guide"):
        response_field(response, "guide", "upsert_guide")
