"""Shared helpers for tool execution and result shaping."""

import time
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

from knock_obs.logging import get_logger
from knock_obs.metrics import tool_execution_duration, tool_executions_total
from knock_obs.tracing import get_tracer
from knock_tools.api.exceptions import KnockAPIError
from knock_tools.exceptions import ToolValidationError

if TYPE_CHECKING:
    from knock_tools.base import ToolDescriptor

logger = get_logger(__name__)

T = TypeVar("T")

MESSAGE_FIELDS = ("id", "status", "engagement_statuses", "data", "metadata")


def serialize_message_response(message: dict[str, Any]) -> dict[str, Any]:
    """Reduce a message to the fields an LLM needs.

    Keeps exactly id, status, engagement_statuses, data and metadata.
    """
    return {field: message.get(field) for field in MESSAGE_FIELDS}


def maybe_hide_user_data(user: dict[str, Any], hide_user_data: bool = False) -> dict[str, Any]:
    if hide_user_data:
        return {"id": user.get("id")}
    return user


def get_tool_map(tools: Iterable["ToolDescriptor"]) -> dict[str, "ToolDescriptor"]:
    """Index tools by method. Later entries win on duplicate methods."""
    return {tool.method: tool for tool in tools}


async def collect(entries: Any) -> list[Any]:
    """Drain an async iterator into a list."""
    return [entry async for entry in entries]


async def safe_execute(
    fn: Callable[[], Awaitable[T]], method: str = "unknown"
) -> T | dict[str, Any]:
    """Run a tool call, turning API and input failures into a readable result.

    Returns `{"message": ..., "error": ...}` for Knock API errors, transport
    errors and invalid arguments so one failing call does not end an agent
    session. Anything else propagates.
    """
    status = "success"
    start = time.perf_counter()

    with get_tracer().start_as_current_span("tool.execute") as span:
        span.set_attribute("tool.method", method)
        try:
            return await fn()
        except ToolValidationError as e:
            status = "failure"
            logger.warning("tool_input_invalid", method=method, errors=e.errors)
            return {
                "message": f"The arguments provided to {method} were invalid: {e}",
                "error": {"type": type(e).__name__, "details": e.errors},
            }
        except KnockAPIError as e:
            status = "failure"
            logger.error(
                "tool_execution_failed", method=method, error=str(e), status_code=e.status_code
            )
            return {
                "message": f"An error occurred with the call to the Knock API: {e}",
                "error": {"type": type(e).__name__, "status_code": e.status_code},
            }
        except httpx.HTTPError as e:
            status = "failure"
            logger.error("tool_execution_failed", method=method, error=str(e))
            return {
                "message": f"An error occurred with the call to the Knock API: {e}",
                "error": {"type": type(e).__name__},
            }
        finally:
            span.set_attribute("tool.status", status)
            tool_executions_total.labels(tool_name=method, status=status).inc()
            tool_execution_duration.labels(tool_name=method).observe(time.perf_counter() - start)


def require(value: T | None, field: str, method: str) -> T:
    """Return `value`, or raise ToolValidationError when neither the call nor the config set it."""
    if value is None or value == "":
        raise ToolValidationError(method, [f"{field}: Field required"])
    return value


def response_field(response: Any, field: str, resource: str) -> Any:
    """Read a required field from an API response.

    Raises:
        KnockAPIError: The response does not have the expected shape
    """
    if not isinstance(response, dict) or field not in response:
        raise KnockAPIError(f"Unexpected {resource} response: missing {field}")
    return response[field]
