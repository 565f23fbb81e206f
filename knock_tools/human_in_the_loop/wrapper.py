"""Deferred execution wrapper.

`HumanInTheLoop.wrap()` returns copies of descriptors whose executor triggers
an approval workflow instead of running the tool. The originals are kept in a
side-table keyed by method; `resume()` runs them once a human has answered.
"""

import uuid
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from knock_obs.logging import get_logger
from knock_obs.metrics import deferred_tool_calls_total
from knock_tools.base import ToolDescriptor, to_json
from knock_tools.exceptions import DeferredCallNotFoundError

from .handler import trigger_human_in_the_loop_workflow
from .types import DeferredToolCall, DeferredToolCallConfig, DeferredToolCallInteractionResult

if TYPE_CHECKING:
    from knock_config.models import Config
    from knock_tools.api.client import KnockClient

logger = get_logger(__name__)

DEFERRED_NOTICE = """

This tool requires human approval. Calling it sends an approval request and
returns a `pending` status; the result is delivered later. Do not call the
tool again for the same request and do not treat the pending status as an
error. Tell the user that the request is awaiting approval."""


class HumanInTheLoop:
    """Side-table of wrapped tools, with the defer and resume paths."""

    def __init__(self):
        self._originals: dict[str, ToolDescriptor] = {}
        self._wrapped: dict[str, list[ToolDescriptor]] = {}

    def __contains__(self, method: object) -> bool:
        return method in self._originals

    def wrap(
        self, tools: Iterable[ToolDescriptor], hitl_config: DeferredToolCallConfig
    ) -> list[ToolDescriptor]:
        """Wrap tools so that calling them requests approval first.

        Passing a copy this side-table returned back in rewraps its stored
        original, so wrappers never nest. Any other descriptor replaces the
        original for its method.
        """
        wrapped = []
        for tool in tools:
            if self._is_wrapper(tool):
                original = self._originals[tool.method]
            else:
                original = self._originals[tool.method] = tool
                self._wrapped[tool.method] = []

            deferred = original.model_copy(
                update={
                    "description": original.description + DEFERRED_NOTICE,
                    "execute": self._defer(original.method, hitl_config),
                }
            )
            self._wrapped[tool.method].append(deferred)
            wrapped.append(deferred)
            logger.debug("tool_wrapped_for_approval", method=tool.method, workflow=hitl_config.workflow)
        return wrapped

    def forget(self, method: str) -> None:
        """Drop a wrapped method. Later resumes for it raise DeferredCallNotFoundError."""
        self._originals.pop(method, None)
        self._wrapped.pop(method, None)

    def _is_wrapper(self, tool: ToolDescriptor) -> bool:
        return any(deferred is tool for deferred in self._wrapped.get(tool.method, []))

    def _defer(self, method: str, hitl_config: DeferredToolCallConfig):
        def factory(client: "KnockClient", config: "Config"):
            async def run(ctx: dict[str, Any], params) -> dict[str, Any]:
                tool_call_id = ctx.get("tool_call_id") or uuid.uuid4().hex
                tool_call = DeferredToolCall(
                    method=method,
                    args=params.model_dump(mode="json", exclude_unset=True),
                    extra={**ctx, "tool_call_id": tool_call_id},
                )

                result = await trigger_human_in_the_loop_workflow(
                    client, config, tool_call, hitl_config
                )

                deferred_tool_calls_total.labels(method=method, status="pending").inc()
                logger.info(
                    "deferred_tool_call_triggered",
                    method=method,
                    tool_call_id=tool_call_id,
                    workflow=hitl_config.workflow,
                    workflow_run_id=result.get("workflow_run_id"),
                )

                return {
                    "status": "pending",
                    "tool_call_id": tool_call_id,
                    "method": method,
                    "workflow_run_id": result.get("workflow_run_id"),
                    "message": (
                        f"The call to {method} is awaiting human approval. "
                        "The result will be provided once it has been reviewed."
                    ),
                }

            return run

        return factory

    async def resume(
        self,
        client: "KnockClient",
        config: "Config",
        tool_call: DeferredToolCall | DeferredToolCallInteractionResult,
    ) -> dict[str, Any]:
        """
        Run the original tool for a deferred call.

        Raises:
            DeferredCallNotFoundError: The method was never wrapped
        """
        if isinstance(tool_call, DeferredToolCallInteractionResult):
            tool_call = tool_call.tool_call

        original = self._originals.get(tool_call.method)
        if original is None:
            raise DeferredCallNotFoundError(tool_call.method)

        extra = dict(tool_call.extra or {})
        run = original.bind_execute(client, config)
        result = await run(tool_call.args or {}, extra)

        deferred_tool_calls_total.labels(method=tool_call.method, status="completed").inc()
        logger.info(
            "deferred_tool_call_completed",
            method=tool_call.method,
            tool_call_id=extra.get("tool_call_id"),
        )

        return {
            "status": "completed",
            "tool_call_id": extra.get("tool_call_id"),
            "method": tool_call.method,
            "result": result,
        }


def deferred_tool_call_to_tool_message(
    tool_call: DeferredToolCall, result: Any
) -> dict[str, Any]:
    """Render a resumed call as an OpenAI `role=tool` message."""
    return {
        "role": "tool",
        "tool_call_id": (tool_call.extra or {}).get("tool_call_id"),
        "content": to_json(result),
    }
