"""Knock toolkit for the OpenAI Chat Completions API."""

from typing import Any

from openai.types.chat import ChatCompletion, ChatCompletionToolMessageParam

from knock_config.models import ToolkitConfig
from knock_tools.base import to_json
from knock_tools.human_in_the_loop import (
    DeferredToolCall,
    DeferredToolCallConfig,
    DeferredToolCallInteractionResult,
    deferred_tool_call_to_tool_message,
)
from knock_tools.toolkit import KnockToolkit, create_toolkit

from .converter import tool_to_chat_completion_tool


class KnockOpenAIToolkit:
    """Chat Completions view over a KnockToolkit.

    Tools are returned as function tool dicts; tool calls from a completion
    are executed and answered with `role=tool` messages.
    """

    def __init__(self, toolkit: KnockToolkit):
        self.toolkit = toolkit

    def get_all_tools(self) -> list[dict[str, Any]]:
        return [tool_to_chat_completion_tool(tool) for tool in self.toolkit.get_all_tools()]

    def get_tools(self, category: str) -> list[dict[str, Any]]:
        return [tool_to_chat_completion_tool(tool) for tool in self.toolkit.get_tools(category)]

    def get_tool_map(self) -> dict[str, dict[str, Any]]:
        return {
            method: tool_to_chat_completion_tool(tool)
            for method, tool in self.toolkit.get_tool_map().items()
        }

    async def handle_tool_call(self, tool_call: Any) -> ChatCompletionToolMessageParam:
        """
        Execute one tool call from a completion.

        Args:
            tool_call: A `ChatCompletionMessageToolCall` (anything with `id`,
                `function.name` and `function.arguments`)

        Raises:
            ToolNotFoundError: The called function is not in this toolkit
        """
        result = await self.toolkit.execute(
            tool_call.function.name,
            tool_call.function.arguments,
            {"tool_call_id": tool_call.id},
        )
        return ChatCompletionToolMessageParam(
            role="tool", tool_call_id=tool_call.id, content=to_json(result)
        )

    async def handle_tool_calls(
        self, completion: ChatCompletion
    ) -> list[ChatCompletionToolMessageParam]:
        """Execute every tool call of the first choice, in order."""
        message = completion.choices[0].message
        return [await self.handle_tool_call(tool_call) for tool_call in message.tool_calls or []]

    def require_human_input(
        self, methods: list[str], hitl_config: DeferredToolCallConfig | dict[str, Any]
    ) -> list[dict[str, Any]]:
        """Defer the named tools behind an approval workflow."""
        tool_map = self.toolkit.get_tool_map()
        wrapped = self.toolkit.require_human_input(
            [tool_map[method] for method in methods if method in tool_map], hitl_config
        )
        return [tool_to_chat_completion_tool(tool) for tool in wrapped]

    async def resume_tool_call(
        self, tool_call: DeferredToolCall | DeferredToolCallInteractionResult
    ) -> ChatCompletionToolMessageParam:
        """Run an approved call and render it as a `role=tool` message."""
        completed = await self.toolkit.resume_tool_call(tool_call)
        if isinstance(tool_call, DeferredToolCallInteractionResult):
            tool_call = tool_call.tool_call
        return deferred_tool_call_to_tool_message(tool_call, completed["result"])


async def create_knock_toolkit(config: ToolkitConfig, **kwargs: Any) -> KnockOpenAIToolkit:
    """
    Create a Knock toolkit for the OpenAI API.

    When `config.permissions["workflows"]["trigger"]` lists workflow keys, a
    trigger tool for each of those workflows is included.

    Example:
        toolkit = await create_knock_toolkit(
            ToolkitConfig(permissions={"workflows": {"read": True, "trigger": ["welcome"]}})
        )
        completion = await openai.chat.completions.create(
            model="gpt-4o", messages=messages, tools=toolkit.get_all_tools()
        )
        messages += await toolkit.handle_tool_calls(completion)
    """
    return KnockOpenAIToolkit(await create_toolkit(config, **kwargs))
