"""Human-in-the-loop: defer tool calls until a person approves them."""

from .handler import handle_message_interaction, trigger_human_in_the_loop_workflow
from .types import (
    DeferredToolCall,
    DeferredToolCallConfig,
    DeferredToolCallInteractionResult,
    DeferredToolCallWorkflowData,
    InteractionContext,
    KnockOutboundWebhookEvent,
)
from .wrapper import HumanInTheLoop, deferred_tool_call_to_tool_message

__all__ = [
    "DeferredToolCall",
    "DeferredToolCallConfig",
    "DeferredToolCallInteractionResult",
    "DeferredToolCallWorkflowData",
    "HumanInTheLoop",
    "InteractionContext",
    "KnockOutboundWebhookEvent",
    "deferred_tool_call_to_tool_message",
    "handle_message_interaction",
    "trigger_human_in_the_loop_workflow",
]
