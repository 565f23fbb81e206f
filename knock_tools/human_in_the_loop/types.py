"""Human-in-the-loop data models."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

DEFERRED_TOOL_CALL_TYPE = "deferred_tool_call"
MESSAGE_INTERACTED = "message.interacted"

Recipient = str | dict[str, Any]


class DeferredToolCall(BaseModel):
    """A tool invocation postponed until a human acts on it."""

    method: str = Field(..., description="Method of the tool that was called")
    args: dict[str, Any] | None = Field(None, description="Arguments as originally supplied")
    extra: dict[str, Any] | None = Field(
        None, description="Execution options; carries the `tool_call_id` used for correlation"
    )


class DeferredToolCallConfig(BaseModel):
    """Which workflow to trigger for a deferred call, and for whom."""

    workflow: str
    recipients: list[Recipient]
    metadata: dict[str, Any] | None = Field(
        None, description="Extra data passed to the workflow as context"
    )
    tenant: str | None = None
    actor: Recipient | None = None


class DeferredToolCallWorkflowData(BaseModel):
    """The `data` payload of the approval workflow trigger."""

    type: Literal["deferred_tool_call"] = DEFERRED_TOOL_CALL_TYPE
    tool_call: DeferredToolCall
    metadata: dict[str, Any] | None = None


class KnockOutboundWebhookEvent(BaseModel):
    """Outbound webhook event. `data` is the message the event is about."""

    model_config = ConfigDict(extra="allow")

    type: str
    created_at: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    event_data: Any = None


class InteractionContext(BaseModel):
    message_id: str | None = None
    channel_id: str | None = None
    timestamp: str | None = None


class DeferredToolCallInteractionResult(BaseModel):
    """A message interaction recovered as a resumable tool call."""

    workflow: str | None
    interaction: Any = Field(None, description="Raw interaction payload, e.g. the clicked action")
    tool_call: DeferredToolCall
    metadata: dict[str, Any] | None = None
    context: InteractionContext
