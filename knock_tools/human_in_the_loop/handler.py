"""Trigger approval workflows and parse the interactions that answer them."""

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from knock_obs.logging import get_logger

from .types import (
    DEFERRED_TOOL_CALL_TYPE,
    MESSAGE_INTERACTED,
    DeferredToolCall,
    DeferredToolCallConfig,
    DeferredToolCallInteractionResult,
    DeferredToolCallWorkflowData,
    InteractionContext,
    KnockOutboundWebhookEvent,
)

if TYPE_CHECKING:
    from knock_config.models import Config
    from knock_tools.api.client import KnockClient

logger = get_logger(__name__)


async def trigger_human_in_the_loop_workflow(
    client: "KnockClient",
    config: "Config",
    tool_call: DeferredToolCall,
    hitl_config: DeferredToolCallConfig,
) -> dict[str, Any]:
    """
    Trigger the approval workflow carrying a deferred tool call.

    Returns:
        The trigger response, carrying `workflow_run_id`
    """
    public = await client.public_api(config.resolve_environment())
    data = DeferredToolCallWorkflowData(tool_call=tool_call, metadata=hitl_config.metadata)

    return await public.trigger_workflow(
        hitl_config.workflow,
        recipients=hitl_config.recipients,
        actor=hitl_config.actor,
        data=data.model_dump(mode="json"),
        tenant=hitl_config.tenant,
    )


def handle_message_interaction(
    event: KnockOutboundWebhookEvent | dict[str, Any],
) -> DeferredToolCallInteractionResult | None:
    """
    Parse an outbound webhook event into a deferred tool call interaction.

    Returns None unless the event is a `message.interacted` event for a
    message whose data is a deferred tool call.

    Example:
        result = handle_message_interaction(request_json)
        if result and result.interaction["action"] == "approve":
            await toolkit.resume_tool_call(result)
    """
    if not isinstance(event, KnockOutboundWebhookEvent):
        try:
            event = KnockOutboundWebhookEvent.model_validate(event)
        except ValidationError as e:
            logger.warning("webhook_event_malformed", error=str(e))
            return None

    if event.type != MESSAGE_INTERACTED:
        return None

    message = event.data
    message_data = message.get("data")
    if not isinstance(message_data, dict):
        return None
    if message_data.get("type") != DEFERRED_TOOL_CALL_TYPE or not message_data.get("tool_call"):
        return None

    try:
        workflow_data = DeferredToolCallWorkflowData.model_validate(message_data)
    except ValidationError as e:
        logger.warning("deferred_tool_call_malformed", message_id=message.get("id"), error=str(e))
        return None

    source = message.get("source")
    return DeferredToolCallInteractionResult(
        workflow=source.get("key") if isinstance(source, dict) else None,
        interaction=event.event_data,
        tool_call=workflow_data.tool_call,
        metadata=workflow_data.metadata,
        context=InteractionContext(
            message_id=message.get("id"),
            channel_id=message.get("channel_id"),
            timestamp=event.created_at,
        ),
    )
