"""Knock tool catalog Pydantic schemas.

Input schemas for every catalog tool, and the slimmed-down output shapes
returned to the LLM. Field descriptions are surfaced verbatim to the model.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

ENVIRONMENT_HINT = "Defaults to `development`."


class RecipientReference(BaseModel):
    """A reference to an object in a collection."""

    id: str
    collection: str


Recipient = str | RecipientReference


class EnvironmentInput(BaseModel):
    """Input schema for listing tools scoped to an environment."""

    environment: str | None = Field(
        None, description=f"(string): The environment to list from. {ENVIRONMENT_HINT}"
    )


# ============================================================================
# USERS TOOL SCHEMAS
# ============================================================================


class GetUserInput(BaseModel):
    """Input schema for get_user."""

    environment: str | None = Field(
        None, description=f"(string): The environment to retrieve the user from. {ENVIRONMENT_HINT}"
    )
    user_id: str | None = Field(None, description="(string): The userId of the User to retrieve.")


class UpsertUserInput(BaseModel):
    """Input schema for upsert_user."""

    environment: str | None = Field(
        None,
        description=f"(string): The environment to create or update the user in. {ENVIRONMENT_HINT}",
    )
    user_id: str | None = Field(None, description="(string): The userId of the User to update.")
    email: str | None = Field(None, description="(string): The email of the User to update.")
    name: str | None = Field(None, description="(string): The name of the User to update.")
    phone_number: str | None = Field(
        None, description="(string): The phone number of the User to update."
    )
    custom_properties: dict[str, Any] | None = Field(
        None, description="(object): A dictionary of custom properties to update for the User."
    )


class GetUserPreferencesInput(BaseModel):
    """Input schema for get_user_preferences."""

    environment: str | None = Field(
        None,
        description=f"(string): The environment to retrieve the user preferences from. {ENVIRONMENT_HINT}",
    )
    user_id: str | None = Field(
        None, description="(string): The userId of the User to retrieve Preferences for."
    )
    preference_set_id: str = Field(
        "default", description="(string): The preference set to retrieve. Defaults to `default`."
    )


class SetUserPreferencesInput(BaseModel):
    """Input schema for set_user_preferences."""

    environment: str | None = Field(
        None, description=f"(string): The environment to set the user preferences in. {ENVIRONMENT_HINT}"
    )
    user_id: str | None = Field(
        None, description="(string): The userId of the User to update preferences for."
    )
    workflows: dict[str, Any] | None = Field(
        None,
        description=(
            "(object): The workflows to update where the key is the workflow key, and the value "
            "is an object that contains a `channel_types` key with a boolean value for each channel type."
        ),
    )
    categories: dict[str, Any] | None = Field(
        None,
        description=(
            "(object): The categories to update where the key is the category key, and the value "
            "is an object that contains a `channel_types` key with a boolean value for each channel type."
        ),
    )
    channel_types: dict[str, bool] | None = Field(
        None,
        description="(object): The channel types to update where the key is the channel type and the value is a boolean.",
    )


class GetUserMessagesInput(BaseModel):
    """Input schema for get_user_messages."""

    environment: str | None = Field(
        None, description=f"(string): The environment to retrieve the user messages from. {ENVIRONMENT_HINT}"
    )
    user_id: str | None = Field(
        None, description="(string): The userId of the User to retrieve messages for."
    )
    workflow_run_id: str | None = Field(
        None,
        description="(string): Only return messages produced by this workflow run.",
    )


# ============================================================================
# WORKFLOWS TOOL SCHEMAS
# ============================================================================


class GetWorkflowInput(BaseModel):
    """Input schema for get_workflow."""

    environment: str | None = Field(
        None, description=f"(string): The environment to get the workflow for. {ENVIRONMENT_HINT}"
    )
    workflow_key: str = Field(..., description="(string): The key of the workflow to get.")


class TriggerWorkflowInput(BaseModel):
    """Input schema for trigger_workflow."""

    environment: str | None = Field(
        None, description=f"(string): The environment to trigger the workflow in. {ENVIRONMENT_HINT}"
    )
    workflow_key: str = Field(..., description="(string): The key of the workflow to trigger.")
    recipients: list[str] | None = Field(
        None,
        description="(array): The recipients to trigger the workflow for. This is an array of user IDs.",
    )
    data: dict[str, Any] | None = Field(None, description="(object): Data to pass to the workflow.")
    tenant: str | None = Field(None, description="(string): The tenant ID to trigger the workflow for.")


class CreateEmailWorkflowInput(BaseModel):
    """Input schema for create_rich_email_workflow."""

    environment: str | None = Field(
        None, description=f"(string): The environment to create the workflow in. {ENVIRONMENT_HINT}"
    )
    workflow_key: str = Field(
        ..., description="(string): The key of the workflow. Use kebab-case with no spaces."
    )
    name: str = Field(..., description="(string): The name of the workflow.")
    description: str | None = Field(None, description="(string): The description of the workflow.")
    categories: list[str] | None = Field(
        None, description="(array): The categories to add to the workflow."
    )
    blocks: list[dict[str, Any]] = Field(..., description="(array): The blocks to add to the email.")
    subject: str = Field(..., description="(string): The subject of the email.")


class CreateOneOffWorkflowScheduleInput(BaseModel):
    """Input schema for create_one_off_workflow_schedule."""

    environment: str | None = Field(
        None, description=f"(string): The environment to create the schedule in. {ENVIRONMENT_HINT}"
    )
    workflow_key: str = Field(..., description="(string): The key of the workflow to schedule.")
    user_id: str | None = Field(
        None, description="(string): The userId of the user to schedule the workflow for."
    )
    scheduled_at: str = Field(
        ...,
        description="(string): The date and time to schedule the workflow for. Must be in ISO 8601 format.",
    )
    data: dict[str, Any] | None = Field(None, description="(object): Data to pass to the workflow.")


class WorkflowTriggerInput(BaseModel):
    """Base input schema for tools synthesized from a single workflow."""

    environment: str | None = Field(
        None, description=f"(string): The environment to trigger the workflow in. {ENVIRONMENT_HINT}"
    )
    actor: Recipient | None = Field(
        None, description="An optional actor to trigger the workflow with."
    )
    recipients: list[Recipient] | None = Field(
        None,
        description="An optional array of recipients to trigger the workflow with. A recipient can be a user ID or a reference to an object in a collection.",
    )
    data: dict[str, Any] | None = Field(None, description="The data to pass to the workflow.")
    tenant: str | None = Field(None, description="The tenant ID to trigger the workflow for.")


class WorkflowSummary(BaseModel):
    """A slimmed down version of the Workflow resource."""

    key: str
    name: str
    description: str | None = None
    categories: list[str] | None = None
    trigger_data_schema: dict[str, Any] | None = None


# ============================================================================
# TENANTS TOOL SCHEMAS
# ============================================================================


class TenantInput(BaseModel):
    """Input schema for get_tenant and delete_tenant."""

    environment: str | None = Field(None, description=f"(string): The environment. {ENVIRONMENT_HINT}")
    tenant_id: str = Field(..., description="(string): The ID of the tenant.")


class SetTenantInput(TenantInput):
    """Input schema for set_tenant."""

    name: str | None = Field(None, description="(string): The name of the tenant.")
    properties: dict[str, Any] | None = Field(
        None, description="(object): The properties to set on the tenant."
    )


# ============================================================================
# MESSAGES TOOL SCHEMAS
# ============================================================================


class MessageInput(BaseModel):
    """Input schema for the message lookup tools."""

    environment: str | None = Field(
        None, description=f"(string): The environment to retrieve the message from. {ENVIRONMENT_HINT}"
    )
    message_id: str = Field(..., description="(string): The ID of the message.")


# ============================================================================
# OBJECTS TOOL SCHEMAS
# ============================================================================


class ListObjectsInput(BaseModel):
    """Input schema for list_objects."""

    environment: str | None = Field(None, description=f"(string): The environment. {ENVIRONMENT_HINT}")
    collection: str = Field(..., description="(string): The collection to list objects from.")


class ObjectInput(ListObjectsInput):
    """Input schema for get_object and delete_object."""

    collection: str = Field(..., description="(string): The collection the object belongs to.")
    object_id: str = Field(..., description="(string): The ID of the object.")


class SetObjectInput(ObjectInput):
    """Input schema for create_or_update_object."""

    properties: dict[str, Any] | None = Field(
        None, description="(object): The properties to set on the object."
    )


class ObjectSubscriptionsInput(ObjectInput):
    """Input schema for subscribe/unsubscribe tools."""

    user_ids: list[str] | None = Field(
        None,
        description="(array): The IDs of the users to (un)subscribe. If not provided, the current user is used.",
    )


# ============================================================================
# CHANNELS / ENVIRONMENTS / PARTIALS TOOL SCHEMAS
# ============================================================================


class ChannelSummary(BaseModel):
    """A slimmed down version of the Channel resource."""

    key: str
    name: str
    type: str
    provider: str | None = None


class EnvironmentSummary(BaseModel):
    """A slimmed down version of the Environment resource."""

    slug: str
    name: str


class PartialSummary(BaseModel):
    """A slimmed down version of the Partial resource."""

    key: str
    type: str
    name: str
    description: str | None = None


# ============================================================================
# COMMITS TOOL SCHEMAS
# ============================================================================


class ListCommitsInput(BaseModel):
    """Input schema for list_commits."""

    environment: str | None = Field(
        None, description=f"(string): The environment to list commits for. {ENVIRONMENT_HINT}"
    )
    promoted: bool = Field(
        False, description="(boolean): Whether to only return promoted commits. Defaults to `false`."
    )


class CommitAllChangesInput(BaseModel):
    """Input schema for commit_all_changes."""

    environment: str | None = Field(
        None, description=f"(string): The environment to commit all changes to. {ENVIRONMENT_HINT}"
    )
    message: str | None = Field(None, description="(string): The message to include in the commit.")


class PromoteAllCommitsInput(BaseModel):
    """Input schema for promote_all_commits."""

    to_environment: str = Field(..., description="(string): The environment to promote all commits to.")


# ============================================================================
# DOCUMENTATION TOOL SCHEMAS
# ============================================================================


class SearchDocumentationInput(BaseModel):
    """Input schema for search_documentation."""

    query: str = Field(..., description="The query to search the documentation for")


# ============================================================================
# MESSAGE TYPES TOOL SCHEMAS
# ============================================================================


class MessageTypeField(BaseModel):
    key: str = Field(..., description="(string): The key of the field.")
    type: str = Field(
        ...,
        description="(string): One of `text`, `textarea`, `button`, `markdown`, `select`, `multi_select`, `image`.",
    )
    label: str = Field(..., description="(string): The label of the field.")
    settings: dict[str, Any] | None = Field(None, description="(object): The settings of the field.")


class MessageTypeVariant(BaseModel):
    key: str = Field(..., description="(string): The key of the variant. One variant MUST be `default`.")
    name: str = Field(..., description="(string): The name of the variant.")
    fields: list[MessageTypeField] = Field(..., description="(array): The fields of the variant.")


class UpsertMessageTypeInput(BaseModel):
    """Input schema for upsert_message_type."""

    environment: str | None = Field(None, description=f"(string): The environment. {ENVIRONMENT_HINT}")
    message_type_key: str = Field(..., description="(string): The key of the message type.")
    name: str = Field(..., description="(string): The name of the message type.")
    description: str | None = Field(None, description="(string): The description of the message type.")
    preview: str | None = Field(
        None, description="(string): HTML preview shared across variants. Supports liquid."
    )
    variants: list[MessageTypeVariant] = Field(..., description="(array): The variants of the message type.")


# ============================================================================
# BROADCASTS TOOL SCHEMAS
# ============================================================================


class BroadcastInput(BaseModel):
    """Input schema for get/cancel broadcast."""

    environment: str | None = Field(None, description=f"(string): The environment. {ENVIRONMENT_HINT}")
    broadcast_key: str = Field(..., description="(string): The key of the broadcast.")


class BroadcastSettings(BaseModel):
    override_preferences: bool | None = None
    is_commercial: bool | None = None


class UpsertBroadcastInput(BroadcastInput):
    """Input schema for upsert_broadcast."""

    broadcast_key: str = Field(
        ...,
        description="(string): The key of the broadcast to create/update. Use kebab-case with no spaces or special characters.",
    )
    name: str = Field(..., description="(string): The name of the broadcast.")
    description: str | None = Field(None, description="(string): The description of the broadcast.")
    categories: list[str] | None = Field(None, description="(array): The categories to add to the broadcast.")
    target_audience_key: str | None = Field(
        None, description="(string): The key of the audience to target for this broadcast."
    )
    steps: list[dict[str, Any]] = Field(
        default_factory=list,
        description="(array): The steps in the broadcast. Broadcasts only support channel, branch, and delay steps.",
    )
    settings: BroadcastSettings | None = Field(None, description="(object): Broadcast settings.")


class SendBroadcastInput(BroadcastInput):
    """Input schema for send_broadcast."""

    send_at: str | None = Field(
        None,
        description="(string): When to send the broadcast, in ISO 8601 UTC. Sends immediately when omitted.",
    )


class BroadcastSummary(BaseModel):
    """A slimmed down version of the Broadcast resource."""

    key: str
    name: str
    status: str | None = None
    description: str | None = None
    categories: list[str] | None = None
    steps: list[dict[str, Any]] | None = None


# ============================================================================
# GUIDES TOOL SCHEMAS
# ============================================================================


class ListGuidesInput(EnvironmentInput):
    """Input schema for list_guides."""

    page_size: int | None = Field(None, ge=1, description="(number): The number of guides per page.")


class GetGuideInput(BaseModel):
    """Input schema for get_guide."""

    environment: str | None = Field(None, description=f"(string): The environment. {ENVIRONMENT_HINT}")
    guide_key: str = Field(..., description="(string): The key of the guide to get.")
    hide_uncommitted_changes: bool | None = Field(
        None, description="(boolean): Return only the published version."
    )


class GuideStepInput(BaseModel):
    ref: str = Field("default", description="(string): The unique reference of the step.")
    schema_key: str = Field(..., description="(string): The message type key the step content conforms to.")
    schema_variant_key: str = Field("default", description="(string): The message type variant to use.")
    schema_content: dict[str, Any] = Field(
        ..., description="(object): Values for each field of the selected variant."
    )


class ActivationLocationRule(BaseModel):
    directive: Literal["allow", "block"]
    pathname: str


class UpsertGuideInput(BaseModel):
    """Input schema for upsert_guide."""

    environment: str | None = Field(None, description=f"(string): The environment. {ENVIRONMENT_HINT}")
    guide_key: str = Field(..., description="(string): The key of the guide.")
    name: str = Field(..., description="(string): The name of the guide.")
    description: str | None = Field(None, description="(string): The description of the guide.")
    channel_key: str = Field("knock-guide", description="(string): The in-app guide channel key.")
    step: GuideStepInput = Field(..., description="(object): The step to display.")
    target_property_conditions: dict[str, Any] | None = Field(
        None, description="(object): Targeting conditions using `all` (AND) and/or `any` (OR)."
    )
    activation_location_rules: list[ActivationLocationRule] | None = Field(
        None, description="(array): Where in your application the guide may be shown."
    )


class GuideStepSummary(BaseModel):
    ref: str
    name: str | None = None
    schema_key: str | None = None
    schema_variant_key: str | None = None
    schema_content: dict[str, Any] | None = None


class GuideSummary(BaseModel):
    """A slimmed down version of the Guide resource."""

    key: str
    name: str
    description: str | None = None
    type: str | None = None
    active: bool | None = None
    steps: list[GuideStepSummary] = Field(default_factory=list)
