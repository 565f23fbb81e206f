"""Workflows tools.

List, inspect, create, schedule and trigger workflows. The `trigger` bucket
also accepts workflow keys, for which dedicated tools are synthesized
(see `knock_tools.workflows_as_tools`).
"""

from typing import Any

from knock_tools.api.exceptions import KnockValidationError
from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import (
    CreateEmailWorkflowInput,
    CreateOneOffWorkflowScheduleInput,
    EnvironmentInput,
    GetWorkflowInput,
    TriggerWorkflowInput,
    WorkflowSummary,
)
from knock_tools.utils import require, response_field


def serialize_workflow(workflow: dict[str, Any]) -> dict[str, Any]:
    """Slim a workflow down to what an LLM needs to pick and call it."""
    key = response_field(workflow, "key", "workflow")
    return WorkflowSummary(
        key=key,
        name=workflow.get("name") or key,
        description=workflow.get("description"),
        categories=workflow.get("categories"),
        trigger_data_schema=workflow.get("trigger_data_json_schema"),
    ).model_dump()


def _list_workflows(client, config):
    async def run(ctx: dict[str, Any], params: EnvironmentInput) -> list[dict[str, Any]]:
        environment = config.resolve_environment(params.environment)
        return [
            serialize_workflow(workflow) async for workflow in client.list_workflows(environment)
        ]

    return run


def _get_workflow(client, config):
    async def run(ctx: dict[str, Any], params: GetWorkflowInput) -> dict[str, Any]:
        workflow = await client.get_workflow(
            params.workflow_key, config.resolve_environment(params.environment)
        )
        return serialize_workflow(workflow)

    return run


def _trigger_workflow(client, config):
    async def run(ctx: dict[str, Any], params: TriggerWorkflowInput) -> str:
        public = await client.public_api(config.resolve_environment(params.environment))
        recipients = params.recipients or ([config.user_id] if config.user_id else [])

        result = await public.trigger_workflow(
            params.workflow_key,
            recipients=recipients,
            data=params.data,
            tenant=params.tenant or config.tenant_id,
        )
        return response_field(result, "workflow_run_id", "trigger_workflow")

    return run


def _create_rich_email_workflow(client, config):
    async def run(ctx: dict[str, Any], params: CreateEmailWorkflowInput) -> dict[str, Any]:
        email_channels = [
            channel async for channel in client.list_channels() if channel.get("type") == "email"
        ]
        if not email_channels:
            raise KnockValidationError("No email channels found", status_code=422)

        workflow = {
            "name": params.name,
            "description": params.description,
            "categories": params.categories or [],
            "steps": [
                {
                    "type": "channel",
                    "channel_key": email_channels[0]["key"],
                    "template": {
                        "settings": {"layout_key": "default"},
                        "subject": params.subject,
                        "visual_blocks": params.blocks,
                    },
                    "name": "Email",
                    "ref": "email_1",
                }
            ],
        }

        result = await client.upsert_workflow(
            params.workflow_key, config.resolve_environment(params.environment), workflow
        )
        return serialize_workflow(response_field(result, "workflow", "upsert_workflow"))

    return run


def _create_one_off_workflow_schedule(client, config):
    async def run(
        ctx: dict[str, Any], params: CreateOneOffWorkflowScheduleInput
    ) -> Any:
        user_id = require(
            params.user_id or config.user_id, "user_id", "create_one_off_workflow_schedule"
        )
        public = await client.public_api(config.resolve_environment(params.environment))
        return await public.create_schedules(
            workflow=params.workflow_key,
            recipients=[user_id],
            scheduled_at=params.scheduled_at,
            data=params.data,
        )

    return run


list_workflows = ToolDescriptor(
    method="list_workflows",
    name="List workflows",
    description="""
    List all workflows available for the given environment. Returns structural
    information about the workflows, including the key, name, description,
    categories and the schema of the data the workflow expects.

    Use this tool when you need to understand which workflows are available to be called.
    """,
    parameters=EnvironmentInput,
    execute=_list_workflows,
)

get_workflow = ToolDescriptor(
    method="get_workflow",
    name="Get workflow",
    description="""
    Get a workflow by key. Returns structural information about the workflow,
    including the key, name, description, and categories.
    """,
    parameters=GetWorkflowInput,
    execute=_get_workflow,
)

trigger_workflow = ToolDescriptor(
    method="trigger_workflow",
    name="Trigger workflow",
    description="""
    Trigger a workflow for one or more recipients, which may produce one or more
    messages for each recipient depending on the workflow's steps.

    Use this tool when you need to trigger a workflow to send a notification across
    the channels configured for the workflow.

    When recipients aren't provided, the workflow will be triggered for the current
    user specified in the config.

    Returns the workflow run ID, which can be used to lookup messages produced by the workflow.
    """,
    parameters=TriggerWorkflowInput,
    execute=_trigger_workflow,
)

create_rich_email_workflow = ToolDescriptor(
    method="create_rich_email_workflow",
    name="Create rich email workflow",
    description="""
    Creates a workflow with a single step for sending an email. Use this tool when
    you're asked to create an email notification and you need to specify the
    content of the email.

    The content of the email is supplied as an array of blocks. Default to
    `markdown` blocks. Supported block types:

    - `markdown`: requires a `content` key with markdown content.
    - `html`: requires a `content` key with raw HTML. Use sparingly.
    - `image`: requires a `url` key.
    - `button_set`: requires a `buttons` array; each button has a `label`,
    an `action` and a `variant` of `solid` or `outline`.
    - `divider`: a horizontal rule.
    - `partial`: renders a shared partial by `key`, with variables in `attrs`.

    Personalize content and subject with liquid. `recipient.id`, `recipient.name`,
    `recipient.email` and `recipient.phone_number` are always available; any other
    variables are referenced under `data`, like `{{ data.variable_name }}`.

    Unless asked otherwise, write in a concise and formal style and keep the
    subject line to 8 words or less.
    """,
    parameters=CreateEmailWorkflowInput,
    execute=_create_rich_email_workflow,
)

create_one_off_workflow_schedule = ToolDescriptor(
    method="create_one_off_workflow_schedule",
    name="Create one-off workflow schedule",
    description="""
    Create a one-off workflow schedule for a user. Use this tool when you need to
    schedule the execution of a workflow for a specific user in the future, like
    to power a delayed notification.

    Schedules can accept a set of data that will be passed to the workflow trigger
    when it is executed. When the user_id is not provided, the schedule will be
    created for the current user specified in the config.
    """,
    parameters=CreateOneOffWorkflowScheduleInput,
    execute=_create_one_off_workflow_schedule,
)

TOOLS = [
    list_workflows,
    get_workflow,
    trigger_workflow,
    create_rich_email_workflow,
    create_one_off_workflow_schedule,
]

PERMISSIONS = {
    "read": ["list_workflows", "get_workflow"],
    "manage": ["create_rich_email_workflow", "create_one_off_workflow_schedule"],
    "trigger": ["trigger_workflow"],
}
