"""Workflows as tools.

Synthesizes one trigger tool per workflow from live account data, so an agent
can call `trigger_order_shipped_workflow` instead of the generic
`trigger_workflow`. When a workflow declares `trigger_data_json_schema`, that
schema is embedded in the tool's parameters and enforced on `data` with
jsonschema.
"""

import re
from typing import TYPE_CHECKING, Any

from jsonschema import SchemaError
from jsonschema.validators import validator_for
from pydantic import Field, create_model, field_validator

from knock_obs.logging import get_logger
from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import WorkflowTriggerInput
from knock_tools.utils import response_field

if TYPE_CHECKING:
    from knock_config.models import Config
    from knock_tools.api.client import KnockClient

logger = get_logger(__name__)

DATA_DESCRIPTION = "The data to pass to the workflow."


def workflow_tool_method(workflow_key: str) -> str:
    """`order-shipped.v2` -> `trigger_order_shipped_v2_workflow`."""
    return f"trigger_{re.sub(r'[^A-Za-z0-9]', '_', workflow_key)}_workflow"


def _model_name(workflow_key: str) -> str:
    parts = re.split(r"[^A-Za-z0-9]+", workflow_key)
    return "Trigger" + "".join(part[:1].upper() + part[1:] for part in parts) + "Input"


def _format_error(error) -> str:
    path = ".".join(str(part) for part in error.absolute_path)
    return f"{path or 'data'}: {error.message}"


def trigger_input_model(workflow: dict[str, Any]) -> type[WorkflowTriggerInput]:
    """Input model for one workflow's trigger tool.

    Without a usable trigger data schema, the generic `WorkflowTriggerInput` is
    returned and `data` accepts any object.
    """
    schema = workflow.get("trigger_data_json_schema")
    if not schema:
        return WorkflowTriggerInput

    validator_cls = validator_for(schema)
    try:
        validator_cls.check_schema(schema)
    except SchemaError as e:
        logger.warning(
            "workflow_trigger_schema_invalid", workflow_key=workflow["key"], error=e.message
        )
        return WorkflowTriggerInput

    validator = validator_cls(schema)

    def check_data(cls, value: dict[str, Any] | None) -> dict[str, Any] | None:
        errors = sorted(validator.iter_errors(value or {}), key=lambda e: list(e.absolute_path))
        if errors:
            raise ValueError("; ".join(_format_error(error) for error in errors))
        return value

    def embed_schema(field_schema: dict[str, Any]) -> None:
        field_schema.clear()
        field_schema.update(schema)
        field_schema.setdefault("description", DATA_DESCRIPTION)

    return create_model(
        _model_name(workflow["key"]),
        __base__=WorkflowTriggerInput,
        __validators__={"check_data": field_validator("data")(check_data)},
        data=(
            dict[str, Any] | None,
            Field(
                None,
                description=DATA_DESCRIPTION,
                json_schema_extra=embed_schema,
                validate_default=True,
            ),
        ),
    )


def _trigger(workflow_key: str):
    def factory(client, config):
        async def run(ctx: dict[str, Any], params: WorkflowTriggerInput) -> str:
            public = await client.public_api(config.resolve_environment(params.environment))
            recipients = params.recipients or ([config.user_id] if config.user_id else [])

            result = await public.trigger_workflow(
                workflow_key,
                recipients=[
                    r if isinstance(r, str) else r.model_dump() for r in recipients
                ],
                actor=(
                    params.actor.model_dump()
                    if params.actor is not None and not isinstance(params.actor, str)
                    else params.actor
                ),
                data=params.data,
                tenant=params.tenant or config.tenant_id,
            )
            return response_field(result, "workflow_run_id", "trigger_workflow")

        return run

    return factory


def workflow_as_tool(workflow: dict[str, Any]) -> ToolDescriptor:
    """Build a trigger tool for a single workflow."""
    key = workflow["key"]
    name = workflow.get("name") or key

    description = (
        f"Triggers the {name} workflow. Use this tool when you're asked to notify, "
        f"send, or trigger for {name} or {key}."
    )
    if workflow.get("description"):
        description += (
            "\n\nAdditional information to consider on when to use this tool: "
            f"{workflow['description']}"
        )
    description += (
        "\n\nReturns the workflow run ID, which can be used to lookup messages "
        "produced by the workflow."
    )

    return ToolDescriptor(
        method=workflow_tool_method(key),
        name=f"Trigger {name} workflow",
        description=description,
        parameters=trigger_input_model(workflow),
        execute=_trigger(key),
    )


async def create_workflow_tools(
    client: "KnockClient",
    config: "Config",
    keys: list[str] | None = None,
) -> list[ToolDescriptor]:
    """
    Create a trigger tool for each workflow in the config's environment.

    Args:
        client: Management client used to list workflows
        config: Caller config (environment)
        keys: Only include these workflow keys; every workflow when None

    Returns:
        Descriptors in the order the listing returned the workflows
    """
    environment = config.resolve_environment()
    wanted = set(keys) if keys is not None else None

    tools = []
    seen = set()
    async for workflow in client.list_workflows(environment):
        if wanted is not None and workflow["key"] not in wanted:
            continue
        seen.add(workflow["key"])
        tools.append(workflow_as_tool(workflow))

    if wanted is not None and wanted - seen:
        logger.warning(
            "workflow_keys_not_found",
            environment=environment,
            keys=sorted(wanted - seen),
        )

    logger.debug("workflow_tools_created", environment=environment, count=len(tools))
    return tools
