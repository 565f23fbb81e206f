"""Tool Descriptor.

A descriptor is pure data: method, name, description, an input schema and an
execution factory. Execution is never bound at definition time; the factory
is called with a client and a config when a toolkit is resolved, so one
descriptor serves any number of callers.
"""

import inspect
import json
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field, field_validator

from knock_tools.exceptions import ToolValidationError
from knock_tools.utils import safe_execute

if TYPE_CHECKING:
    from knock_config.models import Config
    from knock_tools.api.client import KnockClient

# run(ctx, params): ctx carries execution options such as `tool_call_id`.
Executor = Callable[[dict[str, Any], Any], Awaitable[Any]]
ExecuteFactory = Callable[["KnockClient", "Config"], Executor]
BoundExecutor = Callable[..., Awaitable[Any]]


class EmptyInput(BaseModel):
    """Input schema for tools that take no arguments."""


def _trim_lines(text: str) -> str:
    return "\n".join(line.strip() for line in text.split("\n") if line.strip())


class ToolDescriptor(BaseModel):
    """One callable capability exposed to an LLM."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str = Field(..., description="Unique machine-readable name, used as the function name")
    name: str = Field(..., description="Human-readable label")
    description: str
    parameters: type[BaseModel] = EmptyInput
    execute: Callable[..., Any] = Field(..., exclude=True, repr=False)

    @field_validator("description")
    @classmethod
    def _clean_description(cls, value: str) -> str:
        return inspect.cleandoc(value)

    @computed_field
    @property
    def full_description(self) -> str:
        """Description followed by the argument list, for prompt-style frameworks."""
        fields = self.parameters.model_fields
        if fields:
            args = "\n".join(
                f"- {key}: {field.description or ''}" for key, field in fields.items()
            )
        else:
            args = "Takes no arguments"

        return _trim_lines(
            f"Tool name:\n{self.name}\n"
            f"Description:\n{self.description}.\n"
            f"Arguments:\n{args}"
        )

    def json_schema(self) -> dict[str, Any]:
        """JSON-Schema projection of the input parameters."""
        return self.parameters.model_json_schema()

    def validate_input(self, input_data: dict[str, Any] | str | None) -> BaseModel:
        """Validate raw arguments (dict or JSON string) against the schema.

        Raises:
            ToolValidationError: Input does not match the schema
        """
        try:
            if isinstance(input_data, str):
                return self.parameters.model_validate_json(input_data or "{}")
            return self.parameters.model_validate(input_data or {})
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}"
                for err in e.errors()
            ]
            raise ToolValidationError(self.method, errors) from e

    def bind_execute(self, client: "KnockClient", config: "Config") -> BoundExecutor:
        """Bind the execution factory to a client and config.

        The returned coroutine function takes raw arguments and an optional
        ctx dict, and returns the tool result or a structured error.
        """
        run = self.execute(client, config)

        async def bound(
            input_data: dict[str, Any] | str | None = None,
            ctx: dict[str, Any] | None = None,
        ) -> Any:
            async def call() -> Any:
                params = self.validate_input(input_data)
                return await run(ctx or {}, params)

            return await safe_execute(call, method=self.method)

        return bound


def to_json(result: Any) -> str:
    """Serialize a tool result for text-only transports."""
    if isinstance(result, BaseModel):
        return result.model_dump_json()
    return json.dumps(result, default=str)
