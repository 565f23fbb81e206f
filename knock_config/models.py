"""Caller configuration models.

`Config` is bound into every tool executor; `ToolkitConfig` adds the
permission grant used to decide which tools a toolkit exposes.
"""

from typing import Any

from pydantic import BaseModel, Field

from knock_config.settings import Settings

DEFAULT_ENVIRONMENT = "development"


class Config(BaseModel):
    """Per-caller configuration."""

    service_token: str | None = Field(None, description="Service token used to authenticate")
    user_id: str | None = Field(None, description="When set, calls are made as this user")
    tenant_id: str | None = Field(None, description="When set, calls are made in this tenant context")
    environment: str | None = Field(None, description="Environment slug, `development` when unset")
    hide_user_data: bool = Field(False, description="Return only user ids instead of full user objects")

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any) -> "Config":
        """Build a config from environment settings, applying explicit overrides."""
        settings = settings or Settings()
        values: dict[str, Any] = {
            "service_token": settings.KNOCK_SERVICE_TOKEN or None,
            "user_id": settings.KNOCK_USER_ID,
            "tenant_id": settings.KNOCK_TENANT_ID,
            "environment": settings.KNOCK_ENVIRONMENT,
            "hide_user_data": settings.KNOCK_HIDE_USER_DATA,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def resolve_environment(self, environment: str | None = None) -> str:
        """Explicit environment, then the configured one, then `development`."""
        return environment or self.environment or DEFAULT_ENVIRONMENT


class ToolkitConfig(Config):
    """Config plus a permission grant.

    Example:
        ToolkitConfig(
            service_token="sk_...",
            permissions={
                "users": {"read": True},
                "workflows": {"read": True, "trigger": ["order-shipped"]},
            },
        )
    """

    # Shape is checked by PermissionResolver so errors name the offending bucket.
    permissions: dict[str, Any] = Field(default_factory=dict)
