"""
Application Settings (Pydantic Settings).

Loads configuration from environment variables (.env file or system env).

The service token is the only secret. Keep it out of source control:
- Local: .env file (gitignored)
- CI / hosted agents: inject KNOCK_SERVICE_TOKEN into the process environment
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Toolkit settings loaded from environment variables.

    Values here are process-wide defaults; callers can override any of the
    per-request fields through `knock_config.models.Config`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # ========================================================================
    # KNOCK ACCOUNT
    # ========================================================================
    KNOCK_SERVICE_TOKEN: str = Field(default="", description="Knock service token (management API)")
    KNOCK_ENVIRONMENT: str = Field(default="development", description="Environment slug used when none is given")
    KNOCK_USER_ID: str | None = Field(default=None, description="Default user to act as")
    KNOCK_TENANT_ID: str | None = Field(default=None, description="Default tenant to act in")
    KNOCK_HIDE_USER_DATA: bool = Field(default=False, description="Only return user ids to the LLM")

    # ========================================================================
    # KNOCK API ENDPOINTS
    # ========================================================================
    KNOCK_API_URL: str = Field(default="https://api.knock.app/v1")
    KNOCK_CONTROL_URL: str = Field(default="https://control.knock.app/v1")
    KNOCK_DOCS_SEARCH_URL: str = Field(default="https://docs.knock.app/api/search")
    KNOCK_TIMEOUT_SECONDS: int = Field(default=30, ge=1, description="HTTP timeout for API calls")

    # ========================================================================
    # PERMISSIONS
    # ========================================================================
    KNOCK_STRICT_PERMISSIONS: bool = Field(
        default=False,
        description="Fail on unknown categories in a permission grant instead of skipping them",
    )

    # ========================================================================
    # LOGGING
    # ========================================================================
    LOG_LEVEL: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    LOG_FORMAT: str = Field(default="json", pattern="^(json|text)$")

    # ========================================================================
    # OPENTELEMETRY
    # ========================================================================
    OTEL_EXPORTER_OTLP_ENDPOINT: str = Field(default="http://localhost:4317")
    OTEL_SERVICE_NAME: str = Field(default="knock-agent-toolkit")
    OTEL_TRACES_ENABLED: bool = Field(default=False)
