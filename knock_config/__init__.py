"""
Knock Agent Toolkit Configuration Package.

Provides Pydantic Settings loaded from environment variables, plus the
caller-facing Config / ToolkitConfig models.
"""

from knock_config.models import Config, ToolkitConfig
from knock_config.settings import Settings

__all__ = ["Config", "Settings", "ToolkitConfig"]
