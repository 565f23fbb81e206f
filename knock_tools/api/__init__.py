"""Knock API clients.

Usage:
    from knock_config import Config
    from knock_tools.api import create_knock_client

    client = create_knock_client(Config(service_token="sk_..."))
    public = await client.public_api("development")
    await public.get_user("user_1")
"""

from .client import ClientCache, KnockClient, KnockPublicClient, create_knock_client
from .exceptions import (
    KnockAPIError,
    KnockAuthError,
    KnockNotFoundError,
    KnockRateLimitError,
    KnockValidationError,
)

__all__ = [
    # Clients
    "ClientCache",
    "KnockClient",
    "KnockPublicClient",
    "create_knock_client",
    # Exceptions
    "KnockAPIError",
    "KnockAuthError",
    "KnockNotFoundError",
    "KnockRateLimitError",
    "KnockValidationError",
]
