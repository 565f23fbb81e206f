"""Knock API exceptions.

Custom exception hierarchy for Knock API errors.
"""


class KnockAPIError(Exception):
    """Base exception for Knock API failures."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class KnockAuthError(KnockAPIError):
    """Invalid service token / API key or insufficient permissions."""

    pass


class KnockNotFoundError(KnockAPIError):
    """Resource not found (404 response)."""

    pass


class KnockRateLimitError(KnockAPIError):
    """Rate limit exceeded (429 response)."""

    pass


class KnockValidationError(KnockAPIError):
    """Invalid request parameters (400/422 response)."""

    pass
