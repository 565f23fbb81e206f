"""Toolkit exceptions.

Registry, permission and pattern errors are configuration mistakes: they are
raised at resolution time and never retried. API failures live in
`knock_tools.api.exceptions`.
"""


class KnockToolkitError(Exception):
    """Base exception for the toolkit."""

    pass


class ConfigurationError(KnockToolkitError):
    """Missing or invalid caller configuration (e.g. no service token)."""

    pass


class NoPatternProvidedError(KnockToolkitError):
    """A tool pattern was required but empty."""

    def __init__(self):
        super().__init__("No pattern provided")


class CategoryNotFoundError(KnockToolkitError):
    """Tool category is not registered."""

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Tool category {category} not found")


class ToolNotFoundError(KnockToolkitError):
    """Tool is not registered (pattern is `category.method` or a bare method)."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"Tool {pattern} not found")


class InvalidPermissionGrantError(KnockToolkitError):
    """Permission grant has the wrong shape."""

    pass


class DuplicateToolError(KnockToolkitError):
    """Two tools share a method name."""

    def __init__(self, method: str, category: str, existing_category: str):
        self.method = method
        super().__init__(
            f"Tool {method} in category {category} is already registered in {existing_category}"
        )


class RegistryIntegrityError(KnockToolkitError):
    """A permission bucket references a method missing from its category."""

    pass


class DeferredCallNotFoundError(KnockToolkitError):
    """Resume requested for a method that was never wrapped for human input."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"No deferred tool registered for method {method}")


class ToolValidationError(KnockToolkitError):
    """Tool input failed schema validation."""

    def __init__(self, method: str, errors: list[str]):
        self.method = method
        self.errors = errors
        super().__init__(f"Invalid input for {method}: {'; '.join(errors)}")
