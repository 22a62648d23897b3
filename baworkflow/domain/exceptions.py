"""
Domain-specific exception hierarchy for the BA workflow toolkit.
"""


class ToolkitError(Exception):
    """Base class for all application-level errors."""

    code = "toolkit_error"


class InvalidArgumentError(ToolkitError):
    """Raised when a tool receives a malformed or out-of-range argument."""

    code = "invalid_argument"


class NotFoundError(ToolkitError):
    """Raised when a referenced value or entity does not exist."""

    code = "not_found"


class UnsupportedOperationError(ToolkitError):
    """Raised when a tool or operation name is not recognised."""

    code = "unsupported"
