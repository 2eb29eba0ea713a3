"""Exception hierarchy for ffweb.

All package errors derive from FfwebError so callers (and the CLI) can
handle them with a single except clause.
"""

from __future__ import annotations


class FfwebError(Exception):
    """Base exception for all ffweb errors."""


class SchemaError(FfwebError):
    """Raised when a wire payload does not match the expected schema.

    Attributes:
        message: Human-readable summary.
        errors: Field-level error details from validation.
    """

    def __init__(self, message: str, errors: list[dict] | None = None) -> None:
        self.message = message
        self.errors = errors or []
        super().__init__(message)


class InvalidTransitionError(FfwebError):
    """Raised when a task action is not legal from the task's current status.

    Attributes:
        status: The status the task was in.
        action: The action that was attempted.
    """

    def __init__(self, status: str, action: str) -> None:
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} a task that is {status}")


class ApiError(FfwebError):
    """Raised when the backend answers with a non-2xx status.

    Attributes:
        status: HTTP status code.
        message: Error message from the response body, or the reason phrase.
        code: Machine-readable error code, if the backend sent one.
    """

    def __init__(self, status: int, message: str, code: str | None = None) -> None:
        self.status = status
        self.message = message
        self.code = code
        super().__init__(f"HTTP {status}: {message}")


class ApiConnectionError(FfwebError):
    """Raised when the backend cannot be reached."""


class BuiltinPresetError(FfwebError):
    """Raised when an edit or delete targets a built-in preset."""

    def __init__(self, preset_id: str, operation: str) -> None:
        self.preset_id = preset_id
        self.operation = operation
        super().__init__(f"Cannot {operation} built-in preset {preset_id}")


class NotFoundError(FfwebError):
    """Raised when a task or preset ID does not exist."""

    def __init__(self, kind: str, item_id: str) -> None:
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"{kind.capitalize()} not found: {item_id}")


class ConfigError(FfwebError):
    """Raised when configuration files or values are invalid."""
