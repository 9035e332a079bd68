"""Custom exceptions for the stateless server."""

from typing import Any

from mcp.types import INTERNAL_ERROR, ErrorData

RESOURCE_NOT_FOUND = -32002


class StatelessServerError(Exception):
    """Base error for the stateless server."""


class ToolError(StatelessServerError):
    """Error in tool operations."""


class UnknownToolError(ToolError):
    """A tool was called that is not registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class PromptError(StatelessServerError):
    """Error in prompt operations."""


class ResourceError(StatelessServerError):
    """Error in resource operations.

    Defaults to INTERNAL_ERROR (-32603); lookups of unknown URIs use
    RESOURCE_NOT_FOUND (-32002).
    """

    error: ErrorData

    def __init__(self, message: str, code: int = INTERNAL_ERROR, data: Any | None = None):
        super().__init__(message)
        self.error = ErrorData(code=code, message=message, data=data)


class StreamCancelledError(ToolError):
    """A notification stream was stopped before reaching its target count."""

    def __init__(self, emitted: int, target: int):
        super().__init__(f"Notification stream cancelled after {emitted} of {target} notifications")
        self.emitted = emitted
        self.target = target
