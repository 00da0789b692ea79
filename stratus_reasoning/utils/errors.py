"""Custom exceptions for the Stratus reasoning server."""

from __future__ import annotations

from typing import Any


class StratusException(Exception):
    """Base exception for the Stratus reasoning server."""

    pass


class ConfigurationMissingError(StratusException):
    """Raised when no Stratus credentials can be resolved."""

    pass


class RemoteError(StratusException):
    """Raised when the Stratus API returns a non-success status or no content."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize remote error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code, if the service answered at all.

        """
        self.status_code = status_code
        super().__init__(message)


class ParseError(StratusException):
    """Raised when no JSON object can be extracted from a model response."""

    pass


class ValidationError(StratusException):
    """Raised when a model response lacks a required field or has the wrong type."""

    pass


class UnknownToolError(StratusException):
    """Raised when a tool name is not registered."""

    pass


class MissingArgumentsError(StratusException):
    """Raised when a tool is invoked without arguments."""

    pass


class InvalidArgumentsError(StratusException):
    """Raised when tool arguments do not match the tool's input schema."""

    pass


class ToolExecutionError(Exception):
    """Raised when tool execution fails in MCP context.

    Provides structured error information that can be returned
    to the LLM client in a parseable format.
    """

    def __init__(
        self,
        tool_name: str,
        error_message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize tool execution error.

        Args:
            tool_name: Name of the tool that failed.
            error_message: Human-readable error message.
            details: Optional dictionary with additional error details.

        """
        self.tool_name = tool_name
        self.error_message = error_message
        self.details = details or {}
        super().__init__(f"Tool {tool_name} failed: {error_message}")

    def to_mcp_error(self) -> str:
        """Convert to the text carried by an error envelope."""
        return f"Error: {self.error_message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": True,
            "tool": self.tool_name,
            "message": self.error_message,
            "details": self.details,
        }
