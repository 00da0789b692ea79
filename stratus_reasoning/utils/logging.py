"""Logging setup for the Stratus reasoning server.

All output goes to stderr: with the stdio transport, stdout carries the MCP
protocol stream and must stay clean.

Provides:
- Human-readable text format for development, JSON lines for production
- Log level and format from LOG_LEVEL / LOG_FORMAT
- Tool-name context injection for per-invocation records
- Redaction of Stratus and grader API keys
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from enum import Enum
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from loguru import Record

_tool_name: ContextVar[str | None] = ContextVar("tool_name", default=None)


class LogFormat(str, Enum):
    """Supported log output formats."""

    JSON = "json"
    TEXT = "text"


class LogLevel(str, Enum):
    """Supported log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# Compared after lowercasing and stripping "_" / "-"
SENSITIVE_KEYS = frozenset(
    {
        "apikey",
        "password",
        "secret",
        "token",
        "authorization",
        "credential",
    }
)


def redact_sensitive(data: dict[str, Any], depth: int = 0) -> dict[str, Any]:
    """Recursively redact sensitive values from a dictionary.

    Matches both snake_case (``openai_api_key``) and the camelCase keys of the
    persisted config file (``anthropicApiKey``).

    Args:
        data: Dictionary to redact.
        depth: Current recursion depth (prevents infinite recursion).

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]".

    """
    if depth > 10:
        return data

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower().replace("_", "").replace("-", "")
        if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = redact_sensitive(value, depth + 1)
        elif isinstance(value, list):
            result[key] = [
                redact_sensitive(item, depth + 1) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value
    return result


def _inject_context(record: Record) -> None:
    """Loguru patcher: attach the active tool name to every record."""
    if tool_name := _tool_name.get():
        record["extra"]["tool"] = tool_name


def text_format(record: Record) -> str:
    """Format log record as human-readable text.

    Args:
        record: Loguru record dictionary.

    Returns:
        Loguru format string for console output.

    """
    # The tool name is caller input: reference it, never splice it into the template
    context = "[tool={extra[tool]}] " if record["extra"].get("tool") else ""
    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        f"{context}"
        "<level>{message}</level>\n{exception}"
    )


def configure_logging(
    level: LogLevel | str | None = None,
    log_format: LogFormat | str | None = None,
) -> None:
    """Configure loguru with a single stderr handler.

    Reads configuration from environment variables if not specified:
    - LOG_LEVEL: Minimum log level (DEBUG, INFO, WARNING, ERROR)
    - LOG_FORMAT: Output format (json, text)

    Args:
        level: Minimum log level (default: from env or INFO).
        log_format: Output format (default: from env or TEXT).

    """
    resolved_level = LogLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())
    resolved_format = LogFormat((log_format or os.getenv("LOG_FORMAT", "text")).lower())

    logger.remove()
    logger.configure(patcher=_inject_context)

    if resolved_format == LogFormat.JSON:
        logger.add(
            sys.stderr,
            format="{message}",
            level=resolved_level.value,
            serialize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format=text_format,
            level=resolved_level.value,
            colorize=True,
        )


@contextmanager
def tool_context(tool_name: str) -> Iterator[None]:
    """Scope log records to a tool invocation.

    Example:
        with tool_context("stratus_count"):
            logger.info("Dispatching")  # tagged tool=stratus_count

    """
    token = _tool_name.set(tool_name)
    try:
        yield
    finally:
        _tool_name.reset(token)


def get_tool_name() -> str | None:
    """Get the tool name bound to the current context, if any."""
    return _tool_name.get()
