"""Stratus reasoning tools and their dispatcher."""

from .registry import DEFAULT_TOOLS, ToolDispatcher
from .tool_types import ToolArguments, ToolDescriptor, ToolResponse, ToolSpec

__all__ = [
    "DEFAULT_TOOLS",
    "ToolArguments",
    "ToolDescriptor",
    "ToolDispatcher",
    "ToolResponse",
    "ToolSpec",
]
