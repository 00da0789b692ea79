"""Type definitions for the tool registry.

Separated from the registry so that tool modules can declare themselves
without importing the dispatcher.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from stratus_reasoning.models.stratus_client import StratusClient


class ToolArguments(BaseModel):
    """Base class for tool argument models."""

    model_config = ConfigDict(extra="ignore", frozen=True)


@dataclass(frozen=True)
class ToolDescriptor:
    """What the host transport is told about a tool."""

    name: str
    description: str
    input_schema: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the MCP tool-list shape."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(frozen=True)
class ToolSpec:
    """A registered tool: its arguments model and its handler."""

    name: str
    description: str
    arguments: type[ToolArguments]
    handler: Callable[[StratusClient, Any], Awaitable[Any]]

    @property
    def descriptor(self) -> ToolDescriptor:
        return ToolDescriptor(
            name=self.name,
            description=self.description,
            input_schema=self.arguments.model_json_schema(),
        )


@dataclass(frozen=True)
class ToolResponse:
    """Envelope returned by the dispatcher for every invocation."""

    text: str
    is_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to the MCP call-tool result shape."""
        data: dict[str, Any] = {"content": [{"type": "text", "text": self.text}]}
        if self.is_error:
            data["isError"] = True
        return data
