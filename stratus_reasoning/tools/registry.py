"""Tool registry and dispatcher.

The dispatcher is the error boundary of the server: whatever fails below it
(argument validation, network, JSON extraction, result validation) comes back
as an error envelope carrying the exception message. Nothing is retried.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from loguru import logger
from pydantic import ValidationError as ArgumentsValidationError

from stratus_reasoning.tools import analyze, compress, count, plan, rollout, verify
from stratus_reasoning.tools.tool_types import ToolDescriptor, ToolResponse, ToolSpec
from stratus_reasoning.utils.errors import (
    InvalidArgumentsError,
    MissingArgumentsError,
    StratusException,
    ToolExecutionError,
    UnknownToolError,
)
from stratus_reasoning.utils.logging import tool_context
from stratus_reasoning.utils.schema import safe_json_serialize

if TYPE_CHECKING:
    from stratus_reasoning.models.stratus_client import StratusClient

DEFAULT_TOOLS: tuple[ToolSpec, ...] = (
    count.TOOL,
    verify.TOOL,
    analyze.TOOL,
    compress.TOOL,
    plan.TOOL,
    rollout.TOOL,
)


def describe_tools(tools: Iterable[ToolSpec] = DEFAULT_TOOLS) -> list[ToolDescriptor]:
    """Descriptors for the given tools, in order. Needs no client."""
    return [tool.descriptor for tool in tools]


def _describe_arguments_error(error: ArgumentsValidationError) -> str:
    problems = [
        f"{'.'.join(str(part) for part in item['loc']) or 'arguments'}: {item['msg']}"
        for item in error.errors()
    ]
    return "Invalid arguments: " + "; ".join(problems)


class ToolDispatcher:
    """Routes named tool invocations to their handlers.

    Example:
        dispatcher = ToolDispatcher(StratusClient(credentials))
        response = await dispatcher.invoke(
            "stratus_count", {"text": "strawberry", "pattern": "r"}
        )
        print(response.is_error, response.text)

    """

    def __init__(self, client: StratusClient, tools: Iterable[ToolSpec] = DEFAULT_TOOLS) -> None:
        self.client = client
        self._tools: dict[str, ToolSpec] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            self._tools[tool.name] = tool

    def list_tools(self) -> list[ToolDescriptor]:
        """Tool descriptors in registration order."""
        return describe_tools(self._tools.values())

    def get(self, name: str) -> ToolSpec:
        if name not in self._tools:
            raise UnknownToolError(f"Unknown tool: {name}")
        return self._tools[name]

    async def invoke(self, name: str, arguments: Mapping[str, Any] | None) -> ToolResponse:
        """Run a tool and wrap its outcome in an envelope. Never raises."""
        with tool_context(name):
            try:
                result = await self._run(name, arguments)
            except StratusException as e:
                logger.warning(f"Tool {name} failed: {e}")
                error = ToolExecutionError(name, str(e), {"type": type(e).__name__})
                return ToolResponse(text=error.to_mcp_error(), is_error=True)
            except Exception as e:
                logger.exception(f"Unexpected error in tool {name}")
                error = ToolExecutionError(name, str(e), {"type": type(e).__name__})
                return ToolResponse(text=error.to_mcp_error(), is_error=True)

        return ToolResponse(text=safe_json_serialize(result))

    async def _run(self, name: str, arguments: Mapping[str, Any] | None) -> Any:
        tool = self.get(name)
        if not arguments:
            raise MissingArgumentsError("No arguments provided")

        try:
            parsed = tool.arguments.model_validate(dict(arguments))
        except ArgumentsValidationError as e:
            raise InvalidArgumentsError(_describe_arguments_error(e)) from e

        logger.info(f"Dispatching {name}")
        return await tool.handler(self.client, parsed)
