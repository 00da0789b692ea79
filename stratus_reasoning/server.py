"""Stratus reasoning MCP server.

FastMCP adapter around the tool dispatcher. Tools are registered from the
dispatcher's descriptors, so the schema served to MCP clients is the one the
dispatcher validates against. Each tool forwards its raw arguments to
ToolDispatcher.invoke(); error envelopes are raised as ToolError so the
transport flags the result as an error.

Tools:
1. stratus_count    - Accurate counting
2. stratus_verify   - Mathematical verification
3. stratus_analyze  - Pattern analysis
4. stratus_compress - Long-context compression
5. stratus_plan     - Multi-step planning (LLM)
6. stratus_rollout  - Action sequence prediction (T-JEPA)

Run with: stratus-reasoning
Or: python -m stratus_reasoning.server
"""

from __future__ import annotations

import asyncio
import sys
import time
from typing import Any

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool, ToolResult
from loguru import logger

from stratus_reasoning.config import (
    Credentials,
    ServerConfig,
    get_auth_setup_message,
    load_config,
    mask_api_key,
)
from stratus_reasoning.models.stratus_client import StratusClient
from stratus_reasoning.tools.registry import ToolDispatcher, describe_tools
from stratus_reasoning.utils.errors import ConfigurationMissingError
from stratus_reasoning.utils.logging import configure_logging

# Load environment variables from .env file (for local development)
load_dotenv()

SERVER_CONFIG = ServerConfig()


mcp = FastMCP(
    name=SERVER_CONFIG.name,
    instructions="""Stratus X1 reasoning tools.

Every tool forwards to the remote Stratus X1 service; explanation fields in the
results are prefixed with "🧠 Stratus X1" to mark model-authored text.

- stratus_count(text, pattern) - exact occurrence counts
- stratus_verify(statement) - true/false with reasoning and optional proof
- stratus_analyze(data, query) - pattern extraction with insights
- stratus_compress(long_text) - summary, key points, estimated compression ratio
- stratus_plan(current_state, goal) - ordered steps with dependencies
- stratus_rollout(goal, max_steps?, actions?) - predicted action/state sequence
""",
)

# =============================================================================
# Dispatcher
# =============================================================================

_dispatcher: ToolDispatcher | None = None


def init_dispatcher(dispatcher: ToolDispatcher | None) -> None:
    """Install the dispatcher used by the MCP tools (None to reset)."""
    global _dispatcher
    _dispatcher = dispatcher


def get_dispatcher() -> ToolDispatcher:
    """Get the dispatcher, building one from resolved credentials on first use."""
    global _dispatcher
    if _dispatcher is None:
        credentials = load_config()
        if credentials is None:
            raise ConfigurationMissingError("Stratus is not configured")
        _dispatcher = ToolDispatcher(StratusClient(credentials))
    return _dispatcher


async def _dispatch(name: str, arguments: dict[str, Any]) -> str:
    response = await get_dispatcher().invoke(name, arguments)
    if response.is_error:
        raise ToolError(response.text)
    return response.text


# =============================================================================
# Tools
# =============================================================================


class DispatchedTool(Tool):
    """MCP tool that hands its raw arguments to the dispatcher."""

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        return ToolResult(content=await _dispatch(self.name, arguments))


for _descriptor in describe_tools():
    mcp.add_tool(
        DispatchedTool(
            name=_descriptor.name,
            description=_descriptor.description,
            parameters=_descriptor.input_schema,
        )
    )


# =============================================================================
# SERVER ENTRY POINT
# =============================================================================


async def _probe(credentials: Credentials) -> tuple[bool, float]:
    """Run one health check on a throwaway client; returns (healthy, millis)."""
    started = time.perf_counter()
    async with StratusClient(credentials) as probe:
        healthy = await probe.health_check()
    return healthy, (time.perf_counter() - started) * 1000


def main() -> None:
    """Run the Stratus reasoning MCP server."""
    configure_logging()

    credentials = load_config()
    if credentials is None:
        print(get_auth_setup_message(), file=sys.stderr)
        sys.exit(1)

    logger.info(f"Starting {SERVER_CONFIG.name} (transport: {SERVER_CONFIG.transport})")
    logger.info(f"API URL: {credentials.api_url}")
    logger.info(f"API Key: {mask_api_key(credentials.api_key)}")

    logger.info("Verifying connection...")
    healthy, duration_ms = asyncio.run(_probe(credentials))
    if healthy:
        logger.info(f"API connected ({duration_ms:.0f}ms)")
    else:
        logger.warning(
            "Stratus API health check failed. Tools may not work correctly. "
            "Run: stratus-health (to diagnose)"
        )

    dispatcher = ToolDispatcher(StratusClient(credentials))
    init_dispatcher(dispatcher)
    logger.info(
        "Registered tools: " + ", ".join(tool.name for tool in dispatcher.list_tools())
    )

    if SERVER_CONFIG.transport == "stdio":
        mcp.run(transport="stdio")
    elif SERVER_CONFIG.transport == "http":
        mcp.run(transport="streamable-http", host=SERVER_CONFIG.host, port=SERVER_CONFIG.port)
    elif SERVER_CONFIG.transport == "sse":
        mcp.run(transport="sse", host=SERVER_CONFIG.host, port=SERVER_CONFIG.port)
    else:
        logger.warning(f"Unknown transport '{SERVER_CONFIG.transport}', falling back to stdio")
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
