"""stratus_analyze: pattern extraction from code, text or logs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from stratus_reasoning.tools.tool_types import ToolArguments, ToolSpec
from stratus_reasoning.tools.validators import validate_analyze
from stratus_reasoning.utils.schema import AnalyzeResult

if TYPE_CHECKING:
    from stratus_reasoning.models.stratus_client import StratusClient

MAX_DATA_CHARS = 5000

SYSTEM_PROMPT = """You are a pattern analysis assistant using T-JEPA reasoning.
Your job is to analyze data and extract patterns based on a query.

Always respond with valid JSON:
{
  "patterns": ["list", "of", "patterns"],
  "insights": "Key insights and observations",
  "confidence": 0.0-1.0
}"""


class AnalyzeArguments(ToolArguments):
    data: str = Field(description="The data to analyze (code, text, logs, etc.)")
    query: str = Field(description="What patterns or insights to look for")


def build_user_prompt(data: str, query: str) -> str:
    if len(data) > MAX_DATA_CHARS:
        data = data[:MAX_DATA_CHARS] + "\n...(truncated)"
    return (
        "Analyze the following data to answer this query:\n\n"
        f'QUERY: "{query}"\n\n'
        f"DATA:\n{data}\n\n"
        "Extract patterns, provide insights, and explain your findings.\n"
        "Respond with JSON containing patterns (array), insights (string), and confidence."
    )


async def stratus_analyze(client: StratusClient, data: str, query: str) -> AnalyzeResult:
    content = await client.query(SYSTEM_PROMPT, build_user_prompt(data, query))
    return validate_analyze(client.extract_json(content))


async def _handle(client: StratusClient, args: AnalyzeArguments) -> AnalyzeResult:
    return await stratus_analyze(client, args.data, args.query)


TOOL = ToolSpec(
    name="stratus_analyze",
    description=(
        "Analyze data for patterns using Stratus X1 T-JEPA reasoning. Use this for "
        'pattern extraction like "Find all error handling patterns across these files" '
        'or "Identify security vulnerabilities in this code". Returns array of patterns '
        "with insights."
    ),
    arguments=AnalyzeArguments,
    handler=_handle,
)
