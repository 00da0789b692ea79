"""stratus_count: exact counting of a pattern in text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from stratus_reasoning.tools.tool_types import ToolArguments, ToolSpec
from stratus_reasoning.tools.validators import validate_count
from stratus_reasoning.utils.schema import CountResult

if TYPE_CHECKING:
    from stratus_reasoning.models.stratus_client import StratusClient

SYSTEM_PROMPT = """You are a precise counting assistant using T-JEPA reasoning.
Your job is to count occurrences of a pattern in text with 100% accuracy.

Always respond with valid JSON:
{
  "count": number,
  "confidence": 0.0-1.0,
  "reasoning": "Brief explanation of your counting process"
}"""


class CountArguments(ToolArguments):
    text: str = Field(description="The text to search within")
    pattern: str = Field(description="The pattern/substring to count (case-sensitive)")


def build_user_prompt(text: str, pattern: str) -> str:
    return (
        f'Count how many times the pattern "{pattern}" appears in the following text:\n\n'
        f'TEXT: "{text}"\n\n'
        "Count each occurrence carefully. "
        "Respond with JSON containing the count, confidence (0-1), and reasoning."
    )


async def stratus_count(client: StratusClient, text: str, pattern: str) -> CountResult:
    content = await client.query(SYSTEM_PROMPT, build_user_prompt(text, pattern))
    return validate_count(client.extract_json(content))


async def _handle(client: StratusClient, args: CountArguments) -> CountResult:
    return await stratus_count(client, args.text, args.pattern)


TOOL = ToolSpec(
    name="stratus_count",
    description=(
        "Accurately count occurrences of a pattern in text using Stratus X1 T-JEPA "
        "reasoning. Use this for counting tasks where 100% accuracy is required "
        "(e.g., \"How many times does the letter 'r' appear in 'strawberry'?\"). "
        "Returns count with confidence score."
    ),
    arguments=CountArguments,
    handler=_handle,
)
