"""stratus_compress: long-context compression into a summary with key points.

Only the prompt is truncated for long input; token counts and the compression
ratio always describe the full original text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from stratus_reasoning.tools.tool_types import ToolArguments, ToolSpec
from stratus_reasoning.tools.validators import estimate_tokens, validate_compress
from stratus_reasoning.utils.schema import CompressResult

if TYPE_CHECKING:
    from stratus_reasoning.models.stratus_client import StratusClient

MAX_INPUT_CHARS = 10_000

SYSTEM_PROMPT = """You are a text compression assistant using T-JEPA reasoning.
Your job is to compress long text into concise summaries while preserving key information.

Always respond with valid JSON:
{
  "compressed_summary": "Concise summary preserving key details",
  "key_points": ["array", "of", "key", "points"],
  "compression_ratio": number (e.g., 10 for 10x compression)
}"""


class CompressArguments(ToolArguments):
    long_text: str = Field(description="The long text to compress (typically 10k+ tokens)")


def build_user_prompt(long_text: str) -> str:
    original_tokens = estimate_tokens(long_text)
    if len(long_text) > MAX_INPUT_CHARS:
        body = long_text[:MAX_INPUT_CHARS] + "\n...(content truncated for processing)"
    else:
        body = long_text
    return (
        "Compress the following text into a concise summary:\n\n"
        f"ORIGINAL TEXT ({original_tokens} tokens):\n{body}\n\n"
        "Create a highly compressed summary that captures all essential information.\n"
        "Aim for 10-50x compression while maintaining accuracy.\n"
        "Respond with JSON containing compressed_summary, key_points array, "
        "and estimated compression_ratio."
    )


async def stratus_compress(client: StratusClient, long_text: str) -> CompressResult:
    content = await client.query(SYSTEM_PROMPT, build_user_prompt(long_text))
    return validate_compress(client.extract_json(content), long_text)


async def _handle(client: StratusClient, args: CompressArguments) -> CompressResult:
    return await stratus_compress(client, args.long_text)


TOOL = ToolSpec(
    name="stratus_compress",
    description=(
        "Compress long text (10k+ tokens) using Stratus X1 T-JEPA reasoning for efficient "
        "long-context analysis. Use this when files are too large for normal processing. "
        "Achieves 10-50x compression while preserving key information. Returns compressed "
        "summary with key points."
    ),
    arguments=CompressArguments,
    handler=_handle,
)
