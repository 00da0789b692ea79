"""stratus_verify: mathematical and logical statement verification."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from stratus_reasoning.tools.tool_types import ToolArguments, ToolSpec
from stratus_reasoning.tools.validators import validate_verify
from stratus_reasoning.utils.schema import VerifyResult

if TYPE_CHECKING:
    from stratus_reasoning.models.stratus_client import StratusClient

SYSTEM_PROMPT = """You are a mathematical and logical verification assistant using T-JEPA reasoning.
Your job is to verify statements with proofs or logical reasoning.

Always respond with valid JSON:
{
  "valid": true/false,
  "reasoning": "Detailed explanation of your verification process",
  "confidence": 0.0-1.0,
  "proof": "Optional mathematical proof or logical chain"
}"""


class VerifyArguments(ToolArguments):
    statement: str = Field(description="The mathematical or logical statement to verify")


def build_user_prompt(statement: str) -> str:
    return (
        "Verify the following statement:\n\n"
        f'STATEMENT: "{statement}"\n\n'
        "Determine if this statement is true or false. "
        "Provide reasoning and proof if applicable.\n"
        "Respond with JSON containing valid (boolean), reasoning, confidence, and optional proof."
    )


async def stratus_verify(client: StratusClient, statement: str) -> VerifyResult:
    content = await client.query(SYSTEM_PROMPT, build_user_prompt(statement))
    return validate_verify(client.extract_json(content))


async def _handle(client: StratusClient, args: VerifyArguments) -> VerifyResult:
    return await stratus_verify(client, args.statement)


TOOL = ToolSpec(
    name="stratus_verify",
    description=(
        "Verify mathematical or logical statements using Stratus X1 T-JEPA reasoning. "
        'Use this for verification tasks like "Is 8191 a prime number?" or '
        '"Is this logic valid?". Returns boolean validity with detailed reasoning '
        "and optional proof."
    ),
    arguments=VerifyArguments,
    handler=_handle,
)
