"""stratus_plan: multi-step action planning with lookahead prediction."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field

from stratus_reasoning.tools.tool_types import ToolArguments, ToolSpec
from stratus_reasoning.tools.validators import validate_plan
from stratus_reasoning.utils.schema import PlanResult

if TYPE_CHECKING:
    from stratus_reasoning.models.stratus_client import StratusClient

SYSTEM_PROMPT = """You are a planning assistant using T-JEPA reasoning with lookahead prediction.
Your job is to create step-by-step action plans with predicted outcomes.

Always respond with valid JSON:
{
  "steps": [
    {
      "step_number": 1,
      "action": "Description of action",
      "reasoning": "Why this step is necessary",
      "dependencies": [array of step numbers this depends on],
      "estimated_success_rate": 0.0-1.0
    }
  ],
  "predicted_outcomes": ["possible", "outcomes"],
  "confidence": 0.0-1.0,
  "estimated_complexity": "low/medium/high"
}"""


class PlanArguments(ToolArguments):
    current_state: str = Field(description="Description of the current state or situation")
    goal: str = Field(description="The desired end goal or outcome")


def build_user_prompt(current_state: str, goal: str) -> str:
    return (
        "Create a step-by-step plan to achieve a goal:\n\n"
        f"CURRENT STATE:\n{current_state}\n\n"
        f"GOAL:\n{goal}\n\n"
        "Provide a detailed action plan with:\n"
        "- Numbered steps in order\n"
        "- Reasoning for each step\n"
        "- Dependencies between steps\n"
        "- Predicted outcomes\n"
        "- Confidence score\n\n"
        "Respond with JSON containing steps array, predicted_outcomes, confidence, "
        "and estimated_complexity."
    )


async def stratus_plan(client: StratusClient, current_state: str, goal: str) -> PlanResult:
    content = await client.query(SYSTEM_PROMPT, build_user_prompt(current_state, goal))
    return validate_plan(client.extract_json(content))


async def _handle(client: StratusClient, args: PlanArguments) -> PlanResult:
    return await stratus_plan(client, args.current_state, args.goal)


TOOL = ToolSpec(
    name="stratus_plan",
    description=(
        "Plan multi-step tasks with lookahead prediction using Stratus X1 T-JEPA reasoning. "
        'Use this for complex operations like "Plan refactoring of auth system" or '
        '"Design implementation strategy". Returns ordered steps with dependencies and '
        "predicted outcomes."
    ),
    arguments=PlanArguments,
    handler=_handle,
)
