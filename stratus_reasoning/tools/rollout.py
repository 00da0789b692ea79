"""stratus_rollout: multi-step action prediction.

Backed by the structured /v1/rollout endpoint (no free-form text generation).
Useful for action sequence validation, path comparison, "what-if" analysis and
goal achievement estimation. The response is passed through unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field

from stratus_reasoning.models.stratus_client import DEFAULT_ROLLOUT_MAX_STEPS
from stratus_reasoning.tools.tool_types import ToolArguments, ToolSpec

if TYPE_CHECKING:
    from stratus_reasoning.models.stratus_client import StratusClient


class RolloutArguments(ToolArguments):
    goal: str = Field(
        description=(
            "Natural language description of the goal "
            '(e.g., "Find and book a hotel in San Francisco")'
        )
    )
    max_steps: int | None = Field(
        default=None,
        ge=1,
        description="Maximum steps to predict (default: 5, max: 10). Latency scales linearly.",
    )
    actions: list[int] | None = Field(
        default=None,
        description=(
            "Optional: Explicit action IDs (0-66) to validate specific sequence. "
            "Overrides automatic planning."
        ),
    )


async def stratus_rollout(
    client: StratusClient,
    goal: str,
    max_steps: int | None = None,
    actions: list[int] | None = None,
) -> dict[str, Any]:
    request: dict[str, Any] = {"goal": goal, "max_steps": max_steps or DEFAULT_ROLLOUT_MAX_STEPS}
    if actions is not None:
        request["actions"] = actions
    return await client.rollout(request)


async def _handle(client: StratusClient, args: RolloutArguments) -> dict[str, Any]:
    return await stratus_rollout(client, args.goal, args.max_steps, args.actions)


TOOL = ToolSpec(
    name="stratus_rollout",
    description=(
        "Predict multi-step action sequences using Stratus T-JEPA model (no LLM, 2-5s). "
        "Given a goal, predicts what actions will be taken, state transitions, and whether "
        "the goal will be achieved. Perfect for validating plans, comparing paths, or "
        '"what-if" analysis. Returns structured predictions with confidence scores.'
    ),
    arguments=RolloutArguments,
    handler=_handle,
)
