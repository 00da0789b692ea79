"""Validation of Stratus model output into strict tool results.

The service answers in free-form JSON. Each validator checks the fields its
tool depends on, fills defaults for optional ones and raises ValidationError
otherwise. Explanation texts get a provenance marker so callers can tell
remote-model prose apart from local output; the marker is display-only.

Optional fields fall back to their default when absent, null or of the wrong
type. A present zero confidence is kept.
"""

from __future__ import annotations

import math
from typing import Any

from stratus_reasoning.utils.errors import ValidationError
from stratus_reasoning.utils.schema import (
    AnalyzeResult,
    CompressResult,
    CountResult,
    PlanResult,
    PlanStep,
    VerifyResult,
)

PROVENANCE_MARKER = "🧠 Stratus X1"

DEFAULT_COUNT_CONFIDENCE = 0.99
DEFAULT_VERIFY_CONFIDENCE = 0.95
DEFAULT_ANALYZE_CONFIDENCE = 0.85
DEFAULT_PLAN_CONFIDENCE = 0.80
DEFAULT_PLAN_COMPLEXITY = "medium"

CHARS_PER_TOKEN = 4


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require_object(raw: Any, tool: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ValidationError(f"Invalid {tool} result from Stratus: expected a JSON object")
    return raw


def _number_or(raw: dict[str, Any], key: str, default: float) -> float:
    value = raw.get(key)
    return value if _is_number(value) else default


def _text_or(raw: dict[str, Any], key: str, default: str) -> str:
    value = raw.get(key)
    return value if isinstance(value, str) and value else default


def estimate_tokens(text: str) -> int:
    """Estimate token count as ceil(characters / 4)."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def round_ratio(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    return math.floor(value * 10 + 0.5) / 10


def validate_count(raw: Any) -> CountResult:
    data = _require_object(raw, "count")
    count = data.get("count")
    if not _is_number(count) or count < 0:
        raise ValidationError("Invalid count result from Stratus")

    return CountResult(
        count=count,
        confidence=_number_or(data, "confidence", DEFAULT_COUNT_CONFIDENCE),
        reasoning=(
            f"{PROVENANCE_MARKER} (XL): "
            f"{_text_or(data, 'reasoning', 'Count completed successfully')}"
        ),
    )


def validate_verify(raw: Any) -> VerifyResult:
    data = _require_object(raw, "verify")
    valid = data.get("valid")
    if not isinstance(valid, bool):
        raise ValidationError("Invalid verify result from Stratus")

    proof = data.get("proof")
    return VerifyResult(
        valid=valid,
        reasoning=f"{PROVENANCE_MARKER}: {_text_or(data, 'reasoning', 'Verification completed')}",
        confidence=_number_or(data, "confidence", DEFAULT_VERIFY_CONFIDENCE),
        proof=str(proof) if proof else None,
    )


def validate_analyze(raw: Any) -> AnalyzeResult:
    data = _require_object(raw, "analyze")
    patterns = data.get("patterns")
    if not isinstance(patterns, list):
        raise ValidationError("Invalid analyze result from Stratus")

    return AnalyzeResult(
        patterns=patterns,
        insights=f"{PROVENANCE_MARKER}: {_text_or(data, 'insights', 'Analysis completed')}",
        confidence=_number_or(data, "confidence", DEFAULT_ANALYZE_CONFIDENCE),
    )


def validate_compress(raw: Any, original_text: str) -> CompressResult:
    """Build a compress result.

    Token counts and the ratio are computed locally: ``original_text`` must be
    the full input, not the truncated text that was sent.
    """
    data = _require_object(raw, "compress")
    summary = _text_or(data, "compressed_summary", "")
    key_points = data.get("key_points")

    original_tokens = estimate_tokens(original_text)
    compressed_tokens = estimate_tokens(summary)
    ratio = original_tokens / max(compressed_tokens, 1)

    return CompressResult(
        compressed_summary=(
            f"{PROVENANCE_MARKER} ({ratio:.1f}x compression):\n\n"
            f"{summary or 'Compression failed'}"
        ),
        compression_ratio=round_ratio(ratio),
        original_tokens=original_tokens,
        compressed_tokens=compressed_tokens,
        key_points=key_points if isinstance(key_points, list) else [],
    )


def _validate_plan_step(raw: Any, index: int) -> PlanStep:
    if not isinstance(raw, dict):
        raise ValidationError(f"Invalid plan result from Stratus: step {index} is not an object")

    step_number = raw.get("step_number")
    if not _is_int(step_number):
        raise ValidationError(f"Invalid plan result from Stratus: step {index} has no step_number")
    for key in ("action", "reasoning"):
        if not isinstance(raw.get(key), str):
            raise ValidationError(f"Invalid plan result from Stratus: step {index} has no {key}")

    dependencies = raw.get("dependencies")
    if dependencies is not None and not (
        isinstance(dependencies, list) and all(_is_int(dep) for dep in dependencies)
    ):
        raise ValidationError(
            f"Invalid plan result from Stratus: step {index} has malformed dependencies"
        )

    success_rate = raw.get("estimated_success_rate")
    return PlanStep(
        step_number=step_number,
        action=raw["action"],
        reasoning=raw["reasoning"],
        dependencies=list(dependencies) if dependencies is not None else None,
        estimated_success_rate=success_rate if _is_number(success_rate) else None,
    )


def validate_plan(raw: Any) -> PlanResult:
    data = _require_object(raw, "plan")
    steps = data.get("steps")
    if not isinstance(steps, list) or not steps:
        raise ValidationError("Invalid plan result from Stratus")

    confidence = _number_or(data, "confidence", DEFAULT_PLAN_CONFIDENCE)
    outcomes = data.get("predicted_outcomes")
    if not isinstance(outcomes, list) or not outcomes:
        outcomes = ["Plan execution complete"]

    return PlanResult(
        steps=[_validate_plan_step(step, i) for i, step in enumerate(steps, start=1)],
        predicted_outcomes=[
            f"{PROVENANCE_MARKER} Planning ({confidence} confidence):",
            *(str(outcome) for outcome in outcomes),
        ],
        confidence=confidence,
        estimated_complexity=_text_or(data, "estimated_complexity", DEFAULT_PLAN_COMPLEXITY),
    )
