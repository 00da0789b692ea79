"""Result types returned by the Stratus reasoning tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import orjson


@dataclass(frozen=True)
class CountResult:
    """Result from stratus_count."""

    count: int | float
    confidence: float
    reasoning: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "count": self.count,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class VerifyResult:
    """Result from stratus_verify."""

    valid: bool
    reasoning: str
    confidence: float
    proof: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: dict[str, Any] = {
            "valid": self.valid,
            "reasoning": self.reasoning,
            "confidence": self.confidence,
        }
        if self.proof is not None:
            data["proof"] = self.proof
        return data


@dataclass(frozen=True)
class AnalyzeResult:
    """Result from stratus_analyze."""

    patterns: list[Any]
    insights: str
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "patterns": list(self.patterns),
            "insights": self.insights,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class CompressResult:
    """Result from stratus_compress.

    Token counts are local estimates (4 characters per token), not values
    reported by the service.
    """

    compressed_summary: str
    compression_ratio: float
    original_tokens: int
    compressed_tokens: int
    key_points: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "compressed_summary": self.compressed_summary,
            "compression_ratio": self.compression_ratio,
            "key_points": list(self.key_points),
            "original_tokens": self.original_tokens,
            "compressed_tokens": self.compressed_tokens,
        }


@dataclass(frozen=True)
class PlanStep:
    """A single step of a stratus_plan result."""

    step_number: int
    action: str
    reasoning: str
    dependencies: list[int] | None = None
    estimated_success_rate: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: dict[str, Any] = {
            "step_number": self.step_number,
            "action": self.action,
            "reasoning": self.reasoning,
        }
        if self.dependencies is not None:
            data["dependencies"] = list(self.dependencies)
        if self.estimated_success_rate is not None:
            data["estimated_success_rate"] = self.estimated_success_rate
        return data


@dataclass(frozen=True)
class PlanResult:
    """Result from stratus_plan."""

    steps: list[PlanStep]
    predicted_outcomes: list[str]
    confidence: float
    estimated_complexity: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "steps": [step.to_dict() for step in self.steps],
            "predicted_outcomes": list(self.predicted_outcomes),
            "confidence": self.confidence,
            "estimated_complexity": self.estimated_complexity,
        }


def safe_json_serialize(obj: Any) -> str:
    """Safely serialize objects to indented JSON.

    Args:
        obj: Object to serialize. Can be a dataclass with to_dict() method,
             a dict, or any JSON-serializable object.

    Returns:
        JSON string representation of the object.

    """
    try:
        if hasattr(obj, "to_dict"):
            obj = obj.to_dict()
        result: bytes = orjson.dumps(obj, option=orjson.OPT_INDENT_2, default=str)
        return result.decode("utf-8")
    except TypeError as e:
        fallback: bytes = orjson.dumps(
            {"error": f"Serialization failed: {e!s}", "type": type(obj).__name__}
        )
        return fallback.decode("utf-8")
