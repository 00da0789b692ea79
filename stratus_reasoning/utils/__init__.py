"""Utility modules for the Stratus reasoning server."""

from .errors import (
    ConfigurationMissingError,
    InvalidArgumentsError,
    MissingArgumentsError,
    ParseError,
    RemoteError,
    StratusException,
    ToolExecutionError,
    UnknownToolError,
    ValidationError,
)
from .schema import (
    AnalyzeResult,
    CompressResult,
    CountResult,
    PlanResult,
    PlanStep,
    VerifyResult,
    safe_json_serialize,
)

__all__ = [
    "StratusException",
    "ConfigurationMissingError",
    "InvalidArgumentsError",
    "RemoteError",
    "ParseError",
    "ValidationError",
    "UnknownToolError",
    "MissingArgumentsError",
    "ToolExecutionError",
    "CountResult",
    "VerifyResult",
    "AnalyzeResult",
    "CompressResult",
    "PlanStep",
    "PlanResult",
    "safe_json_serialize",
]
