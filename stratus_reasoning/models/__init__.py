"""Remote API clients."""

from .stratus_client import (
    DEFAULT_ROLLOUT_MAX_STEPS,
    ROLLOUT_FORCED_FIELDS,
    StratusClient,
    build_rollout_payload,
    extract_json,
)

__all__ = [
    "DEFAULT_ROLLOUT_MAX_STEPS",
    "ROLLOUT_FORCED_FIELDS",
    "StratusClient",
    "build_rollout_payload",
    "extract_json",
]
