"""Stratus reasoning server configuration.

Credentials are resolved once at startup, in fixed precedence order:

1. Environment: STRATUS_API_KEY (+ STRATUS_API_URL, ANTHROPIC_API_KEY,
   OPENAI_API_KEY). A key in the environment wins over any persisted file.
2. Persisted file: ~/.clyde/stratus-config.json, written by the setup flow.

Sources are never merged. The key format check is advisory (setup-time only);
load_config() does not re-validate keys read from the file.

Usage:
    from stratus_reasoning.config import load_config
    credentials = load_config()
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import orjson
from loguru import logger

from stratus_reasoning.utils.logging import redact_sensitive

DEFAULT_API_URL = "http://212.115.124.137:8000"

CONFIG_DIR_NAME = ".clyde"
CONFIG_FILE_NAME = "stratus-config.json"

API_KEY_PATTERN = re.compile(r"^stratus_sk_(live|beta)_[a-f0-9]{64}$")


def _get_env(key: str, default: str = "") -> str:
    """Get environment variable, treating empty string as unset."""
    value = os.getenv(key, default)
    return value if value else default


def _get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value:
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Invalid integer for {key}: {value}, using default {default}")
    return default


@dataclass(frozen=True)
class Credentials:
    """Stratus API credentials and endpoint.

    Immutable once resolved; the client only ever reads it.
    """

    api_key: str
    api_url: str = DEFAULT_API_URL
    anthropic_api_key: str | None = None  # For Claude graders
    openai_api_key: str | None = None  # For GPT graders
    user_email: str | None = None
    configured_at: str | None = None

    @classmethod
    def from_file_dict(cls, data: dict[str, Any]) -> Credentials:
        """Build credentials from the persisted (camelCase) file format."""
        return cls(
            api_key=data.get("apiKey") or "",
            api_url=data.get("apiUrl") or DEFAULT_API_URL,
            anthropic_api_key=data.get("anthropicApiKey") or None,
            openai_api_key=data.get("openaiApiKey") or None,
            user_email=data.get("userEmail") or None,
            configured_at=data.get("configuredAt") or None,
        )

    def to_file_dict(self) -> dict[str, Any]:
        """Convert to the persisted (camelCase) file format, omitting unset fields."""
        data: dict[str, Any] = {"apiKey": self.api_key, "apiUrl": self.api_url}
        optional = {
            "anthropicApiKey": self.anthropic_api_key,
            "openaiApiKey": self.openai_api_key,
            "userEmail": self.user_email,
            "configuredAt": self.configured_at,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data

    def __repr__(self) -> str:
        return (
            f"Credentials(api_key={mask_api_key(self.api_key)!r}, api_url={self.api_url!r}, "
            f"user_email={self.user_email!r})"
        )


@dataclass(frozen=True)
class ServerConfig:
    """Server runtime configuration."""

    name: str = field(default_factory=lambda: _get_env("SERVER_NAME", "stratus-reasoning"))
    transport: str = field(default_factory=lambda: _get_env("SERVER_TRANSPORT", "stdio"))
    host: str = field(default_factory=lambda: _get_env("SERVER_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: _get_env_int("SERVER_PORT", 8000))


def get_config_dir() -> Path:
    """Get the per-user config directory."""
    return Path.home() / CONFIG_DIR_NAME


def get_config_path() -> Path:
    """Get config file path (for user reference)."""
    return get_config_dir() / CONFIG_FILE_NAME


def _load_from_env() -> Credentials | None:
    api_key = _get_env("STRATUS_API_KEY")
    if not api_key:
        return None
    return Credentials(
        api_key=api_key,
        api_url=_get_env("STRATUS_API_URL", DEFAULT_API_URL),
        anthropic_api_key=_get_env("ANTHROPIC_API_KEY") or None,
        openai_api_key=_get_env("OPENAI_API_KEY") or None,
    )


def _load_from_file(path: Path) -> Credentials | None:
    if not path.is_file():
        return None
    try:
        data = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as e:
        logger.error(f"Failed to load Stratus config from {path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.error(f"Stratus config at {path} is not a JSON object")
        return None

    credentials = Credentials.from_file_dict(data)
    if not credentials.api_key:
        return None
    return credentials


def load_config() -> Credentials | None:
    """Load Stratus credentials from the environment or the config file.

    Returns:
        Resolved credentials, or None if neither source provides an API key.

    """
    credentials = _load_from_env()
    if credentials is not None:
        logger.debug("Stratus credentials loaded from environment")
        return credentials

    credentials = _load_from_file(get_config_path())
    if credentials is not None:
        logger.debug(
            f"Stratus credentials loaded from {get_config_path()}: "
            f"{redact_sensitive(credentials.to_file_dict())}"
        )
    return credentials


def save_config(credentials: Credentials) -> Credentials:
    """Persist credentials to the config file with a fresh timestamp.

    Returns:
        The record as written, including its configured_at stamp.

    """
    stamped = replace(credentials, configured_at=datetime.now(UTC).isoformat())

    get_config_dir().mkdir(parents=True, exist_ok=True)
    path = get_config_path()
    path.write_bytes(orjson.dumps(stamped.to_file_dict(), option=orjson.OPT_INDENT_2))
    logger.info(f"Stratus config saved to {path}")
    return stamped


def clear_config() -> None:
    """Delete the config file if present."""
    get_config_path().unlink(missing_ok=True)


def is_configured() -> bool:
    """Check if Stratus is configured."""
    return load_config() is not None


def is_valid_api_key_format(key: str) -> bool:
    """Validate API key format: stratus_sk_(live|beta)_ + 64 lowercase hex chars."""
    return API_KEY_PATTERN.fullmatch(key) is not None


def mask_api_key(key: str) -> str:
    """Shorten an API key for display."""
    return f"{key[:20]}..."


def get_auth_setup_message() -> str:
    """Get user-friendly error message for missing auth."""
    return f"""
Stratus X1 Authentication Required
==================================

This server uses Stratus X1 for enhanced reasoning capabilities.
To get started, you need a Stratus API key.

Option 1: Environment variables
  export STRATUS_API_KEY="stratus_sk_live_..."
  export STRATUS_API_URL="{DEFAULT_API_URL}"

Option 2: Config file at
  {get_config_path()}

  with contents:
  {{
    "apiKey": "stratus_sk_live_...",
    "apiUrl": "{DEFAULT_API_URL}",
    "userEmail": "your@email.com"
  }}

Don't have a Stratus API key? Contact Formation: team@formation.cloud
"""
