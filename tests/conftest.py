"""pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from stratus_reasoning.config import Credentials
from stratus_reasoning.models.stratus_client import StratusClient

VALID_KEY = "stratus_sk_live_" + "0123456789abcdef" * 4
API_URL = "http://stratus.test"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Clear Stratus env vars and point the home directory at a temp dir."""
    for var in ("STRATUS_API_KEY", "STRATUS_API_URL", "ANTHROPIC_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def credentials() -> Credentials:
    """Credentials pointing at the fake service."""
    return Credentials(api_key=VALID_KEY, api_url=API_URL)


def chat_completion(content: str | None) -> dict[str, Any]:
    """Build an OpenAI-compatible chat completion body."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "stratus-x1ac-xl-gpt-4o",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


class FakeStratusService:
    """Stand-in for the remote Stratus API, recording every request."""

    def __init__(
        self,
        chat_content: str | None = None,
        chat_status: int = 200,
        rollout_body: dict[str, Any] | None = None,
        rollout_status: int = 200,
    ) -> None:
        self.chat_content = chat_content
        self.chat_status = chat_status
        self.rollout_body = rollout_body or {}
        self.rollout_status = rollout_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/v1/chat/completions":
            if self.chat_status >= 400:
                return httpx.Response(self.chat_status, text="upstream exploded")
            return httpx.Response(200, json=chat_completion(self.chat_content))
        if request.url.path == "/v1/rollout":
            if self.rollout_status >= 400:
                return httpx.Response(self.rollout_status, text="rollout exploded")
            return httpx.Response(200, json=self.rollout_body)
        return httpx.Response(404, text="not found")


@pytest.fixture
def make_client(credentials: Credentials) -> Callable[..., StratusClient]:
    """Factory for a StratusClient wired to a mock transport."""

    def _make(handler: Handler, creds: Credentials | None = None) -> StratusClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return StratusClient(creds or credentials, http_client=http_client)

    return _make


@pytest.fixture
def stratus_service() -> FakeStratusService:
    """Fake service; tests set chat_content / statuses before calling."""
    return FakeStratusService()


@pytest.fixture
def client(
    make_client: Callable[..., StratusClient], stratus_service: FakeStratusService
) -> StratusClient:
    """StratusClient talking to the fake service."""
    return make_client(stratus_service)


@pytest.fixture
def sample_rollout() -> dict[str, Any]:
    """Provide a rollout response as returned by /v1/rollout."""
    return {
        "id": "rollout-123",
        "object": "rollout",
        "created": 1700000000,
        "goal": "Find and book a hotel in San Francisco",
        "initial_state": "start",
        "action_sequence": [
            {"step": 1, "action_id": 12, "action_name": "search", "action_category": "query"},
            {"step": 2, "action_id": 40, "action_name": "book", "action_category": "commit"},
        ],
        "predictions": [
            {
                "step": 1,
                "action": {
                    "step": 1,
                    "action_id": 12,
                    "action_name": "search",
                    "action_category": "query",
                },
                "current_state": {"step": 0, "magnitude": 1.0, "confidence": "High"},
                "predicted_state": {"step": 1, "magnitude": 1.4, "confidence": "Medium"},
                "state_change": 0.4,
                "interpretation": "Search narrows candidates",
            }
        ],
        "summary": {
            "total_steps": 2,
            "initial_magnitude": 1.0,
            "final_magnitude": 1.9,
            "total_state_change": 0.9,
            "outcome": "goal_achieved",
            "action_path": ["search", "book"],
        },
    }
