"""Stratus X1 API client.

Two request shapes share one HTTP connection pool:

- ``query``: OpenAI-compatible chat completion (``/v1/chat/completions``),
  sent through the ``openai`` SDK with retries disabled.
- ``rollout``: structured action prediction (``/v1/rollout``), a plain JSON
  POST through ``httpx``.

No timeout is applied here; a hung call hangs the invocation until the
transport gives up.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
import orjson
from loguru import logger
from openai import APIError, APIStatusError, AsyncOpenAI

from stratus_reasoning.config import Credentials
from stratus_reasoning.utils.errors import ParseError, RemoteError

CHAT_MODEL = "stratus-x1ac-xl-gpt-4o"  # XL model with GPT-4o grader
CHAT_TEMPERATURE = 0.1
CHAT_MAX_TOKENS = 2000

DEFAULT_ROLLOUT_MAX_STEPS = 5

# The rollout service returns wrong predictions when return_intermediate is
# omitted or false. Applied after caller fields; drop once fixed upstream.
ROLLOUT_FORCED_FIELDS: dict[str, Any] = {"return_intermediate": True}

HEALTH_CHECK_SYSTEM_PROMPT = 'You are a test assistant. Respond with exactly: {"status": "ok"}'
HEALTH_CHECK_USER_PROMPT = "Health check"


def build_rollout_payload(request: Mapping[str, Any]) -> dict[str, Any]:
    """Build the /v1/rollout body from a caller request.

    Caller fields override the defaults (``None`` values are dropped), then
    ROLLOUT_FORCED_FIELDS override everything.
    """
    payload: dict[str, Any] = {"max_steps": DEFAULT_ROLLOUT_MAX_STEPS}
    payload.update({key: value for key, value in request.items() if value is not None})
    payload.update(ROLLOUT_FORCED_FIELDS)
    return payload


def extract_json(content: str) -> Any:
    """Parse the JSON object embedded in a model response.

    Takes the span from the first ``{`` to the last ``}``. This does not
    balance braces: a response holding two separate objects, or a stray brace
    inside surrounding prose, yields a ParseError or the wrong span.

    Raises:
        ParseError: If there is no such span or it is not valid JSON.

    """
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end < start:
        raise ParseError("Failed to parse Stratus response: No JSON found in response")

    try:
        return orjson.loads(content[start : end + 1])
    except orjson.JSONDecodeError as e:
        raise ParseError(f"Failed to parse Stratus response: {e}") from e


class StratusClient:
    """Async client for the Stratus X1 reasoning API.

    Example:
        async with StratusClient(credentials) as client:
            content = await client.query("You count letters.", "r in strawberry?")
            data = client.extract_json(content)

    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            credentials: Resolved Stratus credentials (read-only).
            http_client: Optional pre-built HTTP client, e.g. with a mock
                transport. Created without a timeout when omitted.

        """
        self.credentials = credentials
        self.base_url = credentials.api_url.rstrip("/")
        self._http = http_client or httpx.AsyncClient(timeout=None)
        self._openai = AsyncOpenAI(
            api_key=credentials.api_key,
            base_url=f"{self.base_url}/v1",
            default_headers=self._grader_headers(),
            max_retries=0,
            http_client=self._http,
        )

    def _grader_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.credentials.anthropic_api_key:
            headers["X-Anthropic-API-Key"] = self.credentials.anthropic_api_key
        if self.credentials.openai_api_key:
            headers["X-OpenAI-API-Key"] = self.credentials.openai_api_key
        return headers

    async def query(self, system_prompt: str, user_prompt: str) -> str:
        """Call the chat endpoint with a system and a user message.

        Returns:
            The first choice's message content.

        Raises:
            RemoteError: On a non-success status, a transport failure, or a
                response without message content.

        """
        logger.debug(f"Stratus query ({len(user_prompt)} chars)")
        try:
            completion = await self._openai.chat.completions.create(
                model=CHAT_MODEL,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=CHAT_TEMPERATURE,
                max_tokens=CHAT_MAX_TOKENS,
            )
        except APIStatusError as e:
            raise RemoteError(
                f"Stratus API returned {e.status_code}: {e.response.text}",
                status_code=e.status_code,
            ) from e
        except APIError as e:
            raise RemoteError(f"Stratus API error: {e}") from e

        choices = getattr(completion, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        content = getattr(message, "content", None)
        if not content:
            raise RemoteError("No response from Stratus API")
        return content

    def extract_json(self, content: str) -> Any:
        """Parse the JSON object embedded in a model response. See extract_json()."""
        return extract_json(content)

    async def rollout(self, request: Mapping[str, Any]) -> dict[str, Any]:
        """Call the rollout endpoint for multi-step action prediction.

        Args:
            request: ``goal`` plus optional ``max_steps``, ``actions`` and
                ``initial_state``.

        Returns:
            The service response, unmodified.

        Raises:
            RemoteError: On a non-success status or a transport failure.
            ParseError: If the body is not a JSON object.

        """
        payload = build_rollout_payload(request)
        logger.debug(f"Stratus rollout (max_steps={payload['max_steps']})")
        try:
            response = await self._http.post(
                f"{self.base_url}/v1/rollout",
                headers={"Authorization": f"Bearer {self.credentials.api_key}"},
                json=payload,
            )
        except httpx.HTTPError as e:
            raise RemoteError(f"Stratus rollout error: {e}") from e

        if not response.is_success:
            raise RemoteError(
                f"Stratus rollout API returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            data = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise ParseError(f"Failed to parse Stratus rollout response: {e}") from e
        if not isinstance(data, dict):
            raise ParseError("Failed to parse Stratus rollout response: expected a JSON object")
        return data

    async def health_check(self) -> bool:
        """Probe the chat endpoint. Never raises."""
        try:
            content = await self.query(HEALTH_CHECK_SYSTEM_PROMPT, HEALTH_CHECK_USER_PROMPT)
            parsed = self.extract_json(content)
        except Exception as e:
            logger.debug(f"Stratus health check failed: {e}")
            return False
        return isinstance(parsed, dict) and parsed.get("status") == "ok"

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> StratusClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
