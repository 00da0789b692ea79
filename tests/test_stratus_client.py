"""Unit tests for stratus_reasoning/models/stratus_client.py."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from stratus_reasoning.config import Credentials
from stratus_reasoning.models.stratus_client import (
    CHAT_MAX_TOKENS,
    CHAT_MODEL,
    DEFAULT_ROLLOUT_MAX_STEPS,
    StratusClient,
    build_rollout_payload,
    extract_json,
)
from stratus_reasoning.utils.errors import ParseError, RemoteError

json_scalars = (
    st.none()
    | st.booleans()
    | st.integers(min_value=-(2**53), max_value=2**53)
    | st.text(max_size=20)
)
json_objects = st.dictionaries(
    st.text(max_size=10),
    st.recursive(
        json_scalars,
        lambda children: st.lists(children, max_size=3)
        | st.dictionaries(st.text(max_size=5), children, max_size=3),
        max_leaves=10,
    ),
    max_size=5,
)


# =============================================================================
# extract_json
# =============================================================================


class TestExtractJson:
    """Test JSON extraction from model responses."""

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(obj=json_objects)
    def test_minimal_json_returned_unchanged(self, obj: dict[str, Any]) -> None:
        """A string that is exactly one JSON object parses to that object."""
        assert extract_json(json.dumps(obj)) == obj

    def test_json_wrapped_in_prose(self) -> None:
        """Leading and trailing text around the object is ignored."""
        content = 'Sure! Here you go:\n```json\n{"count": 3, "confidence": 0.99}\n```\nDone.'
        assert extract_json(content) == {"count": 3, "confidence": 0.99}

    def test_nested_object(self) -> None:
        """Nested braces are included in the span."""
        assert extract_json('x {"a": {"b": 1}} y') == {"a": {"b": 1}}

    @pytest.mark.parametrize("content", ["", "no json here", "} backwards {"])
    def test_no_span_raises(self, content: str) -> None:
        """Content without a {...} span raises ParseError."""
        with pytest.raises(ParseError, match="No JSON found"):
            extract_json(content)

    def test_malformed_json_raises(self) -> None:
        """A span that is not valid JSON raises ParseError."""
        with pytest.raises(ParseError, match="Failed to parse"):
            extract_json("{count: 3}")

    def test_two_objects_are_not_separated(self) -> None:
        """Two separate objects form one invalid span (known limitation)."""
        with pytest.raises(ParseError):
            extract_json('{"a": 1} and then {"b": 2}')


# =============================================================================
# query
# =============================================================================


class TestQuery:
    """Test the chat-completions call."""

    @pytest.mark.asyncio
    async def test_query_returns_content(self, client: StratusClient, stratus_service: Any) -> None:
        """The first choice's content is returned."""
        stratus_service.chat_content = '{"status": "ok"}'

        content = await client.query("system text", "user text")

        assert content == '{"status": "ok"}'
        request = stratus_service.requests[0]
        assert request.url.path == "/v1/chat/completions"
        assert request.headers["authorization"] == f"Bearer {client.credentials.api_key}"
        assert "x-anthropic-api-key" not in request.headers

        body = json.loads(request.content)
        assert body["model"] == CHAT_MODEL
        assert body["temperature"] == 0.1
        assert body["max_tokens"] == CHAT_MAX_TOKENS
        assert body["messages"] == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ]

    @pytest.mark.asyncio
    async def test_query_sends_grader_headers(
        self,
        make_client: Callable[..., StratusClient],
        credentials: Credentials,
        stratus_service: Any,
    ) -> None:
        """Grader keys are forwarded as auxiliary headers."""
        stratus_service.chat_content = "ok"
        graded = Credentials(
            api_key=credentials.api_key,
            api_url=credentials.api_url,
            anthropic_api_key="sk-ant-test",
            openai_api_key="sk-oai-test",
        )
        client = make_client(stratus_service, graded)

        await client.query("s", "u")

        headers = stratus_service.requests[0].headers
        assert headers["x-anthropic-api-key"] == "sk-ant-test"
        assert headers["x-openai-api-key"] == "sk-oai-test"

    @pytest.mark.asyncio
    async def test_http_500_raises_remote_error(
        self, client: StratusClient, stratus_service: Any
    ) -> None:
        """A 500 surfaces as RemoteError with status and body, without retrying."""
        stratus_service.chat_status = 500

        with pytest.raises(RemoteError, match="500") as exc_info:
            await client.query("s", "u")

        assert "upstream exploded" in str(exc_info.value)
        assert exc_info.value.status_code == 500
        assert len(stratus_service.requests) == 1

    @pytest.mark.asyncio
    async def test_http_401_raises_remote_error(
        self, client: StratusClient, stratus_service: Any
    ) -> None:
        """Client errors are surfaced the same way."""
        stratus_service.chat_status = 401

        with pytest.raises(RemoteError, match="401"):
            await client.query("s", "u")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, ""])
    async def test_missing_content_raises(
        self, client: StratusClient, stratus_service: Any, content: str | None
    ) -> None:
        """A completion without content raises RemoteError."""
        stratus_service.chat_content = content

        with pytest.raises(RemoteError, match="No response from Stratus API"):
            await client.query("s", "u")

    @pytest.mark.asyncio
    async def test_empty_choices_raises(self, make_client: Callable[..., StratusClient]) -> None:
        """A completion with no choices raises RemoteError."""
        client = make_client(lambda request: httpx.Response(200, json={"choices": []}))

        with pytest.raises(RemoteError, match="No response from Stratus API"):
            await client.query("s", "u")

    @pytest.mark.asyncio
    async def test_connection_error_raises(self, make_client: Callable[..., StratusClient]) -> None:
        """Transport failures are wrapped in RemoteError."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(refuse)

        with pytest.raises(RemoteError):
            await client.query("s", "u")


# =============================================================================
# rollout
# =============================================================================


class TestRolloutPayload:
    """Test rollout request building."""

    def test_defaults_applied(self) -> None:
        """max_steps defaults to 5 and return_intermediate is set."""
        assert build_rollout_payload({"goal": "g"}) == {
            "goal": "g",
            "max_steps": DEFAULT_ROLLOUT_MAX_STEPS,
            "return_intermediate": True,
        }

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(max_steps=st.integers(min_value=1, max_value=10))
    def test_max_steps_overrides_default(self, max_steps: int) -> None:
        """A caller-supplied max_steps wins over the default."""
        payload = build_rollout_payload({"goal": "g", "max_steps": max_steps})
        assert payload["max_steps"] == max_steps

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(
        body=st.fixed_dictionaries(
            {"goal": st.text(max_size=20)},
            optional={
                "max_steps": st.integers(min_value=1, max_value=10),
                "actions": st.lists(st.integers(min_value=0, max_value=66), max_size=5),
                "return_intermediate": st.booleans(),
            },
        )
    )
    def test_return_intermediate_always_true(self, body: dict[str, Any]) -> None:
        """return_intermediate is true whatever the caller sent."""
        assert build_rollout_payload(body)["return_intermediate"] is True

    def test_none_values_dropped(self) -> None:
        """None fields do not override defaults."""
        payload = build_rollout_payload({"goal": "g", "max_steps": None, "actions": None})
        assert payload == {"goal": "g", "max_steps": 5, "return_intermediate": True}


class TestRollout:
    """Test the /v1/rollout call."""

    @pytest.mark.asyncio
    async def test_rollout_passes_response_through(
        self,
        client: StratusClient,
        stratus_service: Any,
        sample_rollout: dict[str, Any],
    ) -> None:
        """The response body is returned unchanged."""
        stratus_service.rollout_body = sample_rollout

        result = await client.rollout({"goal": "Find and book a hotel", "actions": [12, 40]})

        assert result == sample_rollout
        request = stratus_service.requests[0]
        assert request.url.path == "/v1/rollout"
        assert request.headers["authorization"] == f"Bearer {client.credentials.api_key}"
        assert json.loads(request.content) == {
            "goal": "Find and book a hotel",
            "actions": [12, 40],
            "max_steps": 5,
            "return_intermediate": True,
        }

    @pytest.mark.asyncio
    async def test_rollout_cannot_disable_intermediate(
        self, client: StratusClient, stratus_service: Any
    ) -> None:
        """An explicit return_intermediate=False is overridden on the wire."""
        await client.rollout({"goal": "g", "max_steps": 8, "return_intermediate": False})

        body = json.loads(stratus_service.requests[0].content)
        assert body["return_intermediate"] is True
        assert body["max_steps"] == 8

    @pytest.mark.asyncio
    async def test_rollout_error_status(self, client: StratusClient, stratus_service: Any) -> None:
        """A non-success status raises RemoteError with status and body."""
        stratus_service.rollout_status = 503

        with pytest.raises(RemoteError, match="503: rollout exploded"):
            await client.rollout({"goal": "g"})

    @pytest.mark.asyncio
    async def test_rollout_non_json_body(self, make_client: Callable[..., StratusClient]) -> None:
        """A body that is not a JSON object raises ParseError."""
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ParseError):
            await client.rollout({"goal": "g"})


# =============================================================================
# health_check
# =============================================================================


class TestHealthCheck:
    """Test the health probe."""

    @pytest.mark.asyncio
    async def test_healthy(self, client: StratusClient, stratus_service: Any) -> None:
        """An {"status": "ok"} answer is healthy."""
        stratus_service.chat_content = 'Result: {"status": "ok"}'
        assert await client.health_check() is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ['{"status": "degraded"}', "ok", '["status", "ok"]'])
    async def test_unexpected_answer(
        self, client: StratusClient, stratus_service: Any, content: str
    ) -> None:
        """Any other answer is unhealthy."""
        stratus_service.chat_content = content
        assert await client.health_check() is False

    @pytest.mark.asyncio
    async def test_server_error_never_raises(
        self, client: StratusClient, stratus_service: Any
    ) -> None:
        """HTTP failures yield False instead of raising."""
        stratus_service.chat_status = 500
        assert await client.health_check() is False


class TestClientLifecycle:
    """Test client construction and cleanup."""

    def test_trailing_slash_stripped(self, credentials: Credentials) -> None:
        """The base URL is normalized."""
        client = StratusClient(Credentials(api_key=credentials.api_key, api_url="http://x:1/"))
        assert client.base_url == "http://x:1"

    @pytest.mark.asyncio
    async def test_context_manager_closes_http_client(
        self, make_client: Callable[..., StratusClient], stratus_service: Any
    ) -> None:
        """Leaving the context closes the HTTP client."""
        async with make_client(stratus_service) as client:
            pass
        assert client._http.is_closed
