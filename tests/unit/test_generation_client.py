"""
Unit tests for quizbuilder/services/generation_client.py
Tests: request payload, fence stripping, error mapping, single retry, graceful failure
Uses httpx.MockTransport; no network.
"""

from unittest.mock import AsyncMock

import httpx
import pytest

from quizbuilder.core.constants import UNIQUENESS_REMINDER
from quizbuilder.core.exceptions import LLMError, TransportError
from quizbuilder.services.generation_client import (
    GenerationClient,
    LocalGenerationClient,
    RetryPolicy,
)


class TestCallGenerationService:

    @pytest.mark.asyncio
    async def test_sends_prompt_and_model(self, fake_endpoint):
        client, endpoint = fake_endpoint("[]")
        await client.call_generation_service("hello", "gpt-x")
        assert endpoint.requests == [{"prompt": "hello", "model": "gpt-x"}]

    @pytest.mark.asyncio
    async def test_default_model(self, fake_endpoint):
        client, endpoint = fake_endpoint("[]")
        await client.call_generation_service("hello")
        assert endpoint.requests[0]["model"] == "test-model"

    @pytest.mark.asyncio
    async def test_strips_fences(self, fake_endpoint):
        client, _ = fake_endpoint('```json\n[{"text": "Q"}]\n```')
        assert await client.call_generation_service("p") == '[{"text": "Q"}]'

    @pytest.mark.asyncio
    async def test_missing_content_defaults_to_empty_array(self, fake_endpoint):
        client, _ = fake_endpoint(httpx.Response(200, json={}))
        assert await client.call_generation_service("p") == "[]"

    @pytest.mark.asyncio
    async def test_error_body_becomes_transport_error(self, fake_endpoint):
        client, _ = fake_endpoint(
            httpx.Response(500, json={"error": "Missing OPENAI_API_KEY", "details": {"code": 1}})
        )
        with pytest.raises(TransportError) as exc_info:
            await client.call_generation_service("p")
        assert str(exc_info.value) == "Missing OPENAI_API_KEY"
        assert exc_info.value.status_code == 500
        assert exc_info.value.details == {"code": 1}

    @pytest.mark.asyncio
    async def test_non_json_error_uses_status(self, fake_endpoint):
        client, _ = fake_endpoint(httpx.Response(502, text="Bad Gateway"))
        with pytest.raises(TransportError, match="HTTP 502"):
            await client.call_generation_service("p")

    @pytest.mark.asyncio
    async def test_network_failure_becomes_transport_error(self, fake_endpoint):
        client, _ = fake_endpoint(httpx.ConnectError("refused"))
        with pytest.raises(TransportError):
            await client.call_generation_service("p")

    @pytest.mark.asyncio
    async def test_non_object_success_body(self, fake_endpoint):
        client, _ = fake_endpoint(httpx.Response(200, text="plain text"))
        with pytest.raises(TransportError, match="Malformed"):
            await client.call_generation_service("p")


class TestFetchAndParse:

    @pytest.mark.asyncio
    async def test_parses_first_attempt(self, fake_endpoint):
        client, endpoint = fake_endpoint('[{"text": "Q1"}]')
        assert await client.fetch_and_parse("p") == [{"text": "Q1"}]
        assert len(endpoint.requests) == 1

    @pytest.mark.asyncio
    async def test_accepts_envelopes(self, fake_endpoint):
        client, _ = fake_endpoint('{"questions": [{"text": "Q1"}]}')
        assert await client.fetch_and_parse("p") == [{"text": "Q1"}]

    @pytest.mark.asyncio
    async def test_unknown_shape_is_empty_without_retry(self, fake_endpoint):
        client, endpoint = fake_endpoint('{"quiz": []}')
        assert await client.fetch_and_parse("p") == []
        assert len(endpoint.requests) == 1

    @pytest.mark.asyncio
    async def test_retries_once_with_uniqueness_reminder(self, fake_endpoint):
        client, endpoint = fake_endpoint("not json", '[{"text": "Q1"}]')
        assert await client.fetch_and_parse("base") == [{"text": "Q1"}]
        assert endpoint.prompts[0] == "base"
        assert endpoint.prompts[1].startswith("base")
        assert endpoint.prompts[1].endswith(UNIQUENESS_REMINDER)

    @pytest.mark.asyncio
    async def test_two_failures_return_empty(self, fake_endpoint):
        client, endpoint = fake_endpoint("not json", "still not json", '[{"text": "never"}]')
        assert await client.fetch_and_parse("p") == []
        assert len(endpoint.requests) == 2

    @pytest.mark.asyncio
    async def test_transport_failure_is_retried(self, fake_endpoint):
        client, endpoint = fake_endpoint(httpx.Response(500, json={"error": "boom"}), "[]")
        assert await client.fetch_and_parse("p") == []
        assert len(endpoint.requests) == 2

    @pytest.mark.asyncio
    async def test_custom_retry_policy(self, fake_endpoint):
        client, endpoint = fake_endpoint("x", "y", "z")
        client.retry_policy = RetryPolicy(max_retries=0, amend=lambda p: p + "!")
        assert await client.fetch_and_parse("p") == []
        assert endpoint.prompts == ["p"]


class TestLocalGenerationClient:

    @pytest.mark.asyncio
    async def test_uses_llm_directly(self):
        llm = AsyncMock()
        llm.complete.return_value = '```json\n[{"text": "Q"}]\n```'
        client = LocalGenerationClient(llm=llm, model="m")
        assert await client.fetch_and_parse("p") == [{"text": "Q"}]
        llm.complete.assert_awaited_once_with("p", "m")

    @pytest.mark.asyncio
    async def test_llm_error_mapped_to_transport_error(self):
        llm = AsyncMock()
        llm.complete.side_effect = LLMError("rate limited", details={"retry_after": 3})
        client = LocalGenerationClient(llm=llm)
        with pytest.raises(TransportError) as exc_info:
            await client.call_generation_service("p")
        assert exc_info.value.details == {"retry_after": 3}

    @pytest.mark.asyncio
    async def test_llm_errors_degrade_to_empty(self):
        llm = AsyncMock()
        llm.complete.side_effect = LLMError("down")
        client = LocalGenerationClient(llm=llm)
        assert await client.fetch_and_parse("p") == []
        assert llm.complete.await_count == 2


def test_defaults_come_from_settings():
    from quizbuilder.core.config import settings
    client = GenerationClient()
    assert client.endpoint == settings.GENERATION_ENDPOINT
    assert client.model == settings.MODEL_NAME
    assert client.timeout == settings.GENERATION_TIMEOUT
    assert client.retry_policy.max_retries == settings.GENERATION_MAX_RETRIES
