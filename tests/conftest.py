"""
Shared pytest fixtures for the test suite.
Applies to all subdirectories: unit/, api/
No network access: the generation endpoint is faked with httpx.MockTransport.
"""

import json
import os

import httpx
import pytest

# Keep a developer's .env key out of the tests
os.environ.setdefault("OPENAI_API_KEY", "")

from quizbuilder.services.generation_client import GenerationClient


class FakeGenerationEndpoint:
    """Scripted transport endpoint: replays one reply per request, records prompts."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        reply = self.replies.pop(0) if self.replies else httpx.Response(500, json={"error": "no reply scripted"})
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, str):
            return httpx.Response(200, json={"content": reply})
        return reply

    @property
    def prompts(self):
        return [body["prompt"] for body in self.requests]


@pytest.fixture
def fake_endpoint():
    """Factory: fake_endpoint("[...]", httpx.Response(...), ...) -> (client, endpoint)."""
    def _make(*replies):
        endpoint = FakeGenerationEndpoint(replies)
        client = GenerationClient(
            endpoint="http://testserver/api/generate",
            model="test-model",
            timeout=5,
            transport=httpx.MockTransport(endpoint),
        )
        return client, endpoint
    return _make


@pytest.fixture
def mc_item():
    """Factory for a raw multiple-choice item as the generator would emit it."""
    def _make(text, **extra):
        item = {"type": "multiple-choice", "text": text, "points": 1, "options": ["a", "b", "c"]}
        item.update(extra)
        return item
    return _make
