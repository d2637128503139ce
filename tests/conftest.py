"""Shared fixtures for halo-capture tests."""

from __future__ import annotations

import pytest

from halo_capture.types import ConversationTurn, LLMProviderError, ReviewConfig


class MockLLMProvider:
    """Records every call and returns canned replies in order (last one repeats)."""

    def __init__(self, replies: list[str] | None = None, error: Exception | None = None):
        self.replies = list(replies or ["mock reply"])
        self.error = error
        self.calls: list[dict] = []

    def _next(self) -> str:
        if self.error is not None:
            raise self.error
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0]

    def complete(self, system: str, user: str, max_tokens: int) -> str:
        self.calls.append({"system": system, "user": user, "max_tokens": max_tokens})
        return self._next()

    def chat(self, system, messages, max_tokens, json_schema=None) -> str:
        self.calls.append({
            "system": system,
            "messages": list(messages),
            "max_tokens": max_tokens,
            "json_schema": json_schema,
        })
        return self._next()


@pytest.fixture
def mock_provider() -> MockLLMProvider:
    return MockLLMProvider(["The expert shows strong tacit knowledge."])


@pytest.fixture
def failing_provider() -> MockLLMProvider:
    return MockLLMProvider(error=LLMProviderError("HTTP 503: overloaded", provider="openai", status_code=503))


@pytest.fixture
def review_config() -> ReviewConfig:
    return ReviewConfig(total_budget_tokens=100_000, reserved_response_tokens=2_000, max_reply_tokens=1_500)


@pytest.fixture
def expert_turns() -> list[ConversationTurn]:
    return [
        ConversationTurn(
            role="assistant",
            content="Tell me about a time you rescued a failing campaign.",
            timestamp="2026-01-15T10:00:00Z",
        ),
        ConversationTurn(
            role="user",
            content="In 2019 our launch tanked, so I pulled the team into a war room and rebuilt the brief in a day.",
            timestamp="2026-01-15T10:00:30Z",
            emotions={"determination": 0.82, "pride": 0.4, "anxiety": 0.15},
        ),
        ConversationTurn(
            role="assistant",
            content="What signal told you the brief itself was the problem?",
            timestamp="2026-01-15T10:01:00Z",
        ),
        ConversationTurn(
            role="user",
            content="Focus groups kept repeating our tagline back wrong. That never happens with a clear brief.",
            timestamp="2026-01-15T10:01:45Z",
            emotions={"confidence": 0.7},
        ),
    ]


@pytest.fixture
def make_provider():
    """Build a MockLLMProvider with specific replies."""
    return MockLLMProvider
