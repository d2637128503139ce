"""Tests for text-generation providers using httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from halo_capture.core.review import run_review
from halo_capture.providers import AnthropicProvider, LazyProvider, OpenAIProvider, create_provider
from halo_capture.types import (
    CollaboratorFailure,
    ConversationTurn,
    LLMProviderError,
    ProviderConfig,
    ReviewSettings,
)


class Recorder:
    def __init__(self, responses: list[httpx.Response]):
        self.responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses[min(len(self.requests), len(self.responses)) - 1]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def body(self, i: int = 0) -> dict:
        return json.loads(self.requests[i].content)


def _openai_reply(text: str) -> httpx.Response:
    return httpx.Response(200, json={
        "choices": [{"message": {"role": "assistant", "content": text}}],
        "usage": {"prompt_tokens": 12, "completion_tokens": 3},
    })


class TestOpenAIProvider:
    def test_complete(self):
        rec = Recorder([_openai_reply("analysis")])
        provider = OpenAIProvider(api_key="sk-test", transport=rec.transport)
        assert provider.complete("", "review this", 1500) == "analysis"

        request = rec.requests[0]
        assert str(request.url) == "https://api.openai.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = rec.body()
        # empty system prompt is not sent
        assert body["messages"] == [{"role": "user", "content": "review this"}]
        assert body["max_tokens"] == 1500
        assert body["model"] == "gpt-4o-mini"
        assert provider.last_usage == {"prompt_tokens": 12, "completion_tokens": 3}

    def test_chat_with_schema(self):
        rec = Recorder([_openai_reply("{}")])
        provider = OpenAIProvider(api_key="sk-test", transport=rec.transport)
        schema = {"title": "AssessmentResponse", "type": "object"}
        provider.chat("be Spark", [{"role": "user", "content": "hi"}], 900, json_schema=schema)
        body = rec.body()
        assert body["messages"][0] == {"role": "system", "content": "be Spark"}
        assert body["response_format"]["type"] == "json_schema"
        assert body["response_format"]["json_schema"]["name"] == "AssessmentResponse"
        assert body["response_format"]["json_schema"]["schema"] == schema

    def test_requires_key_for_hosted_api(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(LLMProviderError, match="OPENAI_API_KEY"):
            OpenAIProvider()

    def test_local_server_needs_no_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        rec = Recorder([_openai_reply("ok")])
        provider = OpenAIProvider(base_url="http://127.0.0.1:11434/v1/", transport=rec.transport)
        assert provider.complete("", "hi", 10) == "ok"
        assert str(rec.requests[0].url) == "http://127.0.0.1:11434/v1/chat/completions"
        assert "Authorization" not in rec.requests[0].headers

    def test_single_attempt_by_default(self):
        rec = Recorder([httpx.Response(503, text="overloaded")])
        provider = OpenAIProvider(api_key="sk-test", transport=rec.transport)
        with pytest.raises(LLMProviderError) as exc:
            provider.complete("", "hi", 10)
        assert exc.value.status_code == 503
        assert len(rec.requests) == 1

    def test_retries_when_configured(self, monkeypatch):
        monkeypatch.setattr("halo_capture.providers.base.time.sleep", lambda s: None)
        rec = Recorder([httpx.Response(429, text="slow down"), _openai_reply("second")])
        provider = OpenAIProvider(api_key="sk-test", max_retries=3, transport=rec.transport)
        assert provider.complete("", "hi", 10) == "second"
        assert len(rec.requests) == 2

    def test_client_error_not_retried(self):
        rec = Recorder([httpx.Response(400, text="bad request")])
        provider = OpenAIProvider(api_key="sk-test", max_retries=3, transport=rec.transport)
        with pytest.raises(LLMProviderError, match="HTTP 400"):
            provider.complete("", "hi", 10)
        assert len(rec.requests) == 1

    def test_transport_error(self):
        def boom(request):
            raise httpx.ConnectError("refused", request=request)

        provider = OpenAIProvider(api_key="sk-test", transport=httpx.MockTransport(boom))
        with pytest.raises(LLMProviderError, match="HTTP error"):
            provider.complete("", "hi", 10)

    def test_non_json_reply_is_provider_error(self):
        rec = Recorder([httpx.Response(200, text="<html>gateway</html>")])
        provider = OpenAIProvider(api_key="sk-test", transport=rec.transport)
        with pytest.raises(LLMProviderError, match="Malformed response"):
            provider.complete("", "hi", 10)

    def test_unexpected_shape_is_provider_error(self):
        rec = Recorder([httpx.Response(200, json=["not", "an", "object"])])
        provider = OpenAIProvider(api_key="sk-test", transport=rec.transport)
        with pytest.raises(LLMProviderError, match="Malformed response"):
            provider.complete("", "hi", 10)

    def test_gateway_page_fails_the_review(self):
        rec = Recorder([httpx.Response(200, text="<html>gateway</html>")])
        provider = OpenAIProvider(api_key="sk-test", transport=rec.transport)
        turns = [ConversationTurn("user", "hi", "t0")]
        with pytest.raises(CollaboratorFailure) as exc:
            run_review(turns, ReviewSettings(), provider)
        assert exc.value.status_code == 500


class TestAnthropicProvider:
    def test_system_field_and_schema_instruction(self):
        rec = Recorder([httpx.Response(200, json={
            "content": [{"type": "text", "text": '{"message": "hi"}'}],
            "usage": {"input_tokens": 5, "output_tokens": 2},
        })])
        provider = AnthropicProvider(api_key="sk-ant-test", transport=rec.transport)
        reply = provider.chat(
            "be Spark",
            [
                {"role": "system", "content": "extra context"},
                {"role": "user", "content": "hello"},
            ],
            700,
            json_schema={"type": "object"},
        )
        assert reply == '{"message": "hi"}'

        request = rec.requests[0]
        assert request.headers["x-api-key"] == "sk-ant-test"
        body = rec.body()
        assert body["messages"] == [{"role": "user", "content": "hello"}]
        assert body["system"].startswith("be Spark\n\nextra context\n\n")
        assert '{"type": "object"}' in body["system"]
        assert body["max_tokens"] == 700

    def test_block_without_text_is_provider_error(self):
        rec = Recorder([httpx.Response(200, json={"content": [{"type": "text"}]})])
        provider = AnthropicProvider(api_key="sk-ant-test", transport=rec.transport)
        with pytest.raises(LLMProviderError, match="Malformed response"):
            provider.complete("", "hi", 10)

    def test_requires_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(LLMProviderError):
            AnthropicProvider()


class TestCreateProvider:
    def test_builds_from_config(self):
        config = ProviderConfig(provider="openai", model="llama3", base_url="http://localhost:8000/v1")
        provider = create_provider(config)
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "llama3"
        assert provider.max_retries == 1

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            create_provider(ProviderConfig(provider="gemini"))


class TestLazyProvider:
    def test_defers_construction(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        lazy = LazyProvider(ProviderConfig())
        with pytest.raises(CollaboratorFailure) as exc:
            lazy.complete("", "hi", 10)
        assert exc.value.error == "Provider unavailable"

    def test_unknown_provider_is_collaborator_failure(self):
        with pytest.raises(CollaboratorFailure):
            LazyProvider(ProviderConfig(provider="gemini")).get()

    def test_wraps_given_provider(self, mock_provider):
        lazy = LazyProvider(ProviderConfig(), mock_provider)
        assert lazy.chat("sys", [{"role": "user", "content": "x"}], 5) == "The expert shows strong tacit knowledge."
        assert mock_provider.calls[0]["system"] == "sys"
