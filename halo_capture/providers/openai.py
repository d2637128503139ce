"""OpenAIProvider: chat completions via httpx (no SDK dependency).

Works with api.openai.com or any server exposing /v1/chat/completions
(Ollama, vLLM, LM Studio).
"""

from __future__ import annotations

import os

import httpx

from ..types import LLMProviderError
from .base import BaseProvider

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class OpenAIProvider(BaseProvider):
    """LLM provider using an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        api_key: str | None = None,
        api_key_env: str = "OPENAI_API_KEY",
        model: str = "gpt-4o-mini",
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = 0.7,
        timeout: float = 60.0,
        max_retries: int = 1,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=timeout, max_retries=max_retries, transport=transport)
        self.api_key = api_key or os.environ.get(api_key_env, "")
        self.model = model
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.temperature = temperature
        # Self-hosted OpenAI-compatible servers usually run without a key
        if self.base_url == DEFAULT_BASE_URL and not self.api_key:
            raise LLMProviderError(
                f"No API key found. Set {api_key_env} env var or pass api_key.",
                provider="openai",
            )

    def _provider_name(self) -> str:
        return "openai"

    def _get_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def _get_headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _build_payload(
        self,
        system: str,
        messages: list[dict],
        max_tokens: int,
        json_schema: dict | None,
    ) -> dict:
        chat_messages = [{"role": "system", "content": system}] if system else []
        chat_messages.extend(
            {"role": m["role"], "content": m["content"]} for m in messages
        )
        payload = {
            "model": self.model,
            "messages": chat_messages,
            "max_tokens": max_tokens,
            "temperature": self.temperature,
        }
        if json_schema is not None:
            payload["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": json_schema.get("title", "response"),
                    "schema": json_schema,
                    "strict": False,
                },
            }
        return payload

    def _extract_text(self, data: dict) -> str:
        choices = data.get("choices", [])
        if choices:
            return choices[0].get("message", {}).get("content") or ""
        return ""
