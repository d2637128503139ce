"""LLM Provider base class with the shared request loop."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

import httpx

from ..types import LLMProviderError

RETRY_BACKOFF = [1.0, 2.0, 4.0]

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base for LLM providers. Subclasses override hook methods;
    the request loop in ``chat()`` is shared.

    ``max_retries`` counts attempts, so the default of 1 makes exactly one
    request. Transient failures (429, 5xx, transport errors) are only retried
    when the caller opts into more attempts.
    """

    def __init__(
        self,
        timeout: float = 60.0,
        max_retries: int = 1,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.last_usage: dict = {}
        self._transport = transport

    # -- hook methods subclasses must implement --

    @abstractmethod
    def _provider_name(self) -> str: ...

    @abstractmethod
    def _get_url(self) -> str: ...

    @abstractmethod
    def _get_headers(self) -> dict: ...

    @abstractmethod
    def _build_payload(
        self,
        system: str,
        messages: list[dict],
        max_tokens: int,
        json_schema: dict | None,
    ) -> dict: ...

    @abstractmethod
    def _extract_text(self, data: dict) -> str: ...

    # -- shared request loop --

    def complete(self, system: str, user: str, max_tokens: int) -> str:
        """Single-prompt completion."""
        return self.chat(system, [{"role": "user", "content": user}], max_tokens)

    def chat(
        self,
        system: str,
        messages: list[dict],
        max_tokens: int,
        json_schema: dict | None = None,
    ) -> str:
        """Send a chat request. ``json_schema`` asks for a structured JSON reply."""
        url = self._get_url()
        headers = self._get_headers()
        payload = self._build_payload(system, messages, max_tokens, json_schema)

        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                    response = client.post(url, headers=headers, json=payload)

                if response.status_code == 200:
                    try:
                        data = response.json()
                        self.last_usage = data.get("usage", {})
                        return self._extract_text(data)
                    except (ValueError, KeyError, TypeError, AttributeError) as e:
                        raise LLMProviderError(
                            f"Malformed response: {e}",
                            provider=self._provider_name(),
                        ) from e

                if response.status_code == 429 or response.status_code >= 500:
                    last_error = LLMProviderError(
                        f"HTTP {response.status_code}: {response.text}",
                        provider=self._provider_name(),
                        status_code=response.status_code,
                    )
                    if attempt < self.max_retries - 1:
                        logger.warning(
                            "%s transient error (attempt %d/%d): HTTP %d",
                            self._provider_name(), attempt + 1, self.max_retries,
                            response.status_code,
                        )
                        time.sleep(RETRY_BACKOFF[min(attempt, len(RETRY_BACKOFF) - 1)])
                    continue

                raise LLMProviderError(
                    f"HTTP {response.status_code}: {response.text}",
                    provider=self._provider_name(),
                    status_code=response.status_code,
                )

            except httpx.HTTPError as e:
                last_error = LLMProviderError(
                    f"HTTP error: {e}",
                    provider=self._provider_name(),
                )
                if attempt < self.max_retries - 1:
                    time.sleep(RETRY_BACKOFF[min(attempt, len(RETRY_BACKOFF) - 1)])
                continue

        raise last_error or LLMProviderError(
            "Max retries exceeded", provider=self._provider_name()
        )
