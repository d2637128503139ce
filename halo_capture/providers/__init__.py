from __future__ import annotations

import logging
import threading

from .anthropic import AnthropicProvider
from .base import BaseProvider, LLMProviderError
from .openai import OpenAIProvider

from ..types import ChatProvider, CollaboratorFailure, ProviderConfig

logger = logging.getLogger(__name__)

PROVIDERS = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}


def create_provider(config: ProviderConfig, **kwargs) -> BaseProvider:
    """Build a provider from config. Extra kwargs (api_key, transport) pass through."""
    cls = PROVIDERS.get(config.provider)
    if cls is None:
        raise ValueError(
            f"Unknown provider: {config.provider!r} (expected one of {', '.join(PROVIDERS)})"
        )
    options = dict(
        api_key_env=config.api_key_env,
        model=config.model,
        temperature=config.temperature,
        timeout=config.timeout,
        max_retries=config.max_retries,
    )
    if config.base_url:
        options["base_url"] = config.base_url
    options.update(kwargs)
    return cls(**options)


class LazyProvider:
    """Builds the configured provider on the first actual call.

    Requests rejected by validation never construct a provider, so a missing
    API key only fails requests that would reach the text-generation service.
    """

    def __init__(self, config: ProviderConfig, provider: ChatProvider | None = None) -> None:
        self.config = config
        self._provider = provider
        self._lock = threading.Lock()

    def get(self) -> ChatProvider:
        with self._lock:
            if self._provider is None:
                try:
                    self._provider = create_provider(self.config)
                except (LLMProviderError, ValueError) as e:
                    logger.error("Provider unavailable: %s", e)
                    raise CollaboratorFailure(
                        f"Text generation provider is not configured ({e})",
                        error="Provider unavailable",
                    ) from e
            return self._provider

    def complete(self, system: str, user: str, max_tokens: int) -> str:
        return self.get().complete(system, user, max_tokens)

    def chat(
        self,
        system: str,
        messages: list[dict],
        max_tokens: int,
        json_schema: dict | None = None,
    ) -> str:
        return self.get().chat(system, messages, max_tokens, json_schema=json_schema)


__all__ = [
    "AnthropicProvider",
    "BaseProvider",
    "LLMProviderError",
    "LazyProvider",
    "OpenAIProvider",
    "PROVIDERS",
    "create_provider",
]
