"""Token counting for review window sizing."""

from __future__ import annotations

import importlib
from typing import Callable

DEFAULT_TIKTOKEN_MODEL = "gpt-4o-mini"


def estimate_tokens(text: str) -> int:
    """Rough estimate: ~4 chars per token, rounded up.

    Not a tokenizer. Monotonic in length, 0 for empty text.
    """
    return -(-len(text) // 4)


def _tiktoken_counter(model: str) -> Callable[[str], int]:
    try:
        import tiktoken
    except ImportError:
        raise ImportError(
            "tiktoken not installed. Install with: pip install halo-capture[tiktoken]"
        )
    try:
        enc = tiktoken.encoding_for_model(model)
    except KeyError:
        enc = tiktoken.get_encoding("o200k_base")
    return lambda text: len(enc.encode(text))


def create_token_counter(mode: str = "estimate") -> Callable[[str], int]:
    """Factory for token counters.

    Modes:
        "estimate" - ceil(len(text) / 4), no dependencies
        "tiktoken" or "tiktoken:<model>" - exact counts, needs the tiktoken extra
        "callable:module.path:func" - any ``str -> int`` callable
    """
    if mode == "estimate":
        return estimate_tokens

    if mode == "tiktoken" or mode.startswith("tiktoken:"):
        _, _, model = mode.partition(":")
        return _tiktoken_counter(model or DEFAULT_TIKTOKEN_MODEL)

    if mode.startswith("callable:"):
        parts = mode[len("callable:"):].rsplit(":", 1)
        if len(parts) != 2:
            raise ValueError(f"Invalid callable spec: {mode}. Expected callable:module:func")
        module_path, func_name = parts
        return getattr(importlib.import_module(module_path), func_name)

    raise ValueError(f"Unknown token counter mode: {mode}")
