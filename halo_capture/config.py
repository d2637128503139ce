"""Configuration loading, validation, and defaults."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml

from .prompts.methods import DEFAULT_METHOD_PROMPTS
from .types import (
    CaptureConfig,
    HaloConfig,
    PromptsConfig,
    ProviderConfig,
    ReviewConfig,
    ServerConfig,
)

CONFIG_ENV = "HALO_CAPTURE_CONFIG"

CONFIG_FILENAMES = [
    "halo-capture.yaml",
    "halo-capture.yml",
    "halo-capture.json",
]

DEFAULT_API_KEY_ENVS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


def _discover_config() -> Path | None:
    """Search CWD then parent dirs up to home for a config file."""
    cwd = Path.cwd()
    home = Path.home()
    search = cwd
    while True:
        for name in CONFIG_FILENAMES:
            candidate = search / name
            if candidate.is_file():
                return candidate
        if search == home or search == search.parent:
            break
        search = search.parent
    return None


def _read_mapping(path: Path) -> dict[str, Any]:
    text = path.read_text()
    if path.suffix == ".json":
        raw = json.loads(text)
    else:
        raw = yaml.safe_load(text) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a mapping in {path}, got {type(raw).__name__}")
    return raw


def load_overrides_file(path: str | Path) -> dict[str, str]:
    """Load a method-key -> template mapping from YAML or JSON."""
    raw = _read_mapping(Path(path))
    return {str(k): str(v) for k, v in raw.items() if v}


def _build_config(raw: dict[str, Any], base_dir: Path | None = None) -> HaloConfig:
    """Build a HaloConfig from a raw dict."""
    provider_raw = raw.get("provider", {})
    provider_name = provider_raw.get("provider", "openai")
    provider = ProviderConfig(
        provider=provider_name,
        model=provider_raw.get("model", "gpt-4o-mini"),
        base_url=provider_raw.get("base_url", ""),
        api_key_env=provider_raw.get(
            "api_key_env", DEFAULT_API_KEY_ENVS.get(provider_name, "OPENAI_API_KEY"),
        ),
        temperature=provider_raw.get("temperature", 0.7),
        timeout=provider_raw.get("timeout", 60.0),
        max_retries=provider_raw.get("max_retries", 1),
    )

    review_raw = raw.get("review", {})
    review = ReviewConfig(
        total_budget_tokens=review_raw.get("total_budget_tokens", 100_000),
        reserved_response_tokens=review_raw.get("reserved_response_tokens", 2_000),
        max_reply_tokens=review_raw.get("max_reply_tokens", 1_500),
        default_prompt=review_raw.get("default_prompt"),
    )

    capture_raw = raw.get("capture", {})
    capture = CaptureConfig(
        chat_max_tokens=capture_raw.get("chat_max_tokens", 1_000),
        assessment_max_tokens=capture_raw.get("assessment_max_tokens", 1_500),
        capture_max_tokens=capture_raw.get("capture_max_tokens", 1_000),
    )

    # Prompt overrides: inline entries win over the overrides file
    prompts_raw = raw.get("prompts", {})
    overrides_file = prompts_raw.get("overrides_file")
    overrides: dict[str, str] = {}
    if overrides_file:
        file_path = Path(overrides_file)
        if base_dir is not None and not file_path.is_absolute():
            file_path = base_dir / file_path
        if file_path.is_file():
            overrides.update(load_overrides_file(file_path))
        overrides_file = str(file_path)
    for key, value in (prompts_raw.get("overrides") or {}).items():
        if value:
            overrides[str(key)] = value
    prompts = PromptsConfig(overrides=overrides, overrides_file=overrides_file)

    server_raw = raw.get("server", {})
    server = ServerConfig(
        host=server_raw.get("host", "127.0.0.1"),
        port=server_raw.get("port", 3000),
    )

    return HaloConfig(
        version=str(raw.get("version", "1.0")),
        token_counter=raw.get("token_counter", "estimate"),
        provider=provider,
        review=review,
        capture=capture,
        prompts=prompts,
        server=server,
    )


def validate_config(config: HaloConfig) -> list[str]:
    """Validate a config. Returns list of error strings (empty = valid)."""
    errors: list[str] = []

    mode = config.token_counter
    if not (mode in ("estimate", "tiktoken") or mode.startswith(("tiktoken:", "callable:"))):
        errors.append(f"Unknown token_counter mode '{mode}'")

    if config.provider.provider not in DEFAULT_API_KEY_ENVS:
        errors.append(
            f"Unknown provider '{config.provider.provider}' "
            f"(expected one of {', '.join(DEFAULT_API_KEY_ENVS)})"
        )

    if config.provider.timeout <= 0:
        errors.append("provider.timeout must be > 0")

    if config.provider.max_retries < 1:
        errors.append("provider.max_retries must be >= 1")

    review = config.review
    if review.total_budget_tokens <= 0:
        errors.append("review.total_budget_tokens must be > 0")
    if review.reserved_response_tokens < 0:
        errors.append("review.reserved_response_tokens must be >= 0")
    if review.reserved_response_tokens >= review.total_budget_tokens:
        errors.append(
            f"review.reserved_response_tokens ({review.reserved_response_tokens}) must be < "
            f"review.total_budget_tokens ({review.total_budget_tokens})"
        )
    if review.max_reply_tokens <= 0:
        errors.append("review.max_reply_tokens must be > 0")

    for key in config.prompts.overrides:
        if key not in DEFAULT_METHOD_PROMPTS:
            errors.append(
                f"Prompt override for unknown method key '{key}' "
                f"(expected one of {', '.join(DEFAULT_METHOD_PROMPTS)})"
            )

    if config.prompts.overrides_file and not Path(config.prompts.overrides_file).is_file():
        errors.append(f"Prompt overrides file not found: {config.prompts.overrides_file}")

    return errors


def load_config(
    config_path: str | Path | None = None,
    config_dict: dict | None = None,
) -> HaloConfig:
    """Load config from dict, explicit path, $HALO_CAPTURE_CONFIG, or auto-discover."""
    if config_dict is not None:
        return _build_config(config_dict)

    if config_path is not None:
        path = Path(config_path)
    elif os.environ.get(CONFIG_ENV):
        path = Path(os.environ[CONFIG_ENV])
    else:
        path = _discover_config()

    if path is None:
        # Return defaults
        return _build_config({})

    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    return _build_config(_read_mapping(path), base_dir=path.parent)
