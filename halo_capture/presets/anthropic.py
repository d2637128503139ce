"""Anthropic preset: Claude Haiku through the Messages API."""

from __future__ import annotations

import copy

from .base import Preset, register_preset
from .openai import OPENAI_CONFIG, OPENAI_TEMPLATE

ANTHROPIC_CONFIG: dict = copy.deepcopy(OPENAI_CONFIG)
ANTHROPIC_CONFIG["provider"] = {
    "provider": "anthropic",
    "model": "claude-haiku-4-5-20251001",
    "api_key_env": "ANTHROPIC_API_KEY",
    "temperature": 0.7,
    "timeout": 60,
}

ANTHROPIC_TEMPLATE = (
    OPENAI_TEMPLATE
    .replace("(preset: openai)", "(preset: anthropic)")
    .replace("provider: openai", "provider: anthropic")
    .replace("model: gpt-4o-mini", "model: claude-haiku-4-5-20251001")
    .replace("api_key_env: OPENAI_API_KEY", "api_key_env: ANTHROPIC_API_KEY")
)

anthropic_preset = Preset(
    name="anthropic",
    description="Anthropic Claude Haiku; structured assessment replies via schema instructions",
    config_dict=ANTHROPIC_CONFIG,
    template=ANTHROPIC_TEMPLATE,
    next_steps=[
        "Export your key:   export ANTHROPIC_API_KEY=sk-ant-...",
        "Validate config:   halo-capture config validate",
        "Start the API:     halo-capture serve",
    ],
)

register_preset(anthropic_preset)
