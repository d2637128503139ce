"""Local preset: an OpenAI-compatible server such as Ollama, no API key."""

from __future__ import annotations

import copy

from .base import Preset, register_preset
from .openai import OPENAI_CONFIG, OPENAI_TEMPLATE

LOCAL_BASE_URL = "http://127.0.0.1:11434/v1"
LOCAL_MODEL = "qwen3:4b-instruct-2507-fp16"

LOCAL_CONFIG: dict = copy.deepcopy(OPENAI_CONFIG)
LOCAL_CONFIG["provider"] = {
    "provider": "openai",
    "model": LOCAL_MODEL,
    "base_url": LOCAL_BASE_URL,
    "api_key_env": "OPENAI_API_KEY",
    "temperature": 0.7,
    "timeout": 120,
}
# Smaller context on local models
LOCAL_CONFIG["review"]["total_budget_tokens"] = 24000

LOCAL_TEMPLATE = (
    OPENAI_TEMPLATE
    .replace("(preset: openai)", "(preset: local)")
    .replace(
        "  model: gpt-4o-mini\n",
        f"  model: {LOCAL_MODEL}\n  base_url: {LOCAL_BASE_URL}\n",
    )
    .replace("  timeout: 60\n", "  timeout: 120\n")
    .replace("total_budget_tokens: 100000", "total_budget_tokens: 24000")
)

local_preset = Preset(
    name="local",
    description=f"Local OpenAI-compatible server ({LOCAL_MODEL} via Ollama), no API key needed",
    config_dict=LOCAL_CONFIG,
    template=LOCAL_TEMPLATE,
    next_steps=[
        f"Install Ollama:    brew install ollama && ollama pull {LOCAL_MODEL}",
        "Start Ollama:      ollama serve",
        "Validate config:   halo-capture config validate",
        "Start the API:     halo-capture serve",
    ],
)

register_preset(local_preset)
