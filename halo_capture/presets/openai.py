"""Hosted OpenAI preset: gpt-4o-mini for review, chat and capture."""

from __future__ import annotations

from .base import Preset, register_preset

OPENAI_CONFIG: dict = {
    "version": "1.0",
    "token_counter": "estimate",
    "provider": {
        "provider": "openai",
        "model": "gpt-4o-mini",
        "api_key_env": "OPENAI_API_KEY",
        "temperature": 0.7,
        "timeout": 60,
    },
    "review": {
        "total_budget_tokens": 100000,
        "reserved_response_tokens": 2000,
        "max_reply_tokens": 1500,
    },
    "capture": {
        "chat_max_tokens": 1000,
        "assessment_max_tokens": 1500,
        "capture_max_tokens": 1000,
    },
    "prompts": {
        "overrides": {},
    },
    "server": {
        "host": "127.0.0.1",
        "port": 3000,
    },
}

OPENAI_TEMPLATE = """\
# halo-capture config (preset: openai)
version: "1.0"

# Token estimate used for review window sizing: estimate | tiktoken
token_counter: estimate

# ---------------------------------------------------------------------------
# Text generation provider
# ---------------------------------------------------------------------------

provider:
  provider: openai
  model: gpt-4o-mini
  api_key_env: OPENAI_API_KEY
  temperature: 0.7
  timeout: 60

# ---------------------------------------------------------------------------
# HALO review window
# ---------------------------------------------------------------------------

review:
  total_budget_tokens: 100000
  reserved_response_tokens: 2000
  max_reply_tokens: 1500
  # default_prompt: |
  #   Replace the built-in HALO analysis prompt for every review.

# ---------------------------------------------------------------------------
# Capture agents
# ---------------------------------------------------------------------------

capture:
  chat_max_tokens: 1000
  assessment_max_tokens: 1500
  capture_max_tokens: 1000

# ---------------------------------------------------------------------------
# Method prompt overrides, keyed "1".."4"
# ---------------------------------------------------------------------------

prompts:
  overrides: {}
  # overrides_file: prompt-overrides.yaml

server:
  host: 127.0.0.1
  port: 3000
"""

openai_preset = Preset(
    name="openai",
    description="OpenAI gpt-4o-mini with the default review window and capture limits",
    config_dict=OPENAI_CONFIG,
    template=OPENAI_TEMPLATE,
    next_steps=[
        "Export your key:   export OPENAI_API_KEY=sk-...",
        "Validate config:   halo-capture config validate",
        "Start the API:     halo-capture serve",
    ],
)

register_preset(openai_preset)
