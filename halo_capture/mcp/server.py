"""MCP server exposing HALO review and expertise capture as tools."""

from __future__ import annotations

import json
import logging

from mcp.server.fastmcp import FastMCP

from ..config import load_config
from ..core.capture import capture_expertise as _capture_expertise
from ..core.resolver import merge_overrides, method_resolver
from ..core.review import run_review
from ..prompts.methods import METHOD_TITLES
from ..schemas import CaptureRequest, ReviewRequest, UserInfo, parse_model
from ..token_counter import create_token_counter
from ..types import HaloError

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "halo-capture",
    instructions="Multi-method expertise capture: method prompts, capture agents, and HALO conversation review",
)

# Lazy singletons
_config = None
_provider = None


def _get_config():
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _get_provider():
    """Get or create the provider singleton."""
    global _provider
    if _provider is None:
        from ..providers import LazyProvider
        _provider = LazyProvider(_get_config().provider)
    return _provider


def _error_json(e: HaloError) -> str:
    return json.dumps({"error": e.error, "message": e.message})


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------

@mcp.tool()
def halo_review(
    conversation: list[dict],
    custom_prompt: str | None = None,
) -> str:
    """Run a HALO review over a captured conversation.

    Args:
        conversation: Turns with 'role' (user/assistant), 'content', 'timestamp',
            and optional 'emotions' (label -> score in 0..1).
        custom_prompt: Replaces the built-in analysis prompt.

    Returns:
        JSON with the review (analysis text plus metadata), or an error object.
    """
    config = _get_config()
    try:
        request = parse_model(ReviewRequest, {
            "conversation": conversation,
            "settings": {"enabled": True, "customPrompt": custom_prompt},
        })
        result = run_review(
            request.turns(),
            request.settings.to_settings(),
            _get_provider(),
            config.review,
            token_counter=create_token_counter(config.token_counter),
        )
    except HaloError as e:
        return _error_json(e)
    return json.dumps(result.to_dict())


@mcp.tool()
def capture_expertise(
    user_input: str,
    capture_type: str = "orchestrator",
    expertise_domain: str | None = None,
    location: str | None = None,
) -> str:
    """Capture expertise from a spoken or typed input via a specialist agent.

    Args:
        user_input: What the expert said.
        capture_type: orchestrator, narrative, questionnaire, simulation, or protocol.
        expertise_domain: The expert's field.
        location: Where the capture happened.

    Returns:
        JSON with the agent name, its response, and suggested next steps.
    """
    try:
        request = parse_model(CaptureRequest, {
            "user_input": user_input,
            "capture_type": capture_type,
            "expertise_domain": expertise_domain,
            "location": location,
        })
        result = _capture_expertise(
            request, _get_provider(), _get_config().capture.capture_max_tokens,
        )
    except HaloError as e:
        return _error_json(e)
    return json.dumps(result.to_dict())


@mcp.tool()
def get_method_prompt(
    method: str,
    user_name: str | None = None,
    user_domain: str | None = None,
    user_history: str | None = None,
) -> str:
    """Return the effective capture prompt for a method, placeholders filled.

    Args:
        method: Method key "1" (narrative) to "4" (protocol analysis).
        user_name: Expert's name.
        user_domain: Expert's field.
        user_history: Key background.
    """
    info = UserInfo(name=user_name, domain=user_domain, history=user_history)
    overrides = merge_overrides(_get_config().prompts.overrides)
    try:
        return method_resolver().render(method, overrides, info.variables())
    except HaloError as e:
        return _error_json(e)


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

@mcp.resource("halo://methods")
def list_methods() -> str:
    """List the elicitation methods and whether each has a custom prompt."""
    overrides = _get_config().prompts.overrides
    return json.dumps([
        {"key": key, "title": title, "custom": bool(overrides.get(key))}
        for key, title in METHOD_TITLES.items()
    ])


def main():
    mcp.run()


if __name__ == "__main__":
    main()
