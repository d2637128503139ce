"""Capture agents: per-method chat sessions and the voice-tool capture webhook."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Mapping

from ..prompts.agents import (
    AGENT_NAMES,
    CAPTURE_FALLBACKS,
    CAPTURE_NEXT_STEPS,
    CAPTURE_PROMPTS,
    CAPTURE_USER_TEMPLATE,
    ORCHESTRATOR_PROMPT,
)
from ..schemas import CaptureRequest, ChatMessageIn, UserInfo
from ..types import (
    CaptureResult,
    ChatProvider,
    CollaboratorFailure,
    LLMProvider,
    LLMProviderError,
    MissingUserInput,
    UnknownMethodKey,
)
from .resolver import PromptResolver, method_resolver

logger = logging.getLogger(__name__)

# Chat agent -> method key. The orchestrator has no method prompt.
AGENT_METHODS: dict[str, str | None] = {
    "orchestrator": None,
    "narrative": "1",
    "questionnaire": "2",
    "simulation": "3",
    "protocol": "4",
}


def agent_system_prompt(
    agent: str,
    overrides: Mapping[str, str] | None = None,
    user_info: UserInfo | None = None,
) -> str:
    """System prompt for a multi-agent chat session."""
    if agent not in AGENT_METHODS:
        raise UnknownMethodKey(agent, list(AGENT_METHODS))
    method = AGENT_METHODS[agent]
    if method is None:
        return ORCHESTRATOR_PROMPT
    variables = user_info.variables() if user_info else None
    return method_resolver().render(method, overrides, variables)


def run_agent_chat(
    agent: str,
    messages: list[ChatMessageIn],
    provider: ChatProvider,
    max_tokens: int,
    *,
    overrides: Mapping[str, str] | None = None,
    user_info: UserInfo | None = None,
) -> str:
    """One non-streaming turn of an agent chat; returns the reply text."""
    system = agent_system_prompt(agent, overrides, user_info)
    try:
        return provider.chat(
            system,
            [{"role": m.role, "content": m.content} for m in messages],
            max_tokens,
        )
    except LLMProviderError as e:
        logger.error("%s chat failed: %s", agent, e, exc_info=True)
        raise CollaboratorFailure(
            "An error occurred while generating a reply",
            error=f"Failed to run {AGENT_NAMES[agent]}",
        ) from e


def capture_resolver() -> PromptResolver:
    return PromptResolver(CAPTURE_PROMPTS, CAPTURE_FALLBACKS)


def capture_expertise(
    request: CaptureRequest,
    provider: LLMProvider,
    max_tokens: int = 1_000,
) -> CaptureResult:
    """Route a voice-tool call to the capture agent named by ``capture_type``."""
    if not request.user_input:
        raise MissingUserInput()

    resolver = capture_resolver()
    variables = {
        "expertise_domain": request.expertise_domain,
        "user_input": request.user_input,
    }
    system = resolver.render(request.capture_type, variables=variables)
    user = resolver.substitute(CAPTURE_USER_TEMPLATE, {"user_input": request.user_input})
    agent_name = AGENT_NAMES[request.capture_type]

    try:
        response = provider.complete(system, user, max_tokens)
    except LLMProviderError as e:
        logger.error("capture-expertise (%s) failed: %s", request.capture_type, e, exc_info=True)
        raise CollaboratorFailure(
            "I encountered an error while processing your expertise. Please try again.",
            error="Failed to capture expertise",
        ) from e

    result = CaptureResult(
        timestamp=datetime.now(timezone.utc).isoformat(),
        agent=agent_name,
        domain=request.expertise_domain or "general",
        location=request.location or "unknown",
        input=request.user_input,
        response=response,
        capture_type=request.capture_type,
        next_steps=list(CAPTURE_NEXT_STEPS),
    )
    logger.info(
        "Captured expertise: agent=%s domain=%s location=%s",
        result.agent, result.domain, result.location,
    )
    return result
