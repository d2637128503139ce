"""ReviewAssembler: budget the transcript, build the review request, wrap the reply."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Sequence

from ..prompts.review import DEFAULT_REVIEW_PROMPT, build_review_request
from ..token_counter import estimate_tokens
from ..types import (
    CollaboratorFailure,
    ConversationTurn,
    EmptyConversation,
    LLMProvider,
    LLMProviderError,
    RequestPayload,
    ReviewConfig,
    ReviewDisabled,
    ReviewMetadata,
    ReviewResult,
    ReviewSettings,
)
from .window import select_window

logger = logging.getLogger(__name__)


class ReviewAssembler:
    """Assemble HALO review requests within the configured token budget.

    Prompt order in the final request:
    1. analysis prompt (custom, override, configured default, or built-in)
    2. lead-in instruction
    3. truncated transcript, oldest included turn first
    4. closing instruction
    """

    def __init__(
        self,
        config: ReviewConfig | None = None,
        token_counter: Callable[[str], int] | None = None,
    ) -> None:
        self.config = config or ReviewConfig()
        self.token_counter = token_counter or estimate_tokens

    def analysis_prompt(self, settings: ReviewSettings, prompt_override: str | None = None) -> str:
        return (
            settings.custom_prompt
            or prompt_override
            or self.config.default_prompt
            or DEFAULT_REVIEW_PROMPT
        )

    def assemble(
        self,
        turns: Sequence[ConversationTurn],
        settings: ReviewSettings,
        prompt_override: str | None = None,
        max_reply_tokens: int | None = None,
    ) -> RequestPayload:
        if not settings.enabled:
            raise ReviewDisabled()
        if not turns:
            raise EmptyConversation()

        prompt = self.analysis_prompt(settings, prompt_override)
        transcript = select_window(
            turns,
            fixed_overhead_tokens=self.token_counter(prompt),
            total_budget_tokens=self.config.total_budget_tokens,
            reserved_response_tokens=self.config.reserved_response_tokens,
            token_counter=self.token_counter,
        )
        prompt_text = build_review_request(prompt, transcript.rendered_text)

        return RequestPayload(
            prompt_text=prompt_text,
            max_reply_tokens=max_reply_tokens or self.config.max_reply_tokens,
            transcript=transcript,
            custom_prompt_used=bool(settings.custom_prompt),
            estimated_tokens=self.token_counter(prompt_text),
        )

    def build_result(
        self,
        reply_text: str,
        turns: Sequence[ConversationTurn],
        payload: RequestPayload,
        settings: ReviewSettings,
    ) -> ReviewResult:
        user_count = sum(1 for t in turns if t.role == "user")
        assistant_count = sum(1 for t in turns if t.role == "assistant")
        return ReviewResult(
            timestamp=datetime.now(timezone.utc).isoformat(),
            conversation_length=len(turns),
            analysis=reply_text,
            enabled=settings.enabled,
            custom_prompt_used=payload.custom_prompt_used,
            metadata=ReviewMetadata(
                total_messages=len(turns),
                user_messages=user_count,
                assistant_messages=assistant_count,
                emotions_detected=any(t.has_emotions for t in turns),
                estimated_tokens=payload.estimated_tokens,
                truncated=payload.transcript.truncated,
                included_messages=len(payload.transcript.included_turns),
                dropped_messages=payload.transcript.dropped_count,
            ),
        )


def run_review(
    turns: Sequence[ConversationTurn],
    settings: ReviewSettings,
    provider: LLMProvider,
    config: ReviewConfig | None = None,
    *,
    prompt_override: str | None = None,
    max_reply_tokens: int | None = None,
    token_counter: Callable[[str], int] | None = None,
) -> ReviewResult:
    """Validate, assemble, make exactly one provider call, and wrap the reply.

    Provider errors surface as ``CollaboratorFailure``; nothing is retried here.
    """
    assembler = ReviewAssembler(config, token_counter=token_counter)
    payload = assembler.assemble(
        turns, settings,
        prompt_override=prompt_override,
        max_reply_tokens=max_reply_tokens,
    )
    logger.info(
        "HALO review request: %d messages (%d included), ~%d tokens",
        len(turns), len(payload.transcript.included_turns), payload.estimated_tokens,
    )

    t0 = time.monotonic()
    try:
        reply = provider.complete("", payload.prompt_text, payload.max_reply_tokens)
    except (LLMProviderError, TimeoutError) as e:
        logger.error("HALO review provider call failed: %s", e, exc_info=True)
        raise CollaboratorFailure(
            "An error occurred while analyzing the conversation",
            error="Failed to complete HALO review",
        ) from e
    duration_ms = (time.monotonic() - t0) * 1000

    result = assembler.build_result(reply, turns, payload, settings)
    logger.info(
        "HALO review completed: length=%d estimated_tokens=%d truncated=%s duration_ms=%.0f",
        result.conversation_length,
        result.metadata.estimated_tokens,
        result.metadata.truncated,
        duration_ms,
    )
    return result
