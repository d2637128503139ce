"""Guided assessment turns with a structured (JSON schema) reply contract."""

from __future__ import annotations

import logging
from typing import Mapping

from pydantic import ValidationError

from ..prompts.methods import METHOD_TITLES
from ..schemas import (
    AssessmentOption,
    AssessmentRequest,
    AssessmentResponse,
    UserInfo,
    describe_validation_error,
)
from ..types import (
    ChatProvider,
    CollaboratorFailure,
    LLMProviderError,
    StructuredOutputError,
    UnknownMethodKey,
)
from .resolver import method_resolver

logger = logging.getLogger(__name__)

BUTTONS_INSTRUCTIONS = """

INTERACTION MODE: buttons
CRITICAL: Always provide 2-4 interactive options as buttons to guide the conversation. These could be:
- Story prompts ("Tell me about a challenging project", "Share a success story", "Describe a difficult decision")
- Follow-up questions ("What happened next?", "How did you feel?", "What would you do differently?")
- Progress options ("Continue with this story", "Move to next story", "I'm done with stories")"""

CONVERSATION_INSTRUCTIONS = """

INTERACTION MODE: conversation
CONVERSATIONAL MODE: CRITICAL - Do NOT provide any button options (return empty options array []). Instead, ask open-ended questions and encourage free-form responses. Guide the conversation naturally through follow-up questions. The user will type their responses freely."""

PROGRESS_INSTRUCTIONS = """

Progress Tracking:
- Start at 0% progress
- Increase progress by 20-25% for each meaningful story/interaction shared
- Aim for 100% when 3-5 complete stories are captured
- Set eligibilityScore to null unless you have enough information to calculate a meaningful score (0-100)"""

MODE_OPTIONS = [
    AssessmentOption(
        id="mode_buttons",
        text="Guided with buttons",
        value="buttons",
        description="I'll provide helpful buttons to guide our conversation step-by-step",
    ),
    AssessmentOption(
        id="mode_conversation",
        text="Open conversation",
        value="conversation",
        description="Let's have a natural, free-flowing conversation without buttons",
    ),
]


def build_assessment_system_prompt(
    method: str,
    user_info: UserInfo | None = None,
    overrides: Mapping[str, str] | None = None,
    interaction_mode: str = "buttons",
) -> str:
    base = method_resolver().render(
        method, overrides, user_info.variables() if user_info else None,
    )
    mode = CONVERSATION_INSTRUCTIONS if interaction_mode == "conversation" else BUTTONS_INSTRUCTIONS
    return base + mode + PROGRESS_INSTRUCTIONS


def mode_selection_response(method: str, user_info: UserInfo | None = None) -> AssessmentResponse:
    """Opening reply that asks how the user wants to interact. No provider call."""
    if method not in METHOD_TITLES:
        raise UnknownMethodKey(method, list(METHOD_TITLES))
    info = user_info or UserInfo()
    greeting = (
        f"Hi {info.name or 'there'}! I'm Spark, and I'm excited to help capture your "
        f"expertise in {info.domain or 'your field'} using Method {method}: "
        f"{METHOD_TITLES[method]}."
    )
    if info.history:
        greeting += f" I'd love to hear about your experience from {info.history}."
    return AssessmentResponse(
        message=f"{greeting}\n\nBefore we begin, how would you prefer to interact with me?",
        current_step="Interaction Mode Selection",
        progress=0,
        options=list(MODE_OPTIONS),
        next_action="continue",
    )


def is_first_interaction(request: AssessmentRequest) -> bool:
    return len(request.messages) <= 1


def run_assessment(
    request: AssessmentRequest,
    provider: ChatProvider,
    max_tokens: int = 1_500,
    overrides: Mapping[str, str] | None = None,
) -> AssessmentResponse:
    """Produce the next assessment turn.

    The reply must validate against ``AssessmentResponse``; anything else is
    a ``StructuredOutputError`` rather than a silently empty turn.
    """
    if is_first_interaction(request) and not request.interaction_mode:
        return mode_selection_response(request.method, request.user_info)

    system = build_assessment_system_prompt(
        request.method,
        request.user_info,
        overrides,
        request.interaction_mode or "buttons",
    )
    schema = AssessmentResponse.model_json_schema(by_alias=True)
    logger.debug(
        "Assessment turn: method=%s mode=%s messages=%d",
        request.method, request.interaction_mode, len(request.messages),
    )

    try:
        raw = provider.chat(
            system,
            [{"role": m.role, "content": m.content} for m in request.messages],
            max_tokens,
            json_schema=schema,
        )
    except LLMProviderError as e:
        logger.error("Assessment provider call failed: %s", e, exc_info=True)
        raise CollaboratorFailure(
            "An error occurred while preparing the next question",
            error="Failed to continue assessment",
        ) from e

    try:
        response = AssessmentResponse.model_validate_json(raw)
    except ValidationError as e:
        logger.error("Assessment reply did not match schema: %s", describe_validation_error(e))
        raise StructuredOutputError(
            "The assistant reply did not match the assessment schema",
        ) from e

    if request.interaction_mode == "conversation" and response.options:
        logger.warning("Dropping %d options returned in conversation mode", len(response.options))
        response.options = []
    return response
