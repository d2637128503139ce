"""Request and structured-reply schemas validated at the HTTP, MCP, and CLI boundaries.

Field aliases accept the browser client's camelCase keys; snake_case names
are accepted too.
"""

from __future__ import annotations

from typing import Literal, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .types import ConversationTurn, InvalidRequest, ReviewSettings


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---- Review ----

class TurnIn(_Schema):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    role: Literal["user", "assistant"]
    content: str
    timestamp: str = ""
    emotions: Optional[dict[str, float]] = None

    def to_turn(self) -> ConversationTurn:
        return ConversationTurn(
            role=self.role,
            content=self.content,
            timestamp=self.timestamp,
            emotions=dict(self.emotions) if self.emotions else None,
        )


class ReviewSettingsIn(_Schema):
    enabled: bool
    custom_prompt: Optional[str] = Field(default=None, alias="customPrompt")

    def to_settings(self) -> ReviewSettings:
        return ReviewSettings(enabled=self.enabled, custom_prompt=self.custom_prompt or None)


class ReviewRequest(_Schema):
    conversation: list[TurnIn] = Field(default_factory=list)
    settings: ReviewSettingsIn
    max_reply_tokens: Optional[int] = Field(default=None, alias="maxReplyTokens", gt=0)

    def turns(self) -> list[ConversationTurn]:
        return [t.to_turn() for t in self.conversation]


# ---- Capture sessions ----

class ChatMessageIn(_Schema):
    role: Literal["user", "assistant", "system"]
    content: str


class UserInfo(_Schema):
    name: Optional[str] = None
    domain: Optional[str] = None
    history: Optional[str] = None

    def variables(self) -> dict[str, str | None]:
        return {
            "user_name": self.name,
            "user_domain": self.domain,
            "user_history": self.history,
        }


class AgentChatRequest(_Schema):
    messages: list[ChatMessageIn] = Field(default_factory=list)
    user_info: Optional[UserInfo] = Field(default=None, alias="userInfo")
    prompt_overrides: dict[str, str] = Field(default_factory=dict, alias="promptOverrides")


class AssessmentRequest(_Schema):
    messages: list[ChatMessageIn] = Field(default_factory=list)
    method: str = "1"
    user_info: Optional[UserInfo] = Field(default=None, alias="userInfo")
    interaction_mode: Optional[Literal["buttons", "conversation"]] = Field(
        default=None, alias="interactionMode",
    )
    prompt_overrides: dict[str, str] = Field(default_factory=dict, alias="promptOverrides")


class CaptureRequest(_Schema):
    user_input: Optional[str] = None
    capture_type: Literal[
        "orchestrator", "narrative", "questionnaire", "simulation", "protocol",
    ] = "orchestrator"
    expertise_domain: Optional[str] = None
    location: Optional[str] = None


# ---- Structured assessment reply ----

class AssessmentOption(_Schema):
    id: str = Field(description="Unique identifier for the option")
    text: str = Field(description="Button text to display")
    value: str = Field(description="Value to send when clicked")
    description: Optional[str] = Field(default=None, description="Optional description for the option")


class AssessmentResponse(_Schema):
    message: str = Field(description="The main response message to the user")
    current_step: str = Field(alias="currentStep", description="Current step in the assessment process")
    progress: float = Field(ge=0, le=100, description="Progress percentage (0-100)")
    options: list[AssessmentOption] = Field(
        default_factory=list, description="Interactive options/buttons for the user",
    )
    next_action: Literal["continue", "complete", "redirect"] = Field(
        alias="nextAction", description="What should happen next",
    )
    recommendations: Optional[list[str]] = Field(
        default=None, description="Specific recommendations based on user responses",
    )
    eligibility_score: Optional[float] = Field(
        default=None, alias="eligibilityScore", ge=0, le=100,
        description="Eligibility score if applicable (null if not needed)",
    )

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


M = TypeVar("M", bound=BaseModel)


def describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "body"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def parse_model(model: Type[M], raw: object) -> M:
    """Validate ``raw`` against ``model``; shape errors become ``InvalidRequest``."""
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise InvalidRequest(describe_validation_error(e)) from e
