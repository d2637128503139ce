"""All dataclasses, Protocols, and error types for halo-capture."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Protocol, runtime_checkable


# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------

Role = Literal["user", "assistant"]


@dataclass(frozen=True)
class ConversationTurn:
    role: Role
    content: str
    timestamp: str = ""  # ISO-8601, caller keeps these non-decreasing
    emotions: dict[str, float] | None = None  # label -> intensity (0..1)

    @property
    def has_emotions(self) -> bool:
        return bool(self.emotions)


@dataclass(frozen=True)
class FormattedTurn:
    """One turn rendered for the review transcript, with its token size."""
    block: str
    size: int


@dataclass(frozen=True)
class TruncatedTranscript:
    included_turns: tuple[ConversationTurn, ...] = ()
    dropped_count: int = 0
    rendered_text: str = ""
    estimated_tokens: int = 0

    @property
    def truncated(self) -> bool:
        return self.dropped_count > 0


# ---------------------------------------------------------------------------
# Review
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReviewSettings:
    enabled: bool = True
    custom_prompt: str | None = None


@dataclass(frozen=True)
class RequestPayload:
    """Everything sent to the text-generation provider for one review."""
    prompt_text: str
    max_reply_tokens: int
    transcript: TruncatedTranscript
    custom_prompt_used: bool = False
    estimated_tokens: int = 0  # estimate of the full prompt_text


@dataclass
class ReviewMetadata:
    total_messages: int = 0
    user_messages: int = 0
    assistant_messages: int = 0
    emotions_detected: bool = False
    estimated_tokens: int = 0
    truncated: bool = False
    included_messages: int = 0
    dropped_messages: int = 0


@dataclass
class ReviewResult:
    timestamp: str
    conversation_length: int
    analysis: str
    enabled: bool = True
    custom_prompt_used: bool = False
    metadata: ReviewMetadata = field(default_factory=ReviewMetadata)

    def to_dict(self) -> dict:
        """JSON shape consumed by the browser client (camelCase keys)."""
        m = self.metadata
        return {
            "timestamp": self.timestamp,
            "conversationLength": self.conversation_length,
            "analysis": self.analysis,
            "settings": {
                "enabled": self.enabled,
                "customPrompt": self.custom_prompt_used,
            },
            "metadata": {
                "totalMessages": m.total_messages,
                "userMessages": m.user_messages,
                "assistantMessages": m.assistant_messages,
                "emotionsDetected": m.emotions_detected,
                "estimatedTokens": m.estimated_tokens,
                "truncated": m.truncated,
                "includedMessages": m.included_messages,
                "droppedMessages": m.dropped_messages,
            },
        }


# ---------------------------------------------------------------------------
# Capture
# ---------------------------------------------------------------------------

@dataclass
class CaptureResult:
    timestamp: str
    agent: str
    domain: str
    location: str
    input: str
    response: str
    capture_type: str
    next_steps: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": True,
            "agent": self.agent,
            "captured_expertise": {
                "timestamp": self.timestamp,
                "agent": self.agent,
                "domain": self.domain,
                "location": self.location,
                "input": self.input,
                "response": self.response,
                "capture_type": self.capture_type,
            },
            "response": self.response,
            "next_steps": list(self.next_steps),
        }


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class HaloError(Exception):
    """Base for named failures surfaced to callers as ``{error, message}``."""

    status_code = 500
    error = "Internal error"

    def __init__(self, message: str = "", *, error: str | None = None) -> None:
        super().__init__(message or self.error)
        self.message = message or self.error
        if error is not None:
            self.error = error


class EmptyConversation(HaloError):
    status_code = 400
    error = "No conversation provided"

    def __init__(self, message: str = "Please provide a conversation to review") -> None:
        super().__init__(message)


class ReviewDisabled(HaloError):
    status_code = 400
    error = "HALO review is disabled"

    def __init__(self, message: str = "Enable HALO review in settings to use this feature") -> None:
        super().__init__(message)


class MissingUserInput(HaloError):
    status_code = 400
    error = "No user input provided"

    def __init__(
        self,
        message: str = "I was unable to capture your expertise. Please try speaking again.",
    ) -> None:
        super().__init__(message)


class InvalidRequest(HaloError):
    status_code = 400
    error = "Invalid request"


class UnknownMethodKey(HaloError):
    status_code = 500
    error = "Unknown method key"

    def __init__(self, key: str, known: list[str] | None = None) -> None:
        known_part = f" (known: {', '.join(known)})" if known else ""
        super().__init__(f"No prompt template for key {key!r}{known_part}")
        self.key = key


class CollaboratorFailure(HaloError):
    status_code = 500
    error = "Text generation failed"


class StructuredOutputError(HaloError):
    status_code = 500
    error = "Malformed structured reply"


class LLMProviderError(Exception):
    def __init__(self, message: str, provider: str, status_code: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


@runtime_checkable
class LLMProvider(Protocol):
    def complete(self, system: str, user: str, max_tokens: int) -> str: ...


@runtime_checkable
class ChatProvider(LLMProvider, Protocol):
    def chat(
        self,
        system: str,
        messages: list[dict],
        max_tokens: int,
        json_schema: dict | None = None,
    ) -> str: ...


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass
class ProviderConfig:
    provider: str = "openai"  # "openai" or "anthropic"
    model: str = "gpt-4o-mini"
    base_url: str = ""  # empty = provider default
    api_key_env: str = "OPENAI_API_KEY"
    temperature: float = 0.7
    timeout: float = 60.0
    max_retries: int = 1  # single attempt; retry policy belongs to the caller


@dataclass
class ReviewConfig:
    total_budget_tokens: int = 100_000
    reserved_response_tokens: int = 2_000
    max_reply_tokens: int = 1_500
    default_prompt: str | None = None


@dataclass
class CaptureConfig:
    chat_max_tokens: int = 1_000
    assessment_max_tokens: int = 1_500
    capture_max_tokens: int = 1_000


@dataclass
class PromptsConfig:
    overrides: dict[str, str] = field(default_factory=dict)
    overrides_file: str | None = None


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 3000


@dataclass
class HaloConfig:
    version: str = "1.0"
    token_counter: str = "estimate"
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    review: ReviewConfig = field(default_factory=ReviewConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    prompts: PromptsConfig = field(default_factory=PromptsConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
