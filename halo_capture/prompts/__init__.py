"""Built-in prompt tables."""

from .agents import AGENT_NAMES, CAPTURE_PROMPTS, ORCHESTRATOR_PROMPT  # noqa: F401
from .methods import (  # noqa: F401
    DEFAULT_METHOD_PROMPTS,
    METHOD_FALLBACKS,
    METHOD_TITLES,
)
from .review import DEFAULT_REVIEW_PROMPT  # noqa: F401
