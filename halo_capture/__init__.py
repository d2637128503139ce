"""halo-capture: multi-method expertise capture with HALO conversation review."""

from .config import load_config
from .core.review import ReviewAssembler, run_review
from .types import (
    CaptureResult,
    ConversationTurn,
    HaloConfig,
    HaloError,
    ReviewResult,
    ReviewSettings,
    TruncatedTranscript,
)

__version__ = "0.1.0"

__all__ = [
    "ReviewAssembler",
    "run_review",
    "load_config",
    "CaptureResult",
    "ConversationTurn",
    "HaloConfig",
    "HaloError",
    "ReviewResult",
    "ReviewSettings",
    "TruncatedTranscript",
]
