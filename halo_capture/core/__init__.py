"""Core pipeline: formatting, window selection, prompt resolution, review assembly."""

from .formatter import format_turn, summarize_emotions  # noqa: F401
from .resolver import PromptResolver, merge_overrides, method_resolver  # noqa: F401
from .review import ReviewAssembler, run_review  # noqa: F401
from .window import select_window  # noqa: F401
