"""Render conversation turns into transcript blocks for the review prompt."""

from __future__ import annotations

import math
from typing import Callable

from ..token_counter import estimate_tokens
from ..types import ConversationTurn, FormattedTurn

NO_EMOTIONS = "No emotions detected"
TOP_EMOTIONS = 3


def _percent(score: float) -> int:
    # round half up, so 0.125 -> 13 rather than banker's 12
    return math.floor(score * 100 + 0.5)


def summarize_emotions(emotions: dict[str, float] | None, limit: int = TOP_EMOTIONS) -> str:
    """Top ``limit`` emotions by intensity as ``label: NN%``, comma separated.

    ``sorted`` is stable, so equal scores keep their input order.
    """
    # NaN and infinite scores have no percentage
    scored = [(label, score) for label, score in (emotions or {}).items() if math.isfinite(score)]
    if not scored:
        return NO_EMOTIONS
    ranked = sorted(scored, key=lambda item: item[1], reverse=True)
    return ", ".join(
        f"{label}: {_percent(score)}%" for label, score in ranked[:limit]
    )


def format_turn(
    turn: ConversationTurn,
    token_counter: Callable[[str], int] = estimate_tokens,
) -> FormattedTurn:
    """Render one turn exactly as it is transmitted, trailing blank line included."""
    block = (
        f"[{turn.timestamp}] {turn.role.upper()}:\n"
        f"{turn.content}\n"
        f"Emotions: {summarize_emotions(turn.emotions)}\n"
        "\n"
    )
    return FormattedTurn(block=block, size=token_counter(block))
