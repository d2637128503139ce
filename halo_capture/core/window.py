"""Window selection: fit the most recent turns into a token budget."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from ..token_counter import estimate_tokens
from ..types import ConversationTurn, FormattedTurn, TruncatedTranscript
from .formatter import format_turn

logger = logging.getLogger(__name__)

TRUNCATION_NOTICE = "[TRUNCATED: {count} earlier messages omitted due to length]"


def truncation_notice(count: int) -> str:
    return TRUNCATION_NOTICE.format(count=count)


def render_blocks(blocks: Sequence[FormattedTurn], dropped_count: int = 0) -> str:
    """Join blocks with a single blank line between them.

    Every block already ends in a blank line, so one trailing newline is
    dropped before joining.
    """
    text = "\n".join(b.block[:-1] for b in blocks)
    if dropped_count > 0:
        notice = truncation_notice(dropped_count)
        return f"{notice}\n\n{text}" if text else notice
    return text


def select_window(
    turns: Sequence[ConversationTurn],
    fixed_overhead_tokens: int,
    total_budget_tokens: int,
    reserved_response_tokens: int,
    token_counter: Callable[[str], int] = estimate_tokens,
) -> TruncatedTranscript:
    """Keep the longest suffix of ``turns`` whose formatted size fits the budget.

    Turns are scanned newest first and the scan stops at the first turn that
    does not fit, so the result is always a contiguous suffix in original
    order. Never raises: an exhausted budget yields zero turns.
    """
    available = total_budget_tokens - fixed_overhead_tokens - reserved_response_tokens

    included: list[ConversationTurn] = []
    blocks: list[FormattedTurn] = []
    tokens_used = 0

    if available > 0:
        for turn in reversed(turns):
            formatted = format_turn(turn, token_counter)
            if tokens_used + formatted.size > available:
                break
            included.append(turn)
            blocks.append(formatted)
            tokens_used += formatted.size

    included.reverse()
    blocks.reverse()
    dropped = len(turns) - len(included)

    logger.debug(
        "Conversation truncated: %d -> %d messages, ~%d tokens (available=%d)",
        len(turns), len(included), tokens_used, available,
    )

    return TruncatedTranscript(
        included_turns=tuple(included),
        dropped_count=dropped,
        rendered_text=render_blocks(blocks, dropped),
        estimated_tokens=tokens_used,
    )
