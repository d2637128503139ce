"""Tests for budgeted window selection."""

from __future__ import annotations

import pytest

from halo_capture.core.formatter import format_turn
from halo_capture.core.window import render_blocks, select_window, truncation_notice
from halo_capture.types import ConversationTurn


def _turns(n: int, prefix: str = "message") -> list[ConversationTurn]:
    return [
        ConversationTurn(
            role="user" if i % 2 == 0 else "assistant",
            content=f"{prefix} {i}",
            timestamp=f"2026-01-15T10:{i:02d}:00Z",
        )
        for i in range(n)
    ]


def fifty(text: str) -> int:
    return 50


class TestSelectWindow:
    def test_greedy_fill_from_newest(self):
        turns = _turns(3)
        result = select_window(turns, 0, 120, 0, token_counter=fifty)
        assert result.included_turns == tuple(turns[1:])
        assert result.dropped_count == 1
        assert result.truncated
        assert result.estimated_tokens == 100
        assert result.rendered_text.startswith(
            "[TRUNCATED: 1 earlier messages omitted due to length]\n\n"
        )

    def test_everything_fits_has_no_notice(self, expert_turns):
        result = select_window(expert_turns, 500, 100_000, 2_000)
        assert result.included_turns == tuple(expert_turns)
        assert result.dropped_count == 0
        assert not result.truncated
        assert "TRUNCATED" not in result.rendered_text

    @pytest.mark.parametrize("overhead,budget,reserved", [
        (200, 100, 0),
        (0, 100, 100),
        (60, 100, 40),
    ])
    def test_exhausted_budget_returns_nothing(self, overhead, budget, reserved):
        turns = _turns(4)
        result = select_window(turns, overhead, budget, reserved)
        assert result.included_turns == ()
        assert result.dropped_count == 4
        assert result.estimated_tokens == 0
        assert result.rendered_text == truncation_notice(4)

    def test_empty_conversation(self):
        result = select_window([], 0, 1000, 0)
        assert result.included_turns == ()
        assert result.dropped_count == 0
        assert result.rendered_text == ""

    def test_stops_at_first_turn_that_does_not_fit(self):
        turns = _turns(2, "small") + _turns(1, "BIG") + _turns(1, "small")

        def counter(text: str) -> int:
            return 100 if "BIG" in text else 10

        result = select_window(turns, 0, 50, 0, token_counter=counter)
        # earlier small turns would fit, but the window must stay contiguous
        assert result.included_turns == (turns[3],)
        assert result.dropped_count == 3

    def test_exact_fit_is_admitted(self):
        turns = _turns(2)
        result = select_window(turns, 10, 110, 0, token_counter=fifty)
        assert len(result.included_turns) == 2

    def test_result_is_suffix(self, expert_turns):
        for budget in range(0, 400, 25):
            result = select_window(expert_turns, 0, budget, 0)
            k = len(result.included_turns)
            assert list(result.included_turns) == expert_turns[len(expert_turns) - k:]
            assert result.dropped_count + k == len(expert_turns)

    def test_more_budget_never_includes_fewer(self, expert_turns):
        counts = [
            len(select_window(expert_turns, 0, budget, 0).included_turns)
            for budget in range(0, 400, 10)
        ]
        assert counts == sorted(counts)

    def test_reselecting_included_turns_is_stable(self, expert_turns):
        first = select_window(expert_turns, 0, 150, 0)
        again = select_window(list(first.included_turns), 0, 150, 0)
        assert again.included_turns == first.included_turns
        assert again.dropped_count == 0

    def test_size_never_exceeds_available(self, expert_turns):
        for budget in range(0, 400, 7):
            result = select_window(expert_turns, 20, budget, 10)
            assert result.estimated_tokens <= max(0, budget - 30)

    def test_input_is_left_untouched(self, expert_turns):
        before = list(expert_turns)
        emotions = [dict(t.emotions) if t.emotions else None for t in expert_turns]
        select_window(expert_turns, 0, 60, 0)
        assert len(expert_turns) == len(before)
        assert all(a is b for a, b in zip(expert_turns, before))
        assert [t.emotions for t in expert_turns] == emotions

    @pytest.mark.parametrize("score", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_emotion_scores(self, score):
        turns = [ConversationTurn("user", "hi", "t", {"joy": score})]
        result = select_window(turns, 0, 1000, 0)
        assert result.included_turns == tuple(turns)
        assert "Emotions: No emotions detected" in result.rendered_text


class TestRenderBlocks:
    def test_single_blank_line_between_blocks(self):
        turns = _turns(2)
        blocks = [format_turn(t) for t in turns]
        text = render_blocks(blocks)
        assert text == (
            "[2026-01-15T10:00:00Z] USER:\nmessage 0\nEmotions: No emotions detected\n"
            "\n"
            "[2026-01-15T10:01:00Z] ASSISTANT:\nmessage 1\nEmotions: No emotions detected\n"
        )

    def test_notice_precedes_blocks(self):
        blocks = [format_turn(t) for t in _turns(1)]
        text = render_blocks(blocks, dropped_count=5)
        assert text.startswith(truncation_notice(5) + "\n\n[")
