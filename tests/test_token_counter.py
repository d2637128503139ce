"""Tests for token counting."""

from __future__ import annotations

import pytest

from halo_capture.token_counter import create_token_counter, estimate_tokens


class TestEstimateTokens:
    def test_empty_is_zero(self):
        assert estimate_tokens("") == 0

    def test_rounds_up(self):
        assert estimate_tokens("a") == 1
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2
        assert estimate_tokens("x" * 400) == 100

    def test_monotonic_in_length(self):
        sizes = [estimate_tokens("y" * n) for n in range(0, 50)]
        assert sizes == sorted(sizes)

    def test_counts_characters_not_bytes(self):
        assert estimate_tokens("héllo wörld") == 3


class TestCreateTokenCounter:
    def test_estimate_mode(self):
        assert create_token_counter("estimate") is estimate_tokens

    def test_callable_mode(self):
        counter = create_token_counter("callable:halo_capture.token_counter:estimate_tokens")
        assert counter("abcdefgh") == 2

    def test_bad_callable_spec(self):
        with pytest.raises(ValueError, match="Invalid callable spec"):
            create_token_counter("callable:nocolon")

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown token counter mode"):
            create_token_counter("words")
