"""Tests for boundary request schemas."""

from __future__ import annotations

import pytest

from halo_capture.schemas import CaptureRequest, ReviewRequest, parse_model
from halo_capture.types import InvalidRequest


def test_review_request_accepts_client_shape():
    request = parse_model(ReviewRequest, {
        "conversation": [
            {"role": "user", "content": "hi", "timestamp": "t0", "emotions": {"joy": 0.5}},
            {"role": "assistant", "content": "hello", "timestamp": "t1"},
        ],
        "settings": {"enabled": True, "customPrompt": "Be brief."},
        "maxReplyTokens": 400,
    })
    turns = request.turns()
    assert turns[0].emotions == {"joy": 0.5}
    assert turns[1].emotions is None
    assert request.settings.to_settings().custom_prompt == "Be brief."
    assert request.max_reply_tokens == 400


def test_snake_case_names_accepted():
    request = parse_model(ReviewRequest, {
        "settings": {"enabled": False, "custom_prompt": ""},
        "max_reply_tokens": 10,
    })
    assert request.conversation == []
    assert request.settings.to_settings().custom_prompt is None


@pytest.mark.parametrize("raw", [
    {"conversation": []},
    {"conversation": [{"role": "narrator", "content": "x"}], "settings": {"enabled": True}},
    {"conversation": [{"role": "user"}], "settings": {"enabled": True}},
    {"settings": {"enabled": True}, "maxReplyTokens": 0},
    "not an object",
])
def test_invalid_review_shapes(raw):
    with pytest.raises(InvalidRequest) as exc:
        parse_model(ReviewRequest, raw)
    assert exc.value.status_code == 400
    assert exc.value.message


def test_capture_type_restricted():
    with pytest.raises(InvalidRequest, match="capture_type"):
        parse_model(CaptureRequest, {"user_input": "x", "capture_type": "poetry"})


@pytest.mark.parametrize("score", [float("nan"), float("inf")])
def test_non_finite_emotion_scores_rejected(score):
    raw = {
        "conversation": [{"role": "user", "content": "hi", "emotions": {"joy": score}}],
        "settings": {"enabled": True},
    }
    with pytest.raises(InvalidRequest, match="emotions"):
        parse_model(ReviewRequest, raw)
