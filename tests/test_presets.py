"""Tests for the preset registry."""

from __future__ import annotations

import pytest
import yaml

from halo_capture.config import load_config, validate_config
from halo_capture.presets import get_preset, list_presets


def test_builtin_presets_registered():
    assert [p.name for p in list_presets()] == ["openai", "anthropic", "local"]


def test_unknown_preset():
    assert get_preset("nope") is None


@pytest.mark.parametrize("name", ["openai", "anthropic", "local"])
def test_template_matches_config_dict(name):
    preset = get_preset(name)
    assert yaml.safe_load(preset.template) == preset.config_dict


@pytest.mark.parametrize("name", ["openai", "anthropic", "local"])
def test_preset_config_is_valid(name):
    config = load_config(config_dict=get_preset(name).config_dict)
    assert validate_config(config) == []
    assert config.provider.provider == get_preset(name).config_dict["provider"]["provider"]


def test_local_preset_points_at_local_server():
    config = load_config(config_dict=get_preset("local").config_dict)
    assert config.provider.base_url.startswith("http://127.0.0.1")
    assert config.review.total_budget_tokens < 100_000
