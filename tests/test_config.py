"""Tests for config loading and validation."""

from __future__ import annotations

import json

import pytest

from halo_capture.config import CONFIG_ENV, load_config, validate_config


class TestLoadConfig:
    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv(CONFIG_ENV, raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        config = load_config()
        assert config.provider.provider == "openai"
        assert config.provider.model == "gpt-4o-mini"
        assert config.provider.max_retries == 1
        assert config.review.total_budget_tokens == 100_000
        assert config.review.reserved_response_tokens == 2_000
        assert config.review.max_reply_tokens == 1_500
        assert config.server.port == 3000
        assert validate_config(config) == []

    def test_from_dict(self):
        config = load_config(config_dict={
            "provider": {"provider": "anthropic", "model": "claude-haiku-4-5-20251001"},
            "review": {"total_budget_tokens": 8000, "reserved_response_tokens": 500},
            "prompts": {"overrides": {"2": "Ask about {user_domain}."}},
        })
        assert config.provider.api_key_env == "ANTHROPIC_API_KEY"
        assert config.review.total_budget_tokens == 8000
        assert config.review.max_reply_tokens == 1_500
        assert config.prompts.overrides == {"2": "Ask about {user_domain}."}

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "halo-capture.yaml"
        path.write_text(
            "provider:\n"
            "  provider: openai\n"
            "  base_url: http://127.0.0.1:11434/v1\n"
            "capture:\n"
            "  chat_max_tokens: 600\n"
        )
        config = load_config(path)
        assert config.provider.base_url == "http://127.0.0.1:11434/v1"
        assert config.capture.chat_max_tokens == 600

    def test_json_file(self, tmp_path):
        path = tmp_path / "halo-capture.json"
        path.write_text(json.dumps({"server": {"port": 8080}}))
        assert load_config(path).server.port == 8080

    def test_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("token_counter: estimate\nserver:\n  host: 0.0.0.0\n")
        monkeypatch.setenv(CONFIG_ENV, str(path))
        assert load_config().server.host == "0.0.0.0"

    def test_discovers_in_parent_dir(self, tmp_path, monkeypatch):
        (tmp_path / "halo-capture.yml").write_text("review:\n  max_reply_tokens: 900\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        monkeypatch.delenv(CONFIG_ENV, raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert load_config().review.max_reply_tokens == 900

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "halo-capture.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="Expected a mapping"):
            load_config(path)


class TestOverridesFile:
    def test_relative_to_config_and_inline_wins(self, tmp_path):
        (tmp_path / "overrides.yaml").write_text(
            "'1': From file {user_name}\n'3': Simulation from file\n"
        )
        path = tmp_path / "halo-capture.yaml"
        path.write_text(
            "prompts:\n"
            "  overrides_file: overrides.yaml\n"
            "  overrides:\n"
            "    '3': Inline simulation\n"
        )
        config = load_config(path)
        assert config.prompts.overrides == {
            "1": "From file {user_name}",
            "3": "Inline simulation",
        }
        assert validate_config(config) == []

    def test_empty_entries_dropped(self, tmp_path):
        path = tmp_path / "halo-capture.yaml"
        path.write_text("prompts:\n  overrides:\n    '1': ''\n")
        assert load_config(path).prompts.overrides == {}


class TestValidateConfig:
    def test_reports_problems(self):
        config = load_config(config_dict={
            "token_counter": "words",
            "provider": {"provider": "gemini", "timeout": 0, "max_retries": 0},
            "review": {"total_budget_tokens": 1000, "reserved_response_tokens": 1000, "max_reply_tokens": 0},
            "prompts": {"overrides": {"5": "x"}, "overrides_file": "/does/not/exist.yaml"},
        })
        errors = validate_config(config)
        joined = "\n".join(errors)
        assert "Unknown provider 'gemini'" in joined
        assert "Unknown token_counter mode 'words'" in joined
        assert "provider.timeout" in joined
        assert "provider.max_retries" in joined
        assert "review.reserved_response_tokens (1000) must be <" in joined
        assert "review.max_reply_tokens" in joined
        assert "unknown method key '5'" in joined
        assert "overrides file not found" in joined
