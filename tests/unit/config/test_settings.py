# tests/unit/config/test_settings.py — v2
"""Tests for config/settings.py."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from ailint.config.settings import Settings, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ["OPEN_ROUTER_KEY", "ANTHROPIC_API_KEY", "LOG_LEVEL", "LOG_FORMAT", "CACHE_DIR"]:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.open_router_key == ""
        assert s.anthropic_api_key == ""
        assert s.cache_dir == Path(".ai-lint")
        assert s.log_level == "WARNING"
        assert s.log_format == "text"
        assert s.log_file is None
        assert s.request_timeout_s == 120.0

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("OPEN_ROUTER_KEY", "sk-or-123")
        monkeypatch.setenv("CACHE_DIR", "/tmp/ai-lint-cache")
        s = Settings(_env_file=None)
        assert s.open_router_key == "sk-or-123"
        assert s.cache_dir == Path("/tmp/ai-lint-cache")

    def test_reads_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("ANTHROPIC_API_KEY=sk-ant-xyz\nLOG_FORMAT=json\n", encoding="utf-8")
        s = Settings(_env_file=env_file)
        assert s.anthropic_api_key == "sk-ant-xyz"
        assert s.log_format == "json"

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="verbose")

    def test_load_settings_overrides(self):
        s = load_settings(request_timeout_s=5.0, _env_file=None)
        assert s.request_timeout_s == 5.0
