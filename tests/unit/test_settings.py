"""Tests for mawaku.core.settings — runtime settings.

Tests cover:
- Default values for all settings fields.
- Environment variable overrides via the MAWAKU_ prefix.
- Pydantic validation constraints (sample count, timeout, log level).
"""

from __future__ import annotations

from pathlib import Path

import pytest

from mawaku.core.settings import DEFAULT_GEMINI_MODEL, MawakuSettings


class TestSettingsDefaults:
    """Verify that MawakuSettings provides sensible defaults."""

    def test_defaults(self, isolated_env):
        cfg = MawakuSettings(_env_file=None)

        assert cfg.gemini_model == DEFAULT_GEMINI_MODEL
        assert cfg.sample_count == 2
        assert cfg.request_timeout == 120.0
        assert cfg.log_level == "WARNING"

    def test_home_defaults_to_none(self, monkeypatch):
        monkeypatch.delenv("MAWAKU_HOME", raising=False)
        assert MawakuSettings(_env_file=None).home is None


class TestSettingsEnvironment:
    """Verify MAWAKU_* environment overrides."""

    def test_env_overrides(self, isolated_env, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("MAWAKU_HOME", str(temp_dir))
        monkeypatch.setenv("MAWAKU_GEMINI_MODEL", "imagen-3.0-generate-002")
        monkeypatch.setenv("MAWAKU_SAMPLE_COUNT", "4")
        monkeypatch.setenv("MAWAKU_REQUEST_TIMEOUT", "15.5")

        cfg = MawakuSettings(_env_file=None)

        assert cfg.home == temp_dir
        assert cfg.gemini_model == "imagen-3.0-generate-002"
        assert cfg.sample_count == 4
        assert cfg.request_timeout == 15.5

    def test_log_level_is_case_insensitive(self, isolated_env, monkeypatch):
        monkeypatch.setenv("MAWAKU_LOG_LEVEL", "info")
        assert MawakuSettings(_env_file=None).log_level == "INFO"

    def test_env_file_is_read(self, isolated_env):
        (Path.cwd() / ".env").write_text("MAWAKU_SAMPLE_COUNT=1\n", encoding="utf-8")
        assert MawakuSettings().sample_count == 1


class TestSettingsValidation:
    """Verify Pydantic validation constraints on settings fields."""

    @pytest.mark.parametrize("count", [0, 5])
    def test_sample_count_range(self, isolated_env, count):
        with pytest.raises(Exception):
            MawakuSettings(sample_count=count, _env_file=None)

    def test_timeout_must_be_positive(self, isolated_env):
        with pytest.raises(Exception):
            MawakuSettings(request_timeout=0, _env_file=None)

    def test_invalid_log_level(self, isolated_env):
        with pytest.raises(Exception):
            MawakuSettings(log_level="LOUD", _env_file=None)
