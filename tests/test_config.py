"""Tests for environment-driven settings."""

import pytest

from contractguard.config import Settings, get_settings


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.LOG_LEVEL == "info"
        assert settings.AUTH_TIMEOUT_SECONDS == 10.0
        assert settings.SESSION_TTL_SECONDS is None
        assert settings.AUTH_HEADER_NAME == "Authorization"
        assert settings.AUTH_SCHEME == ""
        assert settings.PATTERN_MATCH_MODE == "partial"

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CONTRACTGUARD_AUTH_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("CONTRACTGUARD_SESSION_TTL_SECONDS", "900")
        settings = Settings()
        assert settings.AUTH_TIMEOUT_SECONDS == 2.5
        assert settings.SESSION_TTL_SECONDS == 900

    def test_invalid_pattern_mode(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CONTRACTGUARD_PATTERN_MATCH_MODE", "fuzzy")
        with pytest.raises(Exception):
            Settings()

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_pattern_mode_drives_rule_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from contractguard.validators import pattern

        monkeypatch.setenv("CONTRACTGUARD_PATTERN_MATCH_MODE", "full")
        get_settings.cache_clear()
        assert pattern("x").mode == "full"
