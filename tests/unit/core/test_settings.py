"""
Unit tests for settings, options and constants
"""

import pytest
from pydantic import ValidationError

from sternlog.core.config.settings import LoggerOptions, Settings
from sternlog.core.constants import normalize_level


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("LOG_LEVEL", "LOG_FORMAT", "LOG_NAMESPACES", "ENVIRONMENT"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)

        assert settings.LOG_LEVEL == "info"
        assert settings.LOG_FORMAT == "json"
        assert settings.LOG_NAMESPACES == "*"
        assert settings.TRACE_CONTEXT_MAX_SIZE == 10000
        assert settings.TRACE_CONTEXT_TTL_MS == 300000
        assert settings.TRACE_CONTEXT_CLEANUP_INTERVAL_MS == 60000

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_NAMESPACES", "voice:*")
        monkeypatch.setenv("TELEMETRY_ENABLED", "true")
        settings = Settings(_env_file=None)

        assert settings.LOG_LEVEL == "debug"
        assert settings.LOG_NAMESPACES == "voice:*"
        assert settings.TELEMETRY_ENABLED is True

    @pytest.mark.parametrize("level,expected", [("WARNING", "warn"), ("critical", "fatal")])
    def test_level_aliases(self, level, expected):
        assert Settings(_env_file=None, LOG_LEVEL=level).LOG_LEVEL == expected

    def test_rejects_unknown_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="verbose")

    def test_rejects_unknown_format(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_FORMAT="xml")

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, TRACE_CONTEXT_TTL_MS=0)


class TestLoggerOptions:
    def test_apply_to_overrides_only_set_fields(self, test_settings):
        options = LoggerOptions(level="error", default_service="billing")
        settings = options.apply_to(test_settings)

        assert settings.LOG_LEVEL == "error"
        assert settings.DEFAULT_SERVICE == "billing"
        assert settings.ENVIRONMENT == test_settings.ENVIRONMENT
        assert test_settings.LOG_LEVEL == "trace"

    def test_redaction_and_metrics_overrides(self, test_settings):
        options = LoggerOptions(
            redact_keys=["pin", "session_id"], redact_remove=True, metrics_enabled=True
        )
        settings = options.apply_to(test_settings)

        assert settings.LOG_REDACT_KEYS == "pin,session_id"
        assert settings.LOG_REDACT_REMOVE is True
        assert settings.METRICS_ENABLED is True
        assert test_settings.LOG_REDACT_KEYS == ""

    def test_validates_level(self):
        with pytest.raises(ValidationError):
            LoggerOptions(level="loud")

    def test_accepts_callable_provider(self):
        options = LoggerOptions(get_active_context=lambda: None)
        assert options.get_active_context() is None


def test_normalize_level():
    assert normalize_level(" Info ") == "info"
    assert normalize_level("SILENT") == "silent"
    with pytest.raises(ValueError):
        normalize_level("loud")
