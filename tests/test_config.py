"""Tests for TwotrackSettings and the structlog setup built on it."""

import logging

import pytest
import structlog
from pydantic import ValidationError

from twotrack.config import TwotrackSettings, get_settings
from twotrack.logs import build_processors, configure_structlog, resolve_level


class TestSettings:
    def test_defaults(self):
        settings = TwotrackSettings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.json_logs is False
        assert settings.execution_log_level == "INFO"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("TWOTRACK_LOG_LEVEL", "debug")
        monkeypatch.setenv("TWOTRACK_JSON_LOGS", "true")
        settings = TwotrackSettings(_env_file=None)
        assert settings.log_level == "DEBUG"
        assert settings.json_logs is True

    def test_rejects_unknown_level(self, monkeypatch):
        monkeypatch.setenv("TWOTRACK_EXECUTION_LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError, match="Unknown log level"):
            TwotrackSettings(_env_file=None)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestLogging:
    def test_resolve_level(self):
        assert resolve_level("warning") == logging.WARNING
        with pytest.raises(ValueError, match="Unknown log level"):
            resolve_level("LOUD")

    def test_json_processors_end_with_json_renderer(self):
        assert isinstance(build_processors(json_logs=True)[-1], structlog.processors.JSONRenderer)
        assert isinstance(build_processors(json_logs=False)[-1], structlog.dev.ConsoleRenderer)

    def test_configure_structlog(self, restore_structlog):
        configure_structlog(log_level="warning", json_logs=True)
        config = structlog.get_config()
        assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
        assert config["wrapper_class"] is structlog.make_filtering_bound_logger(logging.WARNING)
