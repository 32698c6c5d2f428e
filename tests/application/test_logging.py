"""Tests for log level selection."""

from pizzeria.config import Settings
from pizzeria.utils import logging as pizzeria_logging


def _use(monkeypatch, **overrides):
    settings = Settings(**overrides)
    monkeypatch.setattr(pizzeria_logging, "get_settings", lambda: settings)


class TestLogLevel:
    def test_level_follows_environment(self, monkeypatch):
        _use(monkeypatch, environment="production")
        assert pizzeria_logging.get_log_level() == "INFO"

        _use(monkeypatch, environment="test")
        assert pizzeria_logging.get_log_level() == "WARNING"

    def test_explicit_level_wins(self, monkeypatch):
        _use(monkeypatch, environment="production", log_level="debug")
        assert pizzeria_logging.get_log_level() == "DEBUG"

    def test_unknown_environment_defaults_to_info(self, monkeypatch):
        _use(monkeypatch, environment="qa")
        assert pizzeria_logging.get_log_level() == "INFO"
