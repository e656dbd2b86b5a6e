"""Tests for the structlog setup."""

import logging

import pytest
import structlog
from shared import logging as gamevault_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)
    structlog.contextvars.clear_contextvars()


class TestLogLevel:
    def test_tests_log_at_warning(self, monkeypatch):
        monkeypatch.setenv("GAMEVAULT_ENV", "test")
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert gamevault_logging.get_log_level() == "WARNING"

    def test_production_logs_at_info(self, monkeypatch):
        monkeypatch.setenv("GAMEVAULT_ENV", "production")
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert gamevault_logging.get_log_level() == "INFO"

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("GAMEVAULT_ENV", "production")
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert gamevault_logging.get_log_level() == "ERROR"


class TestConfigureLogging:
    def test_test_environment_only_logs_to_console(self, monkeypatch, tmp_path, root_logger):
        monkeypatch.setenv("GAMEVAULT_ENV", "test")
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setattr(gamevault_logging, "LOG_DIR", tmp_path / "logs")

        gamevault_logging.configure_logging()

        assert root_logger.level == logging.WARNING
        assert [type(handler) for handler in root_logger.handlers] == [logging.StreamHandler]
        assert not (tmp_path / "logs").exists()

    def test_modules_log_through_structlog_directly(self):
        assert not hasattr(gamevault_logging, "get_logger")


class TestContext:
    def test_bound_values_reach_every_log_line(self, root_logger):
        gamevault_logging.add_context(request_id="req-1", path="/orders")

        assert structlog.contextvars.get_contextvars() == {"request_id": "req-1", "path": "/orders"}

    def test_clear_context_drops_bound_values(self, root_logger):
        gamevault_logging.add_context(request_id="req-1")
        gamevault_logging.clear_context()

        assert structlog.contextvars.get_contextvars() == {}
