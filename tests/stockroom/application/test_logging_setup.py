"""Tests for the service logging configuration."""

import logging

import pytest
import structlog
from stockroom.utils.logging import bind_request_context, configure_logging, get_log_level


@pytest.fixture()
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers, root.level = handlers, level
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


class TestConfigureLogging:
    def test_writes_rotating_files_to_log_dir(self, tmp_path, restore_logging):
        configure_logging(tmp_path)

        assert (tmp_path / "stockroom.log").exists()
        assert (tmp_path / "stockroom_error.log").exists()
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_production_renders_json(self, tmp_path, monkeypatch, restore_logging):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        configure_logging(tmp_path)

        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    def test_log_level_follows_environment(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("PROTEAN_ENV", "development")
        assert get_log_level() == "DEBUG"

        monkeypatch.setenv("LOG_LEVEL", "error")
        assert get_log_level() == "ERROR"


class TestRequestContext:
    def test_bind_replaces_previous_request(self, restore_logging):
        bind_request_context(request_id="first", path="/inventory/locations")
        bind_request_context(request_id="second")

        assert structlog.contextvars.get_contextvars() == {"request_id": "second"}
