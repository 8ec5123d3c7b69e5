"""Tests for structlog configuration and the request context."""

import structlog

from parstock.config import (
    Settings,
    bind_request_context,
    clear_request_context,
    configure_logging,
    current_request_id,
)
from parstock.config.logging import _app_context, _renderers


class TestRenderers:
    def test_auto_is_console_in_development(self):
        renderers = _renderers(Settings(_env_file=None, environment="development"))
        assert isinstance(renderers[-1], structlog.dev.ConsoleRenderer)

    def test_auto_is_json_in_production(self):
        renderers = _renderers(Settings(_env_file=None, environment="production"))
        assert isinstance(renderers[-1], structlog.processors.JSONRenderer)

    def test_explicit_format_wins(self):
        settings = Settings(_env_file=None, environment="production", log_format="console")
        assert isinstance(_renderers(settings)[-1], structlog.dev.ConsoleRenderer)


class TestAppContext:
    def test_adds_missing_keys_only(self):
        processor = _app_context(Settings(_env_file=None, environment="staging"))

        event = processor(None, "info", {"event": "x", "app": "override"})

        assert event["app"] == "override"
        assert event["environment"] == "staging"
        assert "version" in event


class TestRequestContext:
    def test_bind_and_clear(self):
        bind_request_context(request_id="req-1")
        assert current_request_id() == "req-1"

        clear_request_context()
        assert current_request_id() is None

    def test_bind_replaces_previous_request(self):
        bind_request_context(request_id="req-1", venue_id="v1")
        bind_request_context(request_id="req-2")

        assert structlog.contextvars.get_contextvars() == {"request_id": "req-2"}
        clear_request_context()

    def test_configure_logging_is_repeatable(self):
        settings = Settings(_env_file=None, log_format="json")
        configure_logging(settings)
        configure_logging(settings)
        assert structlog.is_configured()
