"""
Tests for settings loading, logging configuration and display helpers.
"""

import logging

import pytest

from api_explorer.config import DEFAULT_DATABASE_URL, Settings, load_settings
from api_explorer.logging_config import configure_logging
from api_explorer.schemas.response import ResponseEnvelope
from api_explorer.services.formatting import format_bytes, pretty_body, status_category


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings({})

        assert settings == Settings()
        assert settings.history_limit == 50
        assert settings.history_backend == "memory"
        assert settings.database_url == DEFAULT_DATABASE_URL
        assert settings.cors_origins == ("*",)

    def test_environment_overrides(self):
        settings = load_settings({
            "API_EXPLORER_HISTORY_LIMIT": "10",
            "API_EXPLORER_HISTORY_BACKEND": "SQL",
            "API_EXPLORER_DATABASE_URL": "sqlite:///./other.db",
            "API_EXPLORER_DISPATCH_TIMEOUT": "2.5",
            "API_EXPLORER_LOG_LEVEL": "debug",
            "API_EXPLORER_CORS_ORIGINS": "http://a.test, http://b.test",
        })

        assert settings.history_limit == 10
        assert settings.history_backend == "sql"
        assert settings.database_url == "sqlite:///./other.db"
        assert settings.dispatch_timeout == 2.5
        assert settings.log_level == "DEBUG"
        assert settings.cors_origins == ("http://a.test", "http://b.test")

    @pytest.mark.parametrize("env", [
        {"API_EXPLORER_HISTORY_LIMIT": "0"},
        {"API_EXPLORER_HISTORY_LIMIT": "many"},
        {"API_EXPLORER_HISTORY_BACKEND": "redis"},
        {"API_EXPLORER_DISPATCH_TIMEOUT": "-1"},
    ])
    def test_invalid_values_raise(self, env):
        with pytest.raises(ValueError):
            load_settings(env)


class TestConfigureLogging:

    def test_sets_package_logger_level(self):
        configure_logging("warning")
        assert logging.getLogger("api_explorer").level == logging.WARNING

    def test_invalid_level_raises(self):
        with pytest.raises(ValueError):
            configure_logging("chatty")


class TestFormatting:

    @pytest.mark.parametrize("size, expected", [
        (0, "0 Bytes"),
        (500, "500 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1048576, "1 MB"),
        (1234567, "1.18 MB"),
    ])
    def test_format_bytes(self, size, expected):
        assert format_bytes(size) == expected

    @pytest.mark.parametrize("status, expected", [
        (None, "none"),
        (101, "informational"),
        (204, "success"),
        (301, "redirect"),
        (404, "client_error"),
        (503, "server_error"),
    ])
    def test_status_category(self, status, expected):
        assert status_category(status) == expected

    def test_pretty_body_indents_json(self):
        envelope = ResponseEnvelope(
            status=200, headers={"content-type": "application/json"}, raw_body='{"a":1}'
        )
        assert pretty_body(envelope) == '{\n  "a": 1\n}'

    def test_pretty_body_leaves_other_content_alone(self):
        text = ResponseEnvelope(status=200, headers={"content-type": "text/plain"}, raw_body="{}")
        broken = ResponseEnvelope(
            status=200, headers={"content-type": "application/json"}, raw_body="{oops"
        )
        assert pretty_body(text) == "{}"
        assert pretty_body(broken) == "{oops"
        assert pretty_body(ResponseEnvelope(error="x")) is None
