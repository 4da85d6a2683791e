"""
Tests for settings and logging setup.
"""

import logging

import pytest

from universe.core.config import Settings
from universe.core.logging import RequestIdFilter
from universe.errors import ErrorCode, UniverseError


class TestSettings:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "mysql://u:p@db:3306/universe")
        monkeypatch.setenv("ENV", "production")

        config = Settings(_env_file=None)

        assert config.environment == "production"
        assert config.active_database_url() == "mysql://u:p@db:3306/universe"

    def test_test_environment_uses_test_url(self):
        config = Settings(
            _env_file=None,
            environment="test",
            database_url="mysql://u:p@db/universe",
            test_database_url="sqlite:///:memory:",
        )
        assert config.active_database_url() == "sqlite:///:memory:"

    def test_missing_url_is_a_configuration_error(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("TEST_DATABASE_URL", raising=False)

        config = Settings(_env_file=None, environment="test")

        with pytest.raises(UniverseError) as exc_info:
            config.active_database_url()
        assert exc_info.value.code == ErrorCode.ERR_DATABASE_URL_MISSING


class TestRequestIdFilter:
    def test_defaults_request_id(self):
        record = logging.LogRecord("universe", logging.INFO, __file__, 1, "hello", None, None)
        assert RequestIdFilter().filter(record) is True
        assert record.request_id == "-"

    def test_keeps_existing_request_id(self):
        record = logging.LogRecord("universe", logging.INFO, __file__, 1, "hello", None, None)
        record.request_id = "abc-123"
        RequestIdFilter().filter(record)
        assert record.request_id == "abc-123"
