"""Log level selection by environment."""

import pytest
from ordering.utils.logging import get_log_level


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ("ENVIRONMENT", "PROTEAN_ENV", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestLogLevel:
    def test_development_is_default(self, clean_env):
        assert get_log_level() == "DEBUG"

    def test_production_logs_info(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "production")
        assert get_log_level() == "INFO"

    def test_test_env_logs_warnings(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "test")
        assert get_log_level() == "WARNING"

    def test_environment_takes_precedence_over_protean_env(self, clean_env):
        clean_env.setenv("ENVIRONMENT", "staging")
        clean_env.setenv("PROTEAN_ENV", "test")
        assert get_log_level() == "INFO"

    def test_explicit_level_wins(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "production")
        clean_env.setenv("LOG_LEVEL", "ERROR")
        assert get_log_level() == "ERROR"
