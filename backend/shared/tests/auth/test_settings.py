"""Tests for AuthSettings configuration."""

import pytest
from pydantic import ValidationError

from shared.auth.models import BanMode
from shared.auth.settings import AuthSettings

_ENV_NAMES = (
    "AUTH_DATABASE_PATH",
    "AUTH_TICKET_DURATION",
    "AUTH_WRONG_PASS_MAX_COUNT",
    "AUTH_WRONG_PASS_LOGGING",
    "AUTH_WRONG_PASS_BAN_MODE",
    "AUTH_WRONG_PASS_BAN_TIME",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


class TestAuthSettings:
    def test_defaults(self):
        settings = AuthSettings()
        assert settings.database_path == "backend/login.db"
        assert settings.ticket_duration == 3600
        assert settings.wrong_pass_max_count == 0
        assert settings.wrong_pass_logging is False
        assert settings.wrong_pass_ban_mode == BanMode.IP
        assert settings.wrong_pass_ban_time == 600

    def test_database_path_from_env(self, monkeypatch):
        monkeypatch.setenv("AUTH_DATABASE_PATH", "custom/path/login.db")
        assert AuthSettings().database_path == "custom/path/login.db"

    def test_bruteforce_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("AUTH_WRONG_PASS_MAX_COUNT", "5")
        monkeypatch.setenv("AUTH_WRONG_PASS_LOGGING", "true")
        monkeypatch.setenv("AUTH_WRONG_PASS_BAN_MODE", "account")
        monkeypatch.setenv("AUTH_WRONG_PASS_BAN_TIME", "0")
        settings = AuthSettings()
        assert settings.wrong_pass_max_count == 5
        assert settings.wrong_pass_logging is True
        assert settings.wrong_pass_ban_mode == BanMode.ACCOUNT
        assert settings.wrong_pass_ban_time == 0

    def test_unknown_ban_mode_raises(self, monkeypatch):
        monkeypatch.setenv("AUTH_WRONG_PASS_BAN_MODE", "character")
        with pytest.raises(ValidationError, match="wrong_pass_ban_mode"):
            AuthSettings()

    def test_zero_ticket_duration_raises(self, monkeypatch):
        monkeypatch.setenv("AUTH_TICKET_DURATION", "0")
        with pytest.raises(ValidationError, match="ticket_duration"):
            AuthSettings()

    def test_negative_max_count_raises(self):
        with pytest.raises(ValidationError, match="wrong_pass_max_count"):
            AuthSettings(wrong_pass_max_count=-1)
