"""Tests for license_remover/config/settings.py."""

import pytest
from pydantic import ValidationError

from license_remover.config import Settings
from license_remover.core.errors import ConfigurationError

ENV_VARS = [
    "STEAM_SESSION_ID",
    "STEAM_LOGIN_SECURE",
    "REQUEST_DELAY",
    "COOLDOWN_SECONDS",
    "COOLDOWN_TICK_INTERVAL",
    "RETRY_BACKOFF",
    "SUCCESS_CODES",
    "THROTTLE_CODE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.store_url == "https://store.steampowered.com"
        assert settings.request_delay == 2.0
        assert settings.cooldown_seconds == 600.0
        assert settings.cooldown_tick_interval == 15.0
        assert settings.throttle_code == 84
        assert settings.success_codes == [1, 8]
        assert settings.retry_backoff == "fixed"
        assert not settings.has_credentials


class TestEnvironment:
    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv("STEAM_SESSION_ID", "sess")
        monkeypatch.setenv("STEAM_LOGIN_SECURE", "cookie")
        monkeypatch.setenv("REQUEST_DELAY", "3.5")
        monkeypatch.setenv("RETRY_BACKOFF", "exponential")
        monkeypatch.setenv("SUCCESS_CODES", "[1, 8, 9]")

        settings = Settings(_env_file=None)

        assert settings.has_credentials
        assert settings.request_delay == 3.5
        assert settings.retry_backoff == "exponential"
        assert settings.success_codes == [1, 8, 9]

    def test_reads_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("STEAM_SESSION_ID=from-file\nCOOLDOWN_SECONDS=60\n", encoding="utf-8")

        settings = Settings(_env_file=env_file)

        assert settings.steam_session_id == "from-file"
        assert settings.cooldown_seconds == 60.0


class TestValidation:
    def test_negative_delay_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, request_delay=-1)

    def test_unknown_backoff_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, retry_backoff="linear")


class TestCredential:
    def test_builds_credential(self):
        settings = Settings(_env_file=None, steam_session_id="sess", steam_login_secure="cookie")

        credential = settings.credential()

        assert credential.session_id == "sess"
        assert credential.login_cookie == "cookie"

    def test_missing_session(self):
        with pytest.raises(ConfigurationError, match="STEAM_SESSION_ID"):
            Settings(_env_file=None).credential()

    def test_repr_masks_secrets(self):
        credential = Settings(_env_file=None, steam_session_id="secret").credential()

        assert "secret" not in repr(credential)
