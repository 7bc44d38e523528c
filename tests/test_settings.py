"""Tests for Settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from teamboard.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "TEAMBOARD_REMOTE_URL",
        "TEAMBOARD_REMOTE_KEY",
        "TEAMBOARD_PASSWORD",
        "TEAMBOARD_STATE_FILE",
        "TEAMBOARD_OFFLINE",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.remote_url is None
        assert settings.password.get_secret_value() == "lockin2024"
        assert settings.sync_retries == 3
        assert not settings.remote_configured

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("TEAMBOARD_REMOTE_URL", "https://abc.example.co")
        monkeypatch.setenv("TEAMBOARD_REMOTE_KEY", "key")
        monkeypatch.setenv("TEAMBOARD_PASSWORD", "hunter2")
        monkeypatch.setenv("TEAMBOARD_STATE_FILE", "/tmp/board.yml")

        settings = Settings()

        assert settings.remote_configured
        assert settings.remote_key.get_secret_value() == "key"
        assert settings.password.get_secret_value() == "hunter2"
        assert settings.state_file == Path("/tmp/board.yml")

    def test_offline_disables_remote(self):
        settings = Settings(remote_url="https://abc.example.co", remote_key="key", offline=True)
        assert not settings.remote_configured

    def test_url_without_key(self):
        assert not Settings(remote_url="https://abc.example.co").remote_configured

    def test_secrets_hidden(self):
        assert "hunter2" not in repr(Settings(password="hunter2"))

    def test_negative_retries_rejected(self):
        with pytest.raises(ValidationError):
            Settings(sync_retries=-1)
