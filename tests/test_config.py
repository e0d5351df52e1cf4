# Tests for config.py and the from_settings() constructors
# Created: 2026-10-15

import pytest

from twitchkraken.authenticator import Authenticator
from twitchkraken.client import KrakenClient
from twitchkraken.config import KRAKEN_API_BASE, Settings, get_settings
from twitchkraken.errors import InvalidScope


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("CLIENT_ID", "CLIENT_SECRET", "REDIRECT_URI", "STATE", "SCOPES", "USERNAME",
                 "ACCESS_TOKEN", "FORCE_VERIFY"):
        monkeypatch.delenv(f"TWITCH_{name}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.api_base_url == KRAKEN_API_BASE
        assert settings.oauth_base_url == "https://api.twitch.tv/kraken/oauth2/"
        assert settings.scopes == []
        assert settings.access_token is None
        assert settings.timeout == 15.0

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TWITCH_CLIENT_ID", "abc")
        monkeypatch.setenv("TWITCH_SCOPES", "user_read, chat_login")
        monkeypatch.setenv("TWITCH_FORCE_VERIFY", "true")
        settings = Settings(_env_file=None)
        assert settings.client_id == "abc"
        assert settings.scopes == ["user_read", "chat_login"]
        assert settings.force_verify is True

    def test_space_separated_scopes(self, monkeypatch):
        monkeypatch.setenv("TWITCH_SCOPES", "user_read channel_read")
        assert Settings(_env_file=None).scopes == ["user_read", "channel_read"]

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


class TestFromSettings:
    def test_authenticator(self):
        settings = Settings(
            _env_file=None,
            client_id="abc",
            client_secret="s",
            redirect_uri="http://x/",
            state="xyz",
            scopes=["user_read"],
        )
        auth = Authenticator.from_settings(settings)
        assert auth.get_authorize_url() == (
            "https://api.twitch.tv/kraken/oauth2/authorize?client_id=abc"
            "&redirect_uri=http%3A%2F%2Fx%2F&state=xyz&scope=user_read&response_type=code"
        )

    def test_authenticator_rejects_bad_scope(self):
        settings = Settings(_env_file=None, scopes=["nope"])
        with pytest.raises(InvalidScope):
            Authenticator.from_settings(settings)

    def test_client(self):
        settings = Settings(
            _env_file=None,
            username="viewer",
            access_token="tok",
            api_base_url="https://example.test/kraken/",
            timeout=2,
        )
        client = KrakenClient.from_settings(settings)
        assert client.username == "viewer"
        assert client.access_token == "tok"
        assert client.base_url == "https://example.test/kraken/"
        assert client.timeout == 2

    def test_client_from_env(self, monkeypatch):
        monkeypatch.setenv("TWITCH_USERNAME", "envuser")
        client = KrakenClient.from_settings()
        assert client.username == "envuser"
        assert client.access_token is None
