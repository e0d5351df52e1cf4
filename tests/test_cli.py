# Tests for the twitchkraken command line
# Created: 2026-10-15

import json
from unittest.mock import AsyncMock, patch

import pytest

from twitchkraken.__main__ import _split_call_args, main
from twitchkraken.authenticator import TokenResponse
from twitchkraken.config import get_settings


@pytest.fixture(autouse=True)
def cli_env(monkeypatch):
    monkeypatch.setenv("TWITCH_CLIENT_ID", "abc")
    monkeypatch.setenv("TWITCH_CLIENT_SECRET", "s3cret")
    monkeypatch.setenv("TWITCH_REDIRECT_URI", "http://x/")
    monkeypatch.setenv("TWITCH_SCOPES", "user_read")
    monkeypatch.setenv("TWITCH_USERNAME", "viewer")
    monkeypatch.delenv("TWITCH_STATE", raising=False)
    monkeypatch.delenv("TWITCH_ACCESS_TOKEN", raising=False)
    monkeypatch.setattr("twitchkraken.__main__.setup_logging", lambda level: None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_split_call_args():
    assert _split_call_args(["lirik", "limit=5", "a=b=c", "=x"]) == (
        ["lirik", "=x"],
        {"limit": "5", "a": "b=c"},
    )


def test_authorize_url(capsys):
    assert main(["authorize-url", "--state", "xyz"]) == 0
    out = capsys.readouterr().out.strip()
    assert out == (
        "https://api.twitch.tv/kraken/oauth2/authorize?client_id=abc"
        "&redirect_uri=http%3A%2F%2Fx%2F&state=xyz&scope=user_read&response_type=code"
    )


def test_authorize_url_scope_override(capsys):
    assert main(["authorize-url", "--scope", "chat_login", "--scope", "channel_read"]) == 0
    assert "scope=chat_login+channel_read" in capsys.readouterr().out


def test_authorize_url_bad_scope(capsys):
    assert main(["authorize-url", "--scope", "bogus"]) == 1
    assert "Scope bogus is invalid" in capsys.readouterr().err


def test_exchange(capsys):
    tokens = TokenResponse(access_token="T", refresh_token="R", scope=["user_read"])
    with patch(
        "twitchkraken.authenticator.Authenticator.get_token",
        new_callable=AsyncMock,
        return_value=tokens,
    ) as mock_get_token:
        assert main(["exchange", "the-code"]) == 0

    mock_get_token.assert_awaited_once_with("the-code")
    printed = json.loads(capsys.readouterr().out)
    assert printed == {"access_token": "T", "refresh_token": "R", "scope": ["user_read"]}


def test_endpoints(capsys):
    assert main(["endpoints"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 39
    assert any(line.startswith("get_channel_follows") and "/channels/{channel}/follows" in line
               for line in lines)


def test_call(capsys):
    with patch(
        "twitchkraken.client.KrakenClient.send_request",
        new_callable=AsyncMock,
        return_value={"name": "foo"},
    ) as mock_send:
        assert main(["call", "get_channel_follows", "foo", "limit=5"]) == 0

    request = mock_send.call_args.args[0]
    assert request.path == "channels/foo/follows"
    assert request.params == {"limit": "5", "offset": "0", "direction": "desc"}
    assert json.loads(capsys.readouterr().out) == {"name": "foo"}


def test_call_unknown_endpoint(capsys):
    assert main(["call", "get_everything"]) == 2
    assert "Unknown endpoint" in capsys.readouterr().err


def test_call_bad_arguments(capsys):
    assert main(["call", "get_top_games", "page=2"]) == 2
    assert "Error:" in capsys.readouterr().err
