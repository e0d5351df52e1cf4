# Tests for the authenticator page (web.py)
# Created: 2026-10-15

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from twitchkraken.authenticator import Authenticator, TokenResponse
from twitchkraken.config import Settings
from twitchkraken.errors import TokenExchangeFailed
from twitchkraken.web import create_app


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        client_id="abc",
        client_secret="s3cret",
        redirect_uri="http://localhost:8888/",
    )


@pytest.fixture
def authenticator(settings):
    return Authenticator.from_settings(settings).set_scope(["user_read", "chat_login"])


@pytest.fixture
def client(settings, authenticator):
    return TestClient(create_app(settings, authenticator))


class TestAuthenticatorPage:
    def test_redirects_without_code(self, client, authenticator):
        resp = client.get("/", follow_redirects=False)
        assert resp.status_code == 302
        assert resp.headers["location"] == authenticator.get_authorize_url()

    def test_shows_tokens(self, client, authenticator):
        authenticator.get_token = AsyncMock(
            return_value=TokenResponse(
                access_token="T0K", refresh_token="R3F", scope=["user_read", "chat_login"]
            )
        )
        resp = client.get("/", params={"code": "abc123"})

        assert resp.status_code == 200
        assert "Access Token: <code>T0K</code>" in resp.text
        assert "Refresh Token: <code>R3F</code>" in resp.text
        assert "<li>chat_login</li>" in resp.text
        authenticator.get_token.assert_awaited_once_with("abc123")

    def test_shows_exchange_error(self, client, authenticator):
        authenticator.get_token = AsyncMock(
            side_effect=TokenExchangeFailed("Token exchange rejected with HTTP 400", status_code=400)
        )
        resp = client.get("/", params={"code": "abc123"})

        assert resp.status_code == 502
        assert 'class="error"' in resp.text
        assert "HTTP 400" in resp.text
        assert "abc123" not in resp.text

    def test_denied_consent(self, client):
        resp = client.get(
            "/", params={"error": "access_denied", "error_description": "The user denied you access"}
        )
        assert resp.status_code == 200
        assert "The user denied you access" in resp.text

    def test_output_is_escaped(self, client, authenticator):
        authenticator.get_token = AsyncMock(
            return_value=TokenResponse(access_token="<script>", scope=[])
        )
        resp = client.get("/", params={"code": "c"})
        assert "<script>" not in resp.text
        assert "&lt;script&gt;" in resp.text


def test_create_app_requests_all_scopes_by_default(settings):
    app = create_app(settings)
    url = app.state.authenticator.get_authorize_url()
    assert "user_read+user_blocks_edit" in url
    assert url.endswith("chat_login&response_type=code")


def test_create_app_uses_configured_scopes():
    settings = Settings(_env_file=None, client_id="abc", scopes=["channel_read"])
    app = create_app(settings)
    assert app.state.authenticator.get_scope() == ["channel_read"]
