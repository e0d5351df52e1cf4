# Authenticator — OAuth 2.0 authorization code flow against the kraken oauth2 endpoint.
# Created: 2026-10-12
#
# Builds the URL the user is redirected to and exchanges the code that comes
# back for an access + refresh token. Tokens are handed straight back to the
# caller; nothing is stored or refreshed here.

from __future__ import annotations

import dataclasses
import logging
import urllib.parse
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from twitchkraken.config import KRAKEN_OAUTH_BASE, Settings, get_settings
from twitchkraken.errors import TokenExchangeFailed
from twitchkraken.scopes import Scope, validate_scopes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatorConfig:
    """Application credentials and the authorization request they make."""

    client_id: str
    client_secret: str
    redirect_uri: str
    state: str | None = None
    scopes: tuple[str, ...] = ()
    force_verify: bool = False

    def __post_init__(self):
        object.__setattr__(self, "scopes", validate_scopes(self.scopes))

    def __repr__(self) -> str:
        return (
            f"AuthenticatorConfig(client_id={self.client_id!r}, client_secret='***', "
            f"redirect_uri={self.redirect_uri!r}, state={self.state!r}, "
            f"scopes={self.scopes!r}, force_verify={self.force_verify!r})"
        )


class TokenResponse(BaseModel):
    """Result of a successful code exchange.

    Fields the platform adds beyond these are kept as extra attributes and
    show up in ``model_dump()``.
    """

    model_config = ConfigDict(extra="allow")

    access_token: str
    refresh_token: str | None = None
    scope: list[str] = []

    @field_validator("scope", mode="before")
    @classmethod
    def _null_scope(cls, value):
        # Twitch sends "scope": null when no scopes were granted
        return [] if value is None else value


class Authenticator:
    """OAuth 2.0 authorization code flow for the kraken API.

    Typical use::

        auth = Authenticator(client_id, client_secret, redirect_uri, scopes=["user_read"])
        redirect_to(auth.get_authorize_url())
        ...
        tokens = await auth.get_token(request.query_params["code"])

    The configuration is an immutable ``AuthenticatorConfig``; the setters
    swap in a new value and return ``self`` so calls can be chained.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scopes: Iterable[str | Scope] = (),
        state: str | None = None,
        force_verify: bool = False,
        *,
        oauth_base_url: str = KRAKEN_OAUTH_BASE,
        timeout: float = 15.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._config = AuthenticatorConfig(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            state=state,
            scopes=scopes,
            force_verify=force_verify,
        )
        self.oauth_base_url = oauth_base_url
        self.timeout = timeout
        self._http_client = http_client

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> Authenticator:
        settings = settings or get_settings()
        return cls(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            redirect_uri=settings.redirect_uri,
            scopes=settings.scopes,
            state=settings.state,
            force_verify=settings.force_verify,
            oauth_base_url=settings.oauth_base_url,
            timeout=settings.timeout,
            http_client=http_client,
        )

    # -- configuration --

    @property
    def config(self) -> AuthenticatorConfig:
        return self._config

    @property
    def client_id(self) -> str:
        return self._config.client_id

    @property
    def client_secret(self) -> str:
        return self._config.client_secret

    @property
    def redirect_uri(self) -> str:
        return self._config.redirect_uri

    @property
    def state(self) -> str | None:
        return self._config.state

    def update(self, **changes: Any) -> Authenticator:
        """Replace any ``AuthenticatorConfig`` fields, e.g. ``update(client_secret=...)``.

        Scopes passed here are validated like ``set_scope``; on failure the
        current configuration is kept.
        """
        self._config = dataclasses.replace(self._config, **changes)
        return self

    def set_state(self, state: str | None) -> Authenticator:
        """Set the anti-CSRF value round-tripped through the redirect."""
        return self.update(state=state)

    def set_scope(self, scopes: str | Scope | Iterable[str | Scope]) -> Authenticator:
        """Replace the requested scopes.

        Raises:
            InvalidScope: if any entry is unknown. Nothing changes in that case.
        """
        return self.update(scopes=validate_scopes(scopes))

    def add_scope(self, scopes: str | Scope | Iterable[str | Scope]) -> Authenticator:
        """Append to the requested scopes, with the same validation as ``set_scope``."""
        return self.update(scopes=self._config.scopes + validate_scopes(scopes))

    def get_scope(self) -> list[str]:
        return list(self._config.scopes)

    # -- flow --

    def get_authorize_url(self) -> str:
        """URL to send the user to for consent.

        Unset (``None``) fields are left out of the query string; nothing
        is checked for completeness.
        """
        config = self._config
        params = [
            ("client_id", config.client_id),
            ("redirect_uri", config.redirect_uri),
            ("state", config.state),
            ("scope", " ".join(config.scopes)),
            ("response_type", "code"),
        ]
        if config.force_verify:
            params.append(("force_verify", "true"))

        query = urllib.parse.urlencode([(k, v) for k, v in params if v is not None])
        return f"{self.oauth_base_url}authorize?{query}"

    async def get_token(self, code: str) -> TokenResponse:
        """Exchange an authorization code for access + refresh tokens.

        Args:
            code: The ``code`` query parameter from the redirect callback.

        Returns:
            The decoded token response.

        Raises:
            TokenExchangeFailed: on transport errors, a non-2xx status, or a
                body that is not a token response. The code is never part
                of the message.
        """
        config = self._config
        form = {
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "state": config.state,
            "grant_type": "authorization_code",
            "redirect_uri": config.redirect_uri,
            "code": code,
        }
        form = {k: v for k, v in form.items() if v is not None}

        url = f"{self.oauth_base_url}token"
        try:
            if self._http_client is not None:
                resp = await self._http_client.post(url, data=form)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    resp = await client.post(url, data=form)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise TokenExchangeFailed(
                f"Token exchange rejected with HTTP {status}", status_code=status
            ) from e
        except httpx.HTTPError as e:
            raise TokenExchangeFailed(
                f"Token exchange failed: {type(e).__name__}"
            ) from e

        try:
            tokens = TokenResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise TokenExchangeFailed(
                "Token endpoint returned an unexpected body", status_code=resp.status_code
            ) from e

        logger.info("OAuth tokens obtained for %s (scopes: %s)", config.client_id, tokens.scope)
        return tokens
