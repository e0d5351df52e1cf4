"""twitchkraken — Twitch kraken v3 API client and OAuth 2.0 authorization code helper."""

from twitchkraken.authenticator import Authenticator, AuthenticatorConfig, TokenResponse
from twitchkraken.client import KrakenClient
from twitchkraken.endpoints import Direction, Endpoint, KrakenRequest, Period, StreamType
from twitchkraken.errors import ApiRequestFailed, InvalidScope, KrakenError, TokenExchangeFailed
from twitchkraken.scopes import AVAILABLE_SCOPES, Scope

__all__ = [
    "AVAILABLE_SCOPES",
    "ApiRequestFailed",
    "Authenticator",
    "AuthenticatorConfig",
    "Direction",
    "Endpoint",
    "InvalidScope",
    "KrakenClient",
    "KrakenError",
    "KrakenRequest",
    "Period",
    "Scope",
    "StreamType",
    "TokenExchangeFailed",
    "TokenResponse",
]
