"""Settings loaded from environment variables.

Every variable carries the ``TWITCH_`` prefix and may also come from a
``.env`` file in the working directory::

    TWITCH_CLIENT_ID=abc123
    TWITCH_CLIENT_SECRET=...
    TWITCH_REDIRECT_URI=http://localhost:8888/
    TWITCH_SCOPES=user_read,channel_read

Nothing in the core reads the environment directly; ``Authenticator`` and
``KrakenClient`` take explicit arguments and only consult these settings in
their ``from_settings()`` constructors.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

KRAKEN_API_BASE = "https://api.twitch.tv/kraken/"
KRAKEN_OAUTH_BASE = "https://api.twitch.tv/kraken/oauth2/"


class Settings(BaseSettings):
    """twitchkraken configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TWITCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application credentials from the developer console
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""

    # Authorization request
    state: str | None = None
    scopes: Annotated[list[str], NoDecode] = []
    force_verify: bool = False

    # API session
    username: str | None = None
    access_token: str | None = None

    # Endpoints and transport
    api_base_url: str = KRAKEN_API_BASE
    oauth_base_url: str = KRAKEN_OAUTH_BASE
    timeout: float = 15.0

    @field_validator("scopes", mode="before")
    @classmethod
    def _split_scopes(cls, value):
        # "user_read,chat_login" or "user_read chat_login"
        if isinstance(value, str):
            return [s for s in value.replace(",", " ").split() if s]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings; call ``get_settings.cache_clear()`` after changing the environment."""
    return Settings()
