# Errors raised by the authenticator and the kraken client.
# Created: 2026-10-12

from __future__ import annotations


class KrakenError(Exception):
    """Base class for every error raised by twitchkraken."""


class InvalidScope(KrakenError, ValueError):
    """A requested scope is not in the platform's allow-list.

    Raised before any network activity.
    """

    def __init__(self, scope: object, available: tuple[str, ...]):
        self.scope = scope
        self.available = available
        super().__init__(f"Scope {scope!s} is invalid. Available scopes: {', '.join(available)}")


class TokenExchangeFailed(KrakenError):
    """The authorization-code exchange did not produce a token.

    The code is treated as consumed; retrying needs a fresh one.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ApiRequestFailed(KrakenError):
    """A resource call failed at the transport layer or returned a non-2xx status."""

    def __init__(
        self,
        path: str,
        status_code: int | None = None,
        message: str | None = None,
    ):
        self.path = path
        self.status_code = status_code
        self.message = message

        detail = f"HTTP {status_code}" if status_code is not None else "transport error"
        text = f"Request to '{path}' failed ({detail})"
        if message:
            text += f": {message}"
        super().__init__(text)
