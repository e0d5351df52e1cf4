# OAuth scopes — the kraken v3 permission vocabulary and its validation.
# Created: 2026-10-12

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from twitchkraken.errors import InvalidScope


class Scope(str, Enum):
    """Permissions a user can grant to an application."""

    USER_READ = "user_read"
    USER_BLOCKS_EDIT = "user_blocks_edit"
    USER_BLOCKS_READ = "user_blocks_read"
    USER_FOLLOWS_EDIT = "user_follows_edit"
    CHANNEL_READ = "channel_read"
    CHANNEL_EDITOR = "channel_editor"
    CHANNEL_COMMERCIAL = "channel_commercial"
    CHANNEL_STREAM = "channel_stream"
    CHANNEL_SUBSCRIPTIONS = "channel_subscriptions"
    USER_SUBSCRIPTIONS = "user_subscriptions"
    CHANNEL_CHECK_SUBSCRIPTION = "channel_check_subscription"
    CHAT_LOGIN = "chat_login"


# Declaration order is the order the platform documents them in.
AVAILABLE_SCOPES: tuple[str, ...] = tuple(s.value for s in Scope)


def validate_scopes(scopes: str | Scope | Iterable[str | Scope]) -> tuple[str, ...]:
    """Normalize ``scopes`` to a tuple of plain strings.

    A single string (or ``Scope``) counts as a one-element list. Every entry
    is checked before anything is returned, so a caller that only commits
    the result on success gets all-or-nothing semantics.

    Raises:
        InvalidScope: naming the first unknown entry.
    """
    if isinstance(scopes, str):
        scopes = [scopes]

    normalized = []
    for scope in scopes:
        value = scope.value if isinstance(scope, Scope) else scope
        if value not in AVAILABLE_SCOPES:
            raise InvalidScope(value, AVAILABLE_SCOPES)
        normalized.append(value)
    return tuple(normalized)
