# Endpoint descriptors — declarative rows that become KrakenClient methods.
# Created: 2026-10-13
#
# Every kraken resource call has the same shape: a verb, a path template,
# some optional query or form parameters with per-endpoint defaults. An
# ``Endpoint`` holds that row and, when read off a client instance, turns
# into an async method that builds a ``KrakenRequest`` and hands it to
# ``client.send_request``.

from __future__ import annotations

import inspect
import string
import urllib.parse
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from twitchkraken.client import KrakenClient

# Placeholder filled from the client's session username.
SESSION_USER = "me"


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Period(str, Enum):
    ALL = "all"
    WEEK = "week"
    MONTH = "month"


class StreamType(str, Enum):
    ALL = "all"
    PLAYLIST = "playlist"
    LIVE = "live"


@dataclass(frozen=True)
class KrakenRequest:
    """One outgoing API call, relative to the client's base URL."""

    method: str
    path: str
    params: dict[str, str] = field(default_factory=dict)
    data: dict[str, str] = field(default_factory=dict)


def encode_value(value: Any) -> str | None:
    """Render a parameter for the wire; ``None`` means leave the key out."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (list, tuple, set, frozenset)):
        if not value:
            return None
        return ",".join(encode_value(v) or "" for v in value)
    return str(value)


def encode_params(values: Mapping[str, Any]) -> dict[str, str]:
    encoded = {}
    for key, value in values.items():
        text = encode_value(value)
        if text is not None:
            encoded[key] = text
    return encoded


def quote_segment(value: Any) -> str:
    return urllib.parse.quote(str(encode_value(value)), safe="")


class Endpoint:
    """A kraken API operation.

    Args:
        method: HTTP verb.
        path: Path template relative to the API base. ``{me}`` is the
            client's username; other ``{fields}`` become leading positional
            arguments.
        query: Parameter names sent in the query string, in signature order.
        body: Parameter names sent as a form body, in signature order.
        defaults: Default values; parameters without one default to ``None``
            and are omitted when unset.
        required: Query/body parameters with no default at all.
        wire_names: Python name -> wire key, where they differ.
        fallback_path: Path used when the single path argument is omitted
            (e.g. ``channel`` for the authenticated user's own channel).
        doc: Docstring for the generated method.
    """

    def __init__(
        self,
        method: str,
        path: str,
        *,
        query: tuple[str, ...] = (),
        body: tuple[str, ...] = (),
        defaults: Mapping[str, Any] | None = None,
        required: tuple[str, ...] = (),
        wire_names: Mapping[str, str] | None = None,
        fallback_path: str | None = None,
        doc: str = "",
    ):
        self.method = method
        self.path = path
        self.query = query
        self.body = body
        self.defaults = dict(defaults or {})
        self.required = required
        self.wire_names = dict(wire_names or {})
        self.fallback_path = fallback_path
        self.name = ""
        self.__doc__ = doc

        fields = [f for _, f, _, _ in string.Formatter().parse(path) if f]
        self.uses_session_user = SESSION_USER in fields
        self.path_params = tuple(f for f in fields if f != SESSION_USER)
        if fallback_path is not None and len(self.path_params) != 1:
            raise ValueError("fallback_path needs exactly one path parameter")

        self.signature = self._build_signature()

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<Endpoint {self.name or '?'}: {self.method} /{self.path}>"

    def __get__(self, client: KrakenClient | None, owner: type | None = None):
        if client is None:
            return self

        async def call(*args: Any, **kwargs: Any) -> dict[str, Any]:
            return await client.send_request(self.build(client.username, *args, **kwargs))

        call.__name__ = call.__qualname__ = self.name
        call.__doc__ = self.__doc__
        call.__signature__ = self.signature
        return call

    def _build_signature(self) -> inspect.Signature:
        kind = inspect.Parameter.POSITIONAL_OR_KEYWORD
        params = []
        for name in self.path_params:
            default = None if self.fallback_path is not None else inspect.Parameter.empty
            params.append(inspect.Parameter(name, kind, default=default))

        options = self.query + self.body
        for name in options:
            if name in self.required:
                params.append(inspect.Parameter(name, kind))
        for name in options:
            if name not in self.required:
                params.append(inspect.Parameter(name, kind, default=self.defaults.get(name)))
        return inspect.Signature(params)

    def build(self, username: str | None, *args: Any, **kwargs: Any) -> KrakenRequest:
        """Bind call arguments and compose the request.

        Raises:
            TypeError: on arguments that don't fit the signature, or a
                ``{me}`` path with no session username.
        """
        bound = self.signature.bind(*args, **kwargs)
        bound.apply_defaults()
        values = bound.arguments

        segments = {name: values[name] for name in self.path_params}
        if self.fallback_path is not None and all(not v for v in segments.values()):
            path = self.fallback_path
        else:
            missing = [name for name, value in segments.items() if value is None]
            if missing:
                raise TypeError(f"{self.name}() needs a value for {', '.join(missing)}")
            if self.uses_session_user:
                if not username:
                    raise TypeError(f"{self.name}() needs a client username")
                segments[SESSION_USER] = username
            path = self.path.format(**{k: quote_segment(v) for k, v in segments.items()})

        params = encode_params({self.wire_names.get(n, n): values[n] for n in self.query})
        data = encode_params({self.wire_names.get(n, n): values[n] for n in self.body})
        return KrakenRequest(method=self.method, path=path, params=params, data=data)
