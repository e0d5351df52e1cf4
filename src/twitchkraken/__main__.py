"""twitchkraken command line.

Reads credentials and the session from ``TWITCH_*`` environment variables
(or ``.env``), see ``twitchkraken.config``.

Examples::

  twitchkraken authorize-url                 Print the consent URL
  twitchkraken exchange <code>               Trade a code for tokens (JSON)
  twitchkraken endpoints                     List API methods
  twitchkraken call get_channel lirik        Call one API method
  twitchkraken call get_top_games limit=5
  twitchkraken serve --port 8888             Run the authenticator page
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from twitchkraken.authenticator import Authenticator
from twitchkraken.client import KrakenClient
from twitchkraken.errors import KrakenError
from twitchkraken.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _split_call_args(raw: list[str]) -> tuple[list[str], dict[str, str]]:
    """``["lirik", "limit=5"]`` -> ``(["lirik"], {"limit": "5"})``."""
    args: list[str] = []
    kwargs: dict[str, str] = {}
    for item in raw:
        key, sep, value = item.partition("=")
        if sep and key.isidentifier():
            kwargs[key] = value
        else:
            args.append(item)
    return args, kwargs


def cmd_authorize_url(ns: argparse.Namespace) -> int:
    authenticator = Authenticator.from_settings()
    if ns.state is not None:
        authenticator.set_state(ns.state)
    if ns.scope:
        authenticator.set_scope(ns.scope)
    print(authenticator.get_authorize_url())
    return 0


def cmd_exchange(ns: argparse.Namespace) -> int:
    authenticator = Authenticator.from_settings()
    tokens = asyncio.run(authenticator.get_token(ns.code))
    print(json.dumps(tokens.model_dump(), indent=2))
    return 0


def cmd_endpoints(ns: argparse.Namespace) -> int:
    for name, endpoint in KrakenClient.endpoints().items():
        print(f"{name:32} {endpoint.method:6} /{endpoint.path}{endpoint.signature}")
    return 0


def cmd_call(ns: argparse.Namespace) -> int:
    endpoints = KrakenClient.endpoints()
    if ns.endpoint not in endpoints:
        print(f"Unknown endpoint: {ns.endpoint} (see 'twitchkraken endpoints')", file=sys.stderr)
        return 2

    client = KrakenClient.from_settings()
    args, kwargs = _split_call_args(ns.args)
    try:
        method = getattr(client, ns.endpoint)
        result = asyncio.run(method(*args, **kwargs))
    except TypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    print(json.dumps(result, indent=2))
    return 0


def cmd_serve(ns: argparse.Namespace) -> int:
    from twitchkraken.web import run_server

    run_server(host=ns.host, port=ns.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="twitchkraken",
        description="Twitch kraken v3 API client and OAuth helper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples::", 1)[1],
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("authorize-url", help="Print the authorization URL")
    p.add_argument("--state", default=None, help="Anti-CSRF state value")
    p.add_argument("--scope", action="append", help="Scope to request (repeatable)")
    p.set_defaults(func=cmd_authorize_url)

    p = sub.add_parser("exchange", help="Exchange an authorization code for tokens")
    p.add_argument("code", help="The code from the redirect")
    p.set_defaults(func=cmd_exchange)

    p = sub.add_parser("endpoints", help="List API methods")
    p.set_defaults(func=cmd_endpoints)

    p = sub.add_parser("call", help="Call an API method and print the JSON result")
    p.add_argument("endpoint", help="Method name, e.g. get_channel")
    p.add_argument("args", nargs="*", help="Positional values and key=value options")
    p.set_defaults(func=cmd_call)

    p = sub.add_parser("serve", help="Run the authenticator web page")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8888)
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    setup_logging(level="INFO" if ns.command == "serve" else ns.log_level)

    try:
        return ns.func(ns)
    except KrakenError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
