# Kraken Client — HTTP client for the Twitch kraken v3 REST API.
# Created: 2026-10-13
#
# Resource methods are ``Endpoint`` rows declared on the class; they all
# dispatch through ``send_request``.
#
# See https://github.com/justintv/Twitch-API/tree/master/v3_resources

from __future__ import annotations

import logging
from typing import Any

import httpx

from twitchkraken.config import KRAKEN_API_BASE, Settings, get_settings
from twitchkraken.endpoints import Direction, Endpoint, KrakenRequest, Period, StreamType
from twitchkraken.errors import ApiRequestFailed

logger = logging.getLogger(__name__)

API_VERSION = 3
ACCEPT_HEADER = f"application/vnd.twitchtv.v{API_VERSION}+json"

_PAGE = {"limit": 25, "offset": 0}
_VIDEO_PAGE = {"limit": 10, "offset": 0}


class KrakenClient:
    """Kraken v3 API client for one user session.

    ``username`` and ``access_token`` are plain attributes read on every
    request; change them between calls, not during one. Without a token the
    client still works for endpoints that allow anonymous reads.

    Args:
        username: The user the ``users/{me}/...`` endpoints act on.
        access_token: Token from ``Authenticator.get_token``.
        base_url: API root, ending in a slash.
        timeout: Per-request timeout when no ``http_client`` is given.
        http_client: Optional shared client. It is borrowed, never closed.
    """

    supported_api_version = API_VERSION

    def __init__(
        self,
        username: str | None = None,
        access_token: str | None = None,
        *,
        base_url: str = KRAKEN_API_BASE,
        timeout: float = 15.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.username = username
        self.access_token = access_token
        self.base_url = base_url
        self.timeout = timeout
        self._http_client = http_client

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> KrakenClient:
        settings = settings or get_settings()
        return cls(
            username=settings.username,
            access_token=settings.access_token,
            base_url=settings.api_base_url,
            timeout=settings.timeout,
            http_client=http_client,
        )

    @classmethod
    def endpoints(cls) -> dict[str, Endpoint]:
        """All resource endpoints by method name, in declaration order."""
        found: dict[str, Endpoint] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, Endpoint):
                    found[name] = value
        return found

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": ACCEPT_HEADER}
        if self.access_token:
            headers["Authorization"] = f"OAuth {self.access_token}"
        return headers

    async def send_request(self, request: KrakenRequest) -> dict[str, Any]:
        """Send one request and decode its JSON body.

        Raises:
            ApiRequestFailed: on transport errors, non-2xx responses, or a
                success body that isn't JSON. Nothing is retried.
        """
        url = f"{self.base_url}{request.path}"
        kwargs: dict[str, Any] = {"headers": self._headers()}
        if request.params:
            kwargs["params"] = request.params
        if request.data:
            kwargs["data"] = request.data

        logger.debug("%s /%s", request.method, request.path)
        try:
            if self._http_client is not None:
                resp = await self._http_client.request(request.method, url, **kwargs)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    resp = await client.request(request.method, url, **kwargs)
        except (httpx.HTTPError, UnicodeEncodeError) as e:
            # UnicodeEncodeError: header values must be ASCII, e.g. a mangled token
            raise ApiRequestFailed(request.path, message=type(e).__name__) from e

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ApiRequestFailed(
                request.path,
                status_code=resp.status_code,
                message=self._error_message(resp),
            ) from e

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            raise ApiRequestFailed(
                request.path,
                status_code=resp.status_code,
                message="response body is not JSON",
            ) from e

    @staticmethod
    def _error_message(resp: httpx.Response) -> str | None:
        """Pull the server's error text out of a kraken error body, if any."""
        try:
            body = resp.json()
        except ValueError:
            return None
        if not isinstance(body, dict):
            return None
        # {"error": "Unauthorized", "status": 401, "message": "Token invalid or missing required scope"}
        message = body.get("message") or body.get("error")
        return str(message) if message else None

    # ------------------------------------------------------------------
    # Root
    # ------------------------------------------------------------------

    get_status = Endpoint(
        "GET",
        "",
        doc="API status, plus token validity and scopes when authenticated.",
    )

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    get_user_block_list = Endpoint(
        "GET",
        "users/{me}/blocks",
        query=("limit", "offset"),
        defaults=_PAGE,
        doc="The session user's block list. Requires user_blocks_read.",
    )
    add_user_to_block_list = Endpoint(
        "PUT",
        "users/{me}/blocks/{target}",
        doc="Block ``target`` for the session user. Requires user_blocks_edit.",
    )
    remove_user_from_block_list = Endpoint(
        "DELETE",
        "users/{me}/blocks/{target}",
        doc="Unblock ``target`` for the session user. Requires user_blocks_edit.",
    )

    # ------------------------------------------------------------------
    # Channels
    # ------------------------------------------------------------------

    get_channel = Endpoint(
        "GET",
        "channels/{channel}",
        fallback_path="channel",
        doc="A channel by name, or the authenticated user's channel when omitted.",
    )
    get_channel_follows = Endpoint(
        "GET",
        "channels/{channel}/follows",
        query=("limit", "offset", "cursor", "direction"),
        defaults={**_PAGE, "direction": Direction.DESC},
        doc="Users following ``channel``.",
    )
    get_channel_editors = Endpoint(
        "GET",
        "channels/{channel}/editors",
        doc="Editors of ``channel``. Requires channel_read.",
    )
    update_channel = Endpoint(
        "PUT",
        "channels/{channel}",
        query=("status", "game", "delay"),
        defaults={"delay": 60},
        doc="Update title, game or delay of ``channel``. Requires channel_editor.",
    )
    reset_channel_stream_key = Endpoint(
        "DELETE",
        "channels/{channel}/stream_key",
        doc="Reset the stream key of ``channel``. Requires channel_stream.",
    )
    start_channel_commercial = Endpoint(
        "POST",
        "channels/{channel}/commercial",
        body=("length",),
        defaults={"length": 30},
        doc="Run a commercial of ``length`` seconds. Requires channel_commercial.",
    )
    get_channel_teams = Endpoint(
        "GET",
        "channels/{channel}/teams",
        doc="Teams ``channel`` belongs to.",
    )

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    get_chat = Endpoint("GET", "chat/{channel}", doc="Chat links for ``channel``.")
    get_chat_badges = Endpoint("GET", "chat/{channel}/badges", doc="Chat badges for ``channel``.")
    get_chat_emoticons = Endpoint("GET", "chat/emoticons", doc="Every emoticon.")
    get_chat_emoticon_images = Endpoint(
        "GET",
        "chat/emoticon_images",
        query=("emotesets",),
        doc="Emoticon images, optionally restricted to a list of emote set ids.",
    )

    # ------------------------------------------------------------------
    # Follows
    # ------------------------------------------------------------------

    get_user_follows = Endpoint(
        "GET",
        "users/{username}/follows/channels",
        query=("limit", "offset", "direction", "sort_by"),
        defaults={**_PAGE, "direction": Direction.DESC, "sort_by": "created_at"},
        wire_names={"sort_by": "sortby"},
        doc="Channels ``username`` follows.",
    )
    get_user_follow_relationship = Endpoint(
        "GET",
        "users/{username}/follows/channels/{channel}",
        doc="Follow relationship between ``username`` and ``channel``; 404 if none.",
    )
    follow_channel = Endpoint(
        "PUT",
        "users/{me}/follows/channels/{channel}",
        doc="Follow ``channel`` as the session user. Requires user_follows_edit.",
    )
    unfollow_channel = Endpoint(
        "DELETE",
        "users/{me}/follows/channels/{channel}",
        doc="Unfollow ``channel`` as the session user. Requires user_follows_edit.",
    )
    get_user_stream_follows = Endpoint(
        "GET",
        "streams/followed",
        query=("limit", "offset", "stream_type"),
        defaults={**_PAGE, "stream_type": StreamType.ALL},
        doc="Live streams the authenticated user follows. Requires user_read.",
    )
    get_user_video_follows = Endpoint(
        "GET",
        "videos/followed",
        query=("limit", "offset"),
        defaults=_PAGE,
        doc="Videos from channels the authenticated user follows. Requires user_read.",
    )

    # ------------------------------------------------------------------
    # Games, ingests, search
    # ------------------------------------------------------------------

    get_top_games = Endpoint(
        "GET",
        "games/top",
        query=("limit", "offset"),
        defaults=_PAGE,
        doc="Games sorted by current viewers.",
    )
    get_ingests = Endpoint("GET", "ingests", doc="Ingest servers.")
    search_channels = Endpoint(
        "GET",
        "search/channels",
        query=("query", "limit", "offset"),
        defaults=_PAGE,
        required=("query",),
        wire_names={"query": "q"},
        doc="Channels matching ``query``.",
    )
    search_streams = Endpoint(
        "GET",
        "search/streams",
        query=("query", "limit", "offset"),
        defaults=_PAGE,
        required=("query",),
        wire_names={"query": "q"},
        doc="Live streams matching ``query``.",
    )
    search_games = Endpoint(
        "GET",
        "search/games",
        query=("query", "limit", "offset"),
        defaults=_PAGE,
        required=("query",),
        wire_names={"query": "q"},
        doc="Games matching ``query``.",
    )

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    get_stream = Endpoint(
        "GET",
        "streams/{channel}",
        doc="The live stream of ``channel``; ``stream`` is null when offline.",
    )
    get_streams = Endpoint(
        "GET",
        "streams",
        query=("game", "channel", "client_id", "stream_type", "limit", "offset"),
        defaults=_PAGE,
        doc="Live streams, filtered by game, comma-separated channels, client_id or type.",
    )
    get_featured_streams = Endpoint(
        "GET",
        "streams/featured",
        query=("limit", "offset"),
        defaults=_PAGE,
        doc="Featured streams.",
    )
    get_streams_summary = Endpoint(
        "GET",
        "streams/summary",
        query=("game",),
        doc="Viewer and channel totals, optionally for one game.",
    )

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    get_channel_subscribers = Endpoint(
        "GET",
        "channels/{channel}/subscriptions",
        query=("limit", "offset", "direction"),
        defaults={**_PAGE, "direction": Direction.ASC},
        doc="Subscribers of ``channel``, oldest first. Requires channel_subscriptions.",
    )
    get_channel_subscriber = Endpoint(
        "GET",
        "channels/{channel}/subscriptions/{username}",
        doc="Subscription of ``username`` to ``channel``; 404 if none. "
        "Requires channel_check_subscription.",
    )
    get_user_subscription = Endpoint(
        "GET",
        "users/{username}/subscriptions/{channel}",
        doc="Subscription of ``username`` to ``channel``; 404 if none. "
        "Requires user_subscriptions.",
    )

    # ------------------------------------------------------------------
    # Teams, users, videos
    # ------------------------------------------------------------------

    get_teams = Endpoint(
        "GET",
        "teams",
        query=("limit", "offset"),
        defaults=_PAGE,
        doc="Active teams.",
    )
    get_team = Endpoint("GET", "teams/{team}", doc="A team by name.")
    get_user = Endpoint(
        "GET",
        "users/{username}",
        fallback_path="user",
        doc="A user by name, or the authenticated user when omitted.",
    )
    get_video = Endpoint("GET", "videos/{video_id}", doc="A video by id.")
    get_top_videos = Endpoint(
        "GET",
        "videos/top",
        query=("game", "period", "limit", "offset"),
        defaults={**_VIDEO_PAGE, "period": Period.WEEK},
        doc="Most viewed videos over ``period``, optionally for one game.",
    )
    get_channel_videos = Endpoint(
        "GET",
        "channels/{channel}/videos",
        query=("broadcasts", "hls", "limit", "offset"),
        defaults={**_VIDEO_PAGE, "broadcasts": False, "hls": False},
        doc="Videos of ``channel``; ``broadcasts`` for past broadcasts instead of highlights.",
    )
