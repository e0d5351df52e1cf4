# Authenticator page — redirect to Twitch, exchange the returned code, show the tokens.
# Created: 2026-10-14

from __future__ import annotations

import html
import logging

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from twitchkraken.authenticator import Authenticator, TokenResponse
from twitchkraken.config import Settings, get_settings
from twitchkraken.errors import KrakenError
from twitchkraken.scopes import AVAILABLE_SCOPES

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authenticator"])

_PAGE_HTML = """<!DOCTYPE html>
<html lang="en"><head><meta charset="utf-8"><title>Twitch Authentication</title>
<style>
body {{ font-family: system-ui; max-width: 640px; margin: 40px auto; padding: 20px; }}
.error {{ color: #b91c1c; }}
code {{ background: #f3f4f6; padding: 2px 6px; border-radius: 4px; word-break: break-all; }}
</style></head><body>
<div><a href="{authorize_path}">Authorize</a></div>
<hr>
<div id="access-token">{content}</div>
</body></html>"""


def _render_tokens(tokens: TokenResponse) -> str:
    scopes = "".join(f"<li>{html.escape(s)}</li>" for s in tokens.scope)
    return (
        f"<div>Access Token: <code>{html.escape(tokens.access_token)}</code></div>"
        f"<div>Refresh Token: <code>{html.escape(tokens.refresh_token or '')}</code></div>"
        f"<div>Scopes:<ul>{scopes}</ul></div>"
    )


def _render_error(message: str) -> str:
    return f'<div class="error">{html.escape(message)}</div>'


def get_authenticator(request: Request) -> Authenticator:
    """The authenticator for this app; every request sees the same settings."""
    return request.app.state.authenticator


@router.get("/")
async def authenticate(
    request: Request,
    code: str | None = Query(None),
    error: str | None = Query(None),
    error_description: str | None = Query(None),
):
    """Send the user to Twitch, or finish the flow when Twitch sends them back."""
    authenticator = get_authenticator(request)
    authorize_path = request.url_for("authenticate").path

    if error:
        # User denied consent or the request was malformed
        content = _render_error(error_description or error)
        return HTMLResponse(_PAGE_HTML.format(authorize_path=authorize_path, content=content))

    if not code:
        return RedirectResponse(authenticator.get_authorize_url(), status_code=302)

    try:
        tokens = await authenticator.get_token(code)
    except KrakenError as e:
        content = _render_error(str(e))
        status = 502
    else:
        content = _render_tokens(tokens)
        status = 200

    return HTMLResponse(
        _PAGE_HTML.format(authorize_path=authorize_path, content=content),
        status_code=status,
    )


def create_app(
    settings: Settings | None = None,
    authenticator: Authenticator | None = None,
) -> FastAPI:
    """Build the authenticator app.

    Requests every known scope unless the settings name some.
    """
    settings = settings or get_settings()
    if authenticator is None:
        authenticator = Authenticator.from_settings(settings)
        if not settings.scopes:
            authenticator.set_scope(AVAILABLE_SCOPES)

    app = FastAPI(title="Twitch Authenticator", docs_url=None, redoc_url=None)
    app.state.authenticator = authenticator
    app.include_router(router)
    return app


def run_server(host: str = "127.0.0.1", port: int = 8888) -> None:
    """Serve the authenticator page with uvicorn."""
    import uvicorn

    app = create_app()
    logger.info("Authenticator page on http://%s:%d/", host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)
