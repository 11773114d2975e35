from fastapi import FastAPI, Query, Request, Depends
from fastapi.responses import JSONResponse, HTMLResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from dataclasses import dataclass
import html
import logging
import traceback
from typing import Optional, List

import httpx

from config import settings, Settings, VERSION
from credentials import Credentials
from errors import ProxyError
from helix import HelixClient
from models import ChannelsResponse, VideosResponse, PlaylistResponse, ErrorResponse, StatusResponse
from playback import PlaybackSigner
from token_cache import AppTokenCache
from usher import build_live_url, build_vod_url

logger = logging.getLogger(__name__)


@dataclass
class ProxyServices:
    """Upstream components shared by all requests of one process."""
    settings: Settings
    credentials: Credentials
    http_client: httpx.AsyncClient
    token_cache: AppTokenCache
    helix: HelixClient
    signer: PlaybackSigner


def build_services(app_settings: Settings, http_client: httpx.AsyncClient) -> ProxyServices:
    credentials = Credentials.from_settings(app_settings)
    token_cache = AppTokenCache(
        http_client,
        credentials,
        token_url=app_settings.OAUTH_TOKEN_URL,
        margin=app_settings.TOKEN_EXPIRY_MARGIN,
    )
    return ProxyServices(
        settings=app_settings,
        credentials=credentials,
        http_client=http_client,
        token_cache=token_cache,
        helix=HelixClient(
            http_client,
            credentials,
            token_cache,
            base_url=app_settings.HELIX_BASE_URL,
            videos_page_size=app_settings.VIDEOS_PAGE_SIZE,
        ),
        signer=PlaybackSigner(http_client, credentials, gql_url=app_settings.GQL_URL),
    )


def normalize_target(value: Optional[str]) -> str:
    """Trim and lower-case a channel login or video id."""
    return (value or "").strip().lower()


def parse_logins(raw: Optional[str]) -> List[str]:
    """Split a comma-separated login list, dropping blanks and duplicates."""
    logins = []
    for part in (raw or "").split(","):
        login = normalize_target(part)
        if login and login not in logins:
            logins.append(login)
    return logins


def error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def server_error(exc: Exception, app_settings: Settings) -> JSONResponse:
    """500 response for a failed request.

    Errors from our own taxonomy always carry their message. Anything else
    only exposes its message, and the traceback, outside production.
    """
    production = app_settings.is_production
    details = None
    if isinstance(exc, ProxyError) or not production:
        details = str(exc)
    stack = None
    if not production:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    body = ErrorResponse(error="server error", details=details, stack=stack)
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("twitch-proxy starting up...")
    app.state.services = build_services(settings, httpx.AsyncClient())
    if not app.state.services.credentials.helix_configured:
        logger.warning(
            "TWITCH_CLIENT_ID/TWITCH_CLIENT_SECRET not set; metadata endpoints will fail")

    yield

    logger.info("twitch-proxy shutting down...")
    await app.state.services.http_client.aclose()


app = FastAPI(
    title="twitch-proxy",
    version=VERSION,
    description="Twitch metadata and signed HLS playlist proxy",
    lifespan=lifespan,
    root_path=settings.ROOT_PATH,
    docs_url=settings.DOCS_URL,
    redoc_url=settings.REDOC_URL,
    openapi_url=settings.OPENAPI_URL,
)

# Allow all origins so TV and browser clients can call the proxy directly
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_services(request: Request) -> ProxyServices:
    return request.app.state.services


@app.get("/", response_model=StatusResponse)
async def root(services: ProxyServices = Depends(get_services)):
    return StatusResponse(
        status="ok",
        version=VERSION,
        environment=services.settings.APP_ENV,
        helix_configured=services.credentials.helix_configured,
        gql_enabled=True,
        endpoints={
            "channels": "/api/channels?logins=gorgc,dota2ti,admiralbulldog",
            "videos": "/api/videos/:channel (e.g., /api/videos/gorgc)",
            "hls_live": "/hls?channel=CHANNEL_NAME",
            "hls_vod": "/hls?vod=VOD_ID",
            "oauth": "/oauth/callback",
        },
    )


@app.get("/api/channels", response_model=ChannelsResponse)
async def get_channels(
    logins: Optional[str] = Query(None, description="Comma-separated channel logins"),
    services: ProxyServices = Depends(get_services),
):
    """Channels with live status, viewer counts and thumbnails"""
    login_list = parse_logins(logins)
    if not login_list:
        return error_response(400, "logins required (comma-separated)")
    if len(login_list) > services.settings.MAX_LOGINS:
        return error_response(
            400, f"at most {services.settings.MAX_LOGINS} logins per request")

    try:
        channels = await services.helix.get_channels(login_list)
        return ChannelsResponse(channels=channels)
    except Exception as e:
        logger.error(f"Channels error: {e}")
        return server_error(e, services.settings)


@app.get("/api/videos/{channel}", response_model=VideosResponse)
async def get_videos(channel: str, services: ProxyServices = Depends(get_services)):
    """Past broadcasts for a channel"""
    login = normalize_target(channel)
    if not login:
        return error_response(400, "channel required")

    try:
        user = await services.helix.get_user(login)
        if user is None:
            return error_response(404, "channel not found")

        videos = await services.helix.get_archived_videos(user["id"])
        return VideosResponse(videos=videos)
    except Exception as e:
        logger.error(f"Videos error: {e}")
        return server_error(e, services.settings)


@app.get("/hls", response_model=PlaylistResponse)
async def get_hls(
    channel: Optional[str] = Query(None, description="Live channel login"),
    vod: Optional[str] = Query(None, description="VOD id (takes precedence over channel)"),
    services: ProxyServices = Depends(get_services),
):
    """Signed Usher playlist URL for a live channel or a VOD"""
    login = normalize_target(channel)
    vod_id = normalize_target(vod)
    if not login and not vod_id:
        return error_response(400, "channel or vod required")
    if vod_id and not (vod_id.isascii() and vod_id.isdigit()):
        return error_response(400, "vod must be a numeric id")

    usher_base = services.settings.USHER_BASE_URL
    try:
        if vod_id:
            token = await services.signer.sign_vod(vod_id)
            if token is None:
                return error_response(404, "vod not found or unavailable")
            url = build_vod_url(vod_id, token.signature, token.value, base_url=usher_base)
        else:
            token = await services.signer.sign_live(login)
            if token is None:
                return error_response(404, "offline or no token")
            url = build_live_url(login, token.signature, token.value, base_url=usher_base)

        return PlaylistResponse(url=url)
    except Exception as e:
        logger.error(f"HLS error: {e}")
        return server_error(e, services.settings)


OAUTH_CALLBACK_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>Twitch OAuth Callback</title>
  <style>
    body {{
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
      max-width: 600px;
      margin: 100px auto;
      padding: 20px;
      text-align: center;
    }}
    .success {{ color: #00c853; }}
    code {{
      background: #f5f5f5;
      padding: 2px 6px;
      border-radius: 3px;
      font-size: 14px;
    }}
  </style>
</head>
<body>
  <h1 class="success">&#10003; OAuth Redirect Working!</h1>
  <p>This URL is valid for Twitch app registration.</p>
  <p>You can now register your app at <a href="https://dev.twitch.tv/console/apps">dev.twitch.tv</a></p>
  <hr>
  <h3>Setup Instructions:</h3>
  <ol style="text-align: left;">
    <li>Go to <a href="https://dev.twitch.tv/console/apps" target="_blank">dev.twitch.tv/console/apps</a></li>
    <li>Click "Register Your Application"</li>
    <li>Set OAuth Redirect URL to: <code>{callback_url}</code></li>
    <li>Category: "Application Integration"</li>
    <li>Copy Client ID and Secret to your .env file as TWITCH_CLIENT_ID and TWITCH_CLIENT_SECRET</li>
  </ol>
</body>
</html>
"""


@app.get("/oauth/callback", response_class=HTMLResponse)
async def oauth_callback(request: Request):
    """Static page confirming the redirect URL works for app registration"""
    return HTMLResponse(OAUTH_CALLBACK_PAGE.format(callback_url=html.escape(str(request.url))))
