"""
Playback access token signer (GraphQL persisted query).

The signing endpoint accepts the public web client id without any user or
app token. A successful response without a signature/value pair means the
channel is offline or the video is unavailable; that case returns None
rather than raising.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from config import DEFAULT_GQL_URL
from credentials import Credentials
from errors import UpstreamError

logger = logging.getLogger(__name__)

OPERATION_NAME = "PlaybackAccessToken"
# Must match the hash the GraphQL endpoint has registered for the operation
PERSISTED_QUERY_HASH = "0828119ded1c13477966434e15800ff57ddacf13ba1911c129dc2200705b0712"
# "embed" yields the default manifest without injected ads
PLAYER_TYPE = "embed"

# The live token field was renamed upstream; older responses use the second name
LIVE_TOKEN_FIELDS = ("streamPlaybackAccessToken", "streamAccessToken")
VOD_TOKEN_FIELDS = ("videoPlaybackAccessToken",)


@dataclass(frozen=True)
class PlaybackToken:
    signature: str
    value: str


def build_payload(login: str = "", vod_id: str = "") -> Dict[str, Any]:
    is_vod = bool(vod_id)
    return {
        "operationName": OPERATION_NAME,
        "extensions": {
            "persistedQuery": {
                "version": 1,
                "sha256Hash": PERSISTED_QUERY_HASH,
            }
        },
        "variables": {
            "isLive": not is_vod,
            "login": "" if is_vod else login,
            "isVod": is_vod,
            "vodID": vod_id if is_vod else "",
            "playerType": PLAYER_TYPE,
        },
    }


def extract_token(body: Any, fields) -> Optional[PlaybackToken]:
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, dict):
        return None
    for name in fields:
        tok = data.get(name)
        if isinstance(tok, dict):
            break
    else:
        return None
    signature = tok.get("signature")
    value = tok.get("value")
    if not signature or not value:
        return None
    return PlaybackToken(signature=signature, value=value)


class PlaybackSigner:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        credentials: Credentials,
        gql_url: str = DEFAULT_GQL_URL,
    ):
        self.http_client = http_client
        self.credentials = credentials
        self.gql_url = gql_url

    async def sign_live(self, channel: str) -> Optional[PlaybackToken]:
        body = await self._post(build_payload(login=channel))
        token = extract_token(body, LIVE_TOKEN_FIELDS)
        if token is None:
            logger.info(f"No live playback token for {channel} (offline?)")
        return token

    async def sign_vod(self, video_id: str) -> Optional[PlaybackToken]:
        body = await self._post(build_payload(vod_id=video_id))
        token = extract_token(body, VOD_TOKEN_FIELDS)
        if token is None:
            logger.info(f"No playback token for video {video_id}")
        return token

    async def _post(self, payload: Dict[str, Any]) -> Any:
        logger.debug(f"GQL POST {payload['operationName']} {payload['variables']}")
        response = await self.http_client.post(
            self.gql_url,
            json=payload,
            headers={"Client-ID": self.credentials.gql_client_id},
        )
        if not response.is_success:
            logger.error(f"GQL playback token request returned {response.status_code}")
            raise UpstreamError("gql", response.status_code, response.text)
        return response.json()
