"""
Helix (metadata API) client.

Every request carries the cached app access token and the registered
client id. Failures surface immediately; there is no retry.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from config import DEFAULT_HELIX_BASE_URL, DEFAULT_VIDEOS_PAGE_SIZE
from credentials import Credentials
from errors import UpstreamError
from models import ChannelRecord
from token_cache import AppTokenCache

logger = logging.getLogger(__name__)


class HelixClient:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        credentials: Credentials,
        token_cache: AppTokenCache,
        base_url: str = DEFAULT_HELIX_BASE_URL,
        videos_page_size: int = DEFAULT_VIDEOS_PAGE_SIZE,
    ):
        self.http_client = http_client
        self.credentials = credentials
        self.token_cache = token_cache
        self.base_url = base_url.rstrip("/")
        self.videos_page_size = videos_page_size

    async def call(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET ``endpoint`` and return the decoded JSON body.

        List values in ``params`` are sent as repeated query keys
        (``login=a&login=b``), which is what Helix expects.
        """
        token = await self.token_cache.get_token()
        logger.debug(f"Helix GET /{endpoint} {params}")
        response = await self.http_client.get(
            f"{self.base_url}/{endpoint}",
            params=params,
            headers={
                "Client-ID": self.credentials.helix_client_id,
                "Authorization": f"Bearer {token}",
            },
        )
        if not response.is_success:
            logger.error(f"Helix /{endpoint} returned {response.status_code}")
            raise UpstreamError("helix", response.status_code, response.text)
        return response.json()

    async def get_users(self, logins: List[str]) -> List[Dict[str, Any]]:
        data = await self.call("users", {"login": logins})
        return data.get("data") or []

    async def get_streams(self, logins: List[str]) -> List[Dict[str, Any]]:
        # Helix returns 20 streams unless asked for more (max 100)
        data = await self.call("streams", {"user_login": logins, "first": str(len(logins))})
        return data.get("data") or []

    async def get_user(self, login: str) -> Optional[Dict[str, Any]]:
        users = await self.get_users([login])
        return users[0] if users else None

    async def get_channels(self, logins: List[str]) -> List[ChannelRecord]:
        """Users joined with their live streams on login.

        Logins unknown to Helix are left out; users without a live stream
        come back with ``is_live=False``.
        """
        users = await self.get_users(logins)
        streams = await self.get_streams(logins)
        live = {s["user_login"].lower(): s for s in streams if s.get("user_login")}
        return [
            ChannelRecord.from_helix(user, live.get(user["login"].lower()))
            for user in users
        ]

    async def get_archived_videos(self, user_id: str) -> List[Dict[str, Any]]:
        """Past broadcasts for a user, newest first, one page only."""
        data = await self.call("videos", {
            "user_id": user_id,
            "type": "archive",
            "first": str(self.videos_page_size),
        })
        return data.get("data") or []
