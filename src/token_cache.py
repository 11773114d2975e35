"""
App access token cache for the Helix API.

Holds a single slot with the most recent client-credentials token. The slot
is refreshed lazily: the first caller that finds it empty or within the
safety margin of expiry performs the grant request and replaces it.

There is no lock around the check-and-fetch. Concurrent requests that both
see a stale slot each fetch a token and each overwrite the slot; the last
write wins and every caller still receives a usable token. Tokens live for
hours, so the redundant grant requests only happen around a refresh.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from config import DEFAULT_OAUTH_TOKEN_URL, DEFAULT_TOKEN_EXPIRY_MARGIN
from credentials import Credentials
from errors import UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppToken:
    value: str
    expires_at: float  # absolute, seconds since the epoch

    def is_fresh(self, now: float, margin: float) -> bool:
        return now < self.expires_at - margin


class AppTokenCache:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        credentials: Credentials,
        token_url: str = DEFAULT_OAUTH_TOKEN_URL,
        margin: float = DEFAULT_TOKEN_EXPIRY_MARGIN,
        clock: Callable[[], float] = time.time,
    ):
        self.http_client = http_client
        self.credentials = credentials
        self.token_url = token_url
        self.margin = margin
        self.clock = clock
        self._token: Optional[AppToken] = None

    @property
    def current(self) -> Optional[AppToken]:
        """The cached token, whether or not it is still fresh."""
        return self._token

    async def get_token(self) -> str:
        """Return a bearer token valid for at least ``margin`` more seconds."""
        self.credentials.require_helix()

        token = self._token
        if token and token.is_fresh(self.clock(), self.margin):
            return token.value

        token = await self._fetch()
        self._token = token
        return token.value

    async def _fetch(self) -> AppToken:
        logger.debug("Requesting app access token")
        response = await self.http_client.post(
            self.token_url,
            data={
                "client_id": self.credentials.helix_client_id,
                "client_secret": self.credentials.helix_client_secret,
                "grant_type": "client_credentials",
            },
        )
        if not response.is_success:
            logger.error(f"App token request failed: {response.status_code}")
            raise UpstreamError("oauth token", response.status_code, response.text)

        data = response.json()
        expires_in = data["expires_in"]
        token = AppToken(
            value=data["access_token"],
            expires_at=self.clock() + expires_in,
        )
        logger.info(f"Obtained app access token (expires in {expires_in}s)")
        return token
