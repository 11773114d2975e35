"""Signed Usher (HLS manifest) URL construction. No I/O."""

import random
from urllib.parse import quote, urlencode

from config import DEFAULT_USHER_BASE_URL

PLAYER = "twitchweb"
CACHE_BUSTER_RANGE = 10_000_000


def cache_buster() -> str:
    """Fresh random value for the ``p`` parameter on every call."""
    return str(random.randrange(CACHE_BUSTER_RANGE))


def _query(sig: str, token: str, live: bool) -> str:
    params = {
        "sig": sig,
        "token": token,
        "player": PLAYER,
        "allow_source": "true",
        "allow_audio_only": "true",
    }
    if live:
        params["playlist_include_framerate"] = "true"
        params["reassignments_supported"] = "true"
    params["p"] = cache_buster()
    return urlencode(params)


def build_live_url(channel: str, sig: str, token: str, base_url: str = DEFAULT_USHER_BASE_URL) -> str:
    path = f"/api/channel/hls/{quote(channel, safe='')}.m3u8"
    return f"{base_url.rstrip('/')}{path}?{_query(sig, token, live=True)}"


def build_vod_url(video_id: str, sig: str, token: str, base_url: str = DEFAULT_USHER_BASE_URL) -> str:
    # Video ids are numeric and used verbatim in the path
    return f"{base_url.rstrip('/')}/vod/{video_id}.m3u8?{_query(sig, token, live=False)}"
