#!/usr/bin/env python3

import requests
import json
import sys
import argparse
from urllib.parse import quote


class TwitchProxyClient:
    def __init__(self, base_url="http://localhost:3000"):
        self.base_url = base_url.rstrip("/")

    def _get(self, path, params=None):
        response = requests.get(f"{self.base_url}{path}", params=params)
        response.raise_for_status()
        return response.json()

    def status(self):
        """Get proxy status and configuration state"""
        return self._get("/")

    def channels(self, logins):
        """Get channel info and live status for one or more logins"""
        return self._get("/api/channels", params={"logins": ",".join(logins)})

    def videos(self, channel):
        """Get past broadcasts of a channel"""
        return self._get(f"/api/videos/{quote(channel, safe='')}")

    def live_url(self, channel):
        """Get a signed playlist URL for a live channel"""
        return self._get("/hls", params={"channel": channel})["url"]

    def vod_url(self, vod_id):
        """Get a signed playlist URL for a VOD"""
        return self._get("/hls", params={"vod": vod_id})["url"]

    def print_channels(self, logins):
        """Print a one-line summary per channel"""
        for channel in self.channels(logins)["channels"]:
            if channel["is_live"]:
                stream = channel["stream"]
                print(f"{channel['login']}: LIVE ({stream['viewer_count']} viewers) "
                      f"{stream['game_name']} - {stream['title']}")
            else:
                print(f"{channel['login']}: offline")


def main():
    parser = argparse.ArgumentParser(description="twitch-proxy Client")
    parser.add_argument("--base-url", default="http://localhost:3000",
                        help="Base URL of the proxy server")
    parser.add_argument("--json", action="store_true",
                        help="Print raw JSON responses")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("status", help="Show proxy status")

    channels_parser = subparsers.add_parser("channels", help="Show channel live status")
    channels_parser.add_argument("logins", nargs="+", help="Channel logins")

    videos_parser = subparsers.add_parser("videos", help="List past broadcasts")
    videos_parser.add_argument("channel", help="Channel login")

    hls_parser = subparsers.add_parser("hls", help="Get a signed playlist URL")
    target = hls_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--channel", help="Live channel login")
    target.add_argument("--vod", help="VOD id")

    args = parser.parse_args()

    client = TwitchProxyClient(args.base_url)

    try:
        if args.command == "status":
            print(json.dumps(client.status(), indent=2))

        elif args.command == "channels":
            if args.json:
                print(json.dumps(client.channels(args.logins), indent=2))
            else:
                client.print_channels(args.logins)

        elif args.command == "videos":
            result = client.videos(args.channel)
            if args.json:
                print(json.dumps(result, indent=2))
            else:
                for video in result["videos"]:
                    print(f"{video['id']}: {video['title']} ({video['duration']})")

        elif args.command == "hls":
            if args.vod:
                print(client.vod_url(args.vod))
            else:
                print(client.live_url(args.channel))

        else:
            parser.print_help()
            return 1

    except requests.HTTPError as e:
        detail = e.response.text if e.response is not None else ""
        print(f"Error: {e} {detail}", file=sys.stderr)
        return 1
    except requests.RequestException as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
