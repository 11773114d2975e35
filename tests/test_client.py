"""
Tests for the command-line client
"""
import requests
from unittest.mock import patch, Mock

# The client lives at the repository root
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import twitch_proxy_client
from twitch_proxy_client import TwitchProxyClient


def json_response(payload, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


class TestTwitchProxyClient:
    def test_channels_joins_logins(self):
        client = TwitchProxyClient("http://proxy.local:3000/")
        with patch("twitch_proxy_client.requests.get",
                   return_value=json_response({"channels": []})) as get:
            client.channels(["gorgc", "dota2ti"])

        get.assert_called_once_with(
            "http://proxy.local:3000/api/channels",
            params={"logins": "gorgc,dota2ti"},
        )

    def test_videos_quotes_channel(self):
        client = TwitchProxyClient()
        with patch("twitch_proxy_client.requests.get",
                   return_value=json_response({"videos": []})) as get:
            client.videos("a/b")

        get.assert_called_once_with("http://localhost:3000/api/videos/a%2Fb", params=None)

    def test_live_and_vod_urls(self):
        client = TwitchProxyClient()
        with patch("twitch_proxy_client.requests.get",
                   return_value=json_response({"url": "https://usher/x.m3u8"})) as get:
            assert client.live_url("foo") == "https://usher/x.m3u8"
            assert client.vod_url("2001") == "https://usher/x.m3u8"

        assert get.call_args_list[0].kwargs["params"] == {"channel": "foo"}
        assert get.call_args_list[1].kwargs["params"] == {"vod": "2001"}

    def test_print_channels(self, capsys):
        client = TwitchProxyClient()
        payload = {"channels": [
            {"login": "gorgc", "is_live": True, "stream": {
                "viewer_count": 10, "game_name": "Dota 2", "title": "ranked"}},
            {"login": "dota2ti", "is_live": False, "stream": None},
        ]}
        with patch("twitch_proxy_client.requests.get", return_value=json_response(payload)):
            client.print_channels(["gorgc", "dota2ti"])

        out = capsys.readouterr().out
        assert "gorgc: LIVE (10 viewers) Dota 2 - ranked" in out
        assert "dota2ti: offline" in out


class TestMain:
    def test_hls_command_prints_url(self, capsys):
        argv = ["twitch_proxy_client.py", "hls", "--channel", "foo"]
        with patch.object(sys, "argv", argv), \
                patch("twitch_proxy_client.requests.get",
                      return_value=json_response({"url": "https://usher/foo.m3u8"})):
            assert twitch_proxy_client.main() == 0

        assert capsys.readouterr().out.strip() == "https://usher/foo.m3u8"

    def test_http_error_exits_non_zero(self, capsys):
        error_response = Mock(text='{"error":"offline or no token"}')
        response = json_response({}, status_code=404)
        response.raise_for_status.side_effect = requests.HTTPError(
            "404 Client Error", response=error_response)
        argv = ["twitch_proxy_client.py", "hls", "--channel", "sleeping"]
        with patch.object(sys, "argv", argv), \
                patch("twitch_proxy_client.requests.get", return_value=response):
            assert twitch_proxy_client.main() == 1

        assert "offline or no token" in capsys.readouterr().err

    def test_no_command_prints_help(self, capsys):
        with patch.object(sys, "argv", ["twitch_proxy_client.py"]):
            assert twitch_proxy_client.main() == 1
        assert "usage" in capsys.readouterr().out
