"""
Twitch Proxy Server
Signs live and VOD playback requests and serves channel metadata for
clients that cannot hold Twitch credentials themselves.
"""

__version__ = "0.1.0"
__description__ = "Twitch metadata and signed HLS playlist proxy"
