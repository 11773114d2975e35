#!/usr/bin/env python3
"""
twitch-proxy - Main Entry Point
Twitch metadata and signed HLS playlist proxy for clients without Twitch credentials.
"""

import uvicorn
import logging
import sys
import os
import asyncio

# Add the src directory to Python path so local modules in `src/` can be imported
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

# Import configs AFTER setting up the path
from config import settings, VERSION


def main():
    """Main function to start the twitch-proxy server."""

    # Try to use uvloop for better async performance
    try:
        import uvloop
        asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())
        use_uvloop = True
    except ImportError:
        use_uvloop = False

    # Configure logging
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    logger = logging.getLogger(__name__)
    logger.info("="*60)
    logger.info(
        f"⚡️ Starting twitch-proxy v{VERSION} on {settings.HOST}:{settings.PORT}")
    logger.info("="*60)
    logger.info(f"ℹ️  Log level set to: {settings.LOG_LEVEL}")
    logger.info(f"ℹ️  Environment: {settings.APP_ENV}")
    if use_uvloop:
        logger.info("✅ Using uvloop for optimized async I/O performance")
    else:
        logger.info(
            "✅ Using standard asyncio (install uvloop for better performance)")

    logger.info("✅ Live and VOD playback signing via GQL")
    if settings.TWITCH_CLIENT_ID and settings.TWITCH_CLIENT_SECRET:
        logger.info("✅ Helix credentials configured")
    else:
        logger.warning(
            "⚠️  Missing TWITCH_CLIENT_ID/TWITCH_CLIENT_SECRET; /api/channels and /api/videos will fail")
    logger.info("Next steps:")
    logger.info("  1. Start an ngrok or cloudflared tunnel")
    logger.info("  2. Use the HTTPS URL + /oauth/callback as the Twitch OAuth redirect")
    logger.info("  3. Add credentials to .env and restart")

    if settings.RELOAD:
        logger.info("🔄 Auto-reload is enabled.")

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
        loop="uvloop" if use_uvloop and not settings.RELOAD else "asyncio"
    )


if __name__ == "__main__":
    main()
