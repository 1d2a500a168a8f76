#!/usr/bin/env python3
"""
Development server runner with optimized shutdown settings.
"""

import uvicorn
import signal
import sys

from offleash_zones.settings import app_settings


def signal_handler(sig, frame):
    """Handle Ctrl+C gracefully with faster shutdown."""
    print("\nReceived interrupt signal. Shutting down...")
    sys.exit(0)


if __name__ == "__main__":
    # Set up signal handler for faster Ctrl+C response
    signal.signal(signal.SIGINT, signal_handler)

    uvicorn.run(
        "offleash_zones.main:app",
        host=app_settings.host,
        port=app_settings.port,
        reload=app_settings.reload,
        reload_delay=0.25,
        timeout_graceful_shutdown=3,
        log_level="debug" if app_settings.debug else "info"
    )
