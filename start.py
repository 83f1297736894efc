#!/usr/bin/env python3
"""
Startup script for the ScanLens product lookup backend.
"""

import sys

import uvicorn
import structlog

from scanlens.core.config import get_settings

logger = structlog.get_logger(__name__)


def start_development_server(settings):
    """Start the development server with hot reload."""
    logger.info("Starting ScanLens backend in development mode...")

    uvicorn.run(
        "scanlens.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        reload_dirs=["scanlens"],
        log_level="info",
        access_log=True,
        loop="asyncio"
    )


def start_production_server(settings):
    """Start the production server."""
    logger.info("Starting ScanLens backend in production mode...")

    uvicorn.run(
        "scanlens.main:app",
        host=settings.host,
        port=settings.port,
        workers=1,
        log_level="warning",
        access_log=False,
        loop="asyncio"
    )


def main():
    settings = get_settings()
    logger.info(
        "Starting ScanLens backend",
        environment=settings.environment,
        debug=settings.debug,
        providers=[source.value for source in settings.provider_order]
    )

    if settings.environment == "development":
        start_development_server(settings)
    else:
        start_production_server(settings)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)
