#!/usr/bin/env python3
"""
Entry point for the local shortlinks API.

Runs a single uvicorn worker bound to localhost. The link collection has one
writer, so the server is never scaled out to several processes.

Usage:
    shortlinks-server

Environment variables:
    STORAGE_DIR - Directory holding the link collection
    BASE_URL - Base URL for short links
    HOST / PORT - Address to listen on
    LOG_LEVEL - Logging level
    TELEMETRY_URL / TELEMETRY_TOKEN - Optional remote logging endpoint
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .config import load_config
from .registry import LinkRegistry
from .telemetry import reporter_from_config
from .common.logging_config import setup_logging
from .web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the registry on startup and release it on shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting shortlinks service...")
    logger.info(f"Loading links from {config.storage_dir}")

    telemetry = reporter_from_config(config)
    if telemetry is None:
        logger.info("Telemetry disabled")

    registry = LinkRegistry.from_config(config, telemetry=telemetry, logger=logger)
    app.state.registry = registry

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down shortlinks service...")
    registry.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("shortlinks API")
    logger.info(f"Configuration: {config.model_dump(exclude={'telemetry_token'})}")

    app = create_app(registry=None, config=config)
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=1,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
