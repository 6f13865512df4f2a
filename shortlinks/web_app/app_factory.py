"""FastAPI application factory."""

from fastapi import FastAPI

from .api import api_router
from .middleware import LoggingMiddleware


def create_app(registry, config) -> FastAPI:
    """Create and configure FastAPI application.

    Handlers are coroutine functions, so with a single worker every registry
    call runs on the event loop thread, one at a time.

    Args:
        registry: Link registry instance (may be set later on ``app.state``)
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="shortlinks",
        description="Local URL shortener",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Store instances in app state for access in routes
    app.state.registry = registry
    app.state.config = config

    app.add_middleware(LoggingMiddleware)

    app.include_router(api_router, prefix="/api", tags=["API"])

    return app
