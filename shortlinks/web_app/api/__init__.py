"""JSON API for the shortener and statistics views."""

from .routes import router as api_router

__all__ = ["api_router"]
