"""Local URL shortener: link registry, storage and presentation."""

from .errors import (
    ErrorKind,
    FieldError,
    LinkExpiredError,
    LinkNotFoundError,
    ShortcodeGenerationError,
    ShortLinksError,
    StorageError,
    ValidationError,
)
from .models import ClickEvent, LinkRecord, LinkStatus, link_status
from .registry import LinkRegistry
from .shortcode import ShortCodeGenerator

__all__ = [
    "ClickEvent",
    "ErrorKind",
    "FieldError",
    "LinkExpiredError",
    "LinkNotFoundError",
    "LinkRecord",
    "LinkRegistry",
    "LinkStatus",
    "ShortCodeGenerator",
    "ShortcodeGenerationError",
    "ShortLinksError",
    "StorageError",
    "ValidationError",
    "link_status",
]
