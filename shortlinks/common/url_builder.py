"""Short link display form."""

from typing import Optional
from urllib.parse import urlparse


def build_short_url(short_code: str, base_url: str) -> str:
    """Join a base URL and a short code, e.g. ``http://localhost:3000/abc123``."""
    return f"{base_url.rstrip('/')}/{short_code}"


def extract_short_code(value: str, base_url: str) -> Optional[str]:
    """Get the short code out of a pasted short URL.

    A bare code is returned unchanged. A URL is accepted only if it lives
    directly under ``base_url``.

    Args:
        value: Short code or full short URL
        base_url: Base the short URLs were built on

    Returns:
        The short code, or None if ``value`` is a URL under another base
    """
    value = value.strip()
    if "/" not in value:
        return value

    base = urlparse(base_url.rstrip("/"))
    parsed = urlparse(value)
    if (parsed.scheme, parsed.netloc) != (base.scheme, base.netloc):
        return None

    prefix = base.path.rstrip("/") + "/"
    if not parsed.path.startswith(prefix):
        return None
    code = parsed.path[len(prefix):]
    if not code or "/" in code:
        return None
    return code
