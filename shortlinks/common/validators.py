"""Validation utilities for link submissions."""

import math
import re
from urllib.parse import urlparse
from typing import Any, Optional, Tuple

MAX_URL_LENGTH = 2048

_SHORTCODE_RE = re.compile(r"^[A-Za-z0-9]+$")


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    The URL must be absolute: a scheme and a host are both required.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "Original URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if url != url.strip() or any(c.isspace() for c in url):
        return False, "Please enter a valid URL"

    try:
        result = urlparse(url)
        # Accessing port validates the netloc (raises on e.g. "host:abc")
        result.port
    except ValueError:
        return False, "Please enter a valid URL"

    if not result.scheme or not result.netloc or not result.hostname:
        return False, "Please enter a valid URL"

    return True, ""


def is_valid_short_code(short_code: str) -> Tuple[bool, str]:
    """Validate a custom short code.

    Args:
        short_code: The short code to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(short_code, str) or not _SHORTCODE_RE.fullmatch(short_code):
        return False, "Shortcode must be alphanumeric"

    return True, ""


def coerce_validity(value: Any) -> Optional[int]:
    """Coerce a validity period to a positive whole number of minutes.

    Integers, integral floats and numeric strings are accepted. Booleans,
    fractional values and anything non-numeric are not.

    Args:
        value: Raw validity input

    Returns:
        The number of minutes, or None if the value is not a positive integer
    """
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, int):
        minutes = value
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        minutes = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            minutes = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return None
            if not math.isfinite(number) or not number.is_integer():
                return None
            minutes = int(number)
    else:
        return None

    if minutes < 1:
        return None
    return minutes
