"""Common utilities for shortlinks."""

from .validators import is_valid_url, is_valid_short_code, coerce_validity
from .url_builder import build_short_url, extract_short_code
from .logging_config import setup_logging
from .timestamps import utc_now, as_utc, iso_z, parse_timestamp

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "coerce_validity",
    "build_short_url",
    "extract_short_code",
    "setup_logging",
    "utc_now",
    "as_utc",
    "iso_z",
    "parse_timestamp",
]
