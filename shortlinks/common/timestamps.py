"""Timestamp helpers shared by the model and the presentation layer."""

from datetime import datetime, timezone
from typing import Union


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime; naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def iso_z(dt: datetime) -> str:
    return as_utc(dt).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Parse a persisted timestamp back into an aware datetime.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp
    """
    if isinstance(value, datetime):
        return as_utc(value)
    if not isinstance(value, str):
        raise ValueError(f"Invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))
