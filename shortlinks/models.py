"""Data models for shortlinks."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List

from .common.timestamps import iso_z, parse_timestamp


class LinkStatus(str, Enum):
    ACTIVE = "Active"
    EXPIRED = "Expired"


@dataclass(frozen=True)
class ClickEvent:
    """One visit to a short link."""

    timestamp: datetime
    source: str
    location: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "timestamp": iso_z(self.timestamp),
            "source": self.source,
            "location": self.location,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ClickEvent":
        """Create from dictionary."""
        return cls(
            timestamp=parse_timestamp(data["timestamp"]),
            source=data.get("source", ""),
            location=data.get("location", ""),
        )


@dataclass
class LinkRecord:
    """A shortened URL and its click history.

    Only ``clicks`` and ``click_events`` change after creation, and only
    together: ``clicks`` always equals ``len(click_events)``.
    """

    id: str
    original_url: str
    shortcode: str
    short_url: str
    created_at: datetime
    expiry_at: datetime
    clicks: int = 0
    click_events: List[ClickEvent] = field(default_factory=list)

    def add_click(self, event: ClickEvent) -> None:
        self.click_events.append(event)
        self.clicks += 1

    def to_dict(self) -> dict:
        """Convert to the persisted dictionary form."""
        return {
            "id": self.id,
            "originalUrl": self.original_url,
            "shortcode": self.shortcode,
            "shortUrl": self.short_url,
            "createdAt": iso_z(self.created_at),
            "expiryDate": iso_z(self.expiry_at),
            "clicks": self.clicks,
            "clickData": [event.to_dict() for event in self.click_events],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LinkRecord":
        """Create from the persisted dictionary form.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a field cannot be decoded or the click count
                does not match the click history
        """
        events = [ClickEvent.from_dict(item) for item in data.get("clickData", [])]
        clicks = int(data.get("clicks", len(events)))
        if clicks != len(events):
            raise ValueError(
                f"Record {data.get('shortcode')!r} has clicks={clicks} "
                f"but {len(events)} click events"
            )
        return cls(
            id=str(data["id"]),
            original_url=data["originalUrl"],
            shortcode=data["shortcode"],
            short_url=data["shortUrl"],
            created_at=parse_timestamp(data["createdAt"]),
            expiry_at=parse_timestamp(data["expiryDate"]),
            clicks=clicks,
            click_events=events,
        )


def link_status(record: LinkRecord, now: datetime) -> LinkStatus:
    """Status of ``record`` at ``now``; a link is active up to and including its expiry instant."""
    if now > record.expiry_at:
        return LinkStatus.EXPIRED
    return LinkStatus.ACTIVE
