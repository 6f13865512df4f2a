"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

from ...models import ClickEvent, LinkRecord, LinkStatus


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: Optional[str] = Field(None, description="The URL to shorten")
    # Coerced by the registry so that every invalid field is reported together
    validity: Any = Field(None, description="Validity in minutes (default 30)")
    shortcode: Optional[str] = Field(None, description="Optional custom short code")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                    "validity": 30,
                    "shortcode": None
                },
                {
                    "url": "https://github.com/user/repo",
                    "validity": 120,
                    "shortcode": "myrepo"
                }
            ]
        }
    }


class ClickResponse(BaseModel):
    """One recorded click."""

    timestamp: datetime
    source: str
    location: str

    @classmethod
    def from_event(cls, event: ClickEvent) -> "ClickResponse":
        return cls(timestamp=event.timestamp, source=event.source, location=event.location)


class LinkResponse(BaseModel):
    """A short link as shown in the shortener view."""

    id: str
    shortcode: str
    short_url: str
    original_url: str
    created_at: datetime
    expiry_at: datetime
    clicks: int
    status: LinkStatus

    @classmethod
    def from_record(cls, record: LinkRecord, status: LinkStatus) -> "LinkResponse":
        return cls(
            id=record.id,
            shortcode=record.shortcode,
            short_url=record.short_url,
            original_url=record.original_url,
            created_at=record.created_at,
            expiry_at=record.expiry_at,
            clicks=record.clicks,
            status=status,
        )


class LinkStatsResponse(LinkResponse):
    """A short link with its click history, as shown in the statistics view."""

    click_events: List[ClickResponse]

    @classmethod
    def from_record(cls, record: LinkRecord, status: LinkStatus) -> "LinkStatsResponse":
        base = LinkResponse.from_record(record, status)
        return cls(
            **base.model_dump(),
            click_events=[ClickResponse.from_event(e) for e in record.click_events],
        )


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    message: str
    link: LinkResponse


class VisitResponse(BaseModel):
    """Response after recording a visit; the client opens ``original_url``."""

    original_url: str
    clicks: int
    click: ClickResponse


class FieldErrorResponse(BaseModel):
    field: str
    kind: str
    message: str


class ValidationErrorDetail(BaseModel):
    error: str
    errors: Dict[str, FieldErrorResponse]


class ValidationErrorResponse(BaseModel):
    """Every failed field of a rejected submission."""

    detail: ValidationErrorDetail


class ErrorResponse(BaseModel):
    """Error body returned with an HTTPException."""

    detail: str = Field(..., description="Error message")


class StatisticsResponse(BaseModel):
    """Statistics response."""

    total_links: int
    active_links: int
    expired_links: int
    total_clicks: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    storage: str = Field(..., description="Storage status")
    timestamp: datetime = Field(..., description="Check timestamp")
