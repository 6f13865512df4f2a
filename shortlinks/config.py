"""Configuration management for shortlinks."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Storage settings
    storage_dir: str = Field(
        default="~/.shortlinks",
        description="Directory holding the persisted link collection"
    )

    storage_key: str = Field(
        default="urlShortenerData",
        description="Name of the blob holding the link collection"
    )

    # Short link settings
    base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL shown in front of short codes"
    )

    short_code_length: int = Field(
        default=6,
        ge=1,
        description="Length of generated short codes"
    )

    default_validity_minutes: int = Field(
        default=30,
        ge=1,
        description="Validity period used when none is given"
    )

    max_collision_retries: int = Field(
        default=5,
        ge=0,
        description="Extra draws allowed when a generated short code is taken"
    )

    recent_links_limit: int = Field(
        default=5,
        ge=1,
        description="Number of active links shown in the recent view"
    )

    click_source: str = Field(
        default="Direct Click",
        description="Source label recorded on every click"
    )

    click_location: str = Field(
        default="Hyderabad, India",
        description="Location label recorded on every click"
    )

    # Server settings
    host: str = Field(
        default="127.0.0.1",
        description="Host to bind the local API to"
    )

    port: int = Field(
        default=9200,
        description="Port to listen on"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    # Telemetry settings (optional)
    telemetry_url: Optional[str] = Field(
        default=None,
        description="Remote logging endpoint; telemetry is off when unset"
    )

    telemetry_token: Optional[str] = Field(
        default=None,
        description="Bearer token for the remote logging endpoint"
    )

    telemetry_stack: str = Field(
        default="backend",
        description="Stack label sent with telemetry entries"
    )

    telemetry_package: str = Field(
        default="service",
        description="Package label sent with telemetry entries"
    )

    telemetry_timeout_seconds: float = Field(
        default=5,
        gt=0,
        description="Timeout for telemetry requests"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }


def load_config(**overrides) -> Config:
    """Load configuration from environment."""
    return Config(**overrides)
