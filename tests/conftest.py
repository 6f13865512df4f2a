"""Pytest configuration and fixtures."""

import random
from datetime import datetime, timedelta, timezone

import pytest

from shortlinks.config import Config
from shortlinks.registry import LinkRegistry
from shortlinks.shortcode import ShortCodeGenerator
from shortlinks.storage import InMemoryBlobStore
from shortlinks.common.logging_config import setup_logging


class FakeClock:
    """Settable clock for expiry tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    return InMemoryBlobStore()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6, rng=random.Random(1234))


@pytest.fixture
def registry(store, short_code_generator, clock, logger) -> LinkRegistry:
    """Create an empty registry on an in-memory store."""
    return LinkRegistry.load(
        store,
        short_code_generator=short_code_generator,
        clock=clock,
        logger=logger,
    )


@pytest.fixture
def config(tmp_path):
    return Config(storage_dir=str(tmp_path / "store"), base_url="http://localhost:3000")


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
