"""Link registry: validation, creation, expiry and click recording."""

import json
import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from .common.timestamps import as_utc, utc_now
from .common.url_builder import build_short_url
from .common.validators import coerce_validity, is_valid_short_code, is_valid_url
from .errors import (
    ErrorKind,
    FieldError,
    LinkExpiredError,
    LinkNotFoundError,
    ShortcodeGenerationError,
    StorageError,
    ValidationError,
)
from .models import ClickEvent, LinkRecord, LinkStatus, link_status
from .shortcode import ShortCodeGenerator
from .storage.base import BlobStoreBase
from .storage.local import LocalFileBlobStore

DEFAULT_STORAGE_KEY = "urlShortenerData"
DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_VALIDITY_MINUTES = 30
DEFAULT_CLICK_SOURCE = "Direct Click"
DEFAULT_CLICK_LOCATION = "Hyderabad, India"

TelemetrySink = Callable[[str, str], Any]
Clock = Callable[[], datetime]


def decode_collection(raw: str) -> List[LinkRecord]:
    """Decode a persisted collection blob.

    Raises:
        StorageError: If the blob is not a JSON array of link records
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise StorageError(f"Stored link collection is not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise StorageError("Stored link collection must be a JSON array")
    try:
        return [LinkRecord.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError) as e:
        raise StorageError(f"Stored link record could not be decoded: {e}") from e


def encode_collection(records: List[LinkRecord]) -> str:
    return json.dumps([record.to_dict() for record in records])


class LinkRegistry:
    """Owner of the link collection.

    The collection lives in memory and is written back to the blob store,
    whole, after every mutation.
    """

    def __init__(
        self,
        store: BlobStoreBase,
        storage_key: str = DEFAULT_STORAGE_KEY,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        base_url: str = DEFAULT_BASE_URL,
        default_validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
        max_collision_retries: int = 5,
        click_source: str = DEFAULT_CLICK_SOURCE,
        click_location: str = DEFAULT_CLICK_LOCATION,
        clock: Optional[Clock] = None,
        telemetry: Optional[TelemetrySink] = None,
        logger: Optional[logging.Logger] = None,
        records: Optional[List[LinkRecord]] = None,
    ):
        """Initialize link registry.

        Args:
            store: Blob store the collection is flushed to
            storage_key: Name of the collection blob
            short_code_generator: Optional short code generator
            base_url: Base of the displayed short URL
            default_validity_minutes: Validity used when none is given
            max_collision_retries: Extra draws allowed when a generated code is taken
            click_source: Source label recorded on each click
            click_location: Location label recorded on each click
            clock: Optional callable returning the current time
            telemetry: Optional ``(level, message)`` sink for remote logging
            logger: Optional logger
            records: Initial collection (use ``load`` to read it from the store)
        """
        self.store = store
        self.storage_key = storage_key
        self.generator = short_code_generator or ShortCodeGenerator()
        self.base_url = base_url
        self.default_validity_minutes = default_validity_minutes
        self.max_collision_retries = max_collision_retries
        self.click_source = click_source
        self.click_location = click_location
        self.clock = clock or utc_now
        self.telemetry = telemetry
        self.logger = logger or logging.getLogger(__name__)
        self._records: List[LinkRecord] = list(records or [])

    @classmethod
    def load(
        cls,
        store: BlobStoreBase,
        storage_key: str = DEFAULT_STORAGE_KEY,
        **kwargs,
    ) -> "LinkRegistry":
        """Build a registry from the collection persisted in ``store``.

        A missing blob yields an empty registry.

        Raises:
            StorageError: If the stored blob cannot be decoded
        """
        raw = store.read(storage_key)
        records = decode_collection(raw) if raw else []
        registry = cls(store, storage_key=storage_key, records=records, **kwargs)
        registry.logger.info(f"Loaded {len(records)} links from '{storage_key}'")
        return registry

    @classmethod
    def from_config(
        cls,
        config,
        store: Optional[BlobStoreBase] = None,
        telemetry: Optional[TelemetrySink] = None,
        logger: Optional[logging.Logger] = None,
        clock: Optional[Clock] = None,
    ) -> "LinkRegistry":
        """Load a registry using the settings of a ``Config``.

        Args:
            config: Configuration instance
            store: Optional store (a LocalFileBlobStore on ``config.storage_dir`` if not specified)
            telemetry: Optional telemetry sink
            logger: Optional logger
            clock: Optional clock

        Returns:
            Loaded registry
        """
        if store is None:
            store = LocalFileBlobStore(config.storage_dir, logger=logger)
        return cls.load(
            store,
            storage_key=config.storage_key,
            short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
            base_url=config.base_url,
            default_validity_minutes=config.default_validity_minutes,
            max_collision_retries=config.max_collision_retries,
            click_source=config.click_source,
            click_location=config.click_location,
            clock=clock,
            telemetry=telemetry,
            logger=logger,
        )

    def create(
        self,
        original_url: str,
        validity_minutes: Any = None,
        custom_shortcode: Optional[str] = None,
    ) -> LinkRecord:
        """Create a new short link.

        All checks run before anything is rejected, so the raised error
        carries every failing field.

        Args:
            original_url: The original long URL
            validity_minutes: Minutes until expiry (default if None)
            custom_shortcode: Optional user-chosen short code

        Returns:
            The new record

        Raises:
            ValidationError: If any field is invalid
            ShortcodeGenerationError: If no unused code could be generated
            StorageError: If the collection could not be written (the record
                stays in memory and is written by the next flush)
        """
        errors: List[FieldError] = []

        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            errors.append(FieldError("original_url", ErrorKind.INVALID_URL, error))

        created_at = self._now()
        expiry_at = None
        if validity_minutes is None:
            validity_minutes = self.default_validity_minutes
        minutes = coerce_validity(validity_minutes)
        if minutes is None:
            errors.append(FieldError(
                "validity", ErrorKind.INVALID_VALIDITY, "Validity must be a positive integer"
            ))
        else:
            try:
                expiry_at = created_at + timedelta(minutes=minutes)
            except OverflowError:
                errors.append(FieldError(
                    "validity", ErrorKind.INVALID_VALIDITY, "Validity period is too long"
                ))

        has_custom_code = custom_shortcode is not None and custom_shortcode != ""
        if has_custom_code:
            is_valid, error = is_valid_short_code(custom_shortcode)
            if not is_valid:
                errors.append(FieldError(
                    "custom_shortcode", ErrorKind.INVALID_SHORTCODE_FORMAT, error
                ))
            elif self.shortcode_exists(custom_shortcode):
                errors.append(FieldError(
                    "custom_shortcode", ErrorKind.SHORTCODE_TAKEN, "Shortcode already exists"
                ))

        if errors:
            rejection = ValidationError(errors)
            self.logger.info(f"Rejected link submission: {rejection}")
            self._emit("warn", f"Link submission rejected: {sorted(k.value for k in rejection.kinds)}")
            raise rejection

        short_code = custom_shortcode if has_custom_code else self._generate_unique_short_code()

        record = LinkRecord(
            id=uuid.uuid4().hex,
            original_url=original_url,
            shortcode=short_code,
            short_url=build_short_url(short_code, self.base_url),
            created_at=created_at,
            expiry_at=expiry_at,
        )

        self._records.append(record)
        self.flush()

        self.logger.info(f"Created short URL: {short_code} -> {original_url} (expires {record.expiry_at.isoformat()})")
        self._emit("info", f"Short URL created: {short_code}")
        return record

    def record_visit(self, link_id: str) -> ClickEvent:
        """Record a click on a link.

        The caller opens the original URL afterwards; an expired link must
        not be opened.

        Args:
            link_id: Id of the visited record

        Returns:
            The recorded click event

        Raises:
            LinkNotFoundError: If no record has this id
            LinkExpiredError: If the link has expired (nothing is recorded)
        """
        record = self.get(link_id)
        if record is None:
            self.logger.warning(f"Visit for unknown link id: {link_id}")
            raise LinkNotFoundError(f"No link with id '{link_id}'")

        now = self._now()
        if link_status(record, now) is LinkStatus.EXPIRED:
            self.logger.info(f"Visit refused, link expired: {record.shortcode}")
            self._emit("warn", f"Expired short URL visited: {record.shortcode}")
            raise LinkExpiredError(record.shortcode, record.expiry_at)

        event = ClickEvent(
            timestamp=now,
            source=self.click_source,
            location=self.click_location,
        )
        record.add_click(event)
        self.flush()

        self.logger.debug(f"Recorded click on {record.shortcode}: total {record.clicks}")
        self._emit("info", f"Short URL visited: {record.shortcode}")
        return event

    def list_active(self, limit: Optional[int] = None) -> List[LinkRecord]:
        """Active links, most recently created first.

        Args:
            limit: Maximum number to return (all if None)

        Returns:
            List of records that have not expired
        """
        now = self._now()
        active = [
            record for record in reversed(self._records)
            if link_status(record, now) is LinkStatus.ACTIVE
        ]
        if limit is not None:
            return active[:max(limit, 0)]
        return active

    def list_all(self) -> List[LinkRecord]:
        """Every link regardless of expiry, in creation order."""
        return list(self._records)

    def get(self, link_id: str) -> Optional[LinkRecord]:
        for record in self._records:
            if record.id == link_id:
                return record
        return None

    def find_by_shortcode(self, shortcode: str) -> Optional[LinkRecord]:
        for record in self._records:
            if record.shortcode == shortcode:
                return record
        return None

    def shortcode_exists(self, shortcode: str) -> bool:
        return self.find_by_shortcode(shortcode) is not None

    def status(self, record: LinkRecord) -> LinkStatus:
        return link_status(record, self._now())

    def statistics(self) -> Dict[str, int]:
        """Get collection-wide totals.

        Returns:
            Dictionary with total, active and expired link counts and total clicks
        """
        now = self._now()
        active = sum(1 for r in self._records if link_status(r, now) is LinkStatus.ACTIVE)
        return {
            "total_links": len(self._records),
            "active_links": active,
            "expired_links": len(self._records) - active,
            "total_clicks": sum(r.clicks for r in self._records),
        }

    @staticmethod
    def recent_clicks(record: LinkRecord, limit: int = 5) -> Tuple[List[ClickEvent], int]:
        """Newest click events first, plus how many older ones were left out."""
        limit = max(limit, 0)
        shown = list(reversed(record.click_events))[:limit]
        return shown, len(record.click_events) - len(shown)

    def flush(self) -> None:
        """Write the whole collection back to the store."""
        self.store.write(self.storage_key, encode_collection(self._records))
        self.logger.debug(f"Flushed {len(self._records)} links to '{self.storage_key}'")

    def close(self) -> None:
        """Close the store and the telemetry sink, if it can be closed."""
        close = getattr(self.telemetry, "close", None)
        if callable(close):
            close()
        self.store.close()

    def _now(self) -> datetime:
        return as_utc(self.clock())

    def _generate_unique_short_code(self) -> str:
        """Generate a short code not used by any record.

        Returns:
            Unused short code

        Raises:
            ShortcodeGenerationError: If every draw collided
        """
        for attempt in range(self.max_collision_retries + 1):
            code = self.generator.generate_random()
            if not self.shortcode_exists(code):
                if attempt:
                    self.logger.debug(f"Generated code after {attempt + 1} attempts: {code}")
                return code

        self.logger.error("Unable to generate unique short code")
        raise ShortcodeGenerationError(
            f"Unable to generate unique short code after {self.max_collision_retries + 1} attempts"
        )

    def _emit(self, level: str, message: str) -> None:
        if self.telemetry is None:
            return
        try:
            self.telemetry(level, message)
        except Exception as e:
            # Remote logging must never affect the registry
            self.logger.warning(f"Telemetry sink failed: {e}")
