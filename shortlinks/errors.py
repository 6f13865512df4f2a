"""Exceptions raised by the link registry and its storage."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Set


class ErrorKind(str, Enum):
    """Kinds of input error a submission can fail with."""

    INVALID_URL = "InvalidUrl"
    INVALID_VALIDITY = "InvalidValidity"
    INVALID_SHORTCODE_FORMAT = "InvalidShortcodeFormat"
    SHORTCODE_TAKEN = "ShortcodeTaken"


@dataclass(frozen=True)
class FieldError:
    """A single failed check, tied to the form field it belongs to."""

    field: str
    kind: ErrorKind
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "kind": self.kind.value, "message": self.message}


class ShortLinksError(Exception):
    """Base class for registry errors."""


class ValidationError(ShortLinksError, ValueError):
    """One or more fields of a create request failed validation.

    Every check runs before this is raised, so ``errors`` holds all failures
    for the submission keyed by field name.
    """

    def __init__(self, errors: Iterable[FieldError]):
        self.errors: Dict[str, FieldError] = {e.field: e for e in errors}
        super().__init__("; ".join(e.message for e in self.errors.values()))

    @property
    def kinds(self) -> Set[ErrorKind]:
        return {e.kind for e in self.errors.values()}

    def to_dict(self) -> Dict[str, dict]:
        return {name: e.to_dict() for name, e in self.errors.items()}


class LinkNotFoundError(ShortLinksError, LookupError):
    """No record with the given id or shortcode."""


class LinkExpiredError(ShortLinksError):
    """The link exists but its validity period has passed."""

    def __init__(self, shortcode: str, expiry_at):
        self.shortcode = shortcode
        self.expiry_at = expiry_at
        super().__init__("This short URL has expired")


class ShortcodeGenerationError(ShortLinksError):
    """Could not draw an unused shortcode within the retry budget."""


class StorageError(ShortLinksError):
    """The persisted collection could not be read or decoded."""
