"""Local blob store implementations."""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

from ..errors import StorageError
from .base import BlobStoreBase

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def _check_key(key: str) -> None:
    if not key or not _KEY_RE.fullmatch(key) or key in (".", ".."):
        raise ValueError(f"Invalid storage key: {key!r}")


class LocalFileBlobStore(BlobStoreBase):
    """Store each blob as ``<directory>/<key>.json``."""

    def __init__(
        self,
        directory: Union[str, Path],
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize file store.

        Args:
            directory: Directory holding the blob files (created on first write)
            logger: Optional logger instance
        """
        self.directory = Path(directory).expanduser()
        self.logger = logger or logging.getLogger(__name__)

    def path_for(self, key: str) -> Path:
        _check_key(key)
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def write(self, key: str, data: str) -> None:
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Write beside the target and swap it in so readers never see a half-written blob
            fd, tmp_path = tempfile.mkstemp(prefix=f".{key}.", dir=self.directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

        self.logger.debug(f"Wrote {len(data)} bytes to {path}")

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()


class InMemoryBlobStore(BlobStoreBase):
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._blobs: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        _check_key(key)
        return self._blobs.get(key)

    def write(self, key: str, data: str) -> None:
        _check_key(key)
        self._blobs[key] = data
