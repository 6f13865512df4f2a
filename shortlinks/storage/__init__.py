"""Storage layer for shortlinks."""

from .base import BlobStoreBase
from .local import LocalFileBlobStore, InMemoryBlobStore

__all__ = ["BlobStoreBase", "LocalFileBlobStore", "InMemoryBlobStore"]
