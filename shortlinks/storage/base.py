"""Abstract base class for named-blob stores."""

from abc import ABC, abstractmethod
from typing import Optional


class BlobStoreBase(ABC):
    """A flat key-value store holding one text blob per key.

    Writes replace the whole blob. There are no partial writes or
    transactions.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """Read the blob stored under a key.

        Args:
            key: Blob name

        Returns:
            The blob text, or None if nothing is stored under the key
        """
        pass

    @abstractmethod
    def write(self, key: str, data: str) -> None:
        """Replace the blob stored under a key.

        Args:
            key: Blob name
            data: Blob text
        """
        pass

    def exists(self, key: str) -> bool:
        """Check if a blob is stored under a key.

        Args:
            key: Blob name

        Returns:
            True if exists, False otherwise
        """
        return self.read(key) is not None

    def close(self) -> None:
        """Release any resources held by the store."""
        pass
