"""File storage port (abstract interface).

Every object-storage adapter implements this contract, so FakeStorage
(dev/test) and CloudinaryStorage (production) are interchangeable without
touching the gallery or profile code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class StorageError(Exception):
    """Raised when the remote storage rejects or fails an operation."""


@dataclass(frozen=True)
class StoredFile:
    """A file persisted in remote storage."""

    public_id: str
    secure_url: str


class FileStorage(ABC):
    """Abstract file storage interface."""

    @abstractmethod
    def upload(self, filename: str, content: bytes, folder: str | None = None) -> StoredFile:
        """Upload a file and return its storage identifiers. Raises StorageError on failure."""
        ...

    @abstractmethod
    def delete(self, public_id: str) -> bool:
        """Delete a stored file. Returns False when the file did not exist."""
        ...
