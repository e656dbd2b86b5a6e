"""File storage factory.

Provides get_storage() / set_storage() to swap implementations:
- FakeStorage for development and testing
- CloudinaryStorage when Cloudinary credentials are configured
"""

import structlog

from files.storage.fake_adapter import FakeStorage
from files.storage.port import FileStorage, StorageError, StoredFile
from shared.config import get_settings

logger = structlog.get_logger(__name__)

_current_storage: FileStorage | None = None

__all__ = ["FileStorage", "StorageError", "StoredFile", "get_storage", "set_storage", "reset_storage"]


def get_storage() -> FileStorage:
    """Return the current file storage, chosen from settings on first use."""
    global _current_storage
    if _current_storage is None:
        settings = get_settings()
        if settings.storage_configured:
            from files.storage.cloudinary_adapter import CloudinaryStorage

            _current_storage = CloudinaryStorage(
                cloud_name=settings.cloudinary_cloud_name,
                api_key=settings.cloudinary_api_key,
                api_secret=settings.cloudinary_api_secret,
            )
        else:
            logger.warning("Cloudinary is not configured, using in-memory file storage")
            _current_storage = FakeStorage()
    return _current_storage


def set_storage(storage: FileStorage) -> None:
    """Override the active storage (useful for tests)."""
    global _current_storage
    _current_storage = storage


def reset_storage() -> None:
    global _current_storage
    _current_storage = None
