"""Cloudinary storage adapter (production), built on the official SDK.

``cloudinary.config`` holds the account credentials process-wide; uploads
and deletions go through ``cloudinary.uploader``. SDK failures surface as
``StorageError`` so callers never see ``cloudinary.exceptions``.
"""

import io

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
import structlog

from files.storage.port import FileStorage, StorageError, StoredFile

logger = structlog.get_logger(__name__)


class CloudinaryStorage(FileStorage):
    def __init__(self, cloud_name: str, api_key: str, api_secret: str, timeout: int = 30) -> None:
        cloudinary.config(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret, secure=True)
        self.timeout = timeout

    def upload(self, filename: str, content: bytes, folder: str | None = None) -> StoredFile:
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(content),
                folder=folder,
                filename=filename,
                resource_type="image",
                timeout=self.timeout,
            )
        except cloudinary.exceptions.Error as exc:
            raise StorageError(f"Storage rejected upload of {filename}: {exc}") from exc

        logger.info("File uploaded", public_id=result["public_id"], size=len(content))
        return StoredFile(public_id=result["public_id"], secure_url=result["secure_url"])

    def delete(self, public_id: str) -> bool:
        try:
            result = cloudinary.uploader.destroy(public_id, resource_type="image", invalidate=True)
        except cloudinary.exceptions.Error as exc:
            raise StorageError(f"Storage rejected deletion of {public_id}: {exc}") from exc

        outcome = result.get("result")
        if outcome == "not found":
            return False
        if outcome != "ok":
            raise StorageError(f"Unexpected destroy result for {public_id}: {outcome}")
        return True
