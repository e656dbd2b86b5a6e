"""Incoming uploads: validation and batch upload with partial success."""

from dataclasses import dataclass, field
from pathlib import PurePath

import structlog
from fastapi import UploadFile
from protean.exceptions import ValidationError

from files.storage.port import FileStorage, StorageError, StoredFile

logger = structlog.get_logger(__name__)

ALLOWED_IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "webp"})


@dataclass(frozen=True)
class Upload:
    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def extension(self) -> str:
        return PurePath(self.filename).suffix.lower().lstrip(".")

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class UploadFailure:
    filename: str
    reason: str


@dataclass
class UploadBatch:
    stored: list[tuple[Upload, StoredFile]] = field(default_factory=list)
    failed: list[UploadFailure] = field(default_factory=list)


def read_upload(file: UploadFile) -> Upload:
    """Read a FastAPI ``UploadFile`` fully into memory."""
    file.file.seek(0)
    return Upload(filename=file.filename or "upload", content=file.file.read(), content_type=file.content_type)


def validate_image(upload: Upload, max_bytes: int) -> None:
    if upload.extension not in ALLOWED_IMAGE_EXTENSIONS:
        allowed = ", ".join(sorted(ALLOWED_IMAGE_EXTENSIONS))
        raise ValidationError({"file": [f"Unsupported file type '{upload.filename}'. Allowed: {allowed}"]})
    if upload.size == 0:
        raise ValidationError({"file": [f"File '{upload.filename}' is empty"]})
    if upload.size > max_bytes:
        raise ValidationError({"file": [f"File '{upload.filename}' exceeds the {max_bytes // 1024}KB limit"]})


def upload_image(storage: FileStorage, upload: Upload, max_bytes: int, folder: str | None = None) -> StoredFile:
    """Validate and upload a single image. Validation and storage errors propagate."""
    validate_image(upload, max_bytes)
    return storage.upload(upload.filename, upload.content, folder=folder)


def _failure_reason(exc: Exception) -> str:
    if isinstance(exc, ValidationError) and isinstance(exc.messages, dict):
        return next(iter(exc.messages.values()))[0]
    return str(exc)


def upload_many(
    storage: FileStorage,
    uploads: list[Upload],
    max_bytes: int,
    folder: str | None = None,
) -> UploadBatch:
    """Upload every image independently; one bad file does not stop the rest."""
    batch = UploadBatch()
    for upload in uploads:
        try:
            stored = upload_image(storage, upload, max_bytes, folder=folder)
        except (ValidationError, StorageError) as exc:
            reason = _failure_reason(exc)
            logger.error("Image upload failed", filename=upload.filename, error=reason)
            batch.failed.append(UploadFailure(filename=upload.filename, reason=reason))
            continue
        batch.stored.append((upload, stored))
    return batch


def discard_stored(storage: FileStorage, public_id: str) -> None:
    """Delete a file that is no longer referenced. A storage failure only leaves an orphan behind."""
    try:
        storage.delete(public_id)
    except StorageError as exc:
        logger.warning("Could not delete unreferenced file", public_id=public_id, error=str(exc))
