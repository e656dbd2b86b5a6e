"""In-memory file storage for development and testing.

Keeps uploaded files in a dict and records every call. Can be configured to
fail every upload, or only uploads of specific filenames, which is how the
partial-success paths of gallery uploads are exercised.
"""

from uuid import uuid4

from files.storage.port import FileStorage, StorageError, StoredFile


class FakeStorage(FileStorage):
    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.calls: list[dict] = []
        self.should_succeed: bool = True
        self.failure_reason: str = "Upload rejected"
        self.failing_filenames: set[str] = set()

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Upload rejected",
        failing_filenames: set[str] | None = None,
    ) -> None:
        """Configure storage behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.failing_filenames = set(failing_filenames or ())

    def upload(self, filename: str, content: bytes, folder: str | None = None) -> StoredFile:
        self.calls.append({"method": "upload", "filename": filename, "size": len(content), "folder": folder})

        if not self.should_succeed or filename in self.failing_filenames:
            raise StorageError(self.failure_reason)

        public_id = f"{folder or 'uploads'}/{uuid4().hex[:16]}"
        self.files[public_id] = content
        return StoredFile(
            public_id=public_id,
            secure_url=f"https://storage.test/{public_id}/{filename}",
        )

    def delete(self, public_id: str) -> bool:
        self.calls.append({"method": "delete", "public_id": public_id})
        return self.files.pop(public_id, None) is not None

    def reset(self) -> None:
        self.files.clear()
        self.calls.clear()
        self.configure()
