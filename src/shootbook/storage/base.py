from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePosixPath
from uuid import uuid4


class ImageStoreError(RuntimeError):
    """The blob store rejected or failed an operation."""


@dataclass
class StoredImage:
    """Location of an uploaded image."""

    path: str
    url: str


class ImageStore(ABC):
    """Abstract interface for session image blob storage.

    Each backend (local disk, S3-compatible bucket) implements this interface
    so uploads and deletions look the same to the rest of the app.
    """

    @abstractmethod
    def put(self, path: str, content: bytes, content_type: str) -> StoredImage:
        """Store ``content`` at ``path`` without overwriting an existing object.

        Raises:
            ImageStoreError: If the object cannot be written.
        """
        ...

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove the object at ``path``.

        Raises:
            ImageStoreError: If the object cannot be removed.
        """
        ...

    @abstractmethod
    def public_url(self, path: str) -> str:
        """URL a browser can fetch the object from."""
        ...


def build_image_path(session_id: int, filename: str, now: datetime | None = None) -> str:
    """Storage key for a session image: ``{session_id}/{millis}-{nonce}{ext}``."""
    now = now or datetime.utcnow()
    suffix = PurePosixPath(filename).suffix.lower()
    millis = int(now.timestamp() * 1000)
    return f"{session_id}/{millis}-{uuid4().hex[:8]}{suffix}"
