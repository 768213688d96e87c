"""Image store backed by a directory on local disk."""

import logging
from pathlib import Path

from shootbook.storage.base import ImageStore, ImageStoreError, StoredImage

logger = logging.getLogger(__name__)


class LocalImageStore(ImageStore):
    def __init__(self, root: Path, base_url: str) -> None:
        self.root = root
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if not target.is_relative_to(self.root.resolve()):
            raise ImageStoreError(f"Path escapes image directory: {path}")
        return target

    def put(self, path: str, content: bytes, content_type: str) -> StoredImage:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("xb") as fh:
                fh.write(content)
        except FileExistsError:
            raise ImageStoreError(f"Image already exists: {path}") from None
        except OSError as e:
            raise ImageStoreError(f"Failed to write image {path}: {e}") from e
        logger.info("Stored image %s (%d bytes, %s)", path, len(content), content_type)
        return StoredImage(path=path, url=self.public_url(path))

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink()
        except FileNotFoundError:
            raise ImageStoreError(f"Image not found: {path}") from None
        except OSError as e:
            raise ImageStoreError(f"Failed to delete image {path}: {e}") from e

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"
