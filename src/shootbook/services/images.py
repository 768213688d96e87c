"""Promotional images for sessions.

Uploads are best-effort: each file is stored and recorded independently, and
a failure is reported for that file without touching the session itself.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shootbook.models.session import SessionImage
from shootbook.storage.base import ImageStore, ImageStoreError, build_image_path

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/webp",
    "image/gif",
}


@dataclass
class ImageUpload:
    """An image file received from a client."""

    filename: str
    content_type: str
    content: bytes


@dataclass
class UploadOutcome:
    filename: str
    image_id: int | None = None
    path: str | None = None
    url: str | None = None
    error: str | None = None


@dataclass
class UploadResult:
    uploads: list[UploadOutcome]

    @property
    def error_count(self) -> int:
        return sum(1 for upload in self.uploads if upload.error)


def check_upload(upload: ImageUpload, max_bytes: int) -> str | None:
    """Return a user-facing reason the file is rejected, or None if acceptable."""
    if upload.content_type not in ALLOWED_IMAGE_TYPES:
        return "Invalid file type. Only PNG, JPEG, WebP and GIF images are allowed."
    if not upload.content:
        return "File is empty."
    if len(upload.content) > max_bytes:
        return f"File exceeds the {max_bytes // (1024 * 1024)}MB limit."
    return None


async def _has_images(db: AsyncSession, session_id: int) -> bool:
    count = await db.scalar(
        select(func.count()).select_from(SessionImage).where(SessionImage.session_id == session_id)
    )
    return bool(count)


async def upload_session_images(
    db: AsyncSession,
    store: ImageStore,
    session_id: int,
    uploads: list[ImageUpload],
    max_bytes: int,
) -> UploadResult:
    """Store each image and record it against ``session_id``.

    The first image a session receives is marked primary.
    """
    outcomes: list[UploadOutcome] = []
    has_primary = await _has_images(db, session_id)

    for upload in uploads:
        outcome = UploadOutcome(filename=upload.filename)
        outcomes.append(outcome)

        reason = check_upload(upload, max_bytes)
        if reason:
            outcome.error = reason
            continue

        path = build_image_path(session_id, upload.filename)
        try:
            stored = store.put(path, upload.content, upload.content_type)
        except ImageStoreError as e:
            logger.error("Upload of %s for session %s failed: %s", upload.filename, session_id, e)
            outcome.error = "Failed to upload image. Please try again."
            continue

        record = SessionImage(
            session_id=session_id,
            storage_path=stored.path,
            url=stored.url,
            is_primary=not has_primary,
        )
        try:
            db.add(record)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Failed to record image %s: %s", stored.path, e)
            outcome.error = "Failed to save image information."
            try:
                store.delete(stored.path)
            except ImageStoreError:
                logger.exception("Orphaned image left in storage: %s", stored.path)
            continue

        has_primary = True
        outcome.image_id = record.id
        outcome.path = stored.path
        outcome.url = stored.url

    result = UploadResult(uploads=outcomes)
    if result.error_count:
        logger.info(
            "Session %s image upload: %d of %d failed",
            session_id,
            result.error_count,
            len(outcomes),
        )
    return result


async def delete_session_image(db: AsyncSession, store: ImageStore, image: SessionImage) -> None:
    """Delete the blob first, then its record.

    Raises:
        ImageStoreError: If the blob cannot be removed; the record is kept.
    """
    store.delete(image.storage_path)
    await db.delete(image)
    await db.commit()
