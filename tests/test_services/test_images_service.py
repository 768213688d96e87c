"""Tests for best-effort session image uploads."""

from datetime import time
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock

from sqlalchemy import select

from shootbook.models.session import PhotoSession, SessionImage
from shootbook.services.images import (
    ImageUpload,
    check_upload,
    delete_session_image,
    upload_session_images,
)
from shootbook.storage import ImageStoreError, LocalImageStore
from tests.conftest import test_session

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
MAX_BYTES = 1024


async def _create_session() -> int:
    async with test_session() as session:
        photo_session = PhotoSession(
            user_id=1,
            name="Newborn Session",
            duration_minutes=60,
            price=Decimal("300"),
            start_time=time(10, 0),
            end_time=time(12, 0),
        )
        session.add(photo_session)
        await session.commit()
        return photo_session.id


class TestCheckUpload:
    def test_accepts_png(self) -> None:
        assert check_upload(ImageUpload("a.png", "image/png", PNG), MAX_BYTES) is None

    def test_rejects_type(self) -> None:
        reason = check_upload(ImageUpload("a.pdf", "application/pdf", b"%PDF"), MAX_BYTES)
        assert reason is not None
        assert "file type" in reason

    def test_rejects_oversize(self) -> None:
        assert check_upload(ImageUpload("a.png", "image/png", b"x" * 2048), MAX_BYTES)

    def test_rejects_empty(self) -> None:
        assert check_upload(ImageUpload("a.png", "image/png", b""), MAX_BYTES) == "File is empty."


class TestUploadSessionImages:
    async def test_stores_and_records(self, tmp_path: Path) -> None:
        session_id = await _create_session()
        store = LocalImageStore(tmp_path, "/media")

        async with test_session() as session:
            result = await upload_session_images(
                session,
                store,
                session_id,
                [ImageUpload("one.png", "image/png", PNG), ImageUpload("two.PNG", "image/png", PNG)],
                MAX_BYTES,
            )

        assert result.error_count == 0
        assert all(u.path and u.path.startswith(f"{session_id}/") for u in result.uploads)
        assert all(u.path and u.path.endswith(".png") for u in result.uploads)
        assert all((tmp_path / u.path).read_bytes() == PNG for u in result.uploads if u.path)

        async with test_session() as session:
            images = list((await session.execute(select(SessionImage))).scalars().all())
        assert len(images) == 2
        assert sorted(image.is_primary for image in images) == [False, True]

    async def test_partial_failure(self, tmp_path: Path) -> None:
        session_id = await _create_session()
        store = LocalImageStore(tmp_path, "/media")

        async with test_session() as session:
            result = await upload_session_images(
                session,
                store,
                session_id,
                [
                    ImageUpload("good.png", "image/png", PNG),
                    ImageUpload("notes.txt", "text/plain", b"hello"),
                ],
                MAX_BYTES,
            )

        assert result.error_count == 1
        assert result.uploads[0].image_id is not None
        assert result.uploads[1].error is not None

    async def test_store_failure_reported_per_file(self) -> None:
        session_id = await _create_session()
        store = MagicMock()
        store.put.side_effect = ImageStoreError("bucket unavailable")

        async with test_session() as session:
            result = await upload_session_images(
                session, store, session_id, [ImageUpload("a.png", "image/png", PNG)], MAX_BYTES
            )

        assert result.error_count == 1
        assert result.uploads[0].error == "Failed to upload image. Please try again."
        async with test_session() as session:
            assert (await session.execute(select(SessionImage))).first() is None


async def test_delete_removes_blob_and_record(tmp_path: Path) -> None:
    session_id = await _create_session()
    store = LocalImageStore(tmp_path, "/media")

    async with test_session() as session:
        result = await upload_session_images(
            session, store, session_id, [ImageUpload("a.png", "image/png", PNG)], MAX_BYTES
        )
        path = result.uploads[0].path
        assert path is not None
        image = await session.get(SessionImage, result.uploads[0].image_id)
        assert image is not None
        await delete_session_image(session, store, image)

    assert not (tmp_path / path).exists()
    async with test_session() as session:
        assert (await session.execute(select(SessionImage))).first() is None
