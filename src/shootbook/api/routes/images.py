"""Session image routes: upload, list and delete promotional images."""

from fastapi import APIRouter, Depends, HTTPException, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shootbook.api.routes.sessions import get_owned_session
from shootbook.config import get_settings
from shootbook.database import get_db
from shootbook.models.session import PhotoSession, SessionImage
from shootbook.schemas.image import ImageUploadRead, ImageUploadResponse, SessionImageRead
from shootbook.services.images import ImageUpload, delete_session_image, upload_session_images
from shootbook.storage import ImageStore, ImageStoreError, get_image_store

router = APIRouter(prefix="/api/sessions/{session_id}/images", tags=["images"])


@router.post("", response_model=ImageUploadResponse, status_code=201)
async def upload_images(
    files: list[UploadFile],
    photo_session: PhotoSession = Depends(get_owned_session),
    session: AsyncSession = Depends(get_db),
    store: ImageStore = Depends(get_image_store),
) -> ImageUploadResponse:
    """Upload one or more images for a session.

    Each file succeeds or fails on its own; failures are listed in the
    response and never affect the session.
    """
    max_bytes = get_settings().image_max_bytes
    # Reading one byte past the limit is enough for check_upload to reject the file
    uploads = [
        ImageUpload(
            filename=f.filename or "upload",
            content_type=f.content_type or "",
            content=await f.read(max_bytes + 1),
        )
        for f in files
    ]
    result = await upload_session_images(session, store, photo_session.id, uploads, max_bytes)
    return ImageUploadResponse(
        uploads=[
            ImageUploadRead(
                filename=u.filename, image_id=u.image_id, path=u.path, url=u.url, error=u.error
            )
            for u in result.uploads
        ],
        error_count=result.error_count,
    )


@router.get("", response_model=list[SessionImageRead])
async def list_images(
    photo_session: PhotoSession = Depends(get_owned_session),
    session: AsyncSession = Depends(get_db),
) -> list[SessionImage]:
    """List a session's images, newest first."""
    stmt = (
        select(SessionImage)
        .where(SessionImage.session_id == photo_session.id)
        .order_by(SessionImage.created_at.desc(), SessionImage.id.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


@router.delete("/{image_id}", status_code=204)
async def delete_image(
    image_id: int,
    photo_session: PhotoSession = Depends(get_owned_session),
    session: AsyncSession = Depends(get_db),
    store: ImageStore = Depends(get_image_store),
) -> None:
    """Delete an image from storage and then its record."""
    stmt = select(SessionImage).where(
        SessionImage.id == image_id,
        SessionImage.session_id == photo_session.id,
    )
    result = await session.execute(stmt)
    image = result.scalar_one_or_none()
    if image is None:
        raise HTTPException(status_code=404, detail="Image not found")

    try:
        await delete_session_image(session, store, image)
    except ImageStoreError as e:
        raise HTTPException(status_code=502, detail=str(e)) from None
