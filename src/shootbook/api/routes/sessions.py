"""Session API routes: validate, preview and create bookable photography sessions."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shootbook.config import get_settings
from shootbook.database import get_db
from shootbook.models.session import PhotoSession, SessionAvailability
from shootbook.scheduling.generator import generate_slots
from shootbook.scheduling.types import SessionConfig
from shootbook.scheduling.validator import validate_session_form
from shootbook.schemas.session import (
    AvailabilityRead,
    FieldErrorRead,
    PersistenceErrorDetail,
    SchedulePreview,
    SessionDetailRead,
    SessionRead,
    SlotRead,
    ValidationErrorDetail,
)
from shootbook.services.sessions import SessionPersistenceError, create_session

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

USER_ID = 1  # Single-user MVP; identity is handled upstream


def _validated_config(body: dict[str, Any]) -> SessionConfig:
    result = validate_session_form(body)
    if result.config is None:
        detail = ValidationErrorDetail(
            field_errors=[
                FieldErrorRead(field=e.field, message=e.message) for e in result.field_errors
            ],
            selection_error=result.selection_error,
        )
        raise HTTPException(status_code=422, detail=detail.model_dump())
    return result.config


def _session_detail(
    photo_session: PhotoSession, availability: list[SessionAvailability]
) -> SessionDetailRead:
    return SessionDetailRead(
        **SessionRead.model_validate(photo_session).model_dump(),
        availability=[AvailabilityRead.model_validate(row) for row in availability],
    )


async def get_owned_session(
    session_id: int,
    session: AsyncSession = Depends(get_db),
) -> PhotoSession:
    stmt = select(PhotoSession).where(
        PhotoSession.id == session_id,
        PhotoSession.user_id == USER_ID,
    )
    result = await session.execute(stmt)
    photo_session = result.scalar_one_or_none()
    if photo_session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return photo_session


@router.post("/preview", response_model=SchedulePreview)
async def preview_session(body: dict[str, Any]) -> SchedulePreview:
    """Validate a session form and return the slots it would create, without saving."""
    config = _validated_config(body)
    return SchedulePreview(
        window_minutes=config.window_minutes,
        required_minutes=config.required_minutes,
        slots=[SlotRead.model_validate(slot) for slot in generate_slots(config)],
    )


@router.post("", response_model=SessionDetailRead, status_code=201)
async def create_photo_session(
    body: dict[str, Any],
    session: AsyncSession = Depends(get_db),
) -> SessionDetailRead:
    """Create a session and its availability for the selected dates.

    Returns 422 with every field error (and the missing-date error, if any)
    when the form is invalid, and 502 when storage rejects the write.
    """
    config = _validated_config(body)
    settings = get_settings()
    try:
        created = await create_session(
            session, USER_ID, config, granularity=settings.availability_granularity
        )
    except SessionPersistenceError as e:
        detail = PersistenceErrorDetail(
            message=e.message, detail=e.detail, cleanup_succeeded=e.cleanup_succeeded
        )
        raise HTTPException(status_code=502, detail=detail.model_dump()) from None
    return _session_detail(created.session, created.availability)


@router.get("", response_model=list[SessionRead])
async def list_sessions(
    session: AsyncSession = Depends(get_db),
) -> list[PhotoSession]:
    """List the photographer's sessions, newest first."""
    stmt = (
        select(PhotoSession)
        .where(PhotoSession.user_id == USER_ID)
        .order_by(PhotoSession.created_at.desc(), PhotoSession.id.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


@router.get("/{session_id}", response_model=SessionDetailRead)
async def get_session(
    photo_session: PhotoSession = Depends(get_owned_session),
    session: AsyncSession = Depends(get_db),
) -> SessionDetailRead:
    """Get one session with its availability rows."""
    stmt = (
        select(SessionAvailability)
        .where(SessionAvailability.session_id == photo_session.id)
        .order_by(
            SessionAvailability.slot_date,
            SessionAvailability.start_time,
            SessionAvailability.spot_index,
        )
    )
    result = await session.execute(stmt)
    return _session_detail(photo_session, list(result.scalars().all()))
