"""Dashboard API route: summary of the photographer's sessions and open slots."""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shootbook.config import get_settings
from shootbook.database import get_db
from shootbook.models.session import PhotoSession, SessionAvailability
from shootbook.schemas.session import DashboardRead, SessionRead

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

USER_ID = 1  # Single-user MVP


@router.get("", response_model=DashboardRead)
async def get_dashboard(
    today: date | None = None,
    session: AsyncSession = Depends(get_db),
) -> DashboardRead:
    """Counts of sessions, open upcoming slots and dates, plus the latest sessions."""
    today = today or date.today()
    settings = get_settings()

    session_count = await session.scalar(
        select(func.count()).select_from(PhotoSession).where(PhotoSession.user_id == USER_ID)
    )

    upcoming = (
        select(SessionAvailability)
        .join(PhotoSession, PhotoSession.id == SessionAvailability.session_id)
        .where(
            PhotoSession.user_id == USER_ID,
            SessionAvailability.is_booked.is_(False),
            SessionAvailability.slot_date >= today,
        )
        .subquery()
    )
    open_slot_count = await session.scalar(select(func.count()).select_from(upcoming))
    upcoming_date_count = await session.scalar(
        select(func.count(distinct(upcoming.c.slot_date)))
    )

    recent_stmt = (
        select(PhotoSession)
        .where(PhotoSession.user_id == USER_ID)
        .order_by(PhotoSession.created_at.desc(), PhotoSession.id.desc())
        .limit(settings.dashboard_recent_limit)
    )
    result = await session.execute(recent_stmt)

    return DashboardRead(
        session_count=session_count or 0,
        open_slot_count=open_slot_count or 0,
        upcoming_date_count=upcoming_date_count or 0,
        recent_sessions=[SessionRead.model_validate(s) for s in result.scalars().all()],
    )
