"""Persist a validated session and its availability as one logical unit.

The write happens in two phases: the session row is committed first, then its
availability rows. If the second phase fails, the session row is removed by a
compensating delete and the outcome of that cleanup is reported alongside the
original failure.
"""

import logging
from dataclasses import dataclass, fields

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shootbook.models.session import PhotoSession, SessionAvailability
from shootbook.scheduling.generator import Granularity, availability_rows
from shootbook.scheduling.types import AvailabilityRow, SessionConfig

logger = logging.getLogger(__name__)


class SessionPersistenceError(RuntimeError):
    """Storage rejected a session write.

    ``cleanup_succeeded`` is None when no compensating delete was needed,
    otherwise whether the partially created session was removed.
    """

    def __init__(self, message: str, *, detail: str, cleanup_succeeded: bool | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail
        self.cleanup_succeeded = cleanup_succeeded


@dataclass
class CreatedSession:
    session: PhotoSession
    availability: list[SessionAvailability]


def _session_columns(config: SessionConfig) -> dict[str, object]:
    """Flatten a SessionConfig into photo_sessions columns (dates excluded)."""
    return {
        f.name: getattr(config, f.name) for f in fields(config) if f.name != "selected_dates"
    }


async def _insert_session(db: AsyncSession, user_id: int, config: SessionConfig) -> PhotoSession:
    photo_session = PhotoSession(user_id=user_id, **_session_columns(config))
    db.add(photo_session)
    await db.commit()
    await db.refresh(photo_session)
    return photo_session


async def _insert_availability(
    db: AsyncSession, session_id: int, rows: list[AvailabilityRow]
) -> list[SessionAvailability]:
    records = [
        SessionAvailability(
            session_id=session_id,
            slot_date=row.slot_date,
            start_time=row.start_time,
            end_time=row.end_time,
            spot_index=row.spot_index,
        )
        for row in rows
    ]
    db.add_all(records)
    await db.commit()
    return records


async def _delete_session(db: AsyncSession, session_id: int) -> bool:
    """Compensating action for a failed availability write."""
    try:
        # The session instance is expired by the preceding rollback; skip in-session sync
        await db.execute(
            delete(SessionAvailability)
            .where(SessionAvailability.session_id == session_id)
            .execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(PhotoSession)
            .where(PhotoSession.id == session_id)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Compensating delete failed for session %s", session_id)
        return False
    logger.info("Removed session %s after availability write failure", session_id)
    return True


async def create_session(
    db: AsyncSession,
    user_id: int,
    config: SessionConfig,
    granularity: Granularity = "per_spot",
) -> CreatedSession:
    """Create a session and its availability rows.

    Slots are generated before anything is written, so a schedule fault never
    leaves a session behind.

    Raises:
        ScheduleConsistencyError: If generation breaks the window invariant.
        SessionPersistenceError: If either write is rejected by storage.
    """
    rows = availability_rows(config, granularity)

    try:
        photo_session = await _insert_session(db, user_id, config)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Session write failed: %s", e)
        raise SessionPersistenceError("Failed to create session.", detail=str(e)) from e

    # Rollback expires photo_session; only the id is used past this point on failure
    session_id = photo_session.id
    try:
        availability = await _insert_availability(db, session_id, rows)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Availability write failed for session %s: %s", session_id, e)
        cleaned = await _delete_session(db, session_id)
        raise SessionPersistenceError(
            "Failed to save session availability.",
            detail=str(e),
            cleanup_succeeded=cleaned,
        ) from e

    logger.info(
        "Created session %s with %d availability rows (%s)",
        session_id,
        len(availability),
        granularity,
    )
    return CreatedSession(session=photo_session, availability=availability)
