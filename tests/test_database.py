"""Tests for schema creation helpers."""

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine

import shootbook.models  # noqa: F401
from shootbook.database import create_tables, drop_tables


async def test_create_and_drop_tables() -> None:
    engine = create_async_engine("sqlite+aiosqlite://")
    try:
        await create_tables(engine)
        async with engine.connect() as conn:
            names = await conn.run_sync(lambda c: inspect(c).get_table_names())
            fks = await conn.run_sync(
                lambda c: inspect(c).get_foreign_keys("session_availability")
            )
        assert {"users", "photo_sessions", "session_availability", "session_images"} <= set(names)
        assert fks[0]["name"] == "fk_session_availability_session_id_photo_sessions"

        await drop_tables(engine)
        async with engine.connect() as conn:
            names = await conn.run_sync(lambda c: inspect(c).get_table_names())
        assert names == []
    finally:
        await engine.dispose()
