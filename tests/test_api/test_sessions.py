"""Tests for session API endpoints."""

from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from shootbook.models.user import User
from shootbook.scheduling.validator import MISSING_SELECTION_MESSAGE
from tests.conftest import test_session


async def _create_user() -> None:
    async with test_session() as session:
        session.add(User(id=1, name="Ada Lens", email="ada@example.com"))
        await session.commit()


def _form(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": "Spring Mini Sessions",
        "description": "Twenty minutes in the rose garden",
        "duration_minutes": "30",
        "price": "150",
        "deposit": "50",
        "deposit_required": True,
        "location_name": "City Park",
        "start_time": "09:00",
        "end_time": "10:00",
        "number_of_spots": "2",
        "gap_between_slots": "0",
        "selected_dates": ["2024-06-01"],
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_preview(client: AsyncClient) -> None:
    resp = await client.post("/api/sessions/preview", json=_form())
    assert resp.status_code == 200
    data = resp.json()
    assert data["window_minutes"] == 60
    assert data["required_minutes"] == 60
    assert [(s["start_time"], s["end_time"]) for s in data["slots"]] == [
        ("09:00:00", "09:30:00"),
        ("09:30:00", "10:00:00"),
    ]


@pytest.mark.asyncio
async def test_preview_concurrent(client: AsyncClient) -> None:
    resp = await client.post(
        "/api/sessions/preview",
        json=_form(same_start_time=True, number_of_spots=3, duration_minutes=60),
    )
    assert resp.status_code == 200
    slots = resp.json()["slots"]
    assert [s["spot_index"] for s in slots] == [0, 1, 2]
    assert {(s["start_time"], s["end_time"]) for s in slots} == {("09:00:00", "10:00:00")}


@pytest.mark.asyncio
async def test_create_session(client: AsyncClient) -> None:
    await _create_user()

    resp = await client.post(
        "/api/sessions", json=_form(selected_dates=["2024-06-02", "2024-06-01"])
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Spring Mini Sessions"
    assert Decimal(data["price"]) == Decimal("150")
    assert Decimal(data["deposit"]) == Decimal("50")
    assert data["deposit_required"] is True
    assert data["start_time"] == "09:00:00"
    assert len(data["availability"]) == 4
    assert [row["slot_date"] for row in data["availability"]] == [
        "2024-06-01",
        "2024-06-01",
        "2024-06-02",
        "2024-06-02",
    ]
    assert all(row["is_booked"] is False for row in data["availability"])


@pytest.mark.asyncio
async def test_create_session_reports_all_errors(client: AsyncClient) -> None:
    resp = await client.post(
        "/api/sessions",
        json=_form(name="A", price="0", gap_between_slots="10", selected_dates=[]),
    )
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    fields = {e["field"] for e in detail["field_errors"]}
    assert fields == {"name", "price", "number_of_spots"}
    assert detail["selection_error"] == MISSING_SELECTION_MESSAGE

    listing = await client.get("/api/sessions")
    assert listing.json() == []


@pytest.mark.asyncio
async def test_create_session_end_before_start(client: AsyncClient) -> None:
    resp = await client.post("/api/sessions", json=_form(start_time="09:00", end_time="08:00"))
    assert resp.status_code == 422
    assert resp.json()["detail"]["field_errors"] == [
        {"field": "end_time", "message": "End time must be after start time."}
    ]


@pytest.mark.asyncio
async def test_create_session_non_list_dates(client: AsyncClient) -> None:
    resp = await client.post("/api/sessions", json=_form(selected_dates=5))
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert [e["field"] for e in detail["field_errors"]] == ["selected_dates"]
    assert detail["selection_error"] is None


@pytest.mark.asyncio
async def test_create_session_rejects_fractional_cents(client: AsyncClient) -> None:
    resp = await client.post("/api/sessions", json=_form(price="0.004"))
    assert resp.status_code == 422
    fields = {e["field"] for e in resp.json()["detail"]["field_errors"]}
    assert fields == {"price"}

    listing = await client.get("/api/sessions")
    assert listing.json() == []


@pytest.mark.asyncio
async def test_create_session_storage_failure(client: AsyncClient) -> None:
    failure = OperationalError("INSERT", {}, Exception("database is locked"))
    with patch(
        "shootbook.services.sessions._insert_availability",
        new=AsyncMock(side_effect=failure),
    ):
        resp = await client.post("/api/sessions", json=_form())

    assert resp.status_code == 502
    detail = resp.json()["detail"]
    assert detail["message"] == "Failed to save session availability."
    assert "database is locked" in detail["detail"]
    assert detail["cleanup_succeeded"] is True

    listing = await client.get("/api/sessions")
    assert listing.json() == []


@pytest.mark.asyncio
async def test_list_sessions_newest_first(client: AsyncClient) -> None:
    await _create_user()
    await client.post("/api/sessions", json=_form(name="First"))
    await client.post("/api/sessions", json=_form(name="Second"))

    resp = await client.get("/api/sessions")
    assert resp.status_code == 200
    assert [s["name"] for s in resp.json()] == ["Second", "First"]


@pytest.mark.asyncio
async def test_get_session(client: AsyncClient) -> None:
    await _create_user()
    created = (await client.post("/api/sessions", json=_form())).json()

    resp = await client.get(f"/api/sessions/{created['id']}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == created["id"]
    assert [row["spot_index"] for row in data["availability"]] == [0, 1]


@pytest.mark.asyncio
async def test_get_session_not_found(client: AsyncClient) -> None:
    resp = await client.get("/api/sessions/999")
    assert resp.status_code == 404
