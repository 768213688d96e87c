from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from shootbook.scheduling.timeutil import parse_hhmm

MAX_SPOTS = 100


class ScheduleWindow(BaseModel):
    """A day's opening window; enough to check that it is ordered."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    start_time: time
    end_time: time

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _parse_clock_time(cls, value: Any) -> time:
        if isinstance(value, time):
            if value.second or value.microsecond:
                raise PydanticCustomError("time_format", "Invalid time format (HH:MM).")
            return value
        if not isinstance(value, str):
            raise PydanticCustomError("time_format", "Invalid time format (HH:MM).")
        try:
            return parse_hhmm(value)
        except ValueError:
            raise PydanticCustomError("time_format", "Invalid time format (HH:MM).") from None


class ScheduleFields(ScheduleWindow):
    """The subset of session fields that determines slot geometry."""

    duration_minutes: int
    number_of_spots: int = 1
    gap_between_slots: int = 0
    same_start_time: bool = False

    @field_validator("duration_minutes")
    @classmethod
    def _duration_positive(cls, value: int) -> int:
        if value <= 0:
            raise PydanticCustomError("positive", "Duration must be positive.")
        return value

    @field_validator("number_of_spots")
    @classmethod
    def _spots_in_range(cls, value: int) -> int:
        if value <= 0:
            raise PydanticCustomError("positive", "Number of spots must be at least 1.")
        if value > MAX_SPOTS:
            raise PydanticCustomError(
                "too_many", "Number of spots cannot exceed {max_spots}.", {"max_spots": MAX_SPOTS}
            )
        return value

    @field_validator("gap_between_slots")
    @classmethod
    def _gap_non_negative(cls, value: int) -> int:
        if value < 0:
            raise PydanticCustomError("non_negative", "Gap between slots cannot be negative.")
        return value


class SessionForm(ScheduleFields):
    """Field-level schema for the new-session form."""

    name: str
    description: str | None = None
    price: Decimal = Field(max_digits=10, decimal_places=2)
    deposit: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)
    deposit_required: bool = False
    location_name: str | None = None
    address: str | None = None
    location_notes: str | None = None

    @field_validator("name")
    @classmethod
    def _name_length(cls, value: str) -> str:
        if len(value) < 2:
            raise PydanticCustomError(
                "too_short", "Session name must be at least 2 characters."
            )
        return value

    @field_validator("price")
    @classmethod
    def _price_positive(cls, value: Decimal) -> Decimal:
        if value <= 0:
            raise PydanticCustomError("positive", "Price must be positive.")
        return value

    @field_validator("deposit")
    @classmethod
    def _deposit_non_negative(cls, value: Decimal | None) -> Decimal | None:
        if value is not None and value < 0:
            raise PydanticCustomError("non_negative", "Deposit cannot be negative.")
        return value


class FieldErrorRead(BaseModel):
    field: str
    message: str


class ValidationErrorDetail(BaseModel):
    field_errors: list[FieldErrorRead]
    selection_error: str | None = None


class SlotRead(BaseModel):
    date: date
    start_time: time
    end_time: time
    spot_index: int

    model_config = {"from_attributes": True}


class SchedulePreview(BaseModel):
    window_minutes: int
    required_minutes: int
    slots: list[SlotRead]


class AvailabilityRead(BaseModel):
    id: int
    slot_date: date
    start_time: time
    end_time: time
    spot_index: int | None
    is_booked: bool

    model_config = {"from_attributes": True}


class SessionRead(BaseModel):
    id: int
    user_id: int
    name: str
    description: str | None
    duration_minutes: int
    price: Decimal
    deposit: Decimal | None
    deposit_required: bool
    location_name: str | None
    address: str | None
    location_notes: str | None
    start_time: time
    end_time: time
    number_of_spots: int
    gap_between_slots: int
    same_start_time: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SessionDetailRead(SessionRead):
    availability: list[AvailabilityRead]


class PersistenceErrorDetail(BaseModel):
    message: str
    detail: str
    cleanup_succeeded: bool | None


class DashboardRead(BaseModel):
    session_count: int
    open_slot_count: int
    upcoming_date_count: int
    recent_sessions: list[SessionRead]
