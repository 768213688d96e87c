from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal

from shootbook.scheduling.timeutil import required_minutes, window_minutes


@dataclass(frozen=True)
class SessionConfig:
    """A validated, immutable session definition."""

    name: str
    duration_minutes: int
    price: Decimal
    start_time: time
    end_time: time
    selected_dates: tuple[date, ...]
    description: str | None = None
    deposit: Decimal | None = None
    deposit_required: bool = False
    location_name: str | None = None
    address: str | None = None
    location_notes: str | None = None
    number_of_spots: int = 1
    gap_between_slots: int = 0
    same_start_time: bool = False

    @property
    def window_minutes(self) -> int:
        return window_minutes(self.start_time, self.end_time)

    @property
    def required_minutes(self) -> int:
        return required_minutes(
            self.duration_minutes,
            self.number_of_spots,
            self.gap_between_slots,
            self.same_start_time,
        )


@dataclass(frozen=True)
class Slot:
    """One concrete bookable interval on one date."""

    date: date
    start_time: time
    end_time: time
    spot_index: int


@dataclass(frozen=True)
class AvailabilityRow:
    """Storage-shaped availability record; ``spot_index`` is None for per-date rows."""

    slot_date: date
    start_time: time
    end_time: time
    spot_index: int | None = None


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass
class ValidationResult:
    """Outcome of decoding session form input.

    Exactly one of ``config`` or (``field_errors`` / ``selection_error``) is set.
    """

    config: SessionConfig | None = None
    field_errors: list[FieldError] = field(default_factory=list)
    selection_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.config is not None

    def errors_by_field(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for error in self.field_errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped
