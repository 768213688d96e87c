"""Expand a validated SessionConfig into concrete bookable slots.

Every selected date receives an identical copy of one intra-day pattern:
``number_of_spots`` intervals of ``duration_minutes`` either stacked on the
window start (concurrent mode) or laid back to back with ``gap_between_slots``
idle minutes between them (sequential mode).
"""

from collections.abc import Iterator
from typing import Literal

from shootbook.scheduling.timeutil import from_minutes, to_minutes
from shootbook.scheduling.types import AvailabilityRow, SessionConfig, Slot

Granularity = Literal["per_spot", "per_date"]


class ScheduleConsistencyError(RuntimeError):
    """A generated slot would leave its daily window.

    Validation rejects such configurations, so reaching this is a programming
    error rather than bad user input.
    """


def _day_pattern(config: SessionConfig) -> list[tuple[int, int]]:
    """(start, end) minute offsets for each spot on any one day."""
    window_start = to_minutes(config.start_time)
    window_end = to_minutes(config.end_time)
    step = 0 if config.same_start_time else config.duration_minutes + config.gap_between_slots

    pattern = []
    for spot_index in range(config.number_of_spots):
        start = window_start + spot_index * step
        end = start + config.duration_minutes
        if end > window_end:
            raise ScheduleConsistencyError(
                f"Spot {spot_index} ends at minute {end}, after the window end "
                f"({window_end}) of session {config.name!r}"
            )
        pattern.append((start, end))
    return pattern


def iter_slots(config: SessionConfig) -> Iterator[Slot]:
    """Lazily yield slots in (date, spot_index) order.

    The day pattern is checked before the first slot is produced, so a faulty
    configuration never yields a partial schedule.
    """
    pattern = [
        (from_minutes(start), from_minutes(end)) for start, end in _day_pattern(config)
    ]
    for day in sorted(config.selected_dates):
        for spot_index, (start, end) in enumerate(pattern):
            yield Slot(date=day, start_time=start, end_time=end, spot_index=spot_index)


def generate_slots(config: SessionConfig) -> list[Slot]:
    return list(iter_slots(config))


def availability_rows(
    config: SessionConfig, granularity: Granularity = "per_spot"
) -> list[AvailabilityRow]:
    """Shape a config's schedule into storage rows.

    ``per_spot`` emits one row per generated slot. ``per_date`` emits one row
    per date spanning the whole daily window, leaving spot expansion to the
    reader.
    """
    if granularity == "per_spot":
        return [
            AvailabilityRow(
                slot_date=slot.date,
                start_time=slot.start_time,
                end_time=slot.end_time,
                spot_index=slot.spot_index,
            )
            for slot in iter_slots(config)
        ]
    if granularity == "per_date":
        _day_pattern(config)
        return [
            AvailabilityRow(slot_date=day, start_time=config.start_time, end_time=config.end_time)
            for day in sorted(config.selected_dates)
        ]
    raise ValueError(f"Unknown availability granularity: {granularity!r}")
