"""Minute-resolution clock arithmetic on a single abstract day.

Times never cross midnight and carry no timezone; a window is interpreted in
whatever local civil time the caller associates with each date.
"""

import re
from datetime import time

MINUTES_PER_DAY = 24 * 60

# 24-hour clock, single-digit hours allowed ("9:30")
TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def parse_hhmm(value: str) -> time:
    """Parse an ``HH:MM`` string into a ``time``.

    Raises:
        ValueError: If the string is not a valid 24-hour clock time.
    """
    match = TIME_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid time format (HH:MM): {value!r}")
    return time(int(match.group(1)), int(match.group(2)))


def format_hhmm(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def to_minutes(value: time) -> int:
    """Minutes since midnight. Seconds are ignored."""
    return value.hour * 60 + value.minute


def from_minutes(minutes: int) -> time:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"{minutes} minutes is outside a single day")
    return time(minutes // 60, minutes % 60)


def window_minutes(start: time, end: time) -> int:
    """Length of the [start, end) window; negative when end is not after start."""
    return to_minutes(end) - to_minutes(start)


def required_minutes(
    duration: int, spots: int, gap: int, same_start_time: bool = False
) -> int:
    """Minutes a day's window must span to hold every spot.

    Concurrent spots overlap, so only one duration is needed. Sequential spots
    sit back to back with ``gap`` idle minutes between neighbours.
    """
    if same_start_time:
        return duration
    return duration * spots + gap * (spots - 1)
