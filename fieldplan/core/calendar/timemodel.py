# fieldplan/core/calendar/timemodel.py
"""
Pure conversions between grid coordinates (day, hour) and event time fields.

Clock times travel either as :class:`datetime.time` or as ``"HH:MM"`` /
``"HH:MM:SS"`` strings. Malformed input raises ``ValueError``; callers are
expected to pass values produced by pickers.
"""

from __future__ import annotations

from datetime import date, time, timedelta
from typing import Union

ClockLike = Union[time, str]

# 0 = Sunday ... 6 = Saturday
SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)

WEEKDAY_NAMES: dict[int, str] = {
    SUNDAY: "Sunday",
    MONDAY: "Monday",
    TUESDAY: "Tuesday",
    WEDNESDAY: "Wednesday",
    THURSDAY: "Thursday",
    FRIDAY: "Friday",
    SATURDAY: "Saturday",
}


def parse_clock(value: ClockLike) -> time:
    """``"09:30"`` / ``"09:30:00"`` / ``time(9, 30)`` -> ``time(9, 30)``."""
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Malformed clock time: {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    return time(hour, minute)


def minutes_of_day(value: ClockLike) -> int:
    clock = parse_clock(value)
    return clock.hour * 60 + clock.minute


def clock_from_minutes(minutes: int) -> time:
    """Inverse of :func:`minutes_of_day`; 24:00 and later is clamped to 23:59."""
    if minutes < 0:
        raise ValueError(f"Negative minute offset: {minutes}")
    if minutes >= 24 * 60:
        return time(23, 59)
    return time(minutes // 60, minutes % 60)


def to_minutes_since_window_start(clock: ClockLike, window_start_hour: int) -> int:
    """Minutes from the first displayed hour of the grid; negative before the window."""
    return minutes_of_day(clock) - window_start_hour * 60


def span_minutes(start: ClockLike, end: ClockLike) -> int:
    return minutes_of_day(end) - minutes_of_day(start)


def cell_to_clock_time(hour: int) -> str:
    """Grid row hour -> zero padded ``HH:00``."""
    if not 0 <= hour <= 24:
        raise ValueError(f"Hour out of range: {hour}")
    return f"{hour:02d}:00"


def cell_to_time(hour: int) -> time:
    """Like :func:`cell_to_clock_time` but as ``time``; hour 24 maps to 23:59."""
    return clock_from_minutes(hour * 60)


def add_minutes(clock: ClockLike, minutes: int) -> time:
    return clock_from_minutes(minutes_of_day(clock) + minutes)


def format_clock(value: ClockLike) -> str:
    clock = parse_clock(value)
    return f"{clock.hour:02d}:{clock.minute:02d}"


def date_key(day: date) -> str:
    """Canonical ``YYYY-MM-DD`` join key between a displayed day and its events."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def weekday(day: date) -> int:
    """Weekday with 0 = Sunday, matching the recurrence weekday values."""
    return day.isoweekday() % 7


def start_of_week(day: date, first_weekday: int = MONDAY) -> date:
    return day - timedelta(days=(weekday(day) - first_weekday) % 7)


def iter_days(start: date, end: date):
    """Every calendar date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


__all__ = [
    "ClockLike",
    "SUNDAY", "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY",
    "WEEKDAY_NAMES",
    "parse_clock", "minutes_of_day", "clock_from_minutes",
    "to_minutes_since_window_start", "span_minutes",
    "cell_to_clock_time", "cell_to_time", "add_minutes", "format_clock",
    "date_key", "weekday", "start_of_week", "iter_days",
]
