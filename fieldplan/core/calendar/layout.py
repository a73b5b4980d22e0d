# fieldplan/core/calendar/layout.py
"""
Grid layout for one day column of the hour grid.

``top`` and ``height`` follow the plain rule (start offset and span scaled by
``hour_height``, with ``min_event_height`` as a floor). Overlapping events are
additionally assigned a ``column`` out of ``columns`` within their overlap
group; renderers that want the stacked look ignore those two fields.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from fieldplan.config import settings

from .schemas import CalendarEvent
from .timemodel import minutes_of_day, span_minutes, to_minutes_since_window_start

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridGeometry:
    """Numbers that describe the hour grid; nothing about devices."""

    window_start_hour: int = 8
    window_end_hour: int = 22
    hour_height: float = 60.0
    min_event_height: float = 20.0

    def __post_init__(self) -> None:
        if self.window_end_hour <= self.window_start_hour:
            raise ValueError("window_end_hour must be after window_start_hour")
        if self.hour_height <= 0:
            raise ValueError("hour_height must be positive")

    @classmethod
    def from_settings(cls, hour_height: float | None = None) -> "GridGeometry":
        return cls(
            window_start_hour=settings.CALENDAR_WINDOW_START_HOUR,
            window_end_hour=settings.CALENDAR_WINDOW_END_HOUR,
            hour_height=hour_height or settings.CALENDAR_HOUR_HEIGHT,
            min_event_height=settings.CALENDAR_MIN_EVENT_HEIGHT,
        )

    @classmethod
    def compact(cls) -> "GridGeometry":
        """Preset with the shorter row height used for narrow viewports."""
        return cls.from_settings(hour_height=settings.CALENDAR_COMPACT_HOUR_HEIGHT)

    @property
    def hours(self) -> List[int]:
        return list(range(self.window_start_hour, self.window_end_hour))

    @property
    def total_height(self) -> float:
        return (self.window_end_hour - self.window_start_hour) * self.hour_height


@dataclass(frozen=True)
class EventLayout:
    event_id: str
    top: float
    height: float
    column: int = 0
    columns: int = 1
    visible: bool = True


def position(event: CalendarEvent, geometry: GridGeometry) -> tuple[float, float]:
    """``(top, height)`` of a single event in pixels."""
    offset = to_minutes_since_window_start(event.start_time, geometry.window_start_hour)
    top = offset / 60 * geometry.hour_height
    height = max(span_minutes(event.start_time, event.end_time) / 60 * geometry.hour_height,
                 geometry.min_event_height)
    return top, height


def is_within_window(event: CalendarEvent, geometry: GridGeometry) -> bool:
    start = minutes_of_day(event.start_time)
    end = minutes_of_day(event.end_time)
    return start < geometry.window_end_hour * 60 and end > geometry.window_start_hour * 60


def _effective_range(event: CalendarEvent, geometry: GridGeometry) -> tuple[int, int]:
    # zero-length events still occupy their rendered minimum height
    start = minutes_of_day(event.start_time)
    min_minutes = geometry.min_event_height / geometry.hour_height * 60
    end = max(minutes_of_day(event.end_time), start + min_minutes)
    return start, end


def assign_columns(events: Sequence[CalendarEvent], geometry: GridGeometry) -> dict[str, tuple[int, int]]:
    """
    Greedy column assignment over overlap groups.

    Events are swept by start (longer first on ties); an event joins the
    current group while it starts before the group's latest end, and takes
    the first column whose previous occupant has already ended.

    Returns ``{event_id: (column, columns_in_group)}``.
    """
    ordered = sorted(
        events,
        key=lambda ev: (minutes_of_day(ev.start_time), -span_minutes(ev.start_time, ev.end_time), ev.id),
    )
    result: dict[str, tuple[int, int]] = {}
    group: list[tuple[str, int]] = []
    column_ends: list[float] = []
    group_end: float = float("-inf")

    def close_group() -> None:
        for event_id, column in group:
            result[event_id] = (column, len(column_ends))

    for event in ordered:
        start, end = _effective_range(event, geometry)
        if group and start >= group_end:
            close_group()
            group, column_ends, group_end = [], [], float("-inf")

        for index, column_end in enumerate(column_ends):
            if start >= column_end:
                column_ends[index] = end
                group.append((event.id, index))
                break
        else:
            column_ends.append(end)
            group.append((event.id, len(column_ends) - 1))
        group_end = max(group_end, end)

    if group:
        close_group()
    return result


def layout_day(events: Iterable[CalendarEvent], geometry: GridGeometry) -> List[EventLayout]:
    """
    Lay out one day's events (already filtered by day key).

    Pure: the same events and geometry always give the same result, in the
    order the events were passed in.
    """
    day_events = list(events)
    columns = assign_columns(day_events, geometry)
    layouts: List[EventLayout] = []
    for event in day_events:
        top, height = position(event, geometry)
        column, column_count = columns[event.id]
        layouts.append(
            EventLayout(
                event_id=event.id,
                top=top,
                height=height,
                column=column,
                columns=column_count,
                visible=is_within_window(event, geometry),
            )
        )
    log.debug("Laid out %d events (hour_height=%s)", len(layouts), geometry.hour_height)
    return layouts


__all__ = [
    "GridGeometry",
    "EventLayout",
    "position",
    "is_within_window",
    "assign_columns",
    "layout_day",
]
