# fieldplan/core/calendar/views.py
"""
Week and month calendar views.

A view owns two pieces of local state: the navigation offset (which week or
month is displayed) and, for the week view, the drag selection. It never
mutates event lists; pointer gestures are resolved into the callbacks of
:class:`CalendarCallbacks` and the host decides what to do with them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Iterable, List, Optional, Sequence

from fieldplan.config import settings

from . import selection
from .layout import EventLayout, GridGeometry, layout_day
from .schemas import CalendarEvent
from .selection import Cell, RangeCreate, Resolution, SelectionState, SlotClick
from .timemodel import date_key, start_of_week

log = logging.getLogger(__name__)


@dataclass
class CalendarCallbacks:
    """Upward callback surface a host application plugs into a view."""

    on_event_click: Optional[Callable[[CalendarEvent], None]] = None
    on_time_slot_click: Optional[Callable[[date, int], None]] = None
    on_range_create: Optional[Callable[[date, int, int], None]] = None


def events_for_day(events: Iterable[CalendarEvent], day: date) -> List[CalendarEvent]:
    """Events whose day key equals ``day``'s key, ordered by start time."""
    key = date_key(day)
    matching = [ev for ev in events if date_key(ev.date) == key]
    return sorted(matching, key=lambda ev: (ev.start_time, ev.end_time, ev.id))


@dataclass(frozen=True)
class PositionedEvent:
    event: CalendarEvent
    layout: EventLayout


@dataclass(frozen=True)
class DayColumn:
    day: date
    key: str
    events: List[PositionedEvent] = field(default_factory=list)


@dataclass(frozen=True)
class MonthCell:
    day: date
    key: str
    in_month: bool
    events: List[CalendarEvent] = field(default_factory=list)
    overflow: int = 0


class _BaseView:
    def __init__(self, callbacks: CalendarCallbacks | None = None) -> None:
        self.callbacks = callbacks or CalendarCallbacks()

    def click_event(self, event: CalendarEvent) -> None:
        log.debug("Event clicked: %s", event.id)
        if self.callbacks.on_event_click:
            self.callbacks.on_event_click(event)

    def _emit(self, outcome: Resolution) -> None:
        if isinstance(outcome, SlotClick):
            if self.callbacks.on_time_slot_click:
                self.callbacks.on_time_slot_click(outcome.day, outcome.hour)
        elif isinstance(outcome, RangeCreate):
            if self.callbacks.on_range_create:
                self.callbacks.on_range_create(outcome.day, outcome.start_hour, outcome.end_hour)


class WeekView(_BaseView):
    """Seven day columns starting on ``first_weekday`` (0 = Sunday)."""

    def __init__(
        self,
        anchor: date | None = None,
        *,
        first_weekday: int | None = None,
        geometry: GridGeometry | None = None,
        callbacks: CalendarCallbacks | None = None,
    ) -> None:
        super().__init__(callbacks)
        self.first_weekday = settings.CALENDAR_FIRST_WEEKDAY if first_weekday is None else first_weekday
        self.geometry = geometry or GridGeometry.from_settings()
        self.week_start = start_of_week(anchor or date.today(), self.first_weekday)
        self.selection: SelectionState = selection.IDLE

    # ----------------------------------------------------------------- #
    #                            navigation                             #
    # ----------------------------------------------------------------- #
    @property
    def days(self) -> List[date]:
        return [self.week_start + timedelta(days=i) for i in range(7)]

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=6)

    def next_week(self) -> date:
        self.week_start += timedelta(weeks=1)
        return self.week_start

    def previous_week(self) -> date:
        self.week_start -= timedelta(weeks=1)
        return self.week_start

    def go_to(self, day: date) -> date:
        self.week_start = start_of_week(day, self.first_weekday)
        return self.week_start

    def day_at(self, day_index: int) -> date:
        if not 0 <= day_index < 7:
            raise ValueError(f"Day index out of range: {day_index}")
        return self.week_start + timedelta(days=day_index)

    # ----------------------------------------------------------------- #
    #                             rendering                             #
    # ----------------------------------------------------------------- #
    def columns(self, events: Sequence[CalendarEvent]) -> List[DayColumn]:
        out: List[DayColumn] = []
        for day in self.days:
            day_events = events_for_day(events, day)
            layouts = layout_day(day_events, self.geometry)
            out.append(
                DayColumn(
                    day=day,
                    key=date_key(day),
                    events=[PositionedEvent(ev, lay) for ev, lay in zip(day_events, layouts)],
                )
            )
        return out

    # ----------------------------------------------------------------- #
    #                           drag selection                          #
    # ----------------------------------------------------------------- #
    def pointer_down(self, day_index: int, hour: int) -> None:
        self.selection = selection.pointer_down(self.selection, Cell(self.day_at(day_index), hour))

    def pointer_enter(self, day_index: int, hour: int) -> None:
        self.selection = selection.pointer_enter(self.selection, Cell(self.day_at(day_index), hour))

    def pointer_up(self) -> Optional[Resolution]:
        self.selection, outcome = selection.pointer_up(self.selection)
        if outcome is not None:
            self._emit(outcome)
        return outcome

    def pointer_leave(self) -> Optional[Resolution]:
        return self.pointer_up()

    def cancel_selection(self) -> None:
        self.selection = selection.cancel(self.selection)

    def is_in_selection(self, day_index: int, hour: int) -> bool:
        return selection.is_highlighted(self.selection, Cell(self.day_at(day_index), hour))


class MonthView(_BaseView):
    """All calendar weeks overlapping the displayed month."""

    def __init__(
        self,
        anchor: date | None = None,
        *,
        first_weekday: int | None = None,
        max_events: int | None = None,
        default_hour: int | None = None,
        callbacks: CalendarCallbacks | None = None,
    ) -> None:
        super().__init__(callbacks)
        self.first_weekday = settings.CALENDAR_FIRST_WEEKDAY if first_weekday is None else first_weekday
        self.max_events = settings.CALENDAR_MONTH_MAX_EVENTS if max_events is None else max_events
        self.default_hour = settings.CALENDAR_MONTH_DEFAULT_HOUR if default_hour is None else default_hour
        anchor = anchor or date.today()
        self.month_start = anchor.replace(day=1)

    @staticmethod
    def _shift_month(month_start: date, months: int) -> date:
        index = month_start.year * 12 + (month_start.month - 1) + months
        year, month = divmod(index, 12)
        return date(year, month + 1, 1)

    @property
    def month_end(self) -> date:
        return self._shift_month(self.month_start, 1) - timedelta(days=1)

    def next_month(self) -> date:
        self.month_start = self._shift_month(self.month_start, 1)
        return self.month_start

    def previous_month(self) -> date:
        self.month_start = self._shift_month(self.month_start, -1)
        return self.month_start

    def go_to(self, day: date) -> date:
        self.month_start = day.replace(day=1)
        return self.month_start

    def weeks(self) -> List[List[date]]:
        first = start_of_week(self.month_start, self.first_weekday)
        last = start_of_week(self.month_end, self.first_weekday) + timedelta(days=6)
        total_days = (last - first).days + 1
        days = [first + timedelta(days=i) for i in range(total_days)]
        return [days[i:i + 7] for i in range(0, total_days, 7)]

    def cells(self, events: Sequence[CalendarEvent]) -> List[List[MonthCell]]:
        grid: List[List[MonthCell]] = []
        for week in self.weeks():
            row: List[MonthCell] = []
            for day in week:
                day_events = events_for_day(events, day)
                row.append(
                    MonthCell(
                        day=day,
                        key=date_key(day),
                        in_month=(day.year, day.month) == (self.month_start.year, self.month_start.month),
                        events=day_events[:self.max_events],
                        overflow=max(len(day_events) - self.max_events, 0),
                    )
                )
            grid.append(row)
        return grid

    def click_day(self, day: date) -> RangeCreate:
        """Month cells have no hour grid: open creation with the default hour."""
        outcome = RangeCreate(day=day, start_hour=self.default_hour, end_hour=self.default_hour + 1)
        log.debug("Month day clicked: %s", outcome)
        self._emit(outcome)
        return outcome


__all__ = [
    "CalendarCallbacks",
    "events_for_day",
    "PositionedEvent",
    "DayColumn",
    "MonthCell",
    "WeekView",
    "MonthView",
]
