"""
Calendar engine package.

* ``timemodel``  - pure (day, hour) <-> date/clock conversions, day keys.
* ``layout``     - ``GridGeometry`` and per-day ``{top, height}`` layout.
* ``selection``  - drag-selection state machine (Idle | Selecting).
* ``views``      - ``WeekView`` / ``MonthView`` holding navigation and selection state.
* ``schemas``    - ``CalendarEvent`` read projection and its closed category set.
"""
from __future__ import annotations

from .layout import EventLayout, GridGeometry, layout_day
from .schemas import CalendarEvent, EventCategory, category_color
from .views import CalendarCallbacks, MonthView, WeekView, events_for_day

__all__: list[str] = [
    "CalendarEvent",
    "EventCategory",
    "category_color",
    "GridGeometry",
    "EventLayout",
    "layout_day",
    "CalendarCallbacks",
    "WeekView",
    "MonthView",
    "events_for_day",
]
