# fieldplan/core/calendar/schemas.py
"""
Pydantic schemas for renderable calendar events.

Used in:
    * fieldplan/core/calendar/layout.py   - positioning inside the hour grid
    * fieldplan/core/calendar/views.py    - day filtering for week/month views
    * fieldplan/api/v1/calendar.py        - public REST endpoints
    * core.planning.orchestrator          - PlanningItem -> CalendarEvent projection
"""

from __future__ import annotations

import datetime as dt
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class EventCategory(str, Enum):
    """Closed set of display categories (colour only, no scheduling meaning)."""

    WORK = "work"
    PERSONAL = "personal"
    VACATION = "vacation"
    MEETING = "meeting"
    PROJECT = "project"
    APPOINTMENT = "appointment"
    REMINDER = "reminder"
    DEADLINE = "deadline"


_CATEGORY_COLORS: dict[EventCategory, str] = {
    EventCategory.WORK: "#3b82f6",
    EventCategory.PERSONAL: "#22c55e",
    EventCategory.VACATION: "#a855f7",
    EventCategory.MEETING: "#f97316",
    EventCategory.PROJECT: "#ef4444",
    EventCategory.APPOINTMENT: "#c084fc",
    EventCategory.REMINDER: "#eab308",
    EventCategory.DEADLINE: "#dc2626",
}

_missing_colors = set(EventCategory) - set(_CATEGORY_COLORS)
if _missing_colors:  # pragma: no cover
    raise RuntimeError(f"No colour defined for categories: {sorted(c.value for c in _missing_colors)}")


def category_color(category: EventCategory) -> str:
    return _CATEGORY_COLORS[category]


class CalendarEvent(BaseModel):
    """Read projection of a planning item (or other record) for display."""

    id: str = Field(..., description="Identifier of the underlying record")
    title: str = Field(..., description="Display text")
    date: dt.date = Field(..., description="Calendar date, no time component")
    start_time: dt.time = Field(..., description="Start clock time")
    end_time: dt.time = Field(..., description="End clock time")
    category: EventCategory = Field(EventCategory.APPOINTMENT, description="Display category")
    description: str | None = Field(None, description="Optional free text")
    location: str | None = Field(None, description="Optional address")

    model_config = {"from_attributes": True, "frozen": True}

    @model_validator(mode="after")
    def check_time_order(self) -> "CalendarEvent":
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self

    @property
    def color(self) -> str:
        return category_color(self.category)


__all__: list[str] = ["EventCategory", "CalendarEvent", "category_color"]
