# fieldplan/core/planning/schemas.py
"""
Pydantic schemas for planning items and the inputs of the creation flows.

Used in:
    * core.planning.recurrence     - RecurrenceSpec -> PlanningItemCreate batch
    * core.planning.store/service  - persistence collaborator contract
    * core.planning.orchestrator   - single / quick / recurring flows
    * fieldplan/api/v1/planning.py - public REST endpoints
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import List, Set

from pydantic import BaseModel, Field, model_validator


class PlanningStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_STATUS_LABELS: dict[PlanningStatus, str] = {
    PlanningStatus.SCHEDULED: "Scheduled",
    PlanningStatus.CONFIRMED: "Confirmed",
    PlanningStatus.IN_PROGRESS: "In progress",
    PlanningStatus.COMPLETED: "Completed",
    PlanningStatus.CANCELLED: "Cancelled",
}

_STATUS_COLORS: dict[PlanningStatus, str] = {
    PlanningStatus.SCHEDULED: "#3b82f6",
    PlanningStatus.CONFIRMED: "#22c55e",
    PlanningStatus.IN_PROGRESS: "#f97316",
    PlanningStatus.COMPLETED: "#6b7280",
    PlanningStatus.CANCELLED: "#ef4444",
}

for _table in (_STATUS_LABELS, _STATUS_COLORS):
    _missing = set(PlanningStatus) - set(_table)
    if _missing:  # pragma: no cover
        raise RuntimeError(f"Status lookup incomplete, missing: {sorted(s.value for s in _missing)}")


def status_label(status: PlanningStatus) -> str:
    return _STATUS_LABELS[status]


def status_color(status: PlanningStatus) -> str:
    return _STATUS_COLORS[status]


class PlanningItemBase(BaseModel):
    """Fields shared by every representation of a planning item."""

    title: str = Field(..., min_length=1, description="Display title")
    date: dt.date = Field(..., description="Day of the appointment")
    start_time: dt.time = Field(..., description="Start clock time")
    end_time: dt.time = Field(..., description="End clock time")
    assigned_resource_id: str = Field(..., min_length=1, description="Person performing the work")
    project_id: str = Field(..., min_length=1, description="Project the work belongs to")
    location: str | None = Field(None, description="Free text or geocoded address")
    description: str | None = Field(None, description="Notes for the resource")

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def check_time_order(self) -> "PlanningItemBase":
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class PlanningItemCreate(PlanningItemBase):
    """A planning item that has not been persisted yet (no id)."""

    status: PlanningStatus = Field(PlanningStatus.SCHEDULED, description="Always created as scheduled")


class PlanningItemOut(PlanningItemBase):
    """A planning item as stored by the persistence collaborator."""

    id: str = Field(..., description="Identifier assigned by the store")
    status: PlanningStatus = Field(..., description="Lifecycle status")
    created_at: dt.datetime | None = Field(None, description="Creation timestamp (UTC)")


class PlanningFilter(BaseModel):
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    assigned_resource_id: str | None = None
    project_id: str | None = None
    status: PlanningStatus | None = None


class PlanningDraft(BaseModel):
    """What a creation dialog is opened with (from a slot click, drag or month click)."""

    date: dt.date
    start_time: dt.time
    end_time: dt.time


class PlanningForm(BaseModel):
    """
    Values submitted from a single or quick creation dialog.

    Everything is optional here; missing required values are reported by the
    orchestrator as validation errors instead of schema errors.
    """

    assigned_resource_id: str | None = None
    project_id: str | None = None
    title: str | None = None
    description: str | None = None
    location: str | None = None
    start_time: dt.time | None = None
    end_time: dt.time | None = None


class RecurrenceSpec(BaseModel):
    """
    Input of the recurring plan generator.

    ``weekdays`` uses 0 = Sunday ... 6 = Saturday. Empty weekday sets and
    missing or inverted date ranges are accepted here and reported by the
    generator's validation step.
    """

    start_date: dt.date | None = None
    end_date: dt.date | None = None
    start_time: dt.time = Field(..., description="Start time on every generated day")
    end_time: dt.time | None = Field(None, description="End time; defaults to start + default duration")
    weekdays: Set[int] = Field(default_factory=set, description="Weekdays to plan (0 = Sunday)")
    assigned_resource_id: str | None = None
    project_id: str | None = None
    title: str | None = None
    location: str | None = None
    description: str | None = None

    @model_validator(mode="after")
    def check_weekday_values(self) -> "RecurrenceSpec":
        invalid = sorted(d for d in self.weekdays if not 0 <= d <= 6)
        if invalid:
            raise ValueError(f"weekday values must be between 0 and 6, got {invalid}")
        return self


class PickerOption(BaseModel):
    """One entry of a resource or project picker."""

    id: str
    label: str


class GeneratedPlan(BaseModel):
    """Ordered output of the recurring plan generator, before persistence."""

    items: List[PlanningItemCreate] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)


class RecurrenceResult(BaseModel):
    """Persisted outcome of a recurring submission."""

    items: List[PlanningItemOut]
    count: int

    @property
    def message(self) -> str:
        return f"{self.count} planning items created"


__all__: list[str] = [
    "PlanningStatus",
    "status_label",
    "status_color",
    "PlanningItemBase",
    "PlanningItemCreate",
    "PlanningItemOut",
    "PlanningFilter",
    "PlanningDraft",
    "PlanningForm",
    "RecurrenceSpec",
    "PickerOption",
    "GeneratedPlan",
    "RecurrenceResult",
]
