# fieldplan/core/planning/recurrence.py
"""
Recurring multi-day plan generator.

Expands a :class:`RecurrenceSpec` (date range, weekday set, fixed time of
day, assignment) into one scheduled planning item per matching date. The
full batch is computed synchronously before anything is handed to the
persistence collaborator. No overlap checking happens here.
"""

from __future__ import annotations

import logging
from typing import List

from fieldplan.config import settings
from fieldplan.core.calendar.timemodel import add_minutes, iter_days, weekday

from .errors import PlanningValidationError
from .schemas import GeneratedPlan, PlanningItemCreate, PlanningStatus, RecurrenceSpec

log = logging.getLogger(__name__)

MSG_NO_WEEKDAYS = "select at least one weekday"
MSG_NO_DATE_RANGE = "select a start and end date"
MSG_NO_RESOURCE = "select a resource"
MSG_NO_PROJECT = "select a project"
MSG_TIME_ORDER = "end time must be after start time"

DEFAULT_TITLE = "Multi-day planning"


def validate_recurrence(spec: RecurrenceSpec) -> None:
    """
    Raise :class:`PlanningValidationError` for the first problem found.

    Order: weekdays, date range, assignment, time range.
    """
    if not spec.weekdays:
        raise PlanningValidationError(MSG_NO_WEEKDAYS, field="weekdays")
    if spec.start_date is None or spec.end_date is None or spec.start_date > spec.end_date:
        raise PlanningValidationError(MSG_NO_DATE_RANGE, field="start_date")
    if not spec.assigned_resource_id:
        raise PlanningValidationError(MSG_NO_RESOURCE, field="assigned_resource_id")
    if not spec.project_id:
        raise PlanningValidationError(MSG_NO_PROJECT, field="project_id")
    end_time = resolve_end_time(spec)
    if end_time <= spec.start_time:
        raise PlanningValidationError(MSG_TIME_ORDER, field="end_time")


def resolve_end_time(spec: RecurrenceSpec):
    if spec.end_time is not None:
        return spec.end_time
    return add_minutes(spec.start_time, settings.PLANNING_DEFAULT_DURATION_MINUTES)


def generate_planning_items(spec: RecurrenceSpec) -> GeneratedPlan:
    """
    Validate ``spec`` and expand it day by day.

    Example: 2025-06-02 .. 2025-06-15 with weekdays {1, 3} (Monday, Wednesday)
    yields 2025-06-02, 06-04, 06-09 and 06-11.
    """
    validate_recurrence(spec)
    end_time = resolve_end_time(spec)
    title = spec.title or spec.description or DEFAULT_TITLE

    items: List[PlanningItemCreate] = []
    for day in iter_days(spec.start_date, spec.end_date):
        if weekday(day) not in spec.weekdays:
            continue
        items.append(
            PlanningItemCreate(
                title=title,
                date=day,
                start_time=spec.start_time,
                end_time=end_time,
                assigned_resource_id=spec.assigned_resource_id,
                project_id=spec.project_id,
                location=spec.location,
                description=spec.description,
                status=PlanningStatus.SCHEDULED,
            )
        )

    log.info(
        "Generated %d planning items for resource %s (%s..%s, weekdays=%s)",
        len(items), spec.assigned_resource_id, spec.start_date, spec.end_date, sorted(spec.weekdays),
    )
    return GeneratedPlan(items=items)


__all__ = [
    "MSG_NO_WEEKDAYS",
    "MSG_NO_DATE_RANGE",
    "MSG_NO_RESOURCE",
    "MSG_NO_PROJECT",
    "MSG_TIME_ORDER",
    "validate_recurrence",
    "resolve_end_time",
    "generate_planning_items",
]
