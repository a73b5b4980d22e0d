# fieldplan/core/planning/conflicts.py
"""
Double-booking detection for a single resource.

Two planning items conflict when they share a date and their half-open
time ranges ``[start, end)`` intersect. Touching ranges (09:00-10:00 and
10:00-11:00) do not conflict.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from fieldplan.core.calendar.timemodel import ClockLike, clock_from_minutes, minutes_of_day

from .schemas import PlanningItemBase, PlanningStatus

log = logging.getLogger(__name__)


class ConflictSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


HIGH_SEVERITY_MINUTES = 120
MEDIUM_SEVERITY_MINUTES = 60


def severity_for(overlap_minutes: int) -> ConflictSeverity:
    if overlap_minutes >= HIGH_SEVERITY_MINUTES:
        return ConflictSeverity.HIGH
    if overlap_minutes >= MEDIUM_SEVERITY_MINUTES:
        return ConflictSeverity.MEDIUM
    return ConflictSeverity.LOW


@dataclass(frozen=True)
class TimeConflict:
    """An existing item that overlaps a candidate, plus the overlapping window."""

    existing: PlanningItemBase
    overlap_start: dt.time
    overlap_end: dt.time
    duration_minutes: int
    severity: ConflictSeverity

    def describe(self) -> str:
        return (
            f"{self.existing.title} ({self.existing.date.isoformat()} "
            f"{self.overlap_start:%H:%M}-{self.overlap_end:%H:%M}, {self.severity.value})"
        )


def times_overlap(start1: ClockLike, end1: ClockLike, start2: ClockLike, end2: ClockLike) -> bool:
    return minutes_of_day(start1) < minutes_of_day(end2) and minutes_of_day(start2) < minutes_of_day(end1)


def check_time_conflict(
    candidate: PlanningItemBase,
    existing: Iterable[PlanningItemBase],
) -> List[TimeConflict]:
    """
    Every item in ``existing`` that double-books ``candidate``'s resource.

    Cancelled items never conflict. Items are matched on resource and date;
    ``existing`` may therefore be a broader listing.
    """
    conflicts: List[TimeConflict] = []
    cand_start = minutes_of_day(candidate.start_time)
    cand_end = minutes_of_day(candidate.end_time)

    for item in existing:
        if item.assigned_resource_id != candidate.assigned_resource_id or item.date != candidate.date:
            continue
        if getattr(item, "status", None) == PlanningStatus.CANCELLED:
            continue
        if getattr(item, "id", None) is not None and item.id == getattr(candidate, "id", None):
            continue
        if not times_overlap(candidate.start_time, candidate.end_time, item.start_time, item.end_time):
            continue

        start = max(cand_start, minutes_of_day(item.start_time))
        end = min(cand_end, minutes_of_day(item.end_time))
        duration = end - start
        conflicts.append(
            TimeConflict(
                existing=item,
                overlap_start=clock_from_minutes(start),
                overlap_end=clock_from_minutes(end),
                duration_minutes=duration,
                severity=severity_for(duration),
            )
        )

    if conflicts:
        log.debug(
            "Resource %s has %d conflict(s) on %s",
            candidate.assigned_resource_id, len(conflicts), candidate.date,
        )
    return conflicts


__all__ = [
    "ConflictSeverity",
    "TimeConflict",
    "severity_for",
    "times_overlap",
    "check_time_conflict",
]
