from datetime import date, time

from fieldplan.core.planning.conflicts import (
    ConflictSeverity,
    check_time_conflict,
    severity_for,
    times_overlap,
)
from fieldplan.core.planning.schemas import PlanningItemCreate, PlanningItemOut, PlanningStatus

DAY = date(2025, 6, 2)


def item(start: int, end: int, *, resource="r1", day=DAY, status=PlanningStatus.SCHEDULED, item_id=None):
    values = dict(
        title="job", date=day, start_time=time(start), end_time=time(end),
        assigned_resource_id=resource, project_id="p1", status=status,
    )
    if item_id is None:
        return PlanningItemCreate(**values)
    return PlanningItemOut(id=item_id, **values)


def test_times_overlap_is_half_open():
    assert times_overlap("09:00", "10:00", "09:30", "11:00")
    assert not times_overlap("09:00", "10:00", "10:00", "11:00")
    assert times_overlap("09:00", "12:00", "10:00", "11:00")


def test_severity_thresholds():
    assert severity_for(30) == ConflictSeverity.LOW
    assert severity_for(60) == ConflictSeverity.MEDIUM
    assert severity_for(119) == ConflictSeverity.MEDIUM
    assert severity_for(120) == ConflictSeverity.HIGH


def test_conflict_reports_overlap_window():
    existing = [item(8, 11, item_id="x1")]
    (conflict,) = check_time_conflict(item(10, 12), existing)
    assert conflict.existing.id == "x1"
    assert (conflict.overlap_start, conflict.overlap_end) == (time(10), time(11))
    assert conflict.duration_minutes == 60
    assert conflict.severity == ConflictSeverity.MEDIUM


def test_other_resource_day_and_cancelled_items_are_ignored():
    existing = [
        item(9, 12, resource="r2", item_id="a"),
        item(9, 12, day=date(2025, 6, 3), item_id="b"),
        item(9, 12, status=PlanningStatus.CANCELLED, item_id="c"),
    ]
    assert check_time_conflict(item(9, 12), existing) == []
