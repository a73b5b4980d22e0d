# fieldplan/core/planning/orchestrator.py
"""
Planning orchestrator: glue between the calendar views, the creation
dialogs and the collaborators.

Flow overview:

    WeekView slot click   -> open_slot()   -> draft hour..hour+1   -> submit_quick()
    WeekView range drag   -> open_range()  -> draft start..end      -> submit_quick()
    MonthView day click   -> open_day()    -> draft 09:00..10:00    -> submit_quick()
    "New planning" button -> open_new()    -> draft 09:00..+60 min  -> submit_single()
    multi-day dialog      ------------------------------------------> submit_recurring()

Successful creations are appended to :class:`PlanningCollection`, whose
``events()`` projection feeds the calendar views. A failed creation leaves
the collection untouched.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from fieldplan.config import settings
from fieldplan.core.calendar.schemas import CalendarEvent, EventCategory
from fieldplan.core.calendar.timemodel import add_minutes, cell_to_time, parse_clock
from fieldplan.core.calendar.views import CalendarCallbacks
from fieldplan.core.directory import BaseDirectoryProvider, project_label
from fieldplan.core.location import BaseGeocoder

from .conflicts import TimeConflict, check_time_conflict
from .errors import (
    PlanningConflictError,
    PlanningError,
    PlanningPersistenceError,
    PlanningValidationError,
)
from .recurrence import (
    MSG_NO_PROJECT,
    MSG_NO_RESOURCE,
    MSG_TIME_ORDER,
    generate_planning_items,
)
from .schemas import (
    PickerOption,
    PlanningDraft,
    PlanningFilter,
    PlanningForm,
    PlanningItemCreate,
    PlanningItemOut,
    PlanningStatus,
    RecurrenceResult,
    RecurrenceSpec,
)
from .store import BasePlanningStore

log = logging.getLogger(__name__)

QUICK_TITLE = "Quick planning"
NEW_TITLE = "New planning"


def to_calendar_event(item: PlanningItemOut) -> CalendarEvent:
    return CalendarEvent(
        id=item.id,
        title=item.title,
        date=item.date,
        start_time=item.start_time,
        end_time=item.end_time,
        category=EventCategory.APPOINTMENT,
        description=item.description,
        location=item.location,
    )


class PlanningCollection:
    """Ordered, append-only view of the planning items known to the host."""

    def __init__(self, items: Iterable[PlanningItemOut] = ()) -> None:
        self._items: list[PlanningItemOut] = list(items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[PlanningItemOut]:
        return iter(self._items)

    def append(self, item: PlanningItemOut) -> None:
        self._items.append(item)

    def extend(self, items: Sequence[PlanningItemOut]) -> None:
        """Append a whole batch at once."""
        self._items.extend(items)

    def replace(self, items: Iterable[PlanningItemOut]) -> None:
        self._items = list(items)

    def get(self, item_id: str) -> PlanningItemOut | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def events(self) -> List[CalendarEvent]:
        return [to_calendar_event(item) for item in self._items]


class PlanningOrchestrator:
    """
    Owns one creation dialog at a time (``draft``) and the visible collection.

    ``block_conflicts`` defaults to ``settings.PLANNING_BLOCK_CONFLICTS``;
    when it is off, conflicts are only logged and exposed via
    ``last_conflicts``.
    """

    def __init__(
        self,
        store: BasePlanningStore,
        directory: BaseDirectoryProvider | None = None,
        geocoder: BaseGeocoder | None = None,
        *,
        block_conflicts: bool | None = None,
    ) -> None:
        self.store = store
        self.directory = directory
        self.geocoder = geocoder
        self.block_conflicts = (
            settings.PLANNING_BLOCK_CONFLICTS if block_conflicts is None else block_conflicts
        )
        self.collection = PlanningCollection()
        self.draft: PlanningDraft | None = None
        self.selected: PlanningItemOut | None = None
        self.last_conflicts: List[TimeConflict] = []

    # ------------------------------------------------------------------ #
    #                        dialog entry points                         #
    # ------------------------------------------------------------------ #
    def open_slot(self, day: dt.date, hour: int) -> PlanningDraft:
        return self._open(day, cell_to_time(hour), cell_to_time(hour + 1))

    def open_range(self, day: dt.date, start_hour: int, end_hour: int) -> PlanningDraft:
        return self._open(day, cell_to_time(start_hour), cell_to_time(end_hour))

    def open_day(self, day: dt.date) -> PlanningDraft:
        hour = settings.CALENDAR_MONTH_DEFAULT_HOUR
        return self.open_range(day, hour, hour + 1)

    def open_new(self, day: dt.date, start_time: dt.time | str | None = None) -> PlanningDraft:
        start = parse_clock(start_time or settings.PLANNING_DEFAULT_START_TIME)
        return self._open(day, start, add_minutes(start, settings.PLANNING_DEFAULT_DURATION_MINUTES))

    def _open(self, day: dt.date, start: dt.time, end: dt.time) -> PlanningDraft:
        self.draft = PlanningDraft(date=day, start_time=start, end_time=end)
        log.debug("Planning dialog opened: %s %s-%s", day, start, end)
        return self.draft

    def close_dialog(self) -> None:
        self.draft = None

    def select_event(self, event: CalendarEvent) -> PlanningItemOut | None:
        self.selected = self.collection.get(event.id)
        if self.selected is None:
            log.warning("Clicked event %s is not in the planning collection", event.id)
        return self.selected

    def callbacks(self) -> CalendarCallbacks:
        """Callbacks wiring a calendar view straight into this orchestrator."""
        return CalendarCallbacks(
            on_event_click=self.select_event,
            on_time_slot_click=self.open_slot,
            on_range_create=self.open_range,
        )

    # ------------------------------------------------------------------ #
    #                          collaborator reads                        #
    # ------------------------------------------------------------------ #
    async def refresh(self, flt: PlanningFilter | None = None) -> List[PlanningItemOut]:
        items = await self._persist(self.store.list_planning_items(flt))
        self.collection.replace(items)
        return items

    async def resource_choices(self) -> List[PickerOption]:
        if self.directory is None:
            return []
        return [PickerOption(id=r["id"], label=r["display_name"]) for r in await self.directory.list_resources()]

    async def project_choices(self) -> List[PickerOption]:
        if self.directory is None:
            return []
        return [PickerOption(id=p["id"], label=project_label(p)) for p in await self.directory.list_projects()]

    async def suggest_locations(self, query: str) -> List[str]:
        """Advisory only: a missing or failing geocoder yields no suggestions."""
        if self.geocoder is None or not query.strip():
            return []
        try:
            return await self.geocoder.suggest(query)
        except Exception:  # noqa: BLE001
            log.warning("Geocoder %s failed for %r", getattr(self.geocoder, "name", "?"), query, exc_info=True)
            return []

    # ------------------------------------------------------------------ #
    #                           creation flows                           #
    # ------------------------------------------------------------------ #
    async def submit_quick(self, form: PlanningForm, draft: PlanningDraft | None = None) -> PlanningItemOut:
        """Create from a slot click, range drag or month click."""
        draft = draft or self.draft
        if draft is None:
            raise PlanningValidationError("no time slot selected", field="date")
        item = await self._build_item(
            form,
            day=draft.date,
            start=form.start_time or draft.start_time,
            end=form.end_time or draft.end_time,
            fallback_title=QUICK_TITLE,
        )
        return await self._create_one(item, draft)

    async def submit_single(self, day: dt.date, form: PlanningForm) -> PlanningItemOut:
        opened = self.draft
        start = form.start_time or parse_clock(settings.PLANNING_DEFAULT_START_TIME)
        end = form.end_time or add_minutes(start, settings.PLANNING_DEFAULT_DURATION_MINUTES)
        item = await self._build_item(form, day=day, start=start, end=end, fallback_title=NEW_TITLE)
        return await self._create_one(item, opened)

    async def submit_recurring(self, spec: RecurrenceSpec) -> RecurrenceResult:
        opened = self.draft
        try:
            plan = generate_planning_items(spec)
        except PlanningValidationError as exc:
            log.info("Recurring plan rejected: %s", exc.message)
            raise
        await self._check_assignment(spec.assigned_resource_id, spec.project_id)
        await self._check_conflicts(plan.items)

        stored = await self._persist(self.store.create_planning_items(plan.items))
        self.collection.extend(stored)
        self._close_if_current(opened)
        result = RecurrenceResult(items=stored, count=len(stored))
        log.info("%s (resource %s)", result.message, spec.assigned_resource_id)
        return result

    # ------------------------------------------------------------------ #
    #                               helpers                              #
    # ------------------------------------------------------------------ #
    async def _build_item(
        self,
        form: PlanningForm,
        *,
        day: dt.date,
        start: dt.time,
        end: dt.time,
        fallback_title: str,
    ) -> PlanningItemCreate:
        if not form.assigned_resource_id:
            raise PlanningValidationError(MSG_NO_RESOURCE, field="assigned_resource_id")
        if not form.project_id:
            raise PlanningValidationError(MSG_NO_PROJECT, field="project_id")
        if end <= start:
            raise PlanningValidationError(MSG_TIME_ORDER, field="end_time")
        await self._check_assignment(form.assigned_resource_id, form.project_id)
        return PlanningItemCreate(
            title=form.title or form.description or fallback_title,
            date=day,
            start_time=start,
            end_time=end,
            assigned_resource_id=form.assigned_resource_id,
            project_id=form.project_id,
            location=form.location or None,
            description=form.description,
            status=PlanningStatus.SCHEDULED,
        )

    async def _check_assignment(self, resource_id: Optional[str], project_id: Optional[str]) -> None:
        if self.directory is None:
            return
        if resource_id and await self.directory.get_resource(resource_id) is None:
            raise PlanningValidationError(f"unknown resource: {resource_id}", field="assigned_resource_id")
        if project_id and await self.directory.get_project(project_id) is None:
            raise PlanningValidationError(f"unknown project: {project_id}", field="project_id")

    async def _check_conflicts(self, items: Sequence[PlanningItemCreate]) -> List[TimeConflict]:
        self.last_conflicts = []
        if not items:
            return self.last_conflicts
        existing = await self._persist(
            self.store.list_planning_items(
                PlanningFilter(
                    start_date=min(i.date for i in items),
                    end_date=max(i.date for i in items),
                    assigned_resource_id=items[0].assigned_resource_id,
                )
            )
        )
        for item in items:
            self.last_conflicts.extend(check_time_conflict(item, existing))
        if self.last_conflicts:
            if self.block_conflicts:
                log.info("Refusing planning: %d conflict(s)", len(self.last_conflicts))
                raise PlanningConflictError(self.last_conflicts)
            log.warning(
                "Planning double-books resource %s: %s",
                items[0].assigned_resource_id, "; ".join(c.describe() for c in self.last_conflicts),
            )
        return self.last_conflicts

    async def _create_one(self, item: PlanningItemCreate, opened: PlanningDraft | None) -> PlanningItemOut:
        await self._check_conflicts([item])
        stored = await self._persist(self.store.create_planning_item(item))
        self.collection.append(stored)
        self._close_if_current(opened)
        log.info("Planning item %s created for %s on %s", stored.id, stored.assigned_resource_id, stored.date)
        return stored

    def _close_if_current(self, opened: PlanningDraft | None) -> None:
        # a dialog opened while the request was in flight stays open
        if opened is not None and self.draft is opened:
            self.draft = None

    async def _persist(self, awaitable):
        try:
            return await awaitable
        except PlanningError:
            raise
        except Exception as exc:
            log.exception("Planning store %s failed", getattr(self.store, "name", "?"))
            raise PlanningPersistenceError(str(exc) or exc.__class__.__name__) from exc


__all__ = [
    "QUICK_TITLE",
    "NEW_TITLE",
    "to_calendar_event",
    "PlanningCollection",
    "PlanningOrchestrator",
]
