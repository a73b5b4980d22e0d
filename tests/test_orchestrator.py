import asyncio
from datetime import date, time

import pytest

from fieldplan.core.calendar.views import WeekView
from fieldplan.core.location.base import BaseGeocoder
from fieldplan.core.planning.errors import (
    PlanningConflictError,
    PlanningPersistenceError,
    PlanningValidationError,
)
from fieldplan.core.planning.orchestrator import NEW_TITLE, QUICK_TITLE, PlanningOrchestrator
from fieldplan.core.planning.schemas import PlanningFilter, PlanningForm, PlanningStatus, RecurrenceSpec
from fieldplan.core.planning.store import InMemoryPlanningStore

DAY = date(2025, 6, 4)


def form(**overrides) -> PlanningForm:
    values = dict(assigned_resource_id="r1", project_id="p1")
    values.update(overrides)
    return PlanningForm(**values)


def test_open_slot_and_range_drafts(orchestrator):
    draft = orchestrator.open_slot(DAY, 9)
    assert (draft.start_time, draft.end_time) == (time(9), time(10))
    draft = orchestrator.open_range(DAY, 9, 12)
    assert (draft.start_time, draft.end_time) == (time(9), time(12))
    draft = orchestrator.open_slot(DAY, 23)
    assert draft.end_time == time(23, 59)
    draft = orchestrator.open_day(DAY)
    assert (draft.start_time, draft.end_time) == (time(9), time(10))
    draft = orchestrator.open_new(DAY)
    assert (draft.start_time, draft.end_time) == (time(9), time(10))
    orchestrator.close_dialog()
    assert orchestrator.draft is None


@pytest.mark.asyncio
async def test_quick_create_from_week_drag(orchestrator, store):
    view = WeekView(DAY, callbacks=orchestrator.callbacks())
    view.pointer_down(2, 13)
    view.pointer_enter(2, 14)
    view.pointer_up()
    assert orchestrator.draft.date == DAY

    created = await orchestrator.submit_quick(form())
    assert created.title == QUICK_TITLE
    assert (created.start_time, created.end_time) == (time(13), time(15))
    assert created.status == PlanningStatus.SCHEDULED
    assert orchestrator.draft is None
    assert [e.id for e in orchestrator.collection.events()] == [created.id]
    assert len(await store.list_planning_items()) == 1


@pytest.mark.asyncio
async def test_quick_create_requires_resource_and_project(orchestrator, store):
    orchestrator.open_slot(DAY, 9)
    with pytest.raises(PlanningValidationError) as excinfo:
        await orchestrator.submit_quick(PlanningForm(project_id="p1"))
    assert excinfo.value.message == "select a resource"
    with pytest.raises(PlanningValidationError) as excinfo:
        await orchestrator.submit_quick(PlanningForm(assigned_resource_id="r1"))
    assert excinfo.value.message == "select a project"
    # dialog stays open, nothing persisted
    assert orchestrator.draft is not None
    assert await store.list_planning_items() == []


@pytest.mark.asyncio
async def test_unknown_resource_is_rejected(orchestrator):
    orchestrator.open_slot(DAY, 9)
    with pytest.raises(PlanningValidationError):
        await orchestrator.submit_quick(form(assigned_resource_id="ghost"))


@pytest.mark.asyncio
async def test_single_create_defaults(orchestrator):
    created = await orchestrator.submit_single(DAY, form())
    assert created.title == NEW_TITLE
    assert (created.start_time, created.end_time) == (time(9), time(10))

    created = await orchestrator.submit_single(DAY, form(start_time=time(14, 30), description="Check boiler"))
    assert created.title == "Check boiler"
    assert created.end_time == time(15, 30)


@pytest.mark.asyncio
async def test_single_create_rejects_inverted_times(orchestrator):
    with pytest.raises(PlanningValidationError):
        await orchestrator.submit_single(DAY, form(start_time=time(11), end_time=time(10)))


@pytest.mark.asyncio
async def test_store_failure_is_wrapped_and_not_added(orchestrator, store):
    store.fail_next = RuntimeError("connection refused")
    with pytest.raises(PlanningPersistenceError):
        await orchestrator.submit_single(DAY, form())
    assert len(orchestrator.collection) == 0
    assert await store.list_planning_items() == []


@pytest.mark.asyncio
async def test_recurring_submit_appends_batch(orchestrator, store):
    spec = RecurrenceSpec(
        start_date=date(2025, 6, 2), end_date=date(2025, 6, 15), start_time=time(8),
        weekdays={1, 3}, assigned_resource_id="r1", project_id="p1", location="Depot",
    )
    result = await orchestrator.submit_recurring(spec)
    assert result.count == 4
    assert result.message == "4 planning items created"
    assert len(orchestrator.collection) == 4
    assert len(await store.list_planning_items(PlanningFilter(assigned_resource_id="r1"))) == 4


@pytest.mark.asyncio
async def test_recurring_batch_failure_stores_nothing(orchestrator, store):
    spec = RecurrenceSpec(
        start_date=date(2025, 6, 2), end_date=date(2025, 6, 15), start_time=time(8),
        weekdays={1}, assigned_resource_id="r1", project_id="p1",
    )
    store.fail_next = RuntimeError("boom")
    with pytest.raises(PlanningPersistenceError):
        await orchestrator.submit_recurring(spec)
    assert len(orchestrator.collection) == 0
    assert await store.list_planning_items() == []


@pytest.mark.asyncio
async def test_recurring_validation_error_reaches_caller(orchestrator):
    with pytest.raises(PlanningValidationError) as excinfo:
        await orchestrator.submit_recurring(RecurrenceSpec(start_time=time(8), weekdays=set()))
    assert excinfo.value.message == "select at least one weekday"


@pytest.mark.asyncio
async def test_conflicts_are_advisory_by_default(orchestrator):
    await orchestrator.submit_single(DAY, form(start_time=time(9), end_time=time(12)))
    second = await orchestrator.submit_single(DAY, form(start_time=time(10), end_time=time(11)))
    assert second.id
    assert len(orchestrator.last_conflicts) == 1


@pytest.mark.asyncio
async def test_conflicts_block_when_enabled(store, directory):
    orchestrator = PlanningOrchestrator(store, directory, block_conflicts=True)
    await orchestrator.submit_single(DAY, form(start_time=time(9), end_time=time(12)))
    with pytest.raises(PlanningConflictError) as excinfo:
        await orchestrator.submit_single(DAY, form(start_time=time(10), end_time=time(13)))
    assert excinfo.value.conflicts[0].duration_minutes == 120
    assert len(await store.list_planning_items()) == 1
    # another resource is free
    await orchestrator.submit_single(DAY, form(assigned_resource_id="r2", start_time=time(10), end_time=time(13)))


@pytest.mark.asyncio
async def test_refresh_and_event_click(orchestrator):
    created = await orchestrator.submit_single(DAY, form())
    orchestrator.collection.replace([])
    await orchestrator.refresh()
    (event,) = orchestrator.collection.events()
    assert orchestrator.select_event(event).id == created.id


@pytest.mark.asyncio
async def test_picker_choices(orchestrator):
    resources = await orchestrator.resource_choices()
    projects = await orchestrator.project_choices()
    assert [r.label for r in resources] == ["Anna Berg", "Jonas Weber"]
    assert [p.label for p in projects] == ["Heat pump", "Roof repair - Mueller GmbH"]


class BrokenGeocoder(BaseGeocoder):
    name = "broken"

    async def suggest(self, query, limit=5):
        raise TimeoutError("geocoder down")


@pytest.mark.asyncio
async def test_location_suggestions_degrade_to_empty(store, directory):
    orchestrator = PlanningOrchestrator(store, directory, BrokenGeocoder())
    assert await orchestrator.suggest_locations("Hauptstr") == []
    assert await PlanningOrchestrator(store).suggest_locations("Hauptstr") == []


class SlowStore(InMemoryPlanningStore):
    """Holds every create until ``release`` is set."""

    def __init__(self):
        super().__init__()
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def create_planning_item(self, item):
        self.started.set()
        await self.release.wait()
        return await super().create_planning_item(item)

    async def create_planning_items(self, items):
        self.started.set()
        await self.release.wait()
        return await super().create_planning_items(items)


@pytest.mark.asyncio
async def test_dialog_opened_during_inflight_create_survives(directory):
    store = SlowStore()
    orchestrator = PlanningOrchestrator(store, directory, block_conflicts=False)
    orchestrator.open_slot(DAY, 9)
    pending = asyncio.create_task(orchestrator.submit_quick(form()))
    await store.started.wait()

    orchestrator.close_dialog()
    reopened = orchestrator.open_slot(date(2025, 6, 5), 14)
    store.release.set()
    created = await pending

    assert created.start_time == time(9)
    assert orchestrator.draft is reopened
    second = await orchestrator.submit_quick(form())
    assert (second.date, second.start_time) == (date(2025, 6, 5), time(14))
    assert orchestrator.draft is None


@pytest.mark.asyncio
async def test_recurring_completion_keeps_newer_dialog(directory):
    store = SlowStore()
    orchestrator = PlanningOrchestrator(store, directory, block_conflicts=False)
    spec = RecurrenceSpec(
        start_date=date(2025, 6, 2), end_date=date(2025, 6, 8), start_time=time(8),
        weekdays={1}, assigned_resource_id="r1", project_id="p1",
    )
    orchestrator.open_new(DAY)
    pending = asyncio.create_task(orchestrator.submit_recurring(spec))
    await store.started.wait()

    reopened = orchestrator.open_day(date(2025, 6, 20))
    store.release.set()
    result = await pending

    assert result.count == 1
    assert orchestrator.draft is reopened
