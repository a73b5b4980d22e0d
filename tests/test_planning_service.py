from datetime import date, time

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from fieldplan.core.planning.schemas import PlanningFilter, PlanningItemCreate, PlanningStatus
from fieldplan.core.planning.service import PlanningService
from fieldplan.db.base import async_session_context


def new_item(day: date, start: int, resource: str = "r1", project: str = "p1") -> PlanningItemCreate:
    return PlanningItemCreate(
        title="Inspection", date=day, start_time=time(start), end_time=time(start + 1),
        assigned_resource_id=resource, project_id=project, location="Depot",
    )


@pytest.mark.asyncio
async def test_create_assigns_id_and_status(db_session: AsyncSession):
    service = PlanningService(db_session)
    created = await service.create_planning_item(new_item(date(2025, 6, 2), 9))
    await db_session.commit()

    assert created.id
    assert created.status == PlanningStatus.SCHEDULED
    assert created.created_at is not None
    row = await service.get_planning_item(created.id)
    assert row.location == "Depot"


@pytest.mark.asyncio
async def test_batch_create_and_ordering(db_session: AsyncSession):
    service = PlanningService(db_session)
    await service.create_planning_items([
        new_item(date(2025, 6, 4), 14),
        new_item(date(2025, 6, 2), 10),
        new_item(date(2025, 6, 2), 8),
    ])
    await db_session.commit()

    listed = await service.list_planning_items()
    assert [(i.date, i.start_time) for i in listed] == [
        (date(2025, 6, 2), time(8)), (date(2025, 6, 2), time(10)), (date(2025, 6, 4), time(14)),
    ]


@pytest.mark.asyncio
async def test_list_filters(db_session: AsyncSession):
    service = PlanningService(db_session)
    await service.create_planning_items([
        new_item(date(2025, 6, 2), 9, resource="r1", project="p1"),
        new_item(date(2025, 6, 3), 9, resource="r2", project="p1"),
        new_item(date(2025, 6, 9), 9, resource="r1", project="p2"),
    ])
    await db_session.commit()

    week = await service.list_planning_items(PlanningFilter(start_date=date(2025, 6, 2), end_date=date(2025, 6, 8)))
    assert len(week) == 2
    assert {i.project_id for i in await service.list_planning_items(PlanningFilter(assigned_resource_id="r1"))} == {"p1", "p2"}
    assert len(await service.list_planning_items(PlanningFilter(project_id="p2"))) == 1
    assert len(await service.list_planning_items(PlanningFilter(status=PlanningStatus.CANCELLED))) == 0
    assert len(await service.list_for_resource_on_date("r2", date(2025, 6, 3))) == 1


@pytest.mark.asyncio
async def test_session_context_commits_clean_block(session_factory):
    async with async_session_context(session_factory) as session:
        await PlanningService(session).create_planning_item(new_item(date(2025, 6, 2), 9))

    async with session_factory() as fresh:
        assert len(await PlanningService(fresh).list_planning_items()) == 1


@pytest.mark.asyncio
async def test_session_context_rolls_back_on_error(session_factory):
    with pytest.raises(RuntimeError):
        async with async_session_context(session_factory) as session:
            await PlanningService(session).create_planning_item(new_item(date(2025, 6, 2), 9))
            raise RuntimeError("dialog failed after flush")

    async with session_factory() as fresh:
        assert await PlanningService(fresh).list_planning_items() == []
