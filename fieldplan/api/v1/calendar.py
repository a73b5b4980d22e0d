from __future__ import annotations

import datetime as dt
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from fieldplan.core.calendar.layout import GridGeometry
from fieldplan.core.calendar.schemas import CalendarEvent
from fieldplan.core.calendar.views import MonthView, WeekView
from fieldplan.core.planning.errors import PlanningPersistenceError
from fieldplan.core.planning.orchestrator import PlanningOrchestrator
from fieldplan.core.planning.schemas import PlanningFilter

from .planning import get_orchestrator

log = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/calendar", tags=["calendar"])


class PositionedEventOut(BaseModel):
    event: CalendarEvent
    color: str
    top: float
    height: float
    column: int
    columns: int
    visible: bool


class DayOut(BaseModel):
    date: dt.date
    key: str
    events: List[PositionedEventOut]


class WeekOut(BaseModel):
    week_start: dt.date
    week_end: dt.date
    hours: List[int]
    hour_height: float
    total_height: float
    days: List[DayOut]


class MonthCellOut(BaseModel):
    date: dt.date
    key: str
    in_month: bool
    events: List[CalendarEvent]
    overflow: int


class MonthOut(BaseModel):
    month_start: dt.date
    month_end: dt.date
    weeks: List[List[MonthCellOut]]


async def _load_events(
    orchestrator: PlanningOrchestrator,
    start: dt.date,
    end: dt.date,
    resource_id: Optional[str],
) -> List[CalendarEvent]:
    try:
        await orchestrator.refresh(
            PlanningFilter(start_date=start, end_date=end, assigned_resource_id=resource_id)
        )
    except PlanningPersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="planning store unavailable") from exc
    return orchestrator.collection.events()


@router.get("/week", response_model=WeekOut)
async def get_week(
    anchor: Optional[dt.date] = Query(None, description="Any day inside the week; defaults to today"),
    hour_height: Optional[float] = Query(None, gt=0, description="Pixel height of one hour row"),
    compact: bool = Query(False, description="Use the narrow-viewport row height"),
    resource_id: Optional[str] = Query(None),
    orchestrator: PlanningOrchestrator = Depends(get_orchestrator),
):
    geometry = GridGeometry.compact() if compact and hour_height is None else GridGeometry.from_settings(hour_height)
    view = WeekView(anchor, geometry=geometry)
    events = await _load_events(orchestrator, view.week_start, view.week_end, resource_id)
    log.debug("Week %s: %d events", view.week_start, len(events))

    return WeekOut(
        week_start=view.week_start,
        week_end=view.week_end,
        hours=geometry.hours,
        hour_height=geometry.hour_height,
        total_height=geometry.total_height,
        days=[
            DayOut(
                date=column.day,
                key=column.key,
                events=[
                    PositionedEventOut(
                        event=positioned.event,
                        color=positioned.event.color,
                        top=positioned.layout.top,
                        height=positioned.layout.height,
                        column=positioned.layout.column,
                        columns=positioned.layout.columns,
                        visible=positioned.layout.visible,
                    )
                    for positioned in column.events
                ],
            )
            for column in view.columns(events)
        ],
    )


@router.get("/month", response_model=MonthOut)
async def get_month(
    anchor: Optional[dt.date] = Query(None, description="Any day inside the month; defaults to today"),
    resource_id: Optional[str] = Query(None),
    orchestrator: PlanningOrchestrator = Depends(get_orchestrator),
):
    view = MonthView(anchor)
    weeks = view.weeks()
    events = await _load_events(orchestrator, weeks[0][0], weeks[-1][-1], resource_id)

    return MonthOut(
        month_start=view.month_start,
        month_end=view.month_end,
        weeks=[
            [
                MonthCellOut(
                    date=cell.day,
                    key=cell.key,
                    in_month=cell.in_month,
                    events=cell.events,
                    overflow=cell.overflow,
                )
                for cell in row
            ]
            for row in view.cells(events)
        ],
    )


__all__ = ["router"]
