# fieldplan/api/v1/planning.py
"""
REST endpoints for planning items.

The host application talks to the orchestrator through these routes:
single / quick / recurring creation, listing, picker options and
location suggestions.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.ext.asyncio import AsyncSession

from fieldplan.core.directory import BaseDirectoryProvider, get_directory_provider
from fieldplan.core.location import BaseGeocoder, get_geocoder
from fieldplan.core.planning.errors import (
    PlanningConflictError,
    PlanningError,
    PlanningPersistenceError,
    PlanningValidationError,
)
from fieldplan.core.planning.orchestrator import PlanningOrchestrator
from fieldplan.core.planning.schemas import (
    PickerOption,
    PlanningFilter,
    PlanningForm,
    PlanningItemOut,
    RecurrenceSpec,
)
from fieldplan.core.planning.service import PlanningService
from fieldplan.core.planning.store import BasePlanningStore
from fieldplan.db.base import get_async_db_session

log = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/planning", tags=["planning"])


# --------------------------------------------------------------------------- #
#                               dependencies                                  #
# --------------------------------------------------------------------------- #
def get_planning_store(session: AsyncSession = Depends(get_async_db_session)) -> BasePlanningStore:
    return PlanningService(session)


def get_directory() -> BaseDirectoryProvider:
    return get_directory_provider()


def get_location_geocoder() -> BaseGeocoder:
    return get_geocoder()


def get_orchestrator(
    store: BasePlanningStore = Depends(get_planning_store),
    directory: BaseDirectoryProvider = Depends(get_directory),
    geocoder: BaseGeocoder = Depends(get_location_geocoder),
) -> PlanningOrchestrator:
    return PlanningOrchestrator(store, directory, geocoder)


# --------------------------------------------------------------------------- #
#                               request/response                              #
# --------------------------------------------------------------------------- #
class SingleCreateIn(PlanningForm):
    date: dt.date


class QuickCreateIn(PlanningForm):
    """A slot click sends only ``start_hour``; a drag also sends ``end_hour`` (exclusive)."""

    date: dt.date
    start_hour: int = Field(..., ge=0, le=23)
    end_hour: Optional[int] = Field(None, ge=1, le=24)

    @model_validator(mode="after")
    def check_hours(self) -> "QuickCreateIn":
        if self.end_hour is not None and self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be after start_hour")
        return self


class RecurrenceOut(BaseModel):
    items: List[PlanningItemOut]
    count: int
    message: str


class ChoicesOut(BaseModel):
    resources: List[PickerOption]
    projects: List[PickerOption]


class LocationsOut(BaseModel):
    query: str
    suggestions: List[str]


def _http_error(exc: PlanningError) -> HTTPException:
    if isinstance(exc, PlanningValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": exc.message, "field": exc.field},
        )
    if isinstance(exc, PlanningConflictError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": str(exc),
                "conflicts": [
                    {
                        "id": getattr(c.existing, "id", None),
                        "title": c.existing.title,
                        "overlap_start": c.overlap_start.strftime("%H:%M"),
                        "overlap_end": c.overlap_end.strftime("%H:%M"),
                        "duration_minutes": c.duration_minutes,
                        "severity": c.severity.value,
                    }
                    for c in exc.conflicts
                ],
            },
        )
    if isinstance(exc, PlanningPersistenceError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="planning store unavailable")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


# --------------------------------------------------------------------------- #
#                                  routes                                     #
# --------------------------------------------------------------------------- #
@router.get("", response_model=List[PlanningItemOut])
async def list_planning(
    flt: PlanningFilter = Depends(),
    orchestrator: PlanningOrchestrator = Depends(get_orchestrator),
):
    try:
        return await orchestrator.refresh(flt)
    except PlanningError as exc:
        raise _http_error(exc) from exc


@router.post("", response_model=PlanningItemOut, status_code=status.HTTP_201_CREATED)
async def create_planning(
    body: SingleCreateIn,
    orchestrator: PlanningOrchestrator = Depends(get_orchestrator),
):
    log.info("POST /v1/planning for %s", body.date)
    try:
        return await orchestrator.submit_single(body.date, body)
    except PlanningError as exc:
        raise _http_error(exc) from exc


@router.post("/quick", response_model=PlanningItemOut, status_code=status.HTTP_201_CREATED)
async def create_quick_planning(
    body: QuickCreateIn,
    orchestrator: PlanningOrchestrator = Depends(get_orchestrator),
):
    if body.end_hour is None:
        draft = orchestrator.open_slot(body.date, body.start_hour)
    else:
        draft = orchestrator.open_range(body.date, body.start_hour, body.end_hour)
    try:
        return await orchestrator.submit_quick(body, draft)
    except PlanningError as exc:
        raise _http_error(exc) from exc


@router.post("/recurring", response_model=RecurrenceOut, status_code=status.HTTP_201_CREATED)
async def create_recurring_planning(
    spec: RecurrenceSpec,
    orchestrator: PlanningOrchestrator = Depends(get_orchestrator),
):
    try:
        result = await orchestrator.submit_recurring(spec)
    except PlanningError as exc:
        raise _http_error(exc) from exc
    return RecurrenceOut(items=result.items, count=result.count, message=result.message)


@router.get("/choices", response_model=ChoicesOut)
async def planning_choices(orchestrator: PlanningOrchestrator = Depends(get_orchestrator)):
    return ChoicesOut(
        resources=await orchestrator.resource_choices(),
        projects=await orchestrator.project_choices(),
    )


@router.get("/locations", response_model=LocationsOut)
async def location_suggestions(
    q: str = Query("", description="Free-text address input"),
    orchestrator: PlanningOrchestrator = Depends(get_orchestrator),
):
    return LocationsOut(query=q, suggestions=await orchestrator.suggest_locations(q))


__all__ = [
    "router",
    "get_planning_store",
    "get_directory",
    "get_location_geocoder",
    "get_orchestrator",
]
