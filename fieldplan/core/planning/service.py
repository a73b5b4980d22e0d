# fieldplan/core/planning/service.py

"""SQLAlchemy-backed persistence collaborator for planning items."""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import PlanningItem
from .schemas import PlanningFilter, PlanningItemCreate, PlanningItemOut
from .store import BasePlanningStore

log = logging.getLogger(__name__)


class PlanningService(BasePlanningStore):
    """
    Async service over the ``planning_items`` table.

    Uses the session it is given and only flushes; commit or rollback is the
    caller's job (``get_async_db_session`` / ``async_session_context``).
    """

    name: str = "sql"

    def __init__(self, db_session: AsyncSession) -> None:
        self.db: AsyncSession = db_session

    # ------------------------------------------------------------------ #
    #                       Public business-methods                      #
    # ------------------------------------------------------------------ #

    async def create_planning_item(self, item: PlanningItemCreate) -> PlanningItemOut:
        log.info(
            "Creating planning item for resource %s on %s %s-%s",
            item.assigned_resource_id, item.date, item.start_time, item.end_time,
        )
        row = PlanningItem(**item.model_dump())
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        log.info("Created planning item id=%s", row.id)
        return PlanningItemOut.model_validate(row)

    async def create_planning_items(self, items: Sequence[PlanningItemCreate]) -> List[PlanningItemOut]:
        """All rows are added before a single flush, so a failure leaves none behind."""
        rows = [PlanningItem(**item.model_dump()) for item in items]
        self.db.add_all(rows)
        await self.db.flush()
        for row in rows:
            await self.db.refresh(row)
        log.info("Created %d planning items in one batch", len(rows))
        return [PlanningItemOut.model_validate(row) for row in rows]

    async def list_planning_items(self, flt: Optional[PlanningFilter] = None) -> List[PlanningItemOut]:
        flt = flt or PlanningFilter()
        log.debug("Listing planning items with filter %s", flt.model_dump(exclude_none=True))
        stmt = select(PlanningItem)
        if flt.start_date is not None:
            stmt = stmt.where(PlanningItem.date >= flt.start_date)
        if flt.end_date is not None:
            stmt = stmt.where(PlanningItem.date <= flt.end_date)
        if flt.assigned_resource_id is not None:
            stmt = stmt.where(PlanningItem.assigned_resource_id == flt.assigned_resource_id)
        if flt.project_id is not None:
            stmt = stmt.where(PlanningItem.project_id == flt.project_id)
        if flt.status is not None:
            stmt = stmt.where(PlanningItem.status == flt.status)
        stmt = stmt.order_by(PlanningItem.date, PlanningItem.start_time)

        result = await self.db.scalars(stmt)
        rows = result.all()
        log.debug("Found %d planning items", len(rows))
        return [PlanningItemOut.model_validate(row) for row in rows]

    async def list_for_resource_on_date(self, resource_id: str, day: date) -> List[PlanningItemOut]:
        return await self.list_planning_items(
            PlanningFilter(start_date=day, end_date=day, assigned_resource_id=resource_id)
        )

    async def get_planning_item(self, item_id: str) -> PlanningItem | None:
        log.debug("Getting planning item id=%s", item_id)
        return await self.db.get(PlanningItem, item_id)


__all__ = ["PlanningService"]
