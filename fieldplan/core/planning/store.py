# fieldplan/core/planning/store.py
"""
Persistence collaborator contract for planning items.

The scheduling engine only calls this interface; it never implements
storage itself. Two implementations ship with the project:

* :class:`InMemoryPlanningStore` - process-local, used in tests and demos.
* :class:`fieldplan.core.planning.service.PlanningService` - SQLAlchemy.
"""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from .schemas import PlanningFilter, PlanningItemCreate, PlanningItemOut

log = logging.getLogger(__name__)


def matches_filter(item: PlanningItemOut, flt: PlanningFilter) -> bool:
    if flt.start_date is not None and item.date < flt.start_date:
        return False
    if flt.end_date is not None and item.date > flt.end_date:
        return False
    if flt.assigned_resource_id is not None and item.assigned_resource_id != flt.assigned_resource_id:
        return False
    if flt.project_id is not None and item.project_id != flt.project_id:
        return False
    if flt.status is not None and item.status != flt.status:
        return False
    return True


class BasePlanningStore(ABC):
    """Asynchronous persistence interface for planning items."""

    name: str

    @abstractmethod
    async def create_planning_item(self, item: PlanningItemCreate) -> PlanningItemOut:
        """
        Persist one item and return it with its assigned id.

        Raises:
            Exception: any failure of the underlying storage.
        """
        ...

    @abstractmethod
    async def create_planning_items(self, items: Sequence[PlanningItemCreate]) -> List[PlanningItemOut]:
        """
        Persist a batch as one unit: either every item is stored or none is.
        """
        ...

    @abstractmethod
    async def list_planning_items(self, flt: Optional[PlanningFilter] = None) -> List[PlanningItemOut]:
        """Items matching ``flt``, ordered by date then start time."""
        ...


class InMemoryPlanningStore(BasePlanningStore):
    """
    Store that keeps planning items in a list.

    ``fail_next`` makes the next create call raise, which lets tests exercise
    the collaborator-failure path without a database.
    """

    name: str = "memory"

    def __init__(self, items: Sequence[PlanningItemOut] | None = None) -> None:
        self._items: list[PlanningItemOut] = list(items or [])
        self.fail_next: Exception | None = None
        log.info("Initialized InMemoryPlanningStore with %d item(s)", len(self._items))

    def _raise_if_failing(self) -> None:
        if self.fail_next is not None:
            exc, self.fail_next = self.fail_next, None
            log.warning("InMemoryPlanningStore: injected failure %r", exc)
            raise exc

    @staticmethod
    def _materialize(item: PlanningItemCreate) -> PlanningItemOut:
        return PlanningItemOut(
            id=str(uuid.uuid4()),
            created_at=datetime.utcnow(),
            **item.model_dump(),
        )

    async def create_planning_item(self, item: PlanningItemCreate) -> PlanningItemOut:
        self._raise_if_failing()
        stored = self._materialize(item)
        self._items.append(stored)
        log.info("Memory: created planning item %s for resource %s", stored.id, stored.assigned_resource_id)
        return stored

    async def create_planning_items(self, items: Sequence[PlanningItemCreate]) -> List[PlanningItemOut]:
        self._raise_if_failing()
        stored = [self._materialize(item) for item in items]
        self._items.extend(stored)
        log.info("Memory: created %d planning items", len(stored))
        return stored

    async def list_planning_items(self, flt: Optional[PlanningFilter] = None) -> List[PlanningItemOut]:
        flt = flt or PlanningFilter()
        found = [item for item in self._items if matches_filter(item, flt)]
        found.sort(key=lambda item: (item.date, item.start_time))
        log.debug("Memory: listed %d planning items", len(found))
        return found


__all__ = ["BasePlanningStore", "InMemoryPlanningStore", "matches_filter"]
