"""
Planning subsystem package.

* ``schemas``      - planning item / recurrence pydantic models, status enum.
* ``models``       - ``planning_items`` ORM table.
* ``recurrence``   - recurring plan generator.
* ``conflicts``    - double-booking detection.
* ``store``        - persistence contract + in-memory store.
* ``service``      - SQLAlchemy store.
* ``orchestrator`` - creation flows used by the calendar host.
* ``reminders``    - day-ahead reminders.
"""
from __future__ import annotations

from .errors import (  # noqa: F401
    PlanningConflictError,
    PlanningError,
    PlanningPersistenceError,
    PlanningValidationError,
)
from .recurrence import generate_planning_items, validate_recurrence  # noqa: F401
from .schemas import (  # noqa: F401
    PlanningFilter,
    PlanningItemCreate,
    PlanningItemOut,
    PlanningStatus,
    RecurrenceSpec,
)
from .store import BasePlanningStore, InMemoryPlanningStore  # noqa: F401

__all__: list[str] = [
    "PlanningError",
    "PlanningValidationError",
    "PlanningConflictError",
    "PlanningPersistenceError",
    "PlanningStatus",
    "PlanningItemCreate",
    "PlanningItemOut",
    "PlanningFilter",
    "RecurrenceSpec",
    "generate_planning_items",
    "validate_recurrence",
    "BasePlanningStore",
    "InMemoryPlanningStore",
]
