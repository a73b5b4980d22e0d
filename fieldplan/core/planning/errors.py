# fieldplan/core/planning/errors.py
"""Error hierarchy for planning creation flows. Every failure is local to one attempt."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from .conflicts import TimeConflict


class PlanningError(Exception):
    """Base class for planning errors."""


class PlanningValidationError(PlanningError):
    """User input is incomplete or inconsistent; the dialog stays open."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class PlanningConflictError(PlanningError):
    """The resource is already booked in (part of) the requested time range."""

    def __init__(self, conflicts: Sequence["TimeConflict"]) -> None:
        super().__init__(f"{len(conflicts)} conflicting planning item(s) for this resource")
        self.conflicts = list(conflicts)


class PlanningPersistenceError(PlanningError):
    """The persistence collaborator rejected the create request."""


__all__ = [
    "PlanningError",
    "PlanningValidationError",
    "PlanningConflictError",
    "PlanningPersistenceError",
]
