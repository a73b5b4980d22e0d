# fieldplan/core/calendar/selection.py
"""
Drag-selection state machine for the hour grid.

States form a tagged union: :class:`Idle` or :class:`Selecting`. A selection
is always fully formed (anchor and cursor) or absent. Transitions are pure
functions returning the next state; releasing the pointer returns the next
state together with the resolved outcome.

    Idle --pointer_down--> Selecting --pointer_enter--> Selecting
    Selecting --pointer_up / pointer_leave--> Idle  (+ SlotClick | RangeCreate)
    Selecting --cancel--> Idle                     (no outcome)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple, Union

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    """Addressable ``(day, hour)`` unit of the grid."""

    day: date
    hour: int


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Selecting:
    anchor: Cell
    cursor: Cell

    @property
    def min_hour(self) -> int:
        return min(self.anchor.hour, self.cursor.hour)

    @property
    def max_hour(self) -> int:
        return max(self.anchor.hour, self.cursor.hour)


SelectionState = Union[Idle, Selecting]


@dataclass(frozen=True)
class SlotClick:
    day: date
    hour: int


@dataclass(frozen=True)
class RangeCreate:
    day: date
    start_hour: int
    end_hour: int  # exclusive hour boundary


Resolution = Union[SlotClick, RangeCreate]

IDLE = Idle()


def pointer_down(state: SelectionState, cell: Cell) -> Selecting:
    """Start a selection. A stray pointer-down while selecting restarts it."""
    if isinstance(state, Selecting):
        log.debug("pointer_down while selecting; restarting at %s", cell)
    return Selecting(anchor=cell, cursor=cell)


def pointer_enter(state: SelectionState, cell: Cell) -> SelectionState:
    """Move the cursor; cells on another day leave the selection unchanged."""
    if not isinstance(state, Selecting):
        return state
    if cell.day != state.anchor.day:
        return state
    if cell == state.cursor:
        return state
    return Selecting(anchor=state.anchor, cursor=cell)


def resolve(selection: Selecting) -> Resolution:
    if selection.anchor.hour == selection.cursor.hour:
        return SlotClick(day=selection.anchor.day, hour=selection.anchor.hour)
    return RangeCreate(
        day=selection.anchor.day,
        start_hour=selection.min_hour,
        end_hour=selection.max_hour + 1,
    )


def pointer_up(state: SelectionState) -> Tuple[Idle, Optional[Resolution]]:
    """Finish the interaction. Pointer-up without a selection resolves to nothing."""
    if not isinstance(state, Selecting):
        return IDLE, None
    outcome = resolve(state)
    log.debug("Selection resolved to %s", outcome)
    return IDLE, outcome


# leaving the grid finishes the selection exactly like releasing the pointer
pointer_leave = pointer_up


def cancel(state: SelectionState) -> Idle:
    return IDLE


def is_highlighted(state: SelectionState, cell: Cell) -> bool:
    """True for cells between anchor and cursor (inclusive) on the anchor's day."""
    if not isinstance(state, Selecting):
        return False
    if cell.day != state.anchor.day:
        return False
    return state.min_hour <= cell.hour <= state.max_hour


__all__ = [
    "Cell",
    "Idle",
    "Selecting",
    "SelectionState",
    "SlotClick",
    "RangeCreate",
    "Resolution",
    "IDLE",
    "pointer_down",
    "pointer_enter",
    "pointer_up",
    "pointer_leave",
    "cancel",
    "resolve",
    "is_highlighted",
]
