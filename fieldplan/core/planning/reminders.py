# fieldplan/core/planning/reminders.py

"""Day-ahead reminders for scheduled planning items."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Awaitable, Callable, List, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldplan.config import settings

from .models import PlanningItem
from .schemas import PlanningStatus

log = logging.getLogger(__name__)

Notifier = Callable[[PlanningItem], Awaitable[None]]


async def log_notifier(item: PlanningItem) -> None:
    """Default notifier: writes the reminder to the log."""
    log.info(
        "Reminder: %s for resource %s on %s at %s (location: %s)",
        item.title, item.assigned_resource_id, item.date.isoformat(),
        item.start_time.strftime("%H:%M"), item.location or "-",
    )


def starts_at(item: PlanningItem) -> datetime:
    return datetime.combine(item.date, item.start_time)


class PlanningRemindersService:
    """
    Selects scheduled items that start roughly ``REMINDER_LEAD_HOURS`` from
    now and have not been reminded yet. With the defaults the window is
    23.5 h to 24.5 h ahead.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        lead: timedelta | None = None,
        window: timedelta | None = None,
    ) -> None:
        self.db: AsyncSession = db_session
        self.lead = lead or timedelta(hours=settings.REMINDER_LEAD_HOURS)
        self.window = window or timedelta(minutes=settings.REMINDER_WINDOW_MINUTES)

    def window_bounds(self, now: datetime) -> tuple[datetime, datetime]:
        centre = now + self.lead
        return centre - self.window / 2, centre + self.window / 2

    async def list_due(self, now: datetime | None = None) -> List[PlanningItem]:
        now = now or datetime.utcnow()
        lower, upper = self.window_bounds(now)
        log.debug("Listing planning items starting between %s and %s", lower.isoformat(), upper.isoformat())
        # dates narrow the query; exact start datetimes are compared below
        stmt = (
            select(PlanningItem)
            .where(PlanningItem.status == PlanningStatus.SCHEDULED)
            .where(PlanningItem.reminder_sent_at.is_(None))
            .where(PlanningItem.date >= lower.date())
            .where(PlanningItem.date <= upper.date())
            .order_by(PlanningItem.date, PlanningItem.start_time)
        )
        result = await self.db.scalars(stmt)
        due = [item for item in result.all() if lower <= starts_at(item) <= upper]
        log.info("Found %d planning items due for a reminder", len(due))
        return due

    async def mark_sent(self, item_id: str, now: datetime | None = None) -> PlanningItem | None:
        item = await self.db.get(PlanningItem, item_id)
        if item is None:
            log.warning("Planning item id=%s not found to mark reminder as sent.", item_id)
            return None
        if item.reminder_sent_at is not None:
            log.warning("Reminder for planning item id=%s was already sent.", item_id)
            return item
        item.reminder_sent_at = now or datetime.utcnow()
        self.db.add(item)
        await self.db.flush()
        await self.db.refresh(item)
        log.info("Marked reminder for planning item id=%s as sent", item_id)
        return item

    async def dispatch_due(self, notify: Notifier = log_notifier, now: datetime | None = None) -> int:
        """Notify and stamp every due item. Items whose notification fails stay unstamped."""
        now = now or datetime.utcnow()
        sent = 0
        due: Sequence[PlanningItem] = await self.list_due(now)
        for item in due:
            try:
                await notify(item)
            except Exception:  # noqa: BLE001
                log.exception("Reminder notification failed for planning item id=%s", item.id)
                continue
            await self.mark_sent(item.id, now)
            sent += 1
        return sent


__all__ = ["Notifier", "log_notifier", "starts_at", "PlanningRemindersService"]
