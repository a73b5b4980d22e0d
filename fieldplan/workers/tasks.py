# fieldplan/workers/tasks.py

from __future__ import annotations

import asyncio
from datetime import datetime

from celery import Celery
from celery.schedules import crontab
from celery.utils.log import get_task_logger

from fieldplan.config import settings
from fieldplan.core.planning.reminders import PlanningRemindersService, log_notifier
from fieldplan.db.base import async_session_context, engine

log = get_task_logger(__name__)

celery_app = Celery(
    "fieldplan",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=['fieldplan.workers.tasks'],
    task_serializer='json',
    result_serializer='json',
    accept_content=['json']
)
celery_app.conf.update(
    task_track_started=True,
    timezone='UTC',
    broker_connection_retry_on_startup=True,
)
celery_app.conf.beat_schedule = {
    "planning-reminders-hourly": {
        "task": "fieldplan.workers.tasks.send_planning_reminders_task",
        "schedule": crontab(minute=0),
    },
}


async def _run_send_reminders_logic(task_id: str | None, now: datetime | None = None) -> int:
    log.info("[reminders %s] Looking for planning items due for a reminder", task_id)
    try:
        async with async_session_context() as session:
            service = PlanningRemindersService(session)
            sent = await service.dispatch_due(log_notifier, now)
    finally:
        # pooled connections are bound to this run's event loop
        await engine.dispose()
    log.info("[reminders %s] Sent %d reminder(s)", task_id, sent)
    return sent


@celery_app.task(
    name="fieldplan.workers.tasks.send_planning_reminders_task",
    bind=True,
    autoretry_for=(Exception,),
    retry_kwargs={'max_retries': 3},
    retry_backoff=True,
    retry_backoff_max=60 * 5,
    retry_jitter=True
)
def send_planning_reminders_task(self, now_iso: str | None = None) -> int:
    """Hourly beat task: remind resources about tomorrow's appointments."""
    now = datetime.fromisoformat(now_iso) if now_iso else None
    return asyncio.run(_run_send_reminders_logic(self.request.id, now))


__all__ = ["celery_app", "send_planning_reminders_task"]
