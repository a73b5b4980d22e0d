from __future__ import annotations
import logging

from fastapi import FastAPI

from fieldplan import __version__
from fieldplan.api.v1.calendar import router as calendar_router
from fieldplan.api.v1.health import router as health_router
from fieldplan.api.v1.planning import router as planning_router
from fieldplan.config import settings

# Configure basic logging
logging.basicConfig(level=logging.INFO)
log = logging.getLogger(__name__)

description = """
Appointment scheduling for field-service teams: week and month calendar
layouts, quick / single / recurring planning creation and day-ahead
reminders.
"""
tags_metadata = [
    {"name": "planning", "description": "Create and list planning items."},
    {"name": "calendar", "description": "Week and month calendar layouts."},
    {"name": "infra", "description": "Health checks."},
]

app = FastAPI(
    title="Fieldplan API",
    description=description,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=tags_metadata,
)

app.include_router(planning_router)
app.include_router(calendar_router)
app.include_router(health_router)

log.info("\U0001F331 FastAPI application configured. Environment: %s", settings.ENVIRONMENT)


@app.on_event("startup")
async def startup_event() -> None:
    log.info("\U0001F680 FastAPI application startup complete.")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    log.info("\U0001F44B FastAPI application shutdown.")
