# fieldplan/config.py

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Single configuration object for the project. Reads environment variables.
    Pydantic v2 + pydantic-settings.
    """
    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    # --- Core ---
    ENVIRONMENT: str = Field("dev", description="Application environment (dev, test, prod)")

    # --- Database ---
    DATABASE_URL: str = Field(..., description="Async database connection URL (e.g., postgresql+asyncpg://...)")

    # --- Redis / Celery ---
    REDIS_URL: str = Field("redis://redis:6379/0", description="URL for Redis connection")
    CELERY_BROKER_URL: Optional[str] = Field(None, description="Celery broker URL (defaults to REDIS_URL)")
    CELERY_RESULT_BACKEND: Optional[str] = Field(None, description="Celery result backend URL (defaults to REDIS_URL)")

    # --- Calendar grid ---
    CALENDAR_WINDOW_START_HOUR: int = Field(8, ge=0, le=23, description="First displayed hour of the time grid")
    CALENDAR_WINDOW_END_HOUR: int = Field(22, ge=1, le=24, description="Hour at which the time grid ends")
    CALENDAR_HOUR_HEIGHT: float = Field(60, gt=0, description="Pixel height of one hour row")
    CALENDAR_COMPACT_HOUR_HEIGHT: float = Field(48, gt=0, description="Pixel height of one hour row on narrow viewports")
    CALENDAR_MIN_EVENT_HEIGHT: float = Field(20, ge=0, description="Minimum rendered height of an event")
    CALENDAR_FIRST_WEEKDAY: int = Field(1, ge=0, le=6, description="First day of the week (0 = Sunday)")
    CALENDAR_MONTH_MAX_EVENTS: int = Field(3, ge=1, description="Events shown per day cell in the month view")
    CALENDAR_MONTH_DEFAULT_HOUR: int = Field(9, ge=0, le=22, description="Start hour used when a month day is clicked")

    # --- Planning ---
    PLANNING_DEFAULT_START_TIME: str = Field("09:00", description="Start time for the single planning dialog")
    PLANNING_DEFAULT_DURATION_MINUTES: int = Field(60, gt=0, description="Duration of a planning item without explicit end")
    PLANNING_BLOCK_CONFLICTS: bool = Field(False, description="Refuse planning items that double-book a resource")

    # --- Providers ---
    DIRECTORY_PROVIDER: str = Field("static", description="Resource/project provider ('static')")
    GEOCODER_PROVIDER: str = Field("noop", description="Address suggestion provider ('noop')")
    DIRECTORY_RESOURCES: List[Dict[str, str]] = Field(
        default_factory=list, description="Static resources as JSON: [{\"id\": ..., \"display_name\": ...}]"
    )
    DIRECTORY_PROJECTS: List[Dict[str, Optional[str]]] = Field(
        default_factory=list,
        description="Static projects as JSON: [{\"id\": ..., \"title\": ..., \"customer_label\": ...}]",
    )

    # --- Reminders ---
    REMINDER_LEAD_HOURS: int = Field(24, ge=1, description="How long before the appointment reminders go out")
    REMINDER_WINDOW_MINUTES: int = Field(60, ge=1, description="Width of the reminder selection window")

    @model_validator(mode='after')
    def set_celery_defaults(self) -> 'Settings':
        if self.CELERY_BROKER_URL is None:
            log.debug("Setting CELERY_BROKER_URL default from REDIS_URL")
            self.CELERY_BROKER_URL = self.REDIS_URL
        if self.CELERY_RESULT_BACKEND is None:
            log.debug("Setting CELERY_RESULT_BACKEND default from REDIS_URL")
            self.CELERY_RESULT_BACKEND = self.REDIS_URL
        return self

    @model_validator(mode='after')
    def check_calendar_window(self) -> 'Settings':
        if self.CALENDAR_WINDOW_END_HOUR <= self.CALENDAR_WINDOW_START_HOUR:
            raise ValueError("CALENDAR_WINDOW_END_HOUR must be after CALENDAR_WINDOW_START_HOUR")
        return self


try:
    settings = Settings()
    log.info("Settings loaded successfully for ENVIRONMENT=%s", settings.ENVIRONMENT)
    log.debug("Loaded settings: DB URL=%s..., Redis URL=%s, window=%02d-%02d",
              str(settings.DATABASE_URL)[:25],
              settings.REDIS_URL,
              settings.CALENDAR_WINDOW_START_HOUR,
              settings.CALENDAR_WINDOW_END_HOUR)
except Exception as e:
    log.exception("Failed to instantiate Settings.")
    raise e
