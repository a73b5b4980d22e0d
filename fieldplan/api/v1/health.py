from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from fieldplan.config import settings
from fieldplan.core.directory import get_directory_provider
from fieldplan.db.base import engine

router = APIRouter(tags=["infra"])
log = logging.getLogger(__name__)


@router.get("/healthz")
async def healthz():
    out: dict[str, str] = {"environment": settings.ENVIRONMENT}

    # DB
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        out["db"] = "ok"
    except SQLAlchemyError as exc:
        log.exception("DB health check failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="db error") from exc

    # Redis
    try:
        r = Redis.from_url(settings.CELERY_BROKER_URL, socket_connect_timeout=2)
        try:
            if not await r.ping():
                raise RedisError("ping returned false")
        finally:
            await r.aclose()
        out["cache"] = "ok"
    except (RedisError, OSError) as exc:
        log.exception("Redis health check failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="cache error") from exc

    out["directory"] = get_directory_provider().name
    return out
