"""
Служебные endpoints: информация о сервисе и health check.

Не требуют X-API-Key, но ограничены по частоте (rate_limit.py).
"""

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from ..core.config import settings
from ..core.database import engine
from ..core.logging import get_logger
from .rate_limit import PUBLIC_RATE_LIMIT, limiter
from .schemas import HealthChecks, HealthResponse

APP_VERSION = "1.0.0"

logger = get_logger(__name__)

router = APIRouter()


async def check_database() -> bool:
    """SELECT 1 через пул движка; False если БД недоступна."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.warning("Health check: database unavailable", exc_info=True)
        return False
    return True


@router.get("/", tags=["root"], summary="Root endpoint", description="Информация о API")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def root(request: Request):
    return {
        "name": settings.APP_NAME,
        "version": APP_VERSION,
        "api_version": "v1",
        "docs": "/docs",
        "redoc": "/redoc",
        "openapi": "/openapi.json",
        "endpoints": {
            "tools": "/api/v1/tools",
            "tasks": "/api/v1/tasks",
        },
        "rate_limit": PUBLIC_RATE_LIMIT,
        "description": "Task manager with points and ice cream rewards",
    }


@router.get(
    "/health",
    tags=["health"],
    summary="Health check",
    description="Проверка подключения к БД: 200 если доступна, 503 если нет",
    response_model=HealthResponse,
)
@limiter.limit(PUBLIC_RATE_LIMIT)
async def health_check(request: Request):
    """
    Пример ответа (200 OK):
    ```json
    {
        "status": "ok",
        "checks": {"database": "connected", "version": "1.0.0", "uptime_seconds": 3600},
        "timestamp": "2026-01-22T12:00:00+00:00"
    }
    ```
    """
    started_at = getattr(request.app.state, "started_at", None)
    uptime_seconds = int(time.time() - started_at) if started_at else 0

    database_ok = await check_database()

    body = HealthResponse(
        status="ok" if database_ok else "error",
        checks=HealthChecks(
            database="connected" if database_ok else "disconnected",
            version=APP_VERSION,
            uptime_seconds=uptime_seconds,
        ),
        timestamp=datetime.now(UTC),
    )
    return JSONResponse(
        status_code=200 if database_ok else 503,
        content=body.model_dump(mode="json"),
    )
