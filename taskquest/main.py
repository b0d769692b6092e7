"""
TaskQuest: менеджер задач с очками за выполнение
и поиском мороженого в награду.

Запуск:
    uvicorn taskquest.main:app --reload

Документация: /docs (Swagger UI), /redoc

Все операции доступны как инструменты:
    GET  /api/v1/tools
    POST /api/v1/tools/{name}
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import APIRouter, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from .api import system_router, tasks_router, tools_router
from .api.dependencies import verify_api_key
from .api.errors import register_error_handlers
from .api.middleware import RequestLoggingMiddleware
from .api.rate_limit import limiter, rate_limit_exceeded_handler
from .api.system import APP_VERSION
from .core.config import settings
from .core.logging import get_logger, setup_logging

setup_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)

logger = get_logger(__name__)

DESCRIPTION = """
Менеджер задач с геймификацией.

* **Задачи** - создание, фильтрация, обновление, удаление
* **Теги** - категоризация задач (M:M)
* **Очки** - за выполнение задачи: low=1, medium=3, high=5
* **Награда** - поиск мороженого рядом с адресом (от 10 очков)

Каждая операция - именованный инструмент: `POST /api/v1/tools/{name}`
с аргументами в теле запроса. Ответ всегда
`{"content": [{"type": "text", "text": ...}], "is_error": ...}`.
"""


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Общий HTTP клиент для геокодера и поиска мест живёт всё время работы приложения."""
    app.state.started_at = time.time()
    app.state.http_client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)

    logger.info(
        "Application started",
        extra={
            "version": APP_VERSION,
            "debug": settings.DEBUG,
            "reward_unlock_points": settings.REWARD_UNLOCK_POINTS,
        },
    )
    try:
        yield
    finally:
        await app.state.http_client.aclose()
        logger.info(
            "Application stopped",
            extra={"uptime_seconds": int(time.time() - app.state.started_at)},
        )


def create_app() -> FastAPI:
    app = FastAPI(
        lifespan=lifespan,
        title=settings.APP_NAME,
        description=DESCRIPTION,
        version=APP_VERSION,
    )

    app.state.limiter = limiter
    # slowapi handler имеет специфичный тип, но работает корректно
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # /api/v1/* требует X-API-Key; / и /health открыты
    api_v1 = APIRouter(prefix="/api/v1", dependencies=[Depends(verify_api_key)])
    api_v1.include_router(tools_router)
    api_v1.include_router(tasks_router)

    app.include_router(system_router)
    app.include_router(api_v1)
    return app


app = create_app()
