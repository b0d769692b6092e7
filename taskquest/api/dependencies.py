"""
Зависимости FastAPI.

Цепочка для вызова инструмента:
    POST /api/v1/tools/{name}
      → verify_api_key
      → get_tool_context
          → get_db          (одна сессия = одна транзакция на вызов)
          → get_geo_client  (общий httpx.AsyncClient из app.state)

В тестах get_db и get_geo_client подменяются через
app.dependency_overrides.
"""

import secrets
from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.database import AsyncSessionLocal
from ..integrations.geo import GeoClient
from ..services import TaskService
from ..tools import ToolContext

api_key_header = APIKeyHeader(
    name="X-API-Key",
    auto_error=False,  # 401 формируем сами
    description="Ключ доступа к /api/v1/*",
)


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def verify_api_key(api_key: str | None = Depends(api_key_header)) -> str:
    """
    Проверка заголовка X-API-Key.

        curl -H "X-API-Key: $API_KEY" http://localhost:8000/api/v1/tools
    """
    if not api_key:
        raise _unauthorized("API key is missing. Add header: X-API-Key: your-key")
    if not secrets.compare_digest(api_key.encode(), settings.API_KEY.encode()):
        raise _unauthorized("Invalid API key")
    return api_key


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Сессия на время запроса: commit при успехе, rollback при исключении.

    Бизнес-ошибки инструментов сюда не доходят: ToolRegistry
    откатывает их сам и возвращает конверт, после чего commit
    здесь ничего не записывает.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_geo_client(request: Request) -> GeoClient | None:
    """
    Geo клиент поверх общего httpx.AsyncClient.

    Клиент создаётся в lifespan (main.py). Если lifespan не запускался,
    возвращаем None, и поиск награды ответит UpstreamError.
    """
    http_client = getattr(request.app.state, "http_client", None)
    if http_client is None:
        return None
    return GeoClient(http_client)


async def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)


async def get_tool_context(
    db: AsyncSession = Depends(get_db),
    geo_client: GeoClient | None = Depends(get_geo_client),
) -> ToolContext:
    """Зависимости одного вызова инструмента."""
    return ToolContext(db=db, geo_client=geo_client)
