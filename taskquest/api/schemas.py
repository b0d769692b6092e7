"""
Pydantic схемы для HTTP API.

Схемы аргументов и результатов инструментов живут в tools.schemas
и tools.envelope; здесь только то, что нужно транспорту.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from ..tools.schemas import TaskOut

# ============================================================================
# TOOL SCHEMAS
# ============================================================================


class ToolInfo(BaseModel):
    """
    Описание инструмента для GET /tools.

    Пример:
    {
        "name": "get_score",
        "description": "Get the current total points.",
        "input_schema": {"type": "object", "properties": {}, ...}
    }
    """

    name: str
    description: str
    input_schema: dict[str, Any]


# ============================================================================
# TASK EXPORT SCHEMAS
# ============================================================================


class TaskListResponse(BaseModel):
    """
    Выгрузка всех задач (GET /tasks).

    Пример:
    {
        "success": true,
        "data": [{"id": 1, "title": "...", "tags": [...]}],
        "count": 1,
        "timestamp": "2026-01-22T12:00:00+00:00"
    }
    """

    success: bool = True
    data: list[TaskOut]
    count: int
    timestamp: datetime


# ============================================================================
# COMMON SCHEMAS
# ============================================================================


class ErrorDetail(BaseModel):
    """
    Детали ошибки для конкретного поля.

    Пример:
    {
        "field": "limit",
        "message": "Input should be less than or equal to 100"
    }
    """

    field: str = Field(..., description="Название поля с ошибкой")
    message: str = Field(..., description="Описание ошибки")


class ErrorBody(BaseModel):
    """
    Тело ошибки с кодом и деталями.

    Примеры кодов:
    - VALIDATION_ERROR: ошибка валидации полей
    - NOT_FOUND: ресурс не найден
    - INTERNAL_ERROR: внутренняя ошибка сервера
    """

    code: str = Field(..., description="Код ошибки (VALIDATION_ERROR, NOT_FOUND, etc.)")
    message: str = Field(..., description="Человекочитаемое сообщение")
    details: list[ErrorDetail] | None = Field(
        default=None, description="Список ошибок по полям (для валидации)"
    )


class ErrorResponse(BaseModel):
    """
    Единый формат ответа для ошибок транспорта.

    Бизнес-ошибки инструментов сюда не попадают: они приходят
    как ToolResult с is_error=true и HTTP 200.

    Пример:
    {
        "error": {
            "code": "NOT_FOUND",
            "message": "Tool 'make_coffee' not found",
            "details": null
        }
    }
    """

    error: ErrorBody


# ============================================================================
# HEALTH SCHEMAS
# ============================================================================


class HealthChecks(BaseModel):
    """Результаты отдельных проверок."""

    database: Literal["connected", "disconnected"]
    version: str
    uptime_seconds: int


class HealthResponse(BaseModel):
    """
    Ответ GET /health.

    Пример:
    {
        "status": "ok",
        "checks": {"database": "connected", "version": "1.0.0", "uptime_seconds": 12},
        "timestamp": "2026-01-22T12:00:00+00:00"
    }
    """

    status: Literal["ok", "error"]
    checks: HealthChecks
    timestamp: datetime
