"""
API endpoints для вызова инструментов.

GET  /tools          - каталог инструментов с JSON Schema аргументов
POST /tools/{name}   - вызов инструмента, тело запроса = аргументы

Бизнес-ошибки возвращаются как HTTP 200 с is_error=true:
клиенту (агенту) важен текст, а не статус.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from ..tools import ToolContext, ToolResult, registry
from .dependencies import get_tool_context
from .errors import NotFoundError
from .schemas import ErrorResponse, ToolInfo

router = APIRouter(prefix="/tools", tags=["tools"])


@router.get(
    "",
    response_model=list[ToolInfo],
    summary="Список инструментов",
)
async def list_tools():
    return [
        ToolInfo(name=tool.name, description=tool.description, input_schema=tool.input_schema())
        for tool in registry.list_tools()
    ]


@router.post(
    "/{tool_name}",
    response_model=ToolResult,
    summary="Вызвать инструмент",
    description="""
    Выполнить именованную операцию.

    Ответ всегда в формате конверта:
    - content: [{"type": "text", "text": "..."}]
    - is_error: true для бизнес-ошибок (валидация, не найдено, конфликт,
      недостаточно очков, сбой внешнего сервиса)
    """,
    responses={
        404: {"model": ErrorResponse, "description": "Инструмент не найден"},
    },
)
async def call_tool(
    tool_name: str,
    arguments: dict[str, Any] = Body(default_factory=dict),
    ctx: ToolContext = Depends(get_tool_context),
):
    """
    Вызвать инструмент по имени.

    Пример:
        POST /api/v1/tools/create_task
        {"title": "Buy milk", "priority": "high", "tag_names": ["home"]}
    """
    if registry.get(tool_name) is None:
        raise NotFoundError("Tool", tool_name)

    return await registry.call(tool_name, arguments, ctx)
