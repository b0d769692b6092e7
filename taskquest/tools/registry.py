"""
Реестр инструментов: граница каждой операции.

Здесь бизнес-ошибки (DomainError) превращаются в конверт с is_error=True.
Всё остальное (потеря соединения с БД, баги) пробрасывается дальше,
в транспортный слой, который отдаёт общий ответ 500.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import DomainError
from ..core.logging import get_logger, tool_name_var
from ..integrations.geo import GeoClient
from .envelope import ToolResult

logger = get_logger(__name__)


@dataclass
class ToolContext:
    """Зависимости одного вызова инструмента."""

    db: AsyncSession
    geo_client: GeoClient | None = None


ToolHandler = Callable[[ToolContext, Any], Awaitable[ToolResult]]


@dataclass
class Tool:
    """Зарегистрированный инструмент."""

    name: str
    description: str
    args_model: type[BaseModel]
    handler: ToolHandler

    def input_schema(self) -> dict[str, Any]:
        """JSON Schema аргументов (для GET /tools)."""
        return self.args_model.model_json_schema()


class ToolRegistry:
    """
    Реестр именованных операций.

    Использование:
        registry = ToolRegistry()

        @registry.tool("get_score", NoArgs, "Get current points")
        async def get_score(ctx: ToolContext, args: NoArgs) -> ToolResult:
            ...

        result = await registry.call("get_score", {}, ctx)
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def tool(
        self, name: str, args_model: type[BaseModel], description: str
    ) -> Callable[[ToolHandler], ToolHandler]:
        """Декоратор регистрации инструмента."""

        def decorator(handler: ToolHandler) -> ToolHandler:
            if name in self._tools:
                raise ValueError(f"Tool '{name}' is already registered")
            self._tools[name] = Tool(
                name=name, description=description, args_model=args_model, handler=handler
            )
            return handler

        return decorator

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def list_tools(self) -> list[Tool]:
        return list(self._tools.values())

    async def call(
        self, name: str, arguments: dict[str, Any] | None, ctx: ToolContext
    ) -> ToolResult:
        """
        Вызвать инструмент по имени.

        Порядок:
        1. Неизвестное имя → конверт с ошибкой
        2. Валидация аргументов pydantic-моделью → конверт с ошибкой
        3. Вызов обработчика; DomainError → rollback + конверт с ошибкой

        Raises:
            Exception: Любая не-бизнес ошибка (БД недоступна и т.п.)
        """
        tool = self._tools.get(name)
        if tool is None:
            return ToolResult.error(f"Error: Unknown tool '{name}'", code="UNKNOWN_TOOL")

        token = tool_name_var.set(name)
        try:
            try:
                args = tool.args_model.model_validate(arguments or {})
            except PydanticValidationError as e:
                problems = "; ".join(
                    f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
                    for err in e.errors()
                )
                logger.warning("Invalid tool arguments", extra={"errors": problems})
                return ToolResult.error(
                    f"Error: Invalid arguments for {name}: {problems}", code="VALIDATION_ERROR"
                )

            try:
                result = await tool.handler(ctx, args)
            except DomainError as e:
                # Частичные записи этого вызова не должны попасть в commit
                await ctx.db.rollback()
                logger.warning(
                    "Tool call rejected", extra={"error_kind": e.kind, "error": e.message}
                )
                return ToolResult.error(f"Error: {e.message}", code=e.code)

            logger.debug("Tool call completed", extra={"is_error": result.is_error})
            return result
        finally:
            tool_name_var.reset(token)
