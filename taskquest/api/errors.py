"""
Ошибки транспорта и их преобразование в ErrorResponse.

Бизнес-ошибки (core.errors.DomainError) сюда не доходят:
их превращает в ToolResult реестр инструментов. Здесь только то,
что случилось до или вокруг вызова: неизвестный инструмент,
неверное тело запроса, отсутствующий ключ, сбой сервера.

Формат любого ответа с ошибкой:
    {"error": {"code": "NOT_FOUND", "message": "...", "details": null}}
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.logging import get_logger
from .schemas import ErrorBody, ErrorDetail, ErrorResponse

logger = get_logger(__name__)

# Коды для HTTPException, которые бросают FastAPI/Starlette и verify_api_key
HTTP_ERROR_CODES: dict[int, str] = {
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


class APIError(Exception):
    """
    Ошибка транспорта с HTTP статусом.

    raise APIError(code="NOT_FOUND", message="Tool not found", status_code=404)
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: list[ErrorDetail] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NotFoundError(APIError):
    """raise NotFoundError("Tool", "make_coffee") → 404 "Tool 'make_coffee' not found"."""

    def __init__(self, resource: str, resource_id: int | str):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource} '{resource_id}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
        )


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: list[ErrorDetail] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(error=ErrorBody(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    logger.warning("API error", extra={"code": exc.code, "error": exc.message})
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """
    HTTPException (401 от verify_api_key, 404/405 от роутинга).

    Заголовки исключения сохраняются (WWW-Authenticate для 401).
    """
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return error_response(
        exc.status_code, code, str(exc.detail), headers=getattr(exc, "headers", None)
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Ошибка разбора тела запроса (422).

    {"detail": [{"loc": ["body", "limit"], "msg": "..."}]}
    превращается в
    {"error": {"code": "VALIDATION_ERROR", "details": [{"field": "limit", ...}]}}

    Аргументы инструментов валидирует реестр, сюда попадает
    только тело, которое вообще не является JSON объектом.
    """
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] == "body":
            loc = loc[1:]
        details.append(
            ErrorDetail(
                field=".".join(loc) or "body",
                message=error.get("msg", "Validation error"),
            )
        )

    logger.warning("Request validation failed", extra={"errors": len(details)})
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Request validation failed",
        details,
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Неожиданный сбой (500). Детали остаются в логе, клиенту не показываются."""
    logger.error("Unhandled error", extra={"error_type": type(exc).__name__}, exc_info=True)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "Internal server error"
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)
