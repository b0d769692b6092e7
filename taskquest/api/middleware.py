"""Request tracing: X-Request-ID and one log line per request."""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.logging import generate_request_id, get_logger, request_id_var

logger = get_logger("taskquest.requests")

REQUEST_ID_HEADER = "X-Request-ID"

# Служебные пути, которые дергают мониторинг и браузер
QUIET_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    ID запроса берётся из X-Request-ID клиента или генерируется,
    кладётся в request_id_var (его видят логи инструментов) и
    возвращается в заголовке ответа.

    Лог (JSON):
        {"message": "POST /api/v1/tools/update_task 200", "request_id": "abc-123",
         "extra": {"status": 200, "duration_ms": 12, "client_ip": "127.0.0.1"}}
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        token = request_id_var.set(request_id)
        started = time.perf_counter()
        route = f"{request.method} {request.url.path}"
        client_ip = request.client.host if request.client else None

        try:
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(
                    f"{route} failed",
                    extra={"duration_ms": self._elapsed_ms(started), "client_ip": client_ip},
                )
                raise

            response.headers[REQUEST_ID_HEADER] = request_id
            if request.url.path not in QUIET_PATHS:
                logger.log(
                    logging.WARNING if response.status_code >= 400 else logging.INFO,
                    f"{route} {response.status_code}",
                    extra={
                        "status": response.status_code,
                        "duration_ms": self._elapsed_ms(started),
                        "client_ip": client_ip,
                    },
                )
            return response
        finally:
            request_id_var.reset(token)

    @staticmethod
    def _elapsed_ms(started: float) -> int:
        return int((time.perf_counter() - started) * 1000)
