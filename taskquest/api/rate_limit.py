"""Rate limiting (slowapi) for the public, unauthenticated endpoints."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .schemas import ErrorBody, ErrorDetail, ErrorResponse

PUBLIC_RATE_LIMIT = "100/minute"

# Лимит считается по IP клиента
limiter = Limiter(key_func=get_remote_address)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 в едином формате ErrorResponse."""
    error_response = ErrorResponse(
        error=ErrorBody(
            code="RATE_LIMIT_EXCEEDED",
            message=f"Too many requests. Limit: {exc.detail}",
            details=[ErrorDetail(field="rate_limit", message=str(exc.detail))],
        )
    )
    return JSONResponse(status_code=429, content=error_response.model_dump())
