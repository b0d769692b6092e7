"""API layer - FastAPI endpoints."""

from .system import router as system_router
from .tasks import router as tasks_router
from .tools import router as tools_router

__all__ = [
    "system_router",
    "tools_router",
    "tasks_router",
]
