"""
API endpoint для выгрузки задач.

Отдаёт все задачи с тегами одним списком (для дашбордов и бэкапов).
Изменение задач идёт только через инструменты (/tools).
"""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from ..services import TaskService
from ..tools.schemas import TaskOut
from .dependencies import get_task_service
from .schemas import TaskListResponse

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get(
    "",
    response_model=TaskListResponse,
    summary="Выгрузить все задачи",
    description="Все задачи с тегами, новые первыми.",
)
async def export_tasks(service: TaskService = Depends(get_task_service)):
    """
    Пример ответа:
    ```json
    {
        "success": true,
        "data": [{"id": 1, "title": "Buy milk", "tags": []}],
        "count": 1,
        "timestamp": "2026-01-22T12:00:00+00:00"
    }
    ```
    """
    tasks = await service.list_all_tasks()
    data = [TaskOut.model_validate(task) for task in tasks]
    return TaskListResponse(data=data, count=len(data), timestamp=datetime.now(UTC))
