"""
Pydantic схемы инструментов.

- *Args: аргументы инструментов (валидируются до вызова сервиса)
- TaskOut / TagOut / PlaceOut: то, что инструменты отдают в тексте ответа
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..models import TaskPriority, TaskStatus

# ============================================================================
# TOOL ARGUMENTS
# ============================================================================


class CreateTaskArgs(BaseModel):
    """
    Аргументы create_task.

    Пример:
    {
        "title": "Купить молоко",
        "priority": "high",
        "due_date": "2026-01-25T10:00:00Z",
        "tag_names": ["shopping", "urgent"]
    }
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1, description="Title of the task")
    description: str | None = Field(None, description="Optional description of the task")
    priority: TaskPriority = Field(TaskPriority.MEDIUM, description="Priority level")
    due_date: str | None = Field(None, description="Due date in ISO 8601 format")
    tag_names: list[str] | None = Field(None, description="Tag names to assign")


class ListTasksArgs(BaseModel):
    """Аргументы list_tasks."""

    model_config = ConfigDict(extra="forbid")

    status: TaskStatus | None = Field(None, description="Filter by status")
    priority: TaskPriority | None = Field(None, description="Filter by priority")
    tag_name: str | None = Field(None, description="Filter by tag name")
    due_before: str | None = Field(
        None, description="Filter tasks due on or before this date (ISO 8601)"
    )
    limit: int = Field(50, ge=1, le=100, description="Maximum number of tasks to return")


class UpdateTaskArgs(BaseModel):
    """Аргументы update_task. Все поля кроме id опциональные."""

    model_config = ConfigDict(extra="forbid")

    id: int = Field(..., ge=1, description="ID of the task to update")
    title: str | None = Field(None, min_length=1, description="New title")
    description: str | None = Field(None, description="New description")
    status: TaskStatus | None = Field(None, description="New status")
    priority: TaskPriority | None = Field(None, description="New priority")
    due_date: str | None = Field(None, description="New due date in ISO 8601 format")


class DeleteTaskArgs(BaseModel):
    """Аргументы delete_task."""

    model_config = ConfigDict(extra="forbid")

    id: int = Field(..., ge=1, description="ID of the task to delete")


class CreateTagArgs(BaseModel):
    """Аргументы create_tag. Формат цвета проверяет сервис."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, description="Name of the tag")
    color: str | None = Field(None, description="Hex color code, e.g. #FF5733")


class NoArgs(BaseModel):
    """Инструменты без аргументов (list_tags, get_score)."""

    model_config = ConfigDict(extra="forbid")


class TagAssignmentArgs(BaseModel):
    """Аргументы assign_tag и remove_tag."""

    model_config = ConfigDict(extra="forbid")

    task_id: int = Field(..., ge=1, description="ID of the task")
    tag_name: str = Field(..., min_length=1, description="Name of the tag")


class FindNearbyRewardArgs(BaseModel):
    """Аргументы find_nearby_reward."""

    model_config = ConfigDict(extra="forbid")

    address: str = Field(..., min_length=1, description="Address to search near")


# ============================================================================
# OUTPUT SCHEMAS
# ============================================================================


class TagOut(BaseModel):
    """Тег в ответе."""

    id: int
    name: str
    color: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskOut(BaseModel):
    """
    Задача в ответе.

    Пример:
    {
        "id": 1,
        "title": "Купить молоко",
        "description": null,
        "status": "pending",
        "priority": "high",
        "due_date": "2026-01-25T10:00:00",
        "created_at": "2026-01-18T12:00:00",
        "updated_at": "2026-01-18T12:00:00",
        "tags": [{"id": 1, "name": "shopping", "color": null, ...}]
    }
    """

    id: int
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None
    created_at: datetime
    updated_at: datetime
    tags: list[TagOut] = []

    model_config = ConfigDict(from_attributes=True)


class PlaceOut(BaseModel):
    """Место, найденное поиском награды."""

    name: str
    address: str
    coordinates: str

    model_config = ConfigDict(from_attributes=True)
