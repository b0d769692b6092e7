"""Task service with business logic."""

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError, ValidationError
from ..core.logging import get_logger
from ..models import Task, TaskPriority, TaskStatus
from ..models.base import to_utc_naive, utc_now
from ..repositories import TagRepository, TaskRepository, TaskTagRepository
from .score import ScoreService

logger = get_logger(__name__)

MIN_LIST_LIMIT = 1
MAX_LIST_LIMIT = 100
DEFAULT_LIST_LIMIT = 50


def parse_iso_datetime(value: str, field: str) -> datetime:
    """
    Разобрать дату в формате ISO 8601.

    Принимает "2024-01-15", "2024-01-15T10:00:00" и "2024-01-15T10:00:00Z".
    Результат - naive UTC, как и все даты в БД.

    Raises:
        ValidationError: Если строка не является ISO 8601 датой
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise ValidationError(
            f"Invalid {field} format. Please use ISO 8601 format (e.g., 2024-01-15T10:00:00Z)"
        ) from None
    return to_utc_naive(parsed)


class TaskService:
    """
    Сервис для работы с задачами.

    Координирует несколько репозиториев:
    - Задачи
    - Теги (find-or-create по имени)
    - Связи задача-тег
    - Счётчик очков (начисление при завершении)

    Шаги каждой операции выполняются строго по порядку:
    валидация → проверка существования → изменение → побочный эффект.
    Все шаги идут в одной сессии; commit делает вызывающий код.
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса с несколькими репозиториями."""
        self.db = db
        self.task_repo = TaskRepository(db)
        self.tag_repo = TagRepository(db)
        self.task_tag_repo = TaskTagRepository(db)
        self.score_service = ScoreService(db)

    async def create_task(
        self,
        title: str,
        description: str | None = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: str | None = None,
        tag_names: list[str] | None = None,
    ) -> Task:
        """
        Создать новую задачу.

        Args:
            title: Название задачи
            description: Описание
            priority: Приоритет
            due_date: Дедлайн в ISO 8601
            tag_names: Названия тегов (несуществующие будут созданы)

        Returns:
            Созданная задача с тегами

        Raises:
            ValidationError: Пустое название, пустое имя тега или неверная дата

        Бизнес-правила:
        1. Статус новой задачи всегда pending
        2. Ничего не пишется, пока не пройдена валидация
        3. Теги обрабатываются в переданном порядке, повторы безвредны
        """
        # 1. ВАЛИДАЦИЯ
        if not title or not title.strip():
            raise ValidationError("Task title cannot be empty")

        parsed_due = parse_iso_datetime(due_date, "due_date") if due_date else None

        if any(not name or not name.strip() for name in tag_names or []):
            raise ValidationError("Tag name cannot be empty")

        # 2. СОЗДАНИЕ: статус не задаётся снаружи
        task = Task(
            title=title,
            description=description,
            status=TaskStatus.PENDING,
            priority=priority,
            due_date=parsed_due,
        )
        task = await self.task_repo.create(task)

        # 3. КООРДИНАЦИЯ: теги
        for tag_name in tag_names or []:
            tag = await self.tag_repo.get_or_create(tag_name)
            await self.task_tag_repo.add_if_missing(task.id, tag.id)

        logger.info(
            "Task created",
            extra={"task_id": task.id, "priority": task.priority.value, "tags": tag_names or []},
        )

        return await self.task_repo.get_by_id_full(task.id)

    async def get_task(self, task_id: int) -> Task:
        """
        Получить задачу по ID (вместе с тегами).

        Raises:
            NotFoundError: Если задача не найдена
        """
        task = await self.task_repo.get_by_id_full(task_id)
        if not task:
            raise NotFoundError(f"Task with ID {task_id} not found")
        return task

    async def list_tasks(
        self,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        tag_name: str | None = None,
        due_before: str | None = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> list[Task]:
        """
        Получить задачи с фильтрами.

        Args:
            status: Фильтр по статусу
            priority: Фильтр по приоритету
            tag_name: Оставить только задачи с этим тегом
            due_before: Дедлайн не позже (ISO 8601, включительно)
            limit: Размер страницы, 1..100

        Returns:
            Задачи, новые первыми

        Raises:
            ValidationError: limit вне диапазона или неверный формат due_before

        Фильтр по тегу применяется ПОСЛЕ limit: сначала берётся страница
        из limit задач, потом из неё убираются задачи без тега. Поэтому
        результат может быть короче limit, даже если подходящих задач
        в БД больше.
        """
        if not MIN_LIST_LIMIT <= limit <= MAX_LIST_LIMIT:
            raise ValidationError(
                f"limit must be between {MIN_LIST_LIMIT} and {MAX_LIST_LIMIT}, got {limit}"
            )

        parsed_due_before = parse_iso_datetime(due_before, "due_before") if due_before else None

        tasks = await self.task_repo.get_filtered(
            status=status,
            priority=priority,
            due_before=parsed_due_before,
            limit=limit,
        )

        if tag_name:
            tasks = [task for task in tasks if await self.task_repo.has_tag(task.id, tag_name)]

        return tasks

    async def list_all_tasks(self) -> list[Task]:
        """Все задачи с тегами, новые первыми (для выгрузки)."""
        return await self.task_repo.get_all_with_tags()

    async def update_task(
        self,
        task_id: int,
        title: str | None = None,
        description: str | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        due_date: str | None = None,
    ) -> Task:
        """
        Обновить задачу.

        Args:
            task_id: ID задачи
            title: Новое название
            description: Новое описание
            status: Новый статус
            priority: Новый приоритет
            due_date: Новый дедлайн (ISO 8601)

        Returns:
            Обновлённая задача

        Raises:
            NotFoundError: Задача не найдена
            ValidationError: Неверный формат даты или пустое название

        Бизнес-правила:
        1. Меняются только переданные поля, updated_at обновляется всегда
        2. Переход в completed из другого статуса начисляет очки
           по приоритету задачи (low=1, medium=3, high=5)
        3. Повторный completed ничего не начисляет
        4. Выход из completed очки не списывает
        """
        # 1. ПРОВЕРКА: Задача существует
        existing = await self.task_repo.get_by_id(task_id)
        if not existing:
            raise NotFoundError(f"Task with ID {task_id} not found")
        previous_status = existing.status

        # 2. ВАЛИДАЦИЯ
        if title is not None and not title.strip():
            raise ValidationError("Task title cannot be empty")

        parsed_due = parse_iso_datetime(due_date, "due_date") if due_date else None

        # 3. ОБНОВЛЕНИЕ: Собираем изменения
        updates: dict[str, Any] = {"updated_at": utc_now()}
        if title is not None:
            updates["title"] = title
        if description is not None:
            updates["description"] = description
        if status is not None:
            updates["status"] = status
        if priority is not None:
            updates["priority"] = priority
        if parsed_due is not None:
            updates["due_date"] = parsed_due

        task = await self.task_repo.update(task_id, **updates)

        # 4. ПОБОЧНЫЙ ЭФФЕКТ: очки за переход в completed
        if status == TaskStatus.COMPLETED and previous_status != TaskStatus.COMPLETED:
            points = await self.score_service.award_for_priority(task.priority)
            logger.info("Task completed", extra={"task_id": task_id, "points": points})

        return await self.task_repo.get_by_id_full(task_id)

    async def delete_task(self, task_id: int) -> bool:
        """
        Удалить задачу.

        Связи с тегами удаляет сама БД (ON DELETE CASCADE).

        Raises:
            NotFoundError: Задача не найдена
        """
        if not await self.task_repo.exists(task_id):
            raise NotFoundError(f"Task with ID {task_id} not found")

        deleted = await self.task_repo.delete(task_id)
        logger.info("Task deleted", extra={"task_id": task_id})
        return deleted
