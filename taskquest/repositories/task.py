"""Task queries: eager-loaded tags, filters, tag membership."""

from datetime import datetime

from sqlalchemy import Select, exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import Tag, Task, TaskPriority, TaskStatus, task_tags
from .base import BaseRepository

# id DESC - стабильный порядок для задач, созданных в одну микросекунду
NEWEST_FIRST = (Task.created_at.desc(), Task.id.desc())


class TaskRepository(BaseRepository[Task]):
    """
    Задачи всегда читаются вместе с тегами (selectinload).

    populate_existing=True перечитывает объекты, даже если они уже
    в identity map: связи могли поменяться через таблицу task_tags
    в обход relationship.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Task, db)

    @staticmethod
    def _with_tags() -> Select:
        return (
            select(Task)
            .options(selectinload(Task.tags))
            .execution_options(populate_existing=True)
        )

    async def get_by_id_full(self, id: int) -> Task | None:
        """Задача с тегами или None."""
        result = await self.db.execute(self._with_tags().where(Task.id == id))
        return result.scalar_one_or_none()

    async def get_filtered(
        self,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        due_before: datetime | None = None,
        limit: int = 50,
    ) -> list[Task]:
        """
        Задачи по фильтрам (AND), новые первыми.

        SQL эквивалент:
            SELECT * FROM tasks
            WHERE status = {status}            -- если указан
              AND priority = {priority}        -- если указан
              AND due_date <= {due_before}     -- включительно, если указан
            ORDER BY created_at DESC, id DESC
            LIMIT {limit};
        """
        query = self._with_tags()
        if status is not None:
            query = query.where(Task.status == status)
        if priority is not None:
            query = query.where(Task.priority == priority)
        if due_before is not None:
            query = query.where(Task.due_date <= due_before)

        result = await self.db.execute(query.order_by(*NEWEST_FIRST).limit(limit))
        return list(result.scalars().all())

    async def get_all_with_tags(self) -> list[Task]:
        """Все задачи, новые первыми (выгрузка GET /tasks)."""
        result = await self.db.execute(self._with_tags().order_by(*NEWEST_FIRST))
        return list(result.scalars().all())

    async def has_tag(self, task_id: int, tag_name: str) -> bool:
        """
        SQL эквивалент:
            SELECT EXISTS(
                SELECT 1 FROM task_tags
                JOIN tags ON tags.id = task_tags.tag_id
                WHERE task_tags.task_id = {task_id} AND tags.name = {tag_name}
            );
        """
        query = select(
            exists()
            .where(task_tags.c.task_id == task_id)
            .where(task_tags.c.tag_id == Tag.id)
            .where(Tag.name == tag_name)
        )
        result = await self.db.execute(query)
        return bool(result.scalar())
