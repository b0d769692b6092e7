"""Repository for the task-tag association table."""

from sqlalchemy import and_, delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import task_tags


class TaskTagRepository:
    """
    Репозиторий для связей задача-тег.

    У связи нет своей модели и своего ID: это просто пара
    (task_id, tag_id) в таблице task_tags, поэтому репозиторий
    работает с Core-таблицей, а не наследует BaseRepository.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def exists(self, task_id: int, tag_id: int) -> bool:
        """
        Проверить, есть ли связь.

        SQL эквивалент:
            SELECT 1 FROM task_tags WHERE task_id = {task_id} AND tag_id = {tag_id} LIMIT 1;
        """
        result = await self.db.execute(
            select(task_tags.c.task_id)
            .where(and_(task_tags.c.task_id == task_id, task_tags.c.tag_id == tag_id))
            .limit(1)
        )
        return result.first() is not None

    async def add(self, task_id: int, tag_id: int) -> None:
        """
        Создать связь.

        SQL эквивалент:
            INSERT INTO task_tags (task_id, tag_id, created_at) VALUES (...);
        """
        await self.db.execute(insert(task_tags).values(task_id=task_id, tag_id=tag_id))

    async def add_if_missing(self, task_id: int, tag_id: int) -> bool:
        """
        Создать связь, если её ещё нет.

        Returns:
            True если связь создана, False если уже была
        """
        if await self.exists(task_id, tag_id):
            return False
        await self.add(task_id, tag_id)
        return True

    async def remove(self, task_id: int, tag_id: int) -> bool:
        """
        Удалить связь.

        Returns:
            True если строка удалена, False если связи не было

        SQL эквивалент:
            DELETE FROM task_tags WHERE task_id = {task_id} AND tag_id = {tag_id};
        """
        result = await self.db.execute(
            delete(task_tags).where(
                and_(task_tags.c.task_id == task_id, task_tags.c.tag_id == tag_id)
            )
        )
        return result.rowcount > 0

    async def get_tag_ids(self, task_id: int) -> list[int]:
        """
        Получить ID всех тегов задачи.

        SQL эквивалент:
            SELECT tag_id FROM task_tags WHERE task_id = {task_id};
        """
        result = await self.db.execute(
            select(task_tags.c.tag_id).where(task_tags.c.task_id == task_id)
        )
        return list(result.scalars().all())
