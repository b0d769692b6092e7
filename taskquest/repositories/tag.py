"""Tag repository with specific queries."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Tag
from .base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """Репозиторий для работы с тегами."""

    def __init__(self, db: AsyncSession):
        super().__init__(Tag, db)

    async def get_by_name(self, name: str) -> Tag | None:
        """
        Получить тег по имени.

        Args:
            name: Имя тега (например, "urgent", "backend")

        Returns:
            Тег или None

        SQL эквивалент:
            SELECT * FROM tags WHERE name = {name};
        """
        result = await self.db.execute(select(Tag).where(Tag.name == name))
        return result.scalar_one_or_none()

    async def get_or_create(self, name: str) -> Tag:
        """
        Получить тег по имени или создать, если не существует.

        Args:
            name: Имя тега

        Returns:
            Существующий или новый тег (без цвета)

        Это read-then-write: два параллельных вызова могут оба не найти тег.
        Второй INSERT упрётся в UNIQUE(name) и получит IntegrityError,
        транзакция вызова откатится целиком - дубликата не будет.
        """
        tag = await self.get_by_name(name)

        if not tag:
            tag = await self.create(Tag(name=name))

        return tag

    async def get_all_ordered(self) -> list[Tag]:
        """
        Получить все теги, отсортированные по имени.

        SQL эквивалент:
            SELECT * FROM tags ORDER BY name ASC;
        """
        result = await self.db.execute(select(Tag).order_by(Tag.name.asc()))
        return list(result.scalars().all())
