"""Generic repository: statement-level access to one mapped table."""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Общие операции для моделей с целочисленным первичным ключом `id`.

    Репозиторий не коммитит: изменения уходят в БД через flush(),
    а commit/rollback делает владелец сессии (один раз на вызов инструмента).

    Пример:
        repo = BaseRepository[Tag](Tag, db)
        tag = await repo.create(Tag(name="urgent"))
        await repo.exists(tag.id)  # True
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def create(self, obj: ModelType) -> ModelType:
        """
        Вставить объект и вернуть его с ID и значениями по умолчанию.

        SQL эквивалент:
            INSERT INTO table (...) VALUES (...) RETURNING *;
        """
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def get_by_id(self, id: int) -> ModelType | None:
        """
        SQL эквивалент:
            SELECT * FROM table WHERE id = {id};
        """
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def exists(self, id: int) -> bool:
        """
        Проверить наличие строки, не загружая объект.

        SQL эквивалент:
            SELECT EXISTS(SELECT 1 FROM table WHERE id = {id});
        """
        result = await self.db.execute(select(exists().where(self.model.id == id)))
        return bool(result.scalar())

    async def update(self, id: int, **fields: Any) -> ModelType | None:
        """
        Изменить переданные поля строки.

        Args:
            id: Первичный ключ
            **fields: Новые значения (title="...", status=TaskStatus.COMPLETED)

        Returns:
            Обновлённый объект или None, если строки нет

        Raises:
            AttributeError: Поле не существует в модели
        """
        obj = await self.get_by_id(id)
        if obj is None:
            return None

        for name, value in fields.items():
            if not hasattr(self.model, name):
                raise AttributeError(f"{self.model.__name__} has no field '{name}'")
            setattr(obj, name, value)

        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, id: int) -> bool:
        """
        Удалить строку по ID.

        Returns:
            True если строка была, False если нет
        """
        result = await self.db.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0

    async def count(self) -> int:
        """
        SQL эквивалент:
            SELECT COUNT(*) FROM table;
        """
        result = await self.db.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()
