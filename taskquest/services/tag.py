"""Tag service with business logic."""

import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import ConflictError, NotFoundError, ValidationError
from ..core.logging import get_logger
from ..models import Tag
from ..repositories import TagRepository, TaskRepository, TaskTagRepository

logger = get_logger(__name__)

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


class TagService:
    """
    Сервис для работы с тегами и их привязкой к задачам.

    Теги уникальны по имени. Имя не нормализуется:
    "Urgent" и "urgent" - разные теги.
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса."""
        self.db = db
        self.tag_repo = TagRepository(db)
        self.task_repo = TaskRepository(db)
        self.task_tag_repo = TaskTagRepository(db)

    async def create_tag(self, name: str, color: str | None = None) -> Tag:
        """
        Создать новый тег.

        Args:
            name: Название тега
            color: Цвет в формате #RRGGBB (optional)

        Returns:
            Созданный тег

        Raises:
            ConflictError: Тег с таким именем уже есть
            ValidationError: Пустое имя или неверный формат цвета

        Бизнес-правила:
        1. Название уникально (проверка до вставки)
        2. Цвет, если передан, в формате #RRGGBB
        """
        # 1. ВАЛИДАЦИЯ: Название не пустое
        if not name or not name.strip():
            raise ValidationError("Tag name cannot be empty")

        # 2. ВАЛИДАЦИЯ: Проверка уникальности
        existing = await self.tag_repo.get_by_name(name)
        if existing:
            raise ConflictError(f"Tag '{name}' already exists")

        # 3. ВАЛИДАЦИЯ: Цвет
        if color and not self._is_valid_hex_color(color):
            raise ValidationError("Color must be a valid hex color code (e.g., #FF5733)")

        # 4. СОЗДАНИЕ: параллельный create_tag мог успеть раньше
        try:
            tag = await self.tag_repo.create(Tag(name=name, color=color or None))
        except IntegrityError:
            raise ConflictError(f"Tag '{name}' already exists") from None

        logger.info("Tag created", extra={"tag_id": tag.id, "tag_name": tag.name})
        return tag

    async def list_tags(self) -> list[Tag]:
        """Все теги, отсортированные по имени."""
        return await self.tag_repo.get_all_ordered()

    async def assign_tag(self, task_id: int, tag_name: str) -> bool:
        """
        Привязать тег к задаче.

        Args:
            task_id: ID задачи
            tag_name: Название тега (будет создан, если не существует)

        Returns:
            True если связь создана, False если тег уже был привязан

        Raises:
            NotFoundError: Задача не найдена
            ValidationError: Пустое имя тега
        """
        # 1. ПРОВЕРКА: Задача существует
        if not await self.task_repo.exists(task_id):
            raise NotFoundError(f"Task with ID {task_id} not found")

        if not tag_name or not tag_name.strip():
            raise ValidationError("Tag name cannot be empty")

        # 2. КООРДИНАЦИЯ: find-or-create тега
        tag = await self.tag_repo.get_or_create(tag_name)

        # 3. СВЯЗЬ: не дублируем
        created = await self.task_tag_repo.add_if_missing(task_id, tag.id)
        if created:
            logger.info("Tag assigned", extra={"task_id": task_id, "tag_name": tag_name})
        return created

    async def remove_tag(self, task_id: int, tag_name: str) -> bool:
        """
        Отвязать тег от задачи.

        Args:
            task_id: ID задачи
            tag_name: Название тега

        Returns:
            True если связь удалена, False если её не было

        Raises:
            NotFoundError: Тег не найден

        Существование задачи не проверяется: удаление несуществующей
        связи - успешный no-op.
        """
        tag = await self.tag_repo.get_by_name(tag_name)
        if not tag:
            raise NotFoundError(f"Tag '{tag_name}' not found")

        removed = await self.task_tag_repo.remove(task_id, tag.id)
        if removed:
            logger.info("Tag removed", extra={"task_id": task_id, "tag_name": tag_name})
        return removed

    # Вспомогательные методы (private)

    def _is_valid_hex_color(self, color: str) -> bool:
        """
        Проверить формат цвета.

        Примеры:
            "#FF0000" → True
            "red" → False
            "#FFF" → False
        """
        return bool(HEX_COLOR_PATTERN.fullmatch(color))
