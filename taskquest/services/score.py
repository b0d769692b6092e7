"""Score service: gamification points."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.logging import get_logger
from ..models import TaskPriority
from ..repositories import ScoreRepository

logger = get_logger(__name__)

# Сколько очков даёт завершение задачи с данным приоритетом
POINTS_BY_PRIORITY: dict[TaskPriority, int] = {
    TaskPriority.LOW: 1,
    TaskPriority.MEDIUM: 3,
    TaskPriority.HIGH: 5,
}


class ScoreService:
    """
    Сервис для работы с глобальным счётчиком очков.

    Бизнес-правила:
    1. Счётчик один на всё приложение и создаётся лениво
    2. Очки только начисляются, никогда не списываются
    """

    def __init__(self, db: AsyncSession):
        """Инициализация сервиса."""
        self.db = db
        self.score_repo = ScoreRepository(db)

    async def get_score(self) -> int:
        """Текущее количество очков (создаёт счётчик при первом вызове)."""
        score = await self.score_repo.get_or_create()
        return score.total

    @staticmethod
    def points_for(priority: TaskPriority | str) -> int:
        """
        Очки за завершение задачи с данным приоритетом.

        Неизвестный приоритет даёт 0.

        Пример:
            ScoreService.points_for("high")  # 5
        """
        try:
            return POINTS_BY_PRIORITY[TaskPriority(priority)]
        except ValueError:
            return 0

    async def award_for_priority(self, priority: TaskPriority | str) -> int:
        """
        Начислить очки за завершённую задачу.

        Args:
            priority: Приоритет завершённой задачи

        Returns:
            Сколько очков начислено (0 - ничего не записано)
        """
        points = self.points_for(priority)
        if points <= 0:
            return 0

        total = await self.score_repo.add_points(points)
        logger.info("Points awarded", extra={"points": points, "total_points": total})
        return points
