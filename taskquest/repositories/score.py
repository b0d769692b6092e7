"""Score aggregate repository."""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import SCORE_AGGREGATE_ID, ScoreAggregate
from ..models.base import utc_now
from .base import BaseRepository


class ScoreRepository(BaseRepository[ScoreAggregate]):
    """
    Репозиторий для глобального счётчика очков.

    Агрегат - это одна строка с заранее известным ключом
    SCORE_AGGREGATE_ID, а не синглтон в памяти процесса.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(ScoreAggregate, db)

    async def get_or_create(self) -> ScoreAggregate:
        """
        Получить строку счётчика, создав её с total=0 при первом обращении.

        SQL эквивалент:
            SELECT * FROM score_aggregate WHERE id = 1;
            -- если пусто:
            INSERT INTO score_aggregate (id, total) VALUES (1, 0);
        """
        # populate_existing: total меняется UPDATE-ом мимо identity map
        result = await self.db.execute(
            select(ScoreAggregate)
            .where(ScoreAggregate.id == SCORE_AGGREGATE_ID)
            .execution_options(populate_existing=True)
        )
        score = result.scalar_one_or_none()

        if not score:
            score = await self.create(ScoreAggregate(id=SCORE_AGGREGATE_ID, total=0))

        return score

    async def add_points(self, points: int) -> int:
        """
        Атомарно увеличить счётчик.

        Инкремент выполняется одним UPDATE на стороне БД, поэтому два
        параллельных начисления не теряют друг друга (в отличие от
        read-modify-write в Python).

        Args:
            points: Сколько очков добавить (> 0)

        Returns:
            Новое значение total

        SQL эквивалент:
            UPDATE score_aggregate
            SET total = total + {points}, updated_at = now()
            WHERE id = 1;
        """
        await self.get_or_create()

        await self.db.execute(
            update(ScoreAggregate)
            .where(ScoreAggregate.id == SCORE_AGGREGATE_ID)
            .values(total=ScoreAggregate.total + points, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )

        result = await self.db.execute(
            select(ScoreAggregate.total).where(ScoreAggregate.id == SCORE_AGGREGATE_ID)
        )
        return result.scalar_one()
