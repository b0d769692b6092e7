"""Score aggregate model."""

from sqlalchemy import CheckConstraint, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin

# Единственная строка агрегата живёт под этим ключом
SCORE_AGGREGATE_ID = 1


class ScoreAggregate(Base, TimestampMixin):
    """
    Глобальный счётчик очков (один на всё приложение).

    Создаётся лениво при первом чтении или начислении,
    total только растёт.
    """

    __tablename__ = "score_aggregate"
    __table_args__ = (CheckConstraint("total >= 0", name="ck_score_total_non_negative"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    total: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<ScoreAggregate(id={self.id}, total={self.total})>"
