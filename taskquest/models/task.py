"""Task model."""

import enum
from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Хранить в БД значения ("in-progress"), а не имена (IN_PROGRESS)."""
    return [member.value for member in enum_cls]


class TaskStatus(str, enum.Enum):
    """Task status enum."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, enum.Enum):
    """Task priority enum."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(Base, TimestampMixin):
    """Task model: единица работы со статусом, приоритетом и дедлайном."""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Task properties
    status: Mapped[TaskStatus] = mapped_column(
        SQLEnum(TaskStatus, native_enum=False, values_callable=_enum_values),
        default=TaskStatus.PENDING,
        nullable=False,
        index=True,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        SQLEnum(TaskPriority, native_enum=False, values_callable=_enum_values),
        default=TaskPriority.MEDIUM,
        nullable=False,
        index=True,
    )
    due_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, index=True)

    # Tags relationship (many-to-many)
    # passive_deletes - строки task_tags удаляет сама БД (ON DELETE CASCADE)
    tags: Mapped[list["Tag"]] = relationship(
        "Tag",
        secondary="task_tags",
        back_populates="tasks",
        order_by="Tag.name",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{self.title}', status={self.status.value})>"
