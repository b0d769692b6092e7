"""SQLAlchemy models for TaskQuest."""

from .base import Base, TimestampMixin
from .score import SCORE_AGGREGATE_ID, ScoreAggregate
from .tag import Tag
from .task import Task, TaskPriority, TaskStatus
from .task_tag import task_tags

__all__ = [
    "Base",
    "TimestampMixin",
    "Tag",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "task_tags",
    "ScoreAggregate",
    "SCORE_AGGREGATE_ID",
]
