"""Repository layer for data access."""

from .base import BaseRepository
from .score import ScoreRepository
from .tag import TagRepository
from .task import TaskRepository
from .task_tag import TaskTagRepository

__all__ = [
    "BaseRepository",
    "TaskRepository",
    "TagRepository",
    "TaskTagRepository",
    "ScoreRepository",
]
