"""Service layer with business logic."""

from .reward import RewardService
from .score import POINTS_BY_PRIORITY, ScoreService
from .tag import TagService
from .task import TaskService

__all__ = [
    "TaskService",
    "TagService",
    "ScoreService",
    "RewardService",
    "POINTS_BY_PRIORITY",
]
