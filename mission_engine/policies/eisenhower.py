"""Eisenhower urgency/importance policy."""

import statistics
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

from loguru import logger

from ..errors import InvalidInput
from ..models.task import Quadrant, Task
from ..utils.datetime_utils import days_until, to_naive_utc
from .base import PriorityPolicy


class EisenhowerPolicy(PriorityPolicy):
    """Quadrant classification plus a weighted, monotonic priority score.

    A task is urgent when its declared urgency weight reaches the threshold
    or its deadline falls inside the urgency window (overdue tasks included),
    and important when its size reaches the importance threshold. The score is
    ``w_urgency * urgency + w_size * size + w_deadline * bonus`` where the
    deadline bonus is ``max(0, horizon - days_until_deadline)``.
    """

    def __init__(self, config: Optional[dict] = None):
        """Initialize Eisenhower policy."""
        super().__init__(config)
        cfg = self.priority_config
        self.urgent_threshold = cfg['urgent_threshold']
        self.urgency_window = timedelta(days=cfg['urgency_window_days'])
        self.importance_threshold = self._resolve_importance_threshold(cfg)
        self.deadline_horizon_days = cfg['deadline_horizon_days']
        self.weights: Dict[str, float] = cfg['weights']

    @staticmethod
    def _resolve_importance_threshold(cfg: dict) -> float:
        if cfg.get('importance_threshold') is not None:
            return cfg['importance_threshold']
        scale = cfg.get('size_scale') or []
        if not scale:
            raise InvalidInput("size_scale must not be empty when importance_threshold is unset")
        # median_low keeps the threshold on an actual configured size
        return statistics.median_low(sorted(scale))

    def is_urgent(self, task: Task, now: datetime) -> bool:
        if task.urgency_weight >= self.urgent_threshold:
            return True
        return task.deadline_at is not None and task.deadline_at - now <= self.urgency_window

    def is_important(self, task: Task) -> bool:
        return task.size_points >= self.importance_threshold

    def deadline_bonus(self, task: Task, now: datetime) -> float:
        """Bonus that grows as the deadline approaches; 0 without a deadline."""
        if task.deadline_at is None:
            return 0.0
        return max(0.0, self.deadline_horizon_days - days_until(task.deadline_at, now))

    def classify(self, task: Task, now: datetime) -> Tuple[Quadrant, float]:
        """Compute quadrant and priority score for a task."""
        if task.size_points < 0:
            raise InvalidInput(f"Task {task.id}: size_points must be non-negative, got {task.size_points}")
        if task.urgency_weight < 0:
            raise InvalidInput(f"Task {task.id}: urgency_weight must be non-negative, got {task.urgency_weight}")

        now = to_naive_utc(now)
        urgent = self.is_urgent(task, now)
        important = self.is_important(task)

        if urgent and important:
            quadrant = Quadrant.Q1
        elif important:
            quadrant = Quadrant.Q2
        elif urgent:
            quadrant = Quadrant.Q3
        else:
            quadrant = Quadrant.Q4

        score = (
            self.weights['urgency'] * task.urgency_weight
            + self.weights['size'] * task.size_points
            + self.weights['deadline'] * self.deadline_bonus(task, now)
        )

        logger.debug(f"Classified task {task.id}: {quadrant.value} score={score:.2f}")
        return quadrant, float(score)

    def get_policy_name(self) -> str:
        """Return policy name."""
        return "EISENHOWER"
