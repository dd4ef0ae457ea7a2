"""Base priority policy interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from ..models.task import EnrichedTask, Quadrant, Task
from ..utils.config import section


class PriorityPolicy(ABC):
    """Abstract base class for task priority policies."""

    def __init__(self, config: Optional[dict] = None):
        """Initialize policy with configuration."""
        self.config = config or {}
        self.priority_config = section(self.config, 'priority')

    @abstractmethod
    def classify(self, task: Task, now: datetime) -> Tuple[Quadrant, float]:
        """Return the task's quadrant and priority score at ``now``."""
        pass

    @abstractmethod
    def get_policy_name(self) -> str:
        """Return the name of this policy."""
        pass

    def enrich(self, task: Task, now: datetime) -> EnrichedTask:
        """Attach quadrant and score to a task."""
        quadrant, score = self.classify(task, now)
        return EnrichedTask(task=task, quadrant=quadrant, priority_score=score)

    def enrich_all(self, tasks: Iterable[Task], now: datetime) -> List[EnrichedTask]:
        """Enrich every non-dropped task."""
        return [self.enrich(task, now) for task in tasks if not task.was_dropped]
