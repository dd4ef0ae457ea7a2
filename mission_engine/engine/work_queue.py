"""Personal work queue ("my work")."""

from datetime import datetime
from typing import Iterable, Optional

from loguru import logger

from ..models.plan import WorkQueue
from ..models.task import StatusCategory, Task
from ..policies.base import PriorityPolicy
from ..policies.eisenhower import EisenhowerPolicy
from ..utils.config import section
from .ranker import TaskRanker


class WorkQueueBuilder:
    """Ranks one person's tasks into now / next / waiting lanes."""

    def __init__(self, config: Optional[dict] = None, policy: Optional[PriorityPolicy] = None):
        self.config = config or {}
        self.policy = policy or EisenhowerPolicy(self.config)
        self.ranker = TaskRanker()
        queue_config = section(self.config, 'work_queue')
        self.now_size = queue_config['now_size']
        self.next_size = queue_config['next_size']
        self.wip_limit = queue_config['wip_limit']

    def build(self, tasks: Iterable[Task], now: datetime) -> WorkQueue:
        open_tasks = [
            t for t in tasks
            if t.status_category not in (StatusCategory.ARCHIVED, StatusCategory.DONE)
        ]
        ranked = self.ranker.rank(self.policy.enrich_all(open_tasks, now))

        waiting = [t for t in ranked if t.task.needs_info]
        workable = [t for t in ranked if not t.task.needs_info]
        wip = sum(1 for t in workable if t.task.status_category == StatusCategory.ACTIVE)

        queue = WorkQueue(
            now=workable[:self.now_size],
            next=workable[self.now_size:self.now_size + self.next_size],
            waiting=waiting,
            wip=wip,
            wip_limit=self.wip_limit,
        )
        logger.debug(f"Work queue: {len(queue.now)} now, {len(queue.next)} next, "
                     f"{len(waiting)} waiting, wip {wip}/{self.wip_limit}")
        return queue
