"""Planning and scheduling engines."""

from .capacity import CapacityPlanner
from .quest_scheduler import QuestScheduler, QuestStore
from .ranker import TaskRanker, rank
from .work_queue import WorkQueueBuilder

__all__ = [
    'CapacityPlanner',
    'QuestScheduler',
    'QuestStore',
    'TaskRanker',
    'WorkQueueBuilder',
    'rank',
]
