"""Mission prioritization and sprint capacity engine."""

from .engine import CapacityPlanner, QuestScheduler, QuestStore, TaskRanker, WorkQueueBuilder, rank
from .errors import (
    InvalidInput,
    MissionEngineError,
    PersistenceFailure,
    ScheduleConflictError,
    ValidationError,
)
from .policies import EisenhowerPolicy, PriorityPolicy

__version__ = "0.1.0"

__all__ = [
    'CapacityPlanner',
    'EisenhowerPolicy',
    'InvalidInput',
    'MissionEngineError',
    'PersistenceFailure',
    'PriorityPolicy',
    'QuestScheduler',
    'QuestStore',
    'ScheduleConflictError',
    'TaskRanker',
    'ValidationError',
    'WorkQueueBuilder',
    'rank',
]
