"""Engine data models."""

from .plan import CapacityPlan, ProposedTask, TaskAssignment, WorkQueue
from .quest import (
    Quest,
    QuestState,
    QuestTransition,
    ReconcileResult,
    ScheduleConflict,
    Scope,
)
from .task import EnrichedTask, Quadrant, QuestHistory, StatusCategory, Task

__all__ = [
    'CapacityPlan',
    'EnrichedTask',
    'ProposedTask',
    'Quadrant',
    'Quest',
    'QuestHistory',
    'QuestState',
    'QuestTransition',
    'ReconcileResult',
    'ScheduleConflict',
    'Scope',
    'StatusCategory',
    'Task',
    'TaskAssignment',
    'WorkQueue',
]
