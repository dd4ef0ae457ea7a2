"""Task, enriched task and quest history models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from ..utils.datetime_utils import parse_timestamp


class StatusCategory(str, Enum):
    """Workflow bucket a task's status belongs to."""

    BACKLOG = "backlog"
    ACTIVE = "active"
    VALIDATION = "validation"
    DONE = "done"
    ARCHIVED = "archived"


class Quadrant(str, Enum):
    """Eisenhower quadrant. Q1 is the highest priority."""

    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"

    @property
    def rank(self) -> int:
        return int(self.value[1])


@dataclass
class Task:
    """A unit of work as supplied by the surrounding application."""

    id: str
    size_points: int
    urgency_weight: int
    status_category: StatusCategory
    created_at: datetime
    deadline_at: Optional[datetime] = None
    quest_id: Optional[str] = None
    was_dropped: bool = False
    title: str = ""
    needs_info: bool = False
    assignee_id: Optional[str] = None

    def __post_init__(self):
        """Accept plain strings for the status category and timestamps."""
        if not isinstance(self.status_category, StatusCategory):
            self.status_category = StatusCategory(self.status_category)
        self.created_at = parse_timestamp(self.created_at)
        self.deadline_at = parse_timestamp(self.deadline_at)

    def is_backlog_candidate(self) -> bool:
        """True when the task can be proposed for the next sprint."""
        return (
            self.status_category == StatusCategory.BACKLOG
            and self.quest_id is None
            and not self.was_dropped
        )


@dataclass(frozen=True)
class EnrichedTask:
    """Task plus its computed quadrant and priority score. Never persisted."""

    task: Task
    quadrant: Quadrant
    priority_score: float

    @property
    def id(self) -> str:
        return self.task.id

    @property
    def size_points(self) -> int:
        return self.task.size_points

    @property
    def created_at(self) -> datetime:
        return self.task.created_at


@dataclass
class QuestHistory:
    """A completed quest and the tasks it contained."""

    quest_id: str
    ended_at: datetime
    tasks: List[Task] = field(default_factory=list)

    def __post_init__(self):
        self.ended_at = parse_timestamp(self.ended_at)

    @property
    def done_xp(self) -> int:
        """Sum of XP over the quest's finished, non-dropped tasks."""
        return sum(
            t.size_points
            for t in self.tasks
            if t.status_category == StatusCategory.DONE and not t.was_dropped
        )
