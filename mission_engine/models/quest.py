"""Quest lifecycle models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from ..utils.datetime_utils import parse_timestamp


class QuestState(str, Enum):
    """Lifecycle state derived from a quest's dates and flags."""

    UNSCHEDULED = "unscheduled"
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    RECALLED = "recalled"
    ARCHIVED = "archived"


@dataclass(frozen=True)
class Scope:
    """Team (and optional sub-team) boundary for exclusivity rules."""

    team_id: str
    sub_team_id: Optional[str] = None

    def __str__(self) -> str:
        if self.sub_team_id:
            return f"{self.team_id}/{self.sub_team_id}"
        return self.team_id


@dataclass
class Quest:
    """A time-boxed container of tasks."""

    id: str
    scope: Scope
    name: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = False
    is_archived: bool = False

    def __post_init__(self):
        self.start_date = parse_timestamp(self.start_date)
        self.end_date = parse_timestamp(self.end_date)

    @property
    def is_open_ended(self) -> bool:
        return self.end_date is None


@dataclass(frozen=True)
class ScheduleConflict:
    """Structured overlap report naming the colliding quest."""

    quest_id: str
    quest_name: str
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    message: str

    def to_dict(self) -> dict:
        return {
            'quest_id': self.quest_id,
            'quest_name': self.quest_name,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'message': self.message,
        }


@dataclass(frozen=True)
class QuestTransition:
    """A single change to a quest's is_active flag."""

    quest_id: str
    was_active: bool
    is_active: bool
    reason: str


@dataclass
class ReconcileResult:
    """Outcome of reconciling one scope's quests against the clock."""

    scope: Scope
    quests: List[Quest]
    transitions: List[QuestTransition] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)

    @property
    def active_quest(self) -> Optional[Quest]:
        for quest in self.quests:
            if quest.is_active:
                return quest
        return None

    @property
    def fully_persisted(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            'scope': str(self.scope),
            'active_quest_id': self.active_quest.id if self.active_quest else None,
            'quests': [
                {'id': q.id, 'name': q.name, 'is_active': q.is_active, 'is_archived': q.is_archived}
                for q in self.quests
            ],
            'transitions': [
                {'quest_id': t.quest_id, 'is_active': t.is_active, 'reason': t.reason}
                for t in self.transitions
            ],
            'failures': list(self.failures),
        }
