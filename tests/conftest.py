"""Shared pytest fixtures for the engine tests."""

from datetime import datetime, timedelta
from typing import Dict, List, Set, Tuple

import pytest

from mission_engine.engine.quest_scheduler import QuestStore
from mission_engine.errors import PersistenceFailure
from mission_engine.models.quest import Quest, Scope
from mission_engine.models.task import StatusCategory, Task
from mission_engine.policies.eisenhower import EisenhowerPolicy

NOW = datetime(2024, 1, 10, 9, 0)


def make_task(task_id: str, size: int = 10, urgency: int = 0, **kwargs) -> Task:
    kwargs.setdefault('status_category', StatusCategory.BACKLOG)
    kwargs.setdefault('created_at', NOW - timedelta(days=1))
    return Task(id=task_id, size_points=size, urgency_weight=urgency, **kwargs)


def make_quest(quest_id: str, start=None, end=None, scope=None, name=None, **kwargs) -> Quest:
    return Quest(
        id=quest_id,
        scope=scope or Scope(team_id="team_1"),
        name=name or f"Quest {quest_id}",
        start_date=start,
        end_date=end,
        **kwargs,
    )


# --- A tiny in-memory stub store just for unit tests ------------------------

class StubQuestStore(QuestStore):
    def __init__(self, failing: Set[str] = None):
        self.failing = failing or set()
        self.writes: List[Tuple[str, bool]] = []
        self.flags: Dict[str, bool] = {}

    def set_active(self, quest_id: str, is_active: bool) -> None:
        if quest_id in self.failing:
            raise PersistenceFailure(f"write to quest {quest_id} timed out")
        self.writes.append((quest_id, is_active))
        self.flags[quest_id] = is_active


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def scope() -> Scope:
    return Scope(team_id="team_1")


@pytest.fixture()
def policy() -> EisenhowerPolicy:
    return EisenhowerPolicy()


@pytest.fixture()
def store() -> StubQuestStore:
    return StubQuestStore()
