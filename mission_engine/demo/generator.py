"""Sample snapshot generator for demos and tests."""

import random
from datetime import datetime, timedelta
from typing import List, Optional

from ..models.quest import Quest, Scope
from ..models.task import QuestHistory, StatusCategory, Task
from ..snapshot import Snapshot
from ..utils.config import section


class SnapshotGenerator:
    """Generates deterministic backlogs and quest history."""

    def __init__(self, seed: int = 42, config: Optional[dict] = None):
        """Initialize generator with seed for reproducibility."""
        self.seed = seed
        self.random = random.Random(seed)
        self.config = config or {}
        self.size_scale = section(self.config, 'priority')['size_scale']

    def generate_tasks(self, count: int, now: datetime, prefix: str = "task") -> List[Task]:
        """Generate backlog tasks with a spread of sizes, urgencies and deadlines."""
        tasks = []

        for i in range(count):
            # Roughly a third of tasks carry a deadline within two weeks
            deadline_at = None
            if self.random.random() < 0.35:
                deadline_at = now + timedelta(hours=self.random.randint(-24, 14 * 24))

            tasks.append(Task(
                id=f"{prefix}_{i:03d}",
                title=f"Task {i}",
                size_points=self.random.choice(self.size_scale),
                urgency_weight=self.random.randint(0, 5),
                status_category=StatusCategory.BACKLOG,
                created_at=now - timedelta(days=self.random.randint(0, 30)),
                deadline_at=deadline_at,
                was_dropped=self.random.random() < 0.05,
            ))

        return tasks

    def generate_history(self, quest_count: int, now: datetime, sprint_days: int = 14) -> List[QuestHistory]:
        """Generate completed quests, most recent first."""
        history = []

        for q in range(quest_count):
            ended_at = now - timedelta(days=1 + q * sprint_days)
            tasks = self.generate_tasks(self.random.randint(4, 10), ended_at, prefix=f"done_{q}")
            for task in tasks:
                # Most work in a finished quest got done
                task.status_category = (
                    StatusCategory.DONE if self.random.random() < 0.8 else StatusCategory.VALIDATION
                )
                task.quest_id = f"quest_{q:02d}"
            history.append(QuestHistory(quest_id=f"quest_{q:02d}", ended_at=ended_at, tasks=tasks))

        return history

    def generate_snapshot(
        self,
        now: datetime,
        task_count: int = 25,
        quest_count: int = 3,
        analyst_count: int = 4,
        team_id: str = "team_1",
    ) -> Snapshot:
        """Generate a complete snapshot: backlog, history and quests."""
        history = self.generate_history(quest_count, now)
        scope = Scope(team_id=team_id)

        quests = [
            Quest(
                id=h.quest_id,
                scope=scope,
                name=f"Quest {h.quest_id}",
                start_date=h.ended_at - timedelta(days=13),
                end_date=h.ended_at,
                is_active=False,
            )
            for h in history
        ]
        # The current sprint is still marked inactive; reconciling deploys it
        quests.append(Quest(
            id="quest_current",
            scope=scope,
            name="Current quest",
            start_date=now - timedelta(hours=12),
            end_date=now + timedelta(days=12),
            is_active=False,
        ))

        return Snapshot(
            analyst_count=analyst_count,
            tasks=self.generate_tasks(task_count, now),
            quests=quests,
            history=history,
        )
