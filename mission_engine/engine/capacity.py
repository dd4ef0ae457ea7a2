"""Sprint capacity planning."""

import math
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from loguru import logger

from ..errors import InvalidInput, ValidationError
from ..models.plan import CapacityPlan, ProposedTask, TaskAssignment
from ..models.task import QuestHistory, StatusCategory, Task
from ..policies.base import PriorityPolicy
from ..policies.eisenhower import EisenhowerPolicy
from ..utils.config import section
from .ranker import TaskRanker


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


class CapacityPlanner:
    """Proposes a priority-ordered backlog slice sized from past throughput."""

    def __init__(self, config: Optional[dict] = None, policy: Optional[PriorityPolicy] = None):
        """Initialize planner with configuration and an optional priority policy."""
        self.config = config or {}
        self.policy = policy or EisenhowerPolicy(self.config)
        self.ranker = TaskRanker()
        capacity_config = section(self.config, 'capacity')
        self.stretch_factor = capacity_config['stretch_factor']
        self.max_history_quests = capacity_config['max_history_quests']
        self.default_avg_xp = capacity_config['default_avg_xp']

    def plan(
        self,
        analyst_count: int,
        recent_quests: Sequence[QuestHistory],
        backlog: Iterable[Task],
        now: datetime,
    ) -> CapacityPlan:
        """Build a capacity plan for the next sprint."""
        if analyst_count is None or analyst_count < 0:
            raise InvalidInput(f"analyst_count must be non-negative, got {analyst_count}")
        analysts = max(1, analyst_count)

        history = sorted(recent_quests, key=lambda q: q.ended_at, reverse=True)
        history = history[:self.max_history_quests]
        historical_xp = [quest.done_xp for quest in history]

        if historical_xp:
            avg_xp_per_quest = sum(historical_xp) / len(historical_xp)
        else:
            avg_xp_per_quest = float(self.default_avg_xp)
        avg_xp_per_person = avg_xp_per_quest / analysts
        historical_max_xp = float(max(historical_xp, default=0)) or avg_xp_per_quest
        target_xp = round_half_up(historical_max_xp * self.stretch_factor)

        eligible = [task for task in backlog if task.is_backlog_candidate()]
        ranked = self.ranker.rank(self.policy.enrich_all(eligible, now))

        running_xp = 0
        proposed: List[ProposedTask] = []
        for enriched in ranked:
            selected = running_xp < target_xp
            if selected:
                running_xp += enriched.size_points
            proposed.append(ProposedTask(enriched=enriched, selected=selected))

        if not proposed:
            logger.info("No eligible backlog tasks; returning empty plan")

        plan = CapacityPlan(
            analyst_count=analysts,
            avg_xp_per_quest=avg_xp_per_quest,
            avg_xp_per_person=avg_xp_per_person,
            historical_max_xp=historical_max_xp,
            target_xp=target_xp,
            proposed_tasks=proposed,
            total_proposed_xp=running_xp,
            history_quest_ids=[quest.quest_id for quest in history],
        )

        logger.info(
            f"Capacity plan: target={target_xp} XP, proposed={running_xp} XP, "
            f"selected {len(plan.selected_tasks)}/{len(proposed)} tasks"
        )
        return plan

    def finalize(
        self,
        plan: CapacityPlan,
        quest_id: Optional[str],
        task_ids: Optional[Iterable[str]] = None,
    ) -> List[TaskAssignment]:
        """Turn the kept selection into assignments onto ``quest_id``.

        Without ``task_ids`` the plan's current selection is used.
        """
        if task_ids is None:
            ids = [p.id for p in plan.selected_tasks]
        else:
            ids = list(task_ids)

        if not quest_id or not ids:
            raise ValidationError("Must select a quest and at least one task")

        known = {p.id for p in plan.proposed_tasks}
        unknown = [task_id for task_id in ids if task_id not in known]
        if unknown:
            raise ValidationError(f"Tasks not part of the plan: {', '.join(map(str, unknown))}")

        logger.info(f"Finalizing {len(ids)} tasks onto quest {quest_id}")
        return [
            TaskAssignment(task_id=task_id, quest_id=quest_id, status_category=StatusCategory.ACTIVE)
            for task_id in ids
        ]
