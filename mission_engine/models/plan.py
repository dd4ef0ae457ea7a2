"""Capacity plan and work queue models."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List

from .task import EnrichedTask, StatusCategory


@dataclass(frozen=True)
class ProposedTask:
    """A ranked backlog task and whether the planner picked it."""

    enriched: EnrichedTask
    selected: bool

    @property
    def id(self) -> str:
        return self.enriched.id

    @property
    def xp(self) -> int:
        return self.enriched.size_points


@dataclass
class CapacityPlan:
    """Proposed sprint slice. Computed per request, never stored."""

    analyst_count: int
    avg_xp_per_quest: float
    avg_xp_per_person: float
    historical_max_xp: float
    target_xp: int
    proposed_tasks: List[ProposedTask] = field(default_factory=list)
    total_proposed_xp: int = 0
    history_quest_ids: List[str] = field(default_factory=list)

    @property
    def selected_tasks(self) -> List[ProposedTask]:
        return [p for p in self.proposed_tasks if p.selected]

    @property
    def is_empty(self) -> bool:
        return not self.proposed_tasks

    def with_selection(self, task_ids: Iterable[str]) -> "CapacityPlan":
        """Return a copy where exactly ``task_ids`` are selected."""
        wanted = set(task_ids)
        proposed = [replace(p, selected=p.id in wanted) for p in self.proposed_tasks]
        total = sum(p.xp for p in proposed if p.selected)
        return replace(self, proposed_tasks=proposed, total_proposed_xp=total)

    def to_dict(self) -> Dict[str, Any]:
        """Convert plan to dictionary for JSON export."""
        return {
            'team_capacity': {
                'analyst_count': self.analyst_count,
                'avg_xp_per_quest': self.avg_xp_per_quest,
                'avg_xp_per_person': self.avg_xp_per_person,
                'historical_max_xp': self.historical_max_xp,
                'target_xp': self.target_xp,
            },
            'history_quest_ids': list(self.history_quest_ids),
            'proposed_tasks': [
                {
                    'id': p.id,
                    'title': p.enriched.task.title,
                    'xp': p.xp,
                    'quadrant': p.enriched.quadrant.value,
                    'priority_score': p.enriched.priority_score,
                    'selected': p.selected,
                }
                for p in self.proposed_tasks
            ],
            'total_proposed_xp': self.total_proposed_xp,
        }

    def to_human_readable(self) -> str:
        """Generate human-readable summary."""
        lines = [
            "=== Quest Prep ===",
            f"Analysts: {self.analyst_count}",
            f"Avg XP per quest: {self.avg_xp_per_quest:.1f}",
            f"Avg XP per person: {self.avg_xp_per_person:.1f}",
            f"Historical max XP: {self.historical_max_xp:.1f}",
            f"Target XP: {self.target_xp}",
            "",
            "Proposed Tasks:",
        ]

        if not self.proposed_tasks:
            lines.append("  (backlog is empty)")

        for p in self.proposed_tasks:
            mark = "x" if p.selected else " "
            lines.append(
                f"  [{mark}] {p.id} {p.enriched.quadrant.value} "
                f"score={p.enriched.priority_score:.1f} xp={p.xp}"
            )

        lines.extend([
            "",
            f"Total proposed XP: {self.total_proposed_xp} / {self.target_xp}",
            "=" * 50,
        ])

        return "\n".join(lines)


@dataclass(frozen=True)
class TaskAssignment:
    """Write the caller applies when finalizing a plan."""

    task_id: str
    quest_id: str
    status_category: StatusCategory = StatusCategory.ACTIVE


@dataclass
class WorkQueue:
    """One person's ranked work, split into lanes."""

    now: List[EnrichedTask]
    next: List[EnrichedTask]
    waiting: List[EnrichedTask]
    wip: int
    wip_limit: int

    @property
    def can_start(self) -> bool:
        """Whether another task may be moved to active."""
        return self.wip < self.wip_limit

    def to_dict(self) -> Dict[str, Any]:
        def lane(tasks):
            return [
                {'id': t.id, 'quadrant': t.quadrant.value, 'priority_score': t.priority_score}
                for t in tasks
            ]

        return {
            'now': lane(self.now),
            'next': lane(self.next),
            'waiting': lane(self.waiting),
            'wip': self.wip,
            'wip_limit': self.wip_limit,
        }
