"""Deterministic ordering of enriched tasks."""

from typing import Iterable, List

from ..models.task import EnrichedTask


def rank_key(task: EnrichedTask):
    """Sort key giving a total order over enriched tasks."""
    # Primary: priority score (higher first, so negate)
    # Secondary: quadrant (Q1 first)
    # Tertiary: created_at (oldest first)
    # Quaternary: id, so ties never depend on input order
    return (-task.priority_score, task.quadrant.rank, task.created_at, str(task.id))


class TaskRanker:
    """Orders enriched tasks by priority with deterministic tie-breaks."""

    def rank(self, tasks: Iterable[EnrichedTask]) -> List[EnrichedTask]:
        """Return a new list, highest priority first."""
        return sorted(tasks, key=rank_key)


def rank(tasks: Iterable[EnrichedTask]) -> List[EnrichedTask]:
    """Module-level shortcut for ``TaskRanker().rank``."""
    return TaskRanker().rank(tasks)
