"""Quest lifecycle: overlap validation, lazy activation and exclusivity."""

from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from loguru import logger

from ..errors import InvalidInput, PersistenceFailure, ScheduleConflictError
from ..models.quest import (
    Quest,
    QuestState,
    QuestTransition,
    ReconcileResult,
    ScheduleConflict,
    Scope,
)
from ..utils.datetime_utils import to_naive_utc, windows_overlap


class QuestStore(ABC):
    """Write side of the caller's quest storage."""

    @abstractmethod
    def set_active(self, quest_id: str, is_active: bool) -> None:
        """Persist a quest's is_active flag. Raise PersistenceFailure on error."""
        pass


class QuestScheduler:
    """Derives quest state from dates and keeps one active quest per scope.

    Everything except ``persist`` is pure: quests are never mutated, updated
    copies are returned inside a ``ReconcileResult``.
    """

    def state_of(self, quest: Quest, now: datetime) -> QuestState:
        now = to_naive_utc(now)
        if quest.is_archived:
            return QuestState.ARCHIVED
        if quest.start_date is None:
            return QuestState.UNSCHEDULED
        if now < quest.start_date:
            return QuestState.SCHEDULED
        if quest.end_date is not None and quest.end_date < now:
            return QuestState.RECALLED
        return QuestState.ACTIVE

    # --- overlap -----------------------------------------------------------

    def validate_overlap(
        self,
        scope: Scope,
        start: Optional[datetime],
        end: Optional[datetime],
        quests: Iterable[Quest],
        exclude_id: Optional[str] = None,
    ) -> Optional[ScheduleConflict]:
        """Return the first quest whose window collides with ``[start, end]``.

        Boundaries are inclusive and a missing end is open-ended. Archived and
        unscheduled quests never collide. ``None`` means the window is free.
        """
        start, end = to_naive_utc(start), to_naive_utc(end)
        if start is None:
            return None
        if end is not None and end < start:
            raise InvalidInput(f"Quest window ends ({end.isoformat()}) before it starts ({start.isoformat()})")

        candidates = sorted(
            (
                q for q in quests
                if q.scope == scope
                and not q.is_archived
                and q.start_date is not None
                and (exclude_id is None or q.id != exclude_id)
            ),
            key=lambda q: (q.start_date, str(q.id)),
        )

        for quest in candidates:
            if windows_overlap(start, end, quest.start_date, quest.end_date):
                logger.debug(f"Window {start} - {end} collides with quest {quest.id} in {scope}")
                return ScheduleConflict(
                    quest_id=quest.id,
                    quest_name=quest.name,
                    start_date=quest.start_date,
                    end_date=quest.end_date,
                    message=f'Schedule overlaps with existing quest: "{quest.name or quest.id}".',
                )
        return None

    def check_overlap(
        self,
        scope: Scope,
        start: Optional[datetime],
        end: Optional[datetime],
        quests: Iterable[Quest],
        exclude_id: Optional[str] = None,
    ) -> None:
        """Like ``validate_overlap`` but raises ``ScheduleConflictError``."""
        conflict = self.validate_overlap(scope, start, end, quests, exclude_id)
        if conflict is not None:
            raise ScheduleConflictError(conflict)

    def validate_update(
        self,
        quest: Quest,
        start: Optional[datetime],
        end: Optional[datetime],
        quests: Iterable[Quest],
    ) -> Optional[ScheduleConflict]:
        """Re-validate only when an update moves either date."""
        start, end = to_naive_utc(start), to_naive_utc(end)
        if start == quest.start_date and end == quest.end_date:
            return None
        return self.validate_overlap(quest.scope, start, end, quests, exclude_id=quest.id)

    # --- activation --------------------------------------------------------

    def reconcile(self, scope: Scope, quests: Iterable[Quest], now: datetime) -> ReconcileResult:
        """Re-derive every scoped quest's is_active flag from the clock."""
        scoped = [q for q in quests if q.scope == scope]
        desired: Dict[str, bool] = {}
        reasons: Dict[str, str] = {}

        for quest in scoped:
            state = self.state_of(quest, now)
            if state == QuestState.UNSCHEDULED:
                # no dates to drive it; keep the manual flag
                desired[quest.id] = quest.is_active
                reasons[quest.id] = "manual"
            else:
                desired[quest.id] = state == QuestState.ACTIVE
                reasons[quest.id] = {
                    QuestState.ARCHIVED: "archived",
                    QuestState.SCHEDULED: "waiting",
                    QuestState.RECALLED: "recalled",
                    QuestState.ACTIVE: "deployed",
                }[state]

        winner = self._pick_active(scoped, desired)
        for quest in scoped:
            if desired[quest.id] and quest is not winner:
                desired[quest.id] = False
                reasons[quest.id] = "superseded"

        result = self._apply(scope, scoped, desired, reasons)
        if result.transitions:
            logger.info(f"Reconciled {scope}: {len(result.transitions)} quest(s) changed")
        return result

    def _pick_active(self, quests: List[Quest], desired: Dict[str, bool]) -> Optional[Quest]:
        """Choose the single quest allowed to stay active."""
        dated = [
            q for q in quests
            if desired[q.id] and q.start_date is not None
        ]
        if dated:
            # latest start wins, ties by id
            return max(dated, key=lambda q: (q.start_date, str(q.id)))
        manual = [q for q in quests if desired[q.id]]
        if manual:
            return max(manual, key=lambda q: str(q.id))
        return None

    def activate(self, scope: Scope, quests: Iterable[Quest], quest_id: str) -> ReconcileResult:
        """Explicitly activate one quest, deactivating every other in scope."""
        scoped = [q for q in quests if q.scope == scope]
        target = self._find(scoped, quest_id, scope)
        if target.is_archived:
            raise InvalidInput(f"Quest {quest_id} is archived and cannot be activated")

        desired = {q.id: q.id == quest_id for q in scoped}
        reasons = {q.id: ("activated" if q.id == quest_id else "superseded") for q in scoped}
        return self._apply(scope, scoped, desired, reasons)

    def deactivate(self, scope: Scope, quests: Iterable[Quest], quest_id: str) -> ReconcileResult:
        """Explicitly deactivate one quest."""
        scoped = [q for q in quests if q.scope == scope]
        self._find(scoped, quest_id, scope)

        desired = {q.id: (q.is_active and q.id != quest_id) for q in scoped}
        reasons = {q.id: "deactivated" for q in scoped}
        return self._apply(scope, scoped, desired, reasons)

    @staticmethod
    def _find(quests: List[Quest], quest_id: str, scope: Scope) -> Quest:
        for quest in quests:
            if quest.id == quest_id:
                return quest
        raise InvalidInput(f"Quest {quest_id} not found in scope {scope}")

    @staticmethod
    def _apply(
        scope: Scope,
        quests: List[Quest],
        desired: Dict[str, bool],
        reasons: Dict[str, str],
    ) -> ReconcileResult:
        updated: List[Quest] = []
        transitions: List[QuestTransition] = []
        for quest in quests:
            flag = desired[quest.id]
            if flag != quest.is_active:
                transitions.append(QuestTransition(
                    quest_id=quest.id,
                    was_active=quest.is_active,
                    is_active=flag,
                    reason=reasons[quest.id],
                ))
                updated.append(replace(quest, is_active=flag))
            else:
                updated.append(quest)
        return ReconcileResult(scope=scope, quests=updated, transitions=transitions)

    # --- write-back --------------------------------------------------------

    def persist(self, result: ReconcileResult, store: QuestStore) -> ReconcileResult:
        """Write transitions through ``store``; failures are recorded, not raised.

        Deactivations are written before the activation so a storage-level
        single-active constraint never sees two active quests.
        """
        ordered = sorted(result.transitions, key=lambda t: t.is_active)
        for transition in ordered:
            try:
                store.set_active(transition.quest_id, transition.is_active)
            except PersistenceFailure as e:
                logger.warning(
                    f"Failed to persist is_active={transition.is_active} for quest "
                    f"{transition.quest_id}: {e}; will retry on next read"
                )
                result.failures.append(transition.quest_id)
        return result

    def reconcile_and_persist(
        self,
        scope: Scope,
        quests: Iterable[Quest],
        now: datetime,
        store: QuestStore,
    ) -> ReconcileResult:
        """Reconcile, then write back best-effort. Always returns the computed state."""
        return self.persist(self.reconcile(scope, quests, now), store)
