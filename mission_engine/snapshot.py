"""Snapshot files: the tasks, quests and history a caller hands to the engine."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .errors import InvalidInput
from .models.quest import Quest, Scope
from .models.task import QuestHistory, Task
from .utils.datetime_utils import parse_timestamp


def _iso(value):
    return value.isoformat() if value is not None else None


def task_from_dict(data: Dict[str, Any]) -> Task:
    try:
        return Task(
            id=str(data['id']),
            size_points=int(data.get('size_points', 0)),
            urgency_weight=int(data.get('urgency_weight', 0)),
            status_category=data.get('status_category', 'backlog'),
            created_at=parse_timestamp(data['created_at']),
            deadline_at=parse_timestamp(data.get('deadline_at')),
            quest_id=data.get('quest_id'),
            was_dropped=bool(data.get('was_dropped', False)),
            title=data.get('title', ''),
            needs_info=bool(data.get('needs_info', False)),
            assignee_id=data.get('assignee_id'),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise InvalidInput(f"Malformed task {data.get('id', '?')}: {e}") from e


def task_to_dict(task: Task) -> Dict[str, Any]:
    return {
        'id': task.id,
        'title': task.title,
        'size_points': task.size_points,
        'urgency_weight': task.urgency_weight,
        'status_category': task.status_category.value,
        'created_at': _iso(task.created_at),
        'deadline_at': _iso(task.deadline_at),
        'quest_id': task.quest_id,
        'was_dropped': task.was_dropped,
        'needs_info': task.needs_info,
        'assignee_id': task.assignee_id,
    }


def quest_from_dict(data: Dict[str, Any]) -> Quest:
    try:
        return Quest(
            id=str(data['id']),
            scope=Scope(team_id=str(data['team_id']), sub_team_id=data.get('sub_team_id')),
            name=data.get('name', ''),
            start_date=parse_timestamp(data.get('start_date')),
            end_date=parse_timestamp(data.get('end_date')),
            is_active=bool(data.get('is_active', False)),
            is_archived=bool(data.get('is_archived', False)),
        )
    except (KeyError, ValueError, TypeError) as e:
        raise InvalidInput(f"Malformed quest {data.get('id', '?')}: {e}") from e


def history_from_dict(data: Dict[str, Any]) -> QuestHistory:
    try:
        return QuestHistory(
            quest_id=str(data['quest_id']),
            ended_at=parse_timestamp(data['ended_at']),
            tasks=[task_from_dict(t) for t in data.get('tasks', [])],
        )
    except (KeyError, ValueError, TypeError) as e:
        raise InvalidInput(f"Malformed history entry {data.get('quest_id', '?')}: {e}") from e


def quest_to_dict(quest: Quest) -> Dict[str, Any]:
    return {
        'id': quest.id,
        'team_id': quest.scope.team_id,
        'sub_team_id': quest.scope.sub_team_id,
        'name': quest.name,
        'start_date': _iso(quest.start_date),
        'end_date': _iso(quest.end_date),
        'is_active': quest.is_active,
        'is_archived': quest.is_archived,
    }


@dataclass
class Snapshot:
    """Everything one planning request needs."""

    analyst_count: int = 1
    tasks: List[Task] = field(default_factory=list)
    quests: List[Quest] = field(default_factory=list)
    history: List[QuestHistory] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        return cls(
            analyst_count=int(data.get('analyst_count', 1)),
            tasks=[task_from_dict(t) for t in data.get('tasks', [])],
            quests=[quest_from_dict(q) for q in data.get('quests', [])],
            history=[history_from_dict(h) for h in data.get('history', [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'analyst_count': self.analyst_count,
            'tasks': [task_to_dict(t) for t in self.tasks],
            'quests': [quest_to_dict(q) for q in self.quests],
            'history': [
                {
                    'quest_id': h.quest_id,
                    'ended_at': _iso(h.ended_at),
                    'tasks': [task_to_dict(t) for t in h.tasks],
                }
                for h in self.history
            ],
        }


def load_snapshot(path: str) -> Snapshot:
    """Load a snapshot from a YAML or JSON file."""
    snapshot_path = Path(path)

    if not snapshot_path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    with open(snapshot_path, 'r') as f:
        if snapshot_path.suffix.lower() in ['.yaml', '.yml']:
            data = yaml.safe_load(f)
        elif snapshot_path.suffix.lower() == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported snapshot file format: {snapshot_path.suffix}")

    return Snapshot.from_dict(data or {})
