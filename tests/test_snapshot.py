import copy
import json
import sys
from datetime import datetime, timezone

import pytest
from loguru import logger

import main
from mission_engine.demo.generator import SnapshotGenerator
from mission_engine.engine.quest_scheduler import QuestScheduler
from mission_engine.errors import InvalidInput
from mission_engine.models.quest import Scope
from mission_engine.models.task import StatusCategory
from mission_engine.snapshot import Snapshot, load_snapshot
from mission_engine.utils.config import get_default_config
from mission_engine.utils.datetime_utils import parse_timestamp

SNAPSHOT = {
    'analyst_count': 2,
    'tasks': [
        {
            'id': 't1',
            'title': 'Ship invoices',
            'size_points': 20,
            'urgency_weight': 4,
            'status_category': 'backlog',
            'created_at': '2024-01-02T10:00:00',
            'deadline_at': '2024-01-12T00:00:00',
        },
        {'id': 't2', 'size_points': 5, 'urgency_weight': 0, 'created_at': '2024-01-03T10:00:00'},
    ],
    'quests': [
        {'id': 'q1', 'team_id': 'team_1', 'name': 'Sprint 1', 'start_date': '2024-01-01', 'end_date': '2024-01-14'},
    ],
    'history': [
        {
            'quest_id': 'q0',
            'ended_at': '2023-12-31',
            'tasks': [{'id': 'd1', 'size_points': 40, 'status_category': 'done', 'created_at': '2023-12-20'}],
        },
    ],
}


def test_snapshot_from_dict():
    snapshot = Snapshot.from_dict(SNAPSHOT)

    assert snapshot.analyst_count == 2
    task = snapshot.tasks[0]
    assert task.status_category is StatusCategory.BACKLOG
    assert task.deadline_at == datetime(2024, 1, 12)
    assert snapshot.tasks[1].deadline_at is None
    assert snapshot.quests[0].scope == Scope(team_id="team_1")
    assert snapshot.quests[0].start_date == datetime(2024, 1, 1)
    assert snapshot.history[0].done_xp == 40


def test_load_snapshot_json_and_yaml(tmp_path):
    json_path = tmp_path / "snap.json"
    json_path.write_text(json.dumps(SNAPSHOT))
    assert [t.id for t in load_snapshot(str(json_path)).tasks] == ["t1", "t2"]

    yaml_path = tmp_path / "snap.yaml"
    yaml_path.write_text(
        "analyst_count: 1\n"
        "quests:\n"
        "  - {id: q1, team_id: team_1, start_date: 2024-01-01, end_date: 2024-01-14}\n"
    )
    assert load_snapshot(str(yaml_path)).quests[0].end_date == datetime(2024, 1, 14)


def test_malformed_task_is_invalid():
    with pytest.raises(InvalidInput):
        Snapshot.from_dict({'tasks': [{'id': 'x', 'size_points': 3}]})


def test_generator_is_deterministic():
    now = datetime(2024, 3, 1, 9, 0)
    first = SnapshotGenerator(seed=7).generate_snapshot(now).to_dict()
    second = SnapshotGenerator(seed=7).generate_snapshot(now).to_dict()
    assert first == second


def test_generated_quests_do_not_overlap_and_current_deploys():
    now = datetime(2024, 3, 1, 9, 0)
    snapshot = SnapshotGenerator(seed=3).generate_snapshot(now)
    scheduler = QuestScheduler()

    for quest in snapshot.quests:
        assert scheduler.validate_overlap(quest.scope, quest.start_date, quest.end_date,
                                          snapshot.quests, exclude_id=quest.id) is None

    result = scheduler.reconcile(Scope(team_id="team_1"), snapshot.quests, now)
    assert result.active_quest.id == "quest_current"


def test_snapshot_round_trips_through_disk(tmp_path):
    now = datetime(2024, 3, 1, 9, 0)
    out = tmp_path / "snap.json"
    generated = main.run_generate(get_default_config(), str(out), now, seed=11)
    assert load_snapshot(str(out)).to_dict() == generated.to_dict()


def test_cli_plan_prints_json(tmp_path, capsys):
    path = tmp_path / "snap.json"
    path.write_text(json.dumps(SNAPSHOT))

    plan = main.run_plan(get_default_config(), str(path), datetime(2024, 1, 10))
    printed = json.loads(capsys.readouterr().out)

    assert printed['team_capacity']['target_xp'] == plan.target_xp == 44
    assert printed['total_proposed_xp'] == 25


def test_parse_timestamp_normalizes_to_utc():
    assert parse_timestamp('2024-01-02T10:00:00Z') == datetime(2024, 1, 2, 10, 0)
    assert parse_timestamp('2024-01-02T12:00:00+02:00') == datetime(2024, 1, 2, 10, 0)
    assert parse_timestamp('2024-01-02T10:00:00').tzinfo is None
    assert parse_timestamp(datetime(2024, 1, 2, 10, tzinfo=timezone.utc)).tzinfo is None
    assert parse_timestamp(None) is None


def test_malformed_history_is_invalid():
    with pytest.raises(InvalidInput):
        Snapshot.from_dict({'history': [{'quest_id': 'q0', 'tasks': []}]})
    with pytest.raises(InvalidInput):
        Snapshot.from_dict({'history': [{'ended_at': '2023-12-31'}]})


def zulu_snapshot():
    data = copy.deepcopy(SNAPSHOT)
    data['tasks'][0]['created_at'] = '2024-01-02T10:00:00Z'
    data['tasks'][0]['deadline_at'] = '2024-01-12T00:00:00Z'
    data['history'][0]['ended_at'] = '2023-12-31T00:00:00Z'
    return data


def test_cli_plan_mixes_zulu_and_plain_timestamps(tmp_path, capsys):
    path = tmp_path / "snap.json"
    path.write_text(json.dumps(zulu_snapshot()))

    plan = main.run_plan(get_default_config(), str(path), datetime(2024, 1, 10))
    assert plan.target_xp == 44
    assert plan.total_proposed_xp == 25

    # default clock
    assert main.run_plan(get_default_config(), str(path), main._resolve_now(None)).target_xp == 44
    capsys.readouterr()


def test_cli_reconcile(tmp_path, capsys):
    path = tmp_path / "snap.json"
    path.write_text(json.dumps(SNAPSHOT))

    result = main.run_reconcile(str(path), datetime(2024, 1, 10), "team_1")
    printed = json.loads(capsys.readouterr().out)

    assert printed['active_quest_id'] == 'q1'
    assert result.active_quest.id == 'q1'
    assert printed['transitions'] == [{'quest_id': 'q1', 'is_active': True, 'reason': 'deployed'}]


def test_cli_queue_filters_by_assignee(tmp_path, capsys):
    data = copy.deepcopy(SNAPSHOT)
    data['tasks'][0]['assignee_id'] = 'ana'
    data['tasks'][1]['assignee_id'] = 'bo'
    path = tmp_path / "snap.json"
    path.write_text(json.dumps(data))

    queue = main.run_queue(get_default_config(), str(path), datetime(2024, 1, 10), assignee='ana')
    printed = json.loads(capsys.readouterr().out)

    assert [t['id'] for t in printed['now']] == ['t1']
    assert printed['next'] == [] and printed['waiting'] == []
    assert [t.id for t in queue.now] == ['t1']


def run_main(monkeypatch, tmp_path, *args):
    argv = ['main.py', *args, '--config', str(tmp_path / "missing.yaml")]
    monkeypatch.setattr(sys, 'argv', argv)
    try:
        main.main()
    finally:
        logger.remove()
        logger.add(sys.stderr)


def test_main_exits_1_on_malformed_snapshot(monkeypatch, tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({'tasks': [{'id': 'x', 'size_points': 3}]}))

    with pytest.raises(SystemExit) as exc_info:
        run_main(monkeypatch, tmp_path, 'plan', '--snapshot', str(path))
    assert exc_info.value.code == 1


def test_main_plan_with_zulu_snapshot_and_default_clock(monkeypatch, tmp_path, capsys):
    path = tmp_path / "snap.json"
    path.write_text(json.dumps(zulu_snapshot()))

    run_main(monkeypatch, tmp_path, 'plan', '--snapshot', str(path))

    assert json.loads(capsys.readouterr().out)['team_capacity']['target_xp'] == 44
