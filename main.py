"""Main entry point for the Mission Prioritization & Sprint Capacity Engine."""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

from loguru import logger

from mission_engine.demo.generator import SnapshotGenerator
from mission_engine.engine.capacity import CapacityPlanner
from mission_engine.engine.quest_scheduler import QuestScheduler
from mission_engine.engine.work_queue import WorkQueueBuilder
from mission_engine.errors import MissionEngineError
from mission_engine.models.quest import Scope
from mission_engine.snapshot import load_snapshot
from mission_engine.utils.config import load_config, get_default_config
from mission_engine.utils.datetime_utils import parse_timestamp, utc_now
from mission_engine.utils.logging import setup_logging


def _resolve_now(value):
    return parse_timestamp(value) if value else utc_now()


def run_plan(config: dict, snapshot_path: str, now: datetime, verbose: bool = False):
    """Propose the next sprint from a snapshot."""
    snapshot = load_snapshot(snapshot_path)
    planner = CapacityPlanner(config)
    plan = planner.plan(snapshot.analyst_count, snapshot.history, snapshot.tasks, now)

    if verbose:
        print(plan.to_human_readable(), file=sys.stderr)
    print(json.dumps(plan.to_dict(), indent=2, default=str))
    return plan


def run_queue(config: dict, snapshot_path: str, now: datetime, assignee: str = None):
    """Print a person's ranked work queue."""
    snapshot = load_snapshot(snapshot_path)
    tasks = snapshot.tasks
    if assignee:
        tasks = [t for t in tasks if t.assignee_id == assignee]

    queue = WorkQueueBuilder(config).build(tasks, now)
    print(json.dumps(queue.to_dict(), indent=2))
    return queue


def run_reconcile(snapshot_path: str, now: datetime, team_id: str, sub_team_id: str = None):
    """Reconcile a scope's quests against the clock."""
    snapshot = load_snapshot(snapshot_path)
    scope = Scope(team_id=team_id, sub_team_id=sub_team_id)
    result = QuestScheduler().reconcile(scope, snapshot.quests, now)
    print(json.dumps(result.to_dict(), indent=2))
    return result


def run_generate(config: dict, out_path: str, now: datetime, seed: int = 42):
    """Write a sample snapshot to disk."""
    generator = SnapshotGenerator(seed=seed, config=config)
    snapshot = generator.generate_snapshot(now)

    path = Path(out_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(snapshot.to_dict(), f, indent=2)

    print(f"Generated {len(snapshot.tasks)} tasks, {len(snapshot.quests)} quests")
    print(f"Snapshot saved to: {path}")
    return snapshot


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Mission Prioritization & Sprint Capacity Engine"
    )
    parser.add_argument(
        'command',
        choices=['plan', 'queue', 'reconcile', 'generate'],
        help='Command to run'
    )
    parser.add_argument(
        '--config',
        type=str,
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument('--snapshot', type=str, help='Snapshot file (JSON or YAML)')
    parser.add_argument('--now', type=str, help='Evaluate as of this ISO timestamp (default: now)')
    parser.add_argument('--assignee', type=str, help='Only queue tasks assigned to this person')
    parser.add_argument('--team', type=str, help='Team id for reconcile')
    parser.add_argument('--sub-team', type=str, help='Sub-team id for reconcile')
    parser.add_argument('--out', type=str, default='results/snapshot.json', help='Output for generate')
    parser.add_argument('--seed', type=int, default=42, help='Random seed for generate')
    parser.add_argument('--verbose', action='store_true', help='Print a human-readable plan to stderr')

    args = parser.parse_args()

    config = load_config(args.config) if Path(args.config).exists() else get_default_config()
    setup_logging(config['logging']['level'], config['logging']['file'])
    now = _resolve_now(args.now)

    if args.command != 'generate' and not args.snapshot:
        parser.error(f"{args.command} requires --snapshot")
    if args.command == 'reconcile' and not args.team:
        parser.error("reconcile requires --team")

    try:
        if args.command == 'plan':
            run_plan(config, args.snapshot, now, args.verbose)
        elif args.command == 'queue':
            run_queue(config, args.snapshot, now, args.assignee)
        elif args.command == 'reconcile':
            run_reconcile(args.snapshot, now, args.team, args.sub_team)
        elif args.command == 'generate':
            run_generate(config, args.out, now, args.seed)
    except MissionEngineError as e:
        logger.error(f"{e.error_code}: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
