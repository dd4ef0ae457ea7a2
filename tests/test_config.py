import json
import sys

import pytest
from loguru import logger

from mission_engine.utils.config import get_default_config, load_config, merge_config, section
from mission_engine.utils.logging import setup_logging


def test_defaults():
    config = get_default_config()
    assert config['priority']['urgent_threshold'] == 3
    assert config['priority']['weights'] == {'urgency': 10, 'size': 1, 'deadline': 5}
    assert config['capacity'] == {'stretch_factor': 1.10, 'max_history_quests': 3, 'default_avg_xp': 100}


def test_yaml_overrides_merge_over_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("priority:\n  weights:\n    urgency: 20\ncapacity:\n  stretch_factor: 1.25\n")

    config = load_config(str(path))

    assert config['priority']['weights'] == {'urgency': 20, 'size': 1, 'deadline': 5}
    assert config['priority']['urgent_threshold'] == 3
    assert config['capacity']['stretch_factor'] == 1.25
    assert config['capacity']['max_history_quests'] == 3


def test_json_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({'work_queue': {'wip_limit': 5}}))
    assert load_config(str(path))['work_queue']['wip_limit'] == 5


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("")
    assert load_config(str(path)) == get_default_config()


def test_missing_and_unsupported_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))

    path = tmp_path / "config.toml"
    path.write_text("")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_merge_does_not_mutate_base():
    base = get_default_config()
    merge_config(base, {'priority': {'urgent_threshold': 9}})
    assert base['priority']['urgent_threshold'] == 3


def test_section_fills_missing_keys():
    assert section({'capacity': {'default_avg_xp': 50}}, 'capacity')['stretch_factor'] == 1.10
    assert section(None, 'work_queue')['now_size'] == 3


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "engine.log"
    setup_logging("info", log_file)
    try:
        logger.info("capacity plan ready")
        logger.debug("not at info level")
    finally:
        logger.remove()
        logger.add(sys.stderr)

    text = log_file.read_text()
    assert "capacity plan ready" in text
    assert "not at info level" not in text
