"""Configuration management."""

import copy
import json
import yaml
from pathlib import Path
from typing import Dict, Any, Optional


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML or JSON file, merged over the defaults."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r') as f:
        if path.suffix.lower() in ['.yaml', '.yml']:
            overrides = yaml.safe_load(f)
        elif path.suffix.lower() == '.json':
            overrides = json.load(f)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

    return merge_config(get_default_config(), overrides or {})


def merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``overrides`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        'priority': {
            'urgent_threshold': 3,
            'urgency_window_days': 3,
            # None means: median of size_scale
            'importance_threshold': None,
            'size_scale': [5, 10, 20, 40, 80],
            'deadline_horizon_days': 10,
            'weights': {
                'urgency': 10,
                'size': 1,
                'deadline': 5,
            },
        },
        'capacity': {
            'stretch_factor': 1.10,
            'max_history_quests': 3,
            'default_avg_xp': 100,
        },
        'work_queue': {
            'now_size': 3,
            'next_size': 12,
            'wip_limit': 3,
        },
        'logging': {
            'level': 'INFO',
            'file': None,
        },
    }


def section(config: Optional[Dict[str, Any]], name: str) -> Dict[str, Any]:
    """Return one config section with defaults filled in."""
    defaults = get_default_config()[name]
    if not config:
        return defaults
    return merge_config(defaults, config.get(name) or {})
