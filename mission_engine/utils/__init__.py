"""Utility functions."""

from .config import get_default_config, load_config, merge_config
from .datetime_utils import days_until, parse_timestamp, to_naive_utc, utc_now, windows_overlap
from .logging import setup_logging

__all__ = [
    'get_default_config',
    'load_config',
    'merge_config',
    'days_until',
    'parse_timestamp',
    'to_naive_utc',
    'utc_now',
    'windows_overlap',
    'setup_logging',
]
