"""Sample data for demos."""

from .generator import SnapshotGenerator

__all__ = ['SnapshotGenerator']
