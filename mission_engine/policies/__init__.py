"""Task priority policy implementations."""

from .base import PriorityPolicy
from .eisenhower import EisenhowerPolicy

__all__ = ['PriorityPolicy', 'EisenhowerPolicy']
