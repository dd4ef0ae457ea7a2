"""Engine exceptions."""

from typing import Optional


class MissionEngineError(Exception):
    """Base class for all engine errors."""

    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code


class InvalidInput(MissionEngineError):
    """Malformed task, quest or planner input."""

    error_code = "INVALID_INPUT"


class ValidationError(MissionEngineError):
    """Degenerate input that the caller should surface, e.g. an empty selection."""

    error_code = "VALIDATION_ERROR"


class ScheduleConflictError(MissionEngineError):
    """A proposed quest window collides with an existing quest."""

    error_code = "CONFLICT"

    def __init__(self, conflict):
        super().__init__(conflict.message)
        self.conflict = conflict


class PersistenceFailure(MissionEngineError):
    """Raised by a caller's storage layer when a write fails."""

    error_code = "DB_ERROR"
