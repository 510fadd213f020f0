# /gradeflow/services/errors.py

"""
Typed failures raised by the grading engine and the services around it.

Every failure carries a machine-readable `code` and, where one applies, the
dotted `field` path of the offending input. The engine raises these before
producing any effect, so a raised failure always means nothing was mutated.
"""

from typing import Optional


class GradingError(Exception):
    """Base class for all recoverable engine failures."""
    code = "GRADING_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        detail = {"code": self.code, "message": self.message}
        if self.field:
            detail["field"] = self.field
        return detail


class ValidationFailure(GradingError, ValueError):
    """Malformed or out-of-domain input. Never retried automatically."""
    code = "BAD_USER_INPUT"


class StateConflict(GradingError):
    """A transition was attempted from the wrong state, or would duplicate a record."""
    code = "STATE_CONFLICT"


class NotFound(GradingError):
    """A referenced test, task or result does not exist."""
    code = "NOT_FOUND"
