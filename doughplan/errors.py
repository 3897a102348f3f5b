"""Error taxonomy for doughplan.

Every failure raised by the formulation engine or the schedule state machine
is a :class:`DoughPlanError` carrying a stable ``code`` plus keyword details,
so callers can report it without parsing messages.
"""

from __future__ import annotations

from typing import Any


class DoughPlanError(Exception):
    """Base class for all doughplan errors."""

    code = "DOUGHPLAN_ERROR"
    retryable = False

    def __init__(self, message: str, **details: Any):
        self.message = message
        self.details = details
        super().__init__(message)

    def as_dict(self) -> dict[str, Any]:
        """Return the error as a plain dictionary for API or CLI output."""
        return {"code": self.code, "message": self.message, **self.details}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.code}: {self.message} ({details_str})"
        return f"{self.code}: {self.message}"


class ValidationError(DoughPlanError):
    """Request input outside its declared bounds."""

    code = "VALIDATION_ERROR"

    def __init__(self, violations: dict[str, str]):
        self.violations = dict(violations)
        fields = ", ".join(sorted(self.violations))
        super().__init__(f"Invalid request fields: {fields}", violations=self.violations)


class UnsupportedMethod(DoughPlanError):
    """No fermentation strategy is registered for the requested method."""

    code = "UNSUPPORTED_METHOD"


class InvalidPreferment(DoughPlanError):
    """Preferment percentage is not strictly between 0 and 100."""

    code = "INVALID_PREFERMENT"


class ImpossibleFormulation(DoughPlanError):
    """Inputs produce a negative ingredient mass."""

    code = "IMPOSSIBLE_FORMULATION"


class InvalidTransition(DoughPlanError):
    """Command not allowed from the schedule's or step's current state."""

    code = "INVALID_TRANSITION"


class InvalidBakeTime(DoughPlanError):
    """Rescheduled bake time falls before the process start."""

    code = "INVALID_BAKE_TIME"


class ScheduleNotFound(DoughPlanError):
    """No active schedule stored under the given id."""

    code = "SCHEDULE_NOT_FOUND"


class ConcurrentModification(DoughPlanError):
    """Another writer updated the schedule first; re-read and retry."""

    code = "CONCURRENT_MODIFICATION"
    retryable = True


__all__ = [
    "DoughPlanError",
    "ValidationError",
    "UnsupportedMethod",
    "InvalidPreferment",
    "ImpossibleFormulation",
    "InvalidTransition",
    "InvalidBakeTime",
    "ScheduleNotFound",
    "ConcurrentModification",
]
