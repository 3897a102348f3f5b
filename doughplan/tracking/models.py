"""Runtime state of a tracked schedule."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..constants import DEFAULT_REMINDER_LEAD_MINUTES
from ..schedule import ScheduleStep


class StepStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    COMPLETED_EARLY = "completed-early"
    COMPLETED_LATE = "completed-late"
    SKIPPED = "skipped"

    @property
    def is_open(self) -> bool:
        return self in (StepStatus.PENDING, StepStatus.IN_PROGRESS)

    @property
    def is_completion(self) -> bool:
        return self in (
            StepStatus.COMPLETED,
            StepStatus.COMPLETED_EARLY,
            StepStatus.COMPLETED_LATE,
        )


class ScheduleStatus(str, Enum):
    PLANNING = "planning"
    IN_PROGRESS = "in-progress"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (ScheduleStatus.COMPLETED, ScheduleStatus.CANCELLED)


class RuntimeStep(ScheduleStep):
    """A schedule step plus what actually happened to it."""

    status: StepStatus = StepStatus.PENDING
    actual_time: Optional[datetime] = None
    notification_sent: bool = False
    notification_sent_at: Optional[datetime] = None


class NotificationSettings(BaseModel):
    enabled: bool = False
    phone: Optional[str] = None
    reminder_lead_minutes: int = Field(default=DEFAULT_REMINDER_LEAD_MINUTES, ge=0)


class ActiveSchedule(BaseModel):
    """A generated schedule a baker is working through.

    Every transition returns a copy with ``version`` incremented; stores use
    the version for compare-and-swap updates.
    """

    id: str
    owner_ref: Optional[str]
    target_bake_time: datetime
    adjusted_bake_time: Optional[datetime]
    steps: list[RuntimeStep]
    status: ScheduleStatus
    notifications: NotificationSettings
    version: int
    created_at: datetime
    started_at: Optional[datetime]
    completed_at: Optional[datetime]
    updated_at: datetime

    @property
    def effective_bake_time(self) -> datetime:
        return self.adjusted_bake_time or self.target_bake_time

    def get_step(self, step_number: int) -> Optional[RuntimeStep]:
        return next((s for s in self.steps if s.step_number == step_number), None)
