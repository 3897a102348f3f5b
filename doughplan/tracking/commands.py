"""Commands accepted by the schedule state machine."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from ..constants import DEFAULT_REMINDER_LEAD_MINUTES
from .models import StepStatus


class Start(BaseModel):
    type: Literal["start"] = "start"


class Pause(BaseModel):
    type: Literal["pause"] = "pause"


class Resume(BaseModel):
    type: Literal["resume"] = "resume"


class Cancel(BaseModel):
    type: Literal["cancel"] = "cancel"


class CompleteStep(BaseModel):
    type: Literal["complete_step"] = "complete_step"
    step_number: int
    status: Optional[StepStatus] = None


class SkipStep(BaseModel):
    type: Literal["skip_step"] = "skip_step"
    step_number: int


class RescheduleTo(BaseModel):
    type: Literal["reschedule_to"] = "reschedule_to"
    bake_time: datetime


class RescheduleBy(BaseModel):
    type: Literal["reschedule_by"] = "reschedule_by"
    minutes: int


class EnableNotifications(BaseModel):
    type: Literal["enable_notifications"] = "enable_notifications"
    phone: str
    lead_minutes: int = Field(default=DEFAULT_REMINDER_LEAD_MINUTES, ge=0)


class DisableNotifications(BaseModel):
    type: Literal["disable_notifications"] = "disable_notifications"


class MarkNotified(BaseModel):
    """Records that the reminder for a step was delivered."""

    type: Literal["mark_notified"] = "mark_notified"
    step_number: int


Command = Annotated[
    Union[
        Start,
        Pause,
        Resume,
        Cancel,
        CompleteStep,
        SkipStep,
        RescheduleTo,
        RescheduleBy,
        EnableNotifications,
        DisableNotifications,
        MarkNotified,
    ],
    Field(discriminator="type"),
]

_command_adapter: TypeAdapter[Command] = TypeAdapter(Command)


def parse_command(data: dict) -> Command:
    """Build a command from its JSON form, e.g. ``{"type": "skip_step", "step_number": 3}``."""
    return _command_adapter.validate_python(data)


__all__ = [
    "Start",
    "Pause",
    "Resume",
    "Cancel",
    "CompleteStep",
    "SkipStep",
    "RescheduleTo",
    "RescheduleBy",
    "EnableNotifications",
    "DisableNotifications",
    "MarkNotified",
    "Command",
    "parse_command",
]
