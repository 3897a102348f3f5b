"""Live tracking of generated schedules."""

from .commands import (
    Cancel,
    Command,
    CompleteStep,
    DisableNotifications,
    EnableNotifications,
    MarkNotified,
    Pause,
    RescheduleBy,
    RescheduleTo,
    Resume,
    SkipStep,
    Start,
    parse_command,
)
from .machine import (
    completion_percentage,
    create_active_schedule,
    minutes_to_next_step,
    next_pending_step,
    transition,
)
from .models import (
    ActiveSchedule,
    NotificationSettings,
    RuntimeStep,
    ScheduleStatus,
    StepStatus,
)
from .notifications import (
    LoggingNotifier,
    NotificationDispatcher,
    Notifier,
    ReminderKind,
    classify,
    due_notifications,
    format_message,
)
from .service import ScheduleTracker

__all__ = [
    "ActiveSchedule",
    "NotificationSettings",
    "RuntimeStep",
    "ScheduleStatus",
    "StepStatus",
    "Command",
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
    "parse_command",
    "create_active_schedule",
    "transition",
    "next_pending_step",
    "completion_percentage",
    "minutes_to_next_step",
    "due_notifications",
    "classify",
    "format_message",
    "ReminderKind",
    "Notifier",
    "LoggingNotifier",
    "NotificationDispatcher",
    "ScheduleTracker",
]
