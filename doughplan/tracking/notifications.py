"""Reminder timing for tracked schedules and a pluggable notifier."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from ..constants import OVERDUE_NOTIFICATION_MINUTES
from ..errors import ConcurrentModification
from .commands import MarkNotified
from .models import ActiveSchedule, RuntimeStep, ScheduleStatus

if TYPE_CHECKING:  # pragma: no cover
    from .service import ScheduleTracker

logger = logging.getLogger(__name__)

_NOTIFIABLE_STATUSES = (ScheduleStatus.PLANNING, ScheduleStatus.IN_PROGRESS)


class ReminderKind(str, Enum):
    REMINDER = "reminder"
    NOW = "now"
    OVERDUE = "overdue"


def due_notifications(schedule: ActiveSchedule, now: datetime) -> list[RuntimeStep]:
    """Steps whose reminder should be sent at ``now``.

    A step is due once ``now`` reaches ``scheduled_time - reminder_lead_minutes``,
    provided it is still pending or in progress and has not been notified yet.
    """
    settings = schedule.notifications
    if not settings.enabled or not settings.phone:
        return []
    if schedule.status not in _NOTIFIABLE_STATUSES:
        return []

    lead = timedelta(minutes=settings.reminder_lead_minutes)
    return [
        step
        for step in schedule.steps
        if step.status.is_open
        and not step.notification_sent
        and now >= step.scheduled_time - lead
    ]


def classify(step: RuntimeStep, now: datetime) -> ReminderKind:
    minutes_to_step = (step.scheduled_time - now).total_seconds() / 60
    if minutes_to_step > 0:
        return ReminderKind.REMINDER
    if minutes_to_step >= -OVERDUE_NOTIFICATION_MINUTES:
        return ReminderKind.NOW
    return ReminderKind.OVERDUE


def format_message(step: RuntimeStep, now: datetime) -> str:
    kind = classify(step, now)
    minutes = abs(int((step.scheduled_time - now).total_seconds() // 60))
    if kind == ReminderKind.REMINDER:
        return f"In {minutes} min: step {step.step_number}, {step.title}"
    if kind == ReminderKind.NOW:
        return f"Now: step {step.step_number}, {step.title}"
    return f"Overdue by {minutes} min: step {step.step_number}, {step.title}"


class Notifier(Protocol):
    """Delivers a reminder; returns ``True`` when the message went out."""

    def send(self, phone: str, message: str, step: RuntimeStep) -> bool:
        ...


class LoggingNotifier:
    """Notifier that only writes reminders to the log."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, int]] = []

    def send(self, phone: str, message: str, step: RuntimeStep) -> bool:
        logger.info(f"Reminder to {phone}: {message}")
        self.sent.append((phone, message, step.step_number))
        return True


class NotificationDispatcher:
    """Sends due reminders for one schedule and records them through the tracker."""

    def __init__(self, tracker: "ScheduleTracker", notifier: Notifier | None = None):
        self.tracker = tracker
        self.notifier = notifier or LoggingNotifier()

    async def dispatch(self, schedule_id: str) -> list[int]:
        """Send every due reminder; return the step numbers that were delivered."""
        schedule = await self.tracker.get(schedule_id)
        now = self.tracker.clock.now()
        delivered: list[int] = []
        for step in due_notifications(schedule, now):
            message = format_message(step, now)
            if not self.notifier.send(schedule.notifications.phone, message, step):
                logger.warning(
                    f"Reminder for schedule {schedule_id} step {step.step_number} not delivered"
                )
                continue
            try:
                await self.tracker.apply(schedule_id, MarkNotified(step_number=step.step_number))
            except ConcurrentModification:
                logger.warning(
                    f"Schedule {schedule_id} changed while recording step {step.step_number}"
                )
                raise
            delivered.append(step.step_number)
        return delivered


__all__ = [
    "ReminderKind",
    "due_notifications",
    "classify",
    "format_message",
    "Notifier",
    "LoggingNotifier",
    "NotificationDispatcher",
]
