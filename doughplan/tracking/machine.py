"""Pure state machine for tracked schedules.

``transition`` never mutates its input: it validates the command against the
current state, applies it to a deep copy and bumps ``version``.

Schedule states::

    planning -> in-progress <-> paused -> completed | cancelled

Step states::

    pending -> in-progress -> completed | completed-early | completed-late | skipped
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ..constants import ON_TIME_TOLERANCE_MINUTES
from ..errors import InvalidBakeTime, InvalidTransition, ValidationError
from ..schedule import ScheduleStep
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
)
from .models import (
    ActiveSchedule,
    NotificationSettings,
    RuntimeStep,
    ScheduleStatus,
    StepStatus,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # naive datetimes are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _runtime_step(step: ScheduleStep) -> RuntimeStep:
    data = step.model_dump()
    data["scheduled_time"] = _as_utc(step.scheduled_time)
    return RuntimeStep(**data)


def create_active_schedule(
    steps: list[ScheduleStep],
    target_bake_time: datetime,
    notification_config: Optional[NotificationSettings] = None,
    owner_ref: Optional[str] = None,
    now: Optional[datetime] = None,
    schedule_id: Optional[str] = None,
) -> ActiveSchedule:
    """Attach generated steps to a new schedule in the ``planning`` state.

    Naive ``target_bake_time``, ``now`` and step times are taken as UTC.
    """
    now = _as_utc(now) if now else _utcnow()
    return ActiveSchedule(
        id=schedule_id or str(uuid.uuid4()),
        owner_ref=owner_ref,
        target_bake_time=_as_utc(target_bake_time),
        adjusted_bake_time=None,
        steps=[_runtime_step(step) for step in steps],
        status=ScheduleStatus.PLANNING,
        notifications=(notification_config or NotificationSettings()).model_copy(),
        version=1,
        created_at=now,
        started_at=None,
        completed_at=None,
        updated_at=now,
    )


# ----------------------------------------------------------------------
# Queries


def next_pending_step(schedule: ActiveSchedule) -> Optional[RuntimeStep]:
    """First step, by number, that is still pending or in progress."""
    open_steps = [s for s in schedule.steps if s.status.is_open]
    return min(open_steps, key=lambda s: s.step_number, default=None)


def completion_percentage(schedule: ActiveSchedule) -> int:
    if not schedule.steps:
        return 0
    done = sum(1 for s in schedule.steps if not s.status.is_open)
    return done * 100 // len(schedule.steps)


def minutes_to_next_step(schedule: ActiveSchedule, now: Optional[datetime] = None) -> Optional[int]:
    step = next_pending_step(schedule)
    if step is None:
        return None
    now = _as_utc(now) if now else _utcnow()
    return int((step.scheduled_time - now).total_seconds() // 60)


# ----------------------------------------------------------------------
# Transition helpers


def _reject(schedule: ActiveSchedule, command: Command, reason: str, **details) -> InvalidTransition:
    return InvalidTransition(
        f"Cannot {command.type} schedule {schedule.id}: {reason}",
        status=schedule.status.value,
        **details,
    )


def _require_status(schedule: ActiveSchedule, command: Command, *allowed: ScheduleStatus) -> None:
    if schedule.status not in allowed:
        raise _reject(
            schedule,
            command,
            f"requires {' or '.join(s.value for s in allowed)}",
        )


def _open_step(schedule: ActiveSchedule, command: Command, step_number: int) -> RuntimeStep:
    step = schedule.get_step(step_number)
    if step is None:
        raise _reject(schedule, command, f"no step {step_number}", step_number=step_number)
    if not step.status.is_open:
        raise _reject(
            schedule,
            command,
            f"step {step_number} is already {step.status.value}",
            step_number=step_number,
        )
    return step


def _completion_status(step: RuntimeStep, now: datetime, tolerance_minutes: int) -> StepStatus:
    offset = now - step.scheduled_time
    tolerance = timedelta(minutes=tolerance_minutes)
    if offset < -tolerance:
        return StepStatus.COMPLETED_EARLY
    if offset > tolerance:
        return StepStatus.COMPLETED_LATE
    return StepStatus.COMPLETED


def _advance(schedule: ActiveSchedule, now: datetime) -> None:
    """Promote the next pending step or complete the schedule."""
    if any(s.status == StepStatus.IN_PROGRESS for s in schedule.steps):
        return
    step = next_pending_step(schedule)
    if step is not None:
        step.status = StepStatus.IN_PROGRESS
        return
    schedule.status = ScheduleStatus.COMPLETED
    schedule.completed_at = now
    logger.info(f"Schedule {schedule.id} completed")


def _shift(schedule: ActiveSchedule, new_bake_time: datetime, now: datetime) -> None:
    process_start = schedule.started_at or schedule.created_at
    if new_bake_time < process_start:
        raise InvalidBakeTime(
            "New bake time is before the process start",
            bake_time=new_bake_time.isoformat(),
            process_start=process_start.isoformat(),
        )
    delta = new_bake_time - schedule.effective_bake_time
    for step in schedule.steps:
        if step.status.is_open:
            step.scheduled_time = step.scheduled_time + delta
            step.notification_sent = False
            step.notification_sent_at = None
    schedule.adjusted_bake_time = new_bake_time
    logger.info(
        f"Schedule {schedule.id} rescheduled by {delta.total_seconds() / 60:+.0f} min "
        f"to {new_bake_time.isoformat()}"
    )


# ----------------------------------------------------------------------
# Command handlers (operate on the working copy)


def _start(schedule: ActiveSchedule, command: Start, now: datetime, tolerance: int) -> None:
    _require_status(schedule, command, ScheduleStatus.PLANNING)
    schedule.status = ScheduleStatus.IN_PROGRESS
    schedule.started_at = now
    _advance(schedule, now)


def _pause(schedule: ActiveSchedule, command: Pause, now: datetime, tolerance: int) -> None:
    _require_status(schedule, command, ScheduleStatus.IN_PROGRESS)
    schedule.status = ScheduleStatus.PAUSED


def _resume(schedule: ActiveSchedule, command: Resume, now: datetime, tolerance: int) -> None:
    _require_status(schedule, command, ScheduleStatus.PAUSED)
    schedule.status = ScheduleStatus.IN_PROGRESS


def _cancel(schedule: ActiveSchedule, command: Cancel, now: datetime, tolerance: int) -> None:
    schedule.status = ScheduleStatus.CANCELLED


def _complete_step(
    schedule: ActiveSchedule, command: CompleteStep, now: datetime, tolerance: int
) -> None:
    _require_status(schedule, command, ScheduleStatus.IN_PROGRESS)
    if command.status is not None and not command.status.is_completion:
        raise ValidationError(
            {"status": f"must be a completed status, got {command.status.value}"}
        )
    step = _open_step(schedule, command, command.step_number)
    step.status = command.status or _completion_status(step, now, tolerance)
    step.actual_time = now
    _advance(schedule, now)


def _skip_step(schedule: ActiveSchedule, command: SkipStep, now: datetime, tolerance: int) -> None:
    _require_status(schedule, command, ScheduleStatus.IN_PROGRESS)
    step = _open_step(schedule, command, command.step_number)
    step.status = StepStatus.SKIPPED
    step.actual_time = now
    _advance(schedule, now)


def _reschedule_to(
    schedule: ActiveSchedule, command: RescheduleTo, now: datetime, tolerance: int
) -> None:
    _shift(schedule, _as_utc(command.bake_time), now)


def _reschedule_by(
    schedule: ActiveSchedule, command: RescheduleBy, now: datetime, tolerance: int
) -> None:
    _shift(schedule, schedule.effective_bake_time + timedelta(minutes=command.minutes), now)


def _enable_notifications(
    schedule: ActiveSchedule, command: EnableNotifications, now: datetime, tolerance: int
) -> None:
    schedule.notifications = NotificationSettings(
        enabled=True, phone=command.phone, reminder_lead_minutes=command.lead_minutes
    )


def _disable_notifications(
    schedule: ActiveSchedule, command: DisableNotifications, now: datetime, tolerance: int
) -> None:
    schedule.notifications = schedule.notifications.model_copy(update={"enabled": False})


def _mark_notified(
    schedule: ActiveSchedule, command: MarkNotified, now: datetime, tolerance: int
) -> None:
    step = schedule.get_step(command.step_number)
    if step is None:
        raise _reject(
            schedule, command, f"no step {command.step_number}", step_number=command.step_number
        )
    step.notification_sent = True
    step.notification_sent_at = now


_HANDLERS: dict[type, Callable[[ActiveSchedule, Command, datetime, int], None]] = {
    Start: _start,
    Pause: _pause,
    Resume: _resume,
    Cancel: _cancel,
    CompleteStep: _complete_step,
    SkipStep: _skip_step,
    RescheduleTo: _reschedule_to,
    RescheduleBy: _reschedule_by,
    EnableNotifications: _enable_notifications,
    DisableNotifications: _disable_notifications,
    MarkNotified: _mark_notified,
}


def transition(
    schedule: ActiveSchedule,
    command: Command,
    now: Optional[datetime] = None,
    tolerance_minutes: int = ON_TIME_TOLERANCE_MINUTES,
) -> ActiveSchedule:
    """Apply ``command`` and return the next version of ``schedule``.

    ``now`` is read once and used for every timestamp and tolerance check in
    the transition.

    Raises:
        InvalidTransition: the command is not allowed in the current state.
        InvalidBakeTime: a reschedule lands before the process start.
        ValidationError: malformed command arguments.
    """
    if schedule.status.is_terminal:
        raise _reject(schedule, command, "schedule is finished")
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise InvalidTransition(f"Unknown command {command!r}")

    now = _as_utc(now) if now else _utcnow()
    updated = schedule.model_copy(deep=True)
    handler(updated, command, now, tolerance_minutes)
    updated.version = schedule.version + 1
    updated.updated_at = now
    logger.debug(
        f"Schedule {schedule.id} {command.type}: {schedule.status.value} -> "
        f"{updated.status.value} (v{updated.version})"
    )
    return updated


__all__ = [
    "create_active_schedule",
    "transition",
    "next_pending_step",
    "completion_percentage",
    "minutes_to_next_step",
]
