"""Tests for reminder timing and dispatch."""

from datetime import datetime, timedelta, timezone

import pytest

from doughplan.persistence import InMemoryScheduleRepository
from doughplan.schedule import ScheduleStep, StepKind
from doughplan.tracking import (
    Cancel,
    CompleteStep,
    EnableNotifications,
    LoggingNotifier,
    MarkNotified,
    NotificationDispatcher,
    ReminderKind,
    ScheduleTracker,
    Start,
    StepStatus,
    classify,
    create_active_schedule,
    due_notifications,
    format_message,
    transition,
)
from doughplan.utils.clock import FixedClock

T0 = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _steps():
    return [
        ScheduleStep(step_number=1, kind=StepKind.MIX_DOUGH, title="Mix", scheduled_time=T0, duration_minutes=10),
        ScheduleStep(step_number=2, kind=StepKind.KNEAD, title="Knead", scheduled_time=T0 + timedelta(minutes=10), duration_minutes=15),
        ScheduleStep(step_number=3, kind=StepKind.BAKE, title="Bake", scheduled_time=T0 + timedelta(hours=3), duration_minutes=5),
    ]


def _notifying():
    schedule = create_active_schedule(_steps(), T0 + timedelta(hours=3, minutes=5), now=T0 - timedelta(hours=1))
    return transition(schedule, EnableNotifications(phone="+1555", lead_minutes=15), now=T0)


def test_nothing_due_when_disabled():
    schedule = create_active_schedule(_steps(), T0 + timedelta(hours=4), now=T0)
    assert due_notifications(schedule, T0 + timedelta(hours=5)) == []


def test_due_once_lead_time_reached():
    schedule = _notifying()
    assert due_notifications(schedule, T0 - timedelta(minutes=16)) == []
    due = due_notifications(schedule, T0 - timedelta(minutes=15))
    assert [s.step_number for s in due] == [1]
    due = due_notifications(schedule, T0)
    assert [s.step_number for s in due] == [1, 2]


def test_notified_and_non_pending_steps_are_not_due():
    schedule = transition(_notifying(), MarkNotified(step_number=1), now=T0)
    assert [s.step_number for s in due_notifications(schedule, T0)] == [2]
    started = transition(schedule, Start(), now=T0)
    assert [s.step_number for s in due_notifications(started, T0)] == [2]


def test_in_progress_step_is_still_reminded():
    started = transition(_notifying(), Start(), now=T0 - timedelta(minutes=30))
    assert started.steps[0].status == StepStatus.IN_PROGRESS

    due = due_notifications(started, T0 - timedelta(minutes=10))
    assert [s.step_number for s in due] == [1]

    done = transition(started, CompleteStep(step_number=1), now=T0 - timedelta(minutes=10))
    assert [s.step_number for s in due_notifications(done, T0)] == [2]


def test_nothing_due_for_cancelled_schedule():
    cancelled = transition(_notifying(), Cancel(), now=T0)
    assert due_notifications(cancelled, T0 + timedelta(hours=5)) == []


def test_classify_and_message():
    step = _notifying().steps[0]
    assert classify(step, T0 - timedelta(minutes=10)) == ReminderKind.REMINDER
    assert classify(step, T0) == ReminderKind.NOW
    assert classify(step, T0 + timedelta(minutes=25)) == ReminderKind.OVERDUE
    assert format_message(step, T0 - timedelta(minutes=10)) == "In 10 min: step 1, Mix"
    assert format_message(step, T0 + timedelta(minutes=25)).startswith("Overdue by 25 min")


@pytest.mark.asyncio
async def test_dispatcher_sends_and_records():
    clock = FixedClock(T0 - timedelta(hours=1))
    tracker = ScheduleTracker(repository=InMemoryScheduleRepository(), clock=clock)
    schedule = await tracker.create(_steps(), T0 + timedelta(hours=3, minutes=5))
    await tracker.apply(schedule.id, EnableNotifications(phone="+1555", lead_minutes=15))

    notifier = LoggingNotifier()
    dispatcher = NotificationDispatcher(tracker, notifier)
    assert await dispatcher.dispatch(schedule.id) == []

    clock.advance(minutes=56)
    assert await dispatcher.dispatch(schedule.id) == [1, 2]
    assert [entry[2] for entry in notifier.sent] == [1, 2]
    assert notifier.sent[0][0] == "+1555"

    stored = await tracker.get(schedule.id)
    assert stored.steps[0].notification_sent
    assert stored.steps[0].notification_sent_at == clock.now()
    assert await dispatcher.dispatch(schedule.id) == []


@pytest.mark.asyncio
async def test_failed_delivery_is_not_recorded():
    class DownNotifier:
        def send(self, phone, message, step):
            return False

    clock = FixedClock(T0)
    tracker = ScheduleTracker(repository=InMemoryScheduleRepository(), clock=clock)
    schedule = await tracker.create(_steps(), T0 + timedelta(hours=3, minutes=5))
    await tracker.apply(schedule.id, EnableNotifications(phone="+1555"))

    assert await NotificationDispatcher(tracker, DownNotifier()).dispatch(schedule.id) == []
    stored = await tracker.get(schedule.id)
    assert not any(s.notification_sent for s in stored.steps)
