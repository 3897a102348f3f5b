from datetime import datetime, timedelta, timezone

import pytest

from doughplan import (
    DoughStyle,
    FermentationMethod,
    FormulationRequest,
    compute_formulation,
    generate_schedule,
)
from doughplan.config import DoughPlanConfig
from doughplan.persistence import SQLiteScheduleRepository
from doughplan.schedule import StepKind
from doughplan.tracking import (
    CompleteStep,
    EnableNotifications,
    LoggingNotifier,
    NotificationDispatcher,
    Pause,
    RescheduleBy,
    Resume,
    ScheduleStatus,
    ScheduleTracker,
    Start,
    StepStatus,
    completion_percentage,
    next_pending_step,
)
from doughplan.utils.clock import FixedClock

BAKE_AT = datetime(2024, 6, 2, 19, 0, tzinfo=timezone.utc)


def _cold_neapolitan_steps(bake_at=BAKE_AT):
    request = FormulationRequest.for_style(
        DoughStyle.NEAPOLITAN,
        number_of_units=6,
        fermentation_method=FermentationMethod.COLD_FERMENTATION,
        total_fermentation_hours=24,
    )
    result = compute_formulation(request)
    assert result.ingredients.total() == pytest.approx(request.total_dough_grams, abs=0.1)
    return generate_schedule(result, result.fermentation_method, bake_at)


@pytest.mark.asyncio
async def test_full_bake_with_restart(tmp_path):
    db_path = tmp_path / "bake.db"
    steps = _cold_neapolitan_steps()
    assert steps[-1].kind == StepKind.BAKE
    assert steps[-1].ends_at == BAKE_AT

    clock = FixedClock(steps[0].scheduled_time - timedelta(minutes=30))
    tracker = ScheduleTracker(SQLiteScheduleRepository(db_path), clock=clock, config=DoughPlanConfig())
    schedule = await tracker.create(steps, BAKE_AT, owner_ref="kitchen")
    await tracker.apply(schedule.id, EnableNotifications(phone="+15550001111", lead_minutes=15))
    started = await tracker.apply(schedule.id, Start())
    assert started.steps[0].status == StepStatus.IN_PROGRESS

    notifier = LoggingNotifier()
    clock.instant = steps[1].scheduled_time - timedelta(minutes=10)
    delivered = await NotificationDispatcher(tracker, notifier).dispatch(schedule.id)
    assert delivered == [1, 2]
    assert all(entry[0] == "+15550001111" for entry in notifier.sent)

    # restart with a fresh connection halfway through
    half = len(steps) // 2
    for step in steps[:half]:
        clock.instant = step.scheduled_time
        await tracker.apply(schedule.id, CompleteStep(step_number=step.step_number))

    tracker = ScheduleTracker(SQLiteScheduleRepository(db_path), clock=clock, config=DoughPlanConfig())
    resumed = await tracker.get(schedule.id)
    assert next_pending_step(resumed).step_number == steps[half].step_number
    assert resumed.steps[1].notification_sent

    for step in steps[half:]:
        clock.instant = step.scheduled_time
        await tracker.apply(schedule.id, CompleteStep(step_number=step.step_number))

    final = await tracker.get(schedule.id)
    assert final.status == ScheduleStatus.COMPLETED
    assert final.completed_at == steps[-1].scheduled_time
    assert completion_percentage(final) == 100
    assert all(s.status == StepStatus.COMPLETED for s in final.steps)


@pytest.mark.asyncio
async def test_delay_and_pause_mid_bake(tmp_path):
    steps = _cold_neapolitan_steps()
    clock = FixedClock(steps[0].scheduled_time)
    tracker = ScheduleTracker(
        SQLiteScheduleRepository(tmp_path / "bake.db"), clock=clock, config=DoughPlanConfig()
    )
    schedule = await tracker.create(steps, BAKE_AT)
    await tracker.apply(schedule.id, Start())
    await tracker.apply(schedule.id, CompleteStep(step_number=1))

    clock.advance(minutes=40)
    late = await tracker.apply(schedule.id, CompleteStep(step_number=2))
    assert late.steps[1].status == StepStatus.COMPLETED_LATE

    paused = await tracker.apply(schedule.id, Pause())
    assert paused.status == ScheduleStatus.PAUSED
    shifted = await tracker.apply(schedule.id, RescheduleBy(minutes=60))
    assert shifted.effective_bake_time == BAKE_AT + timedelta(hours=1)
    assert shifted.steps[0].scheduled_time == steps[0].scheduled_time
    assert shifted.steps[-1].scheduled_time == steps[-1].scheduled_time + timedelta(hours=1)

    resumed = await tracker.apply(schedule.id, Resume())
    assert resumed.status == ScheduleStatus.IN_PROGRESS
    assert resumed.version == 7
