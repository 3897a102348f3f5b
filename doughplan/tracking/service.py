"""Tracker service: applies state machine transitions against a repository."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from ..config import DoughPlanConfig, load_config
from ..errors import ConcurrentModification, ScheduleNotFound
from ..schedule import ScheduleStep
from ..utils.clock import Clock, SystemClock
from ..utils.retry import schedule_retry
from .commands import Command
from .machine import create_active_schedule, transition
from .models import ActiveSchedule, NotificationSettings

if TYPE_CHECKING:  # pragma: no cover
    from ..persistence import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleTracker:
    """Reads, transitions and saves schedules with optimistic concurrency.

    Each :meth:`apply` takes one ``now`` snapshot from the clock, runs the
    pure transition and saves with the version it read. A lost race raises
    :class:`ConcurrentModification` unless ``max_retries`` allows another
    attempt on a fresh read.
    """

    def __init__(
        self,
        repository: Optional["ScheduleRepository"] = None,
        clock: Optional[Clock] = None,
        config: Optional[DoughPlanConfig] = None,
    ):
        if repository is None:
            from ..persistence import get_repository

            repository = get_repository()
        self.repository = repository
        self.clock = clock or SystemClock()
        self.config = config or load_config()

    async def create(
        self,
        steps: list[ScheduleStep],
        target_bake_time: datetime,
        owner_ref: Optional[str] = None,
        notifications: Optional[NotificationSettings] = None,
    ) -> ActiveSchedule:
        if notifications is None:
            notifications = NotificationSettings(
                reminder_lead_minutes=self.config.tracking.default_reminder_lead_minutes
            )
        schedule = create_active_schedule(
            steps,
            target_bake_time,
            notification_config=notifications,
            owner_ref=owner_ref,
            now=self.clock.now(),
        )
        await self.repository.create(schedule)
        logger.info(f"Created schedule {schedule.id} with {len(schedule.steps)} steps")
        return schedule

    async def get(self, schedule_id: str) -> ActiveSchedule:
        schedule = await self.repository.get(schedule_id)
        if schedule is None:
            raise ScheduleNotFound(f"Schedule {schedule_id} not found", schedule_id=schedule_id)
        return schedule

    async def list(self) -> list[ActiveSchedule]:
        return await self.repository.list()

    async def apply(self, schedule_id: str, command: Command) -> ActiveSchedule:
        max_retries = self.config.tracking.max_retries
        attempt = 0
        while True:
            current = await self.get(schedule_id)
            updated = transition(
                current,
                command,
                now=self.clock.now(),
                tolerance_minutes=self.config.tracking.on_time_tolerance_minutes,
            )
            try:
                await self.repository.save(updated, expected_version=current.version)
            except ConcurrentModification:
                if attempt >= max_retries:
                    raise
                attempt += 1
                logger.warning(
                    f"Version conflict on schedule {schedule_id}, retry {attempt}/{max_retries}"
                )
                await schedule_retry(attempt)
                continue
            logger.info(
                f"Schedule {schedule_id} {command.type} -> {updated.status.value} "
                f"(v{updated.version})"
            )
            return updated


__all__ = ["ScheduleTracker"]
