"""In-memory implementation of the schedule repository."""

from __future__ import annotations

import asyncio
from typing import Dict

from ..errors import ConcurrentModification, ScheduleNotFound
from ..tracking.models import ActiveSchedule
from .repository import ScheduleRepository


class InMemoryScheduleRepository(ScheduleRepository):
    """Store schedules in local memory.

    Useful for tests or when no database is configured. Data is not
    persisted across process restarts. Schedules are kept as JSON so callers
    never share mutable state with the store.
    """

    def __init__(self) -> None:
        self._schedules: Dict[str, str] = {}
        self._versions: Dict[str, int] = {}
        self._lock = asyncio.Lock()

    async def create(self, schedule: ActiveSchedule) -> None:
        async with self._lock:
            if schedule.id in self._schedules:
                raise ValueError(f"Schedule {schedule.id} already exists")
            self._schedules[schedule.id] = schedule.model_dump_json()
            self._versions[schedule.id] = schedule.version

    async def get(self, schedule_id: str) -> ActiveSchedule | None:
        data = self._schedules.get(schedule_id)
        if data is None:
            return None
        return ActiveSchedule.model_validate_json(data)

    async def save(self, schedule: ActiveSchedule, expected_version: int) -> None:
        async with self._lock:
            current = self._versions.get(schedule.id)
            if current is None:
                raise ScheduleNotFound(f"Schedule {schedule.id} not found", schedule_id=schedule.id)
            if current != expected_version:
                raise ConcurrentModification(
                    f"Schedule {schedule.id} was modified concurrently",
                    schedule_id=schedule.id,
                    expected_version=expected_version,
                    actual_version=current,
                )
            self._schedules[schedule.id] = schedule.model_dump_json()
            self._versions[schedule.id] = schedule.version

    async def list(self) -> list[ActiveSchedule]:
        return [ActiveSchedule.model_validate_json(data) for data in self._schedules.values()]
