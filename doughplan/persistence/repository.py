"""Repository abstraction for tracked schedule persistence."""

from __future__ import annotations

from typing import Protocol

from ..tracking.models import ActiveSchedule


class ScheduleRepository(Protocol):
    """Protocol for active schedule persistence backends.

    ``save`` is a compare-and-swap: it succeeds only while the stored version
    still equals ``expected_version`` and raises
    :class:`~doughplan.errors.ConcurrentModification` otherwise.
    """

    async def create(self, schedule: ActiveSchedule) -> None:
        """Persist a new schedule."""

    async def get(self, schedule_id: str) -> ActiveSchedule | None:
        """Retrieve the schedule by id."""

    async def save(self, schedule: ActiveSchedule, expected_version: int) -> None:
        """Replace the stored schedule if its version is ``expected_version``."""

    async def list(self) -> list[ActiveSchedule]:
        """Return all persisted schedules."""
