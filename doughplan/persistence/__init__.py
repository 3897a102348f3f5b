"""Persistence layer for tracked schedules."""

from __future__ import annotations

import os
from typing import Optional

from ..config import DoughPlanConfig, load_config
from .inmemory import InMemoryScheduleRepository
from .repository import ScheduleRepository
from .sqlite import SQLiteScheduleRepository

_repository_instance: ScheduleRepository | None = None


def get_repository(
    database_url: Optional[str] = None, config: Optional[DoughPlanConfig] = None
) -> ScheduleRepository:
    """Factory function to obtain a schedule repository.

    The repository backend is selected based on ``database_url`` which can be
    provided explicitly, via environment variable ``DOUGHPLAN_DATABASE_URL``,
    or from loaded configuration. When no database is configured, an
    in-memory repository is returned.
    """

    global _repository_instance
    if _repository_instance is not None and database_url is None and config is None:
        return _repository_instance

    config = config or load_config()
    database_url = (
        database_url
        or os.getenv("DOUGHPLAN_DATABASE_URL")
        or getattr(config, "database_url", None)
    )

    if not database_url:
        _repository_instance = InMemoryScheduleRepository()
        return _repository_instance

    if database_url.startswith("sqlite://"):
        path = database_url.replace("sqlite://", "", 1)
        _repository_instance = SQLiteScheduleRepository(path)
    else:
        raise ValueError(f"Unsupported database backend: {database_url}")

    return _repository_instance


__all__ = [
    "ScheduleRepository",
    "SQLiteScheduleRepository",
    "InMemoryScheduleRepository",
    "get_repository",
]
