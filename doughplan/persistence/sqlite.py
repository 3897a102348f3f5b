"""SQLite implementation of the schedule repository."""

from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path
from typing import Any

from ..errors import ConcurrentModification, ScheduleNotFound
from ..tracking.models import ActiveSchedule
from .repository import ScheduleRepository


class SQLiteScheduleRepository(ScheduleRepository):
    """Persist tracked schedules using SQLite.

    The full schedule is stored as JSON next to a ``version`` column that
    guards updates.
    """

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Schema management
    def _ensure_schema(self) -> None:
        cur = self._conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS active_schedules (
                id TEXT PRIMARY KEY,
                owner_ref TEXT,
                status TEXT NOT NULL,
                version INTEGER NOT NULL,
                payload TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        self._conn.commit()

    # ------------------------------------------------------------------
    # Helper methods
    def _execute(self, query: str, *params: Any) -> int:
        cur = self._conn.cursor()
        cur.execute(query, params)
        self._conn.commit()
        return cur.rowcount

    def _fetchone(self, query: str, *params: Any) -> sqlite3.Row | None:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchone()

    def _fetchall(self, query: str, *params: Any) -> list[sqlite3.Row]:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchall()

    def close(self) -> None:
        self._conn.close()

    # ------------------------------------------------------------------
    # Repository API
    async def create(self, schedule: ActiveSchedule) -> None:
        try:
            await asyncio.to_thread(
                self._execute,
                "INSERT INTO active_schedules (id, owner_ref, status, version, payload, updated_at) VALUES (?, ?, ?, ?, ?, ?)",
                schedule.id,
                schedule.owner_ref,
                schedule.status.value,
                schedule.version,
                schedule.model_dump_json(),
                schedule.updated_at.isoformat(),
            )
        except sqlite3.IntegrityError as exc:
            raise ValueError(f"Schedule {schedule.id} already exists") from exc

    async def get(self, schedule_id: str) -> ActiveSchedule | None:
        row = await asyncio.to_thread(
            self._fetchone,
            "SELECT payload FROM active_schedules WHERE id = ?",
            schedule_id,
        )
        if not row:
            return None
        return ActiveSchedule.model_validate_json(row["payload"])

    async def save(self, schedule: ActiveSchedule, expected_version: int) -> None:
        updated = await asyncio.to_thread(
            self._execute,
            """
            UPDATE active_schedules
            SET owner_ref = ?, status = ?, version = ?, payload = ?, updated_at = ?
            WHERE id = ? AND version = ?
            """,
            schedule.owner_ref,
            schedule.status.value,
            schedule.version,
            schedule.model_dump_json(),
            schedule.updated_at.isoformat(),
            schedule.id,
            expected_version,
        )
        if updated:
            return
        row = await asyncio.to_thread(
            self._fetchone,
            "SELECT version FROM active_schedules WHERE id = ?",
            schedule.id,
        )
        if row is None:
            raise ScheduleNotFound(f"Schedule {schedule.id} not found", schedule_id=schedule.id)
        raise ConcurrentModification(
            f"Schedule {schedule.id} was modified concurrently",
            schedule_id=schedule.id,
            expected_version=expected_version,
            actual_version=row["version"],
        )

    async def list(self) -> list[ActiveSchedule]:
        rows = await asyncio.to_thread(
            self._fetchall,
            "SELECT payload FROM active_schedules ORDER BY updated_at",
        )
        return [ActiveSchedule.model_validate_json(row["payload"]) for row in rows]
