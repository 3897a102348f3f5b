"""Preparation timeline derived from a formulation and a target bake time."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel

from .constants import (
    ADD_SALT_MINUTES,
    BALLING_TIME_MINUTES,
    BULK_FERMENTATION_COLD_HOURS,
    FINAL_REST_COLD_MINUTES,
    FINAL_REST_DEFAULT_MINUTES,
    FINAL_REST_MIXED_MINUTES,
    FOLD_HYDRATION_THRESHOLD,
    FOLD_MINUTES,
    KNEADING_TIME_MINUTES,
    MAX_FOLDS,
    MIN_STEP_SEPARATION_MINUTES,
    MIXED_BULK_RATIO,
    MIXED_COLD_RATIO,
    MIXING_TIME_MINUTES,
    ROOM_HOURS_FOR_COLD,
    SHAPING_TIME_MINUTES,
)
from .models import FermentationMethod, FormulationResult
from .styles import get_style_profile

logger = logging.getLogger(__name__)


class StepKind(str, Enum):
    MIX_PREFERMENT = "mix-preferment"
    MIX_DOUGH = "mix-dough"
    AUTOLYSE = "autolyse"
    ADD_SALT = "add-salt"
    KNEAD = "knead"
    BULK_FERMENT = "bulk-ferment"
    FOLD = "fold"
    DIVIDE = "divide"
    BALL = "ball"
    COLD_PROOF = "cold-proof"
    ROOM_PROOF = "room-proof"
    REMOVE_FROM_FRIDGE = "remove-from-fridge"
    FINAL_PROOF = "final-proof"
    SHAPE = "shape"
    BAKE = "bake"


class ScheduleStep(BaseModel):
    step_number: int
    kind: StepKind
    title: str
    scheduled_time: datetime
    duration_minutes: int
    temperature_c: Optional[float] = None

    @property
    def ends_at(self) -> datetime:
        return self.scheduled_time + timedelta(minutes=self.duration_minutes)


class _Slot(NamedTuple):
    kind: StepKind
    title: str
    minutes: int
    temperature_c: Optional[float]


def _hours_to_minutes(hours: float) -> int:
    return max(0, round(hours * 60))


def _fermentation_phases(method: FermentationMethod, hours: float) -> tuple[float, float, int, StepKind]:
    """Bulk hours, cold-proof hours, final rest minutes and the final rest kind."""
    if method == FermentationMethod.COLD_FERMENTATION:
        return (
            BULK_FERMENTATION_COLD_HOURS,
            max(0.0, hours - ROOM_HOURS_FOR_COLD),
            FINAL_REST_COLD_MINUTES,
            StepKind.FINAL_PROOF,
        )
    if method == FermentationMethod.MIXED:
        return (
            math.floor(hours * MIXED_BULK_RATIO),
            math.floor(hours * MIXED_COLD_RATIO),
            FINAL_REST_MIXED_MINUTES,
            StepKind.FINAL_PROOF,
        )
    if method == FermentationMethod.SAME_DAY:
        return max(1.0, hours - 1), 0.0, FINAL_REST_DEFAULT_MINUTES, StepKind.ROOM_PROOF
    return max(2.0, hours - 2), 0.0, FINAL_REST_DEFAULT_MINUTES, StepKind.ROOM_PROOF


def _build_slots(result: FormulationResult, method: FermentationMethod) -> tuple[list[_Slot], int]:
    """Ordered main-timeline slots and the index of the bulk fermentation slot."""
    profile = get_style_profile(result.style)
    room = result.room_temp_c
    fridge = result.fridge_temp_c
    bulk_hours, cold_hours, final_minutes, final_kind = _fermentation_phases(
        method, result.total_fermentation_hours
    )

    slots: list[_Slot] = []
    if result.preferment is not None:
        pf = result.preferment
        slots.append(
            _Slot(
                StepKind.MIX_PREFERMENT,
                f"Mix the {pf.type.value.replace('_', ' ')} and let it ferment {pf.hours:g} h",
                _hours_to_minutes(pf.hours),
                room,
            )
        )
    slots.append(_Slot(StepKind.MIX_DOUGH, "Mix flour and water", MIXING_TIME_MINUTES, None))
    if result.autolyse_minutes:
        slots.append(
            _Slot(StepKind.AUTOLYSE, "Rest for autolyse", result.autolyse_minutes, room)
        )
        slots.append(_Slot(StepKind.ADD_SALT, "Add salt and yeast", ADD_SALT_MINUTES, None))
    slots.append(_Slot(StepKind.KNEAD, "Knead until smooth", KNEADING_TIME_MINUTES, None))
    bulk_index = len(slots)
    slots.append(
        _Slot(
            StepKind.BULK_FERMENT,
            f"Bulk ferment {bulk_hours:g} h at room temperature",
            _hours_to_minutes(bulk_hours),
            room,
        )
    )
    slots.append(
        _Slot(StepKind.BALL, f"Divide into {result.number_of_units} balls", BALLING_TIME_MINUTES, None)
    )
    if method.uses_fridge:
        slots.append(
            _Slot(
                StepKind.COLD_PROOF,
                f"Cold proof {cold_hours:g} h in the fridge",
                _hours_to_minutes(cold_hours),
                fridge,
            )
        )
        slots.append(_Slot(StepKind.REMOVE_FROM_FRIDGE, "Take the dough out of the fridge", 0, None))
    if final_kind == StepKind.FINAL_PROOF:
        final_title = "Final proof at room temperature"
    else:
        final_title = "Rest at room temperature"
    slots.append(_Slot(final_kind, final_title, final_minutes, room))
    slots.append(_Slot(StepKind.SHAPE, "Shape and top", SHAPING_TIME_MINUTES, None))
    bake_minutes = max(1, math.ceil(profile.baking_seconds / 60))
    slots.append(
        _Slot(
            StepKind.BAKE,
            f"Bake at {profile.oven_temperature_c}°C",
            bake_minutes,
            float(profile.oven_temperature_c),
        )
    )
    return slots, bulk_index


def _fold_count(hydration_pct: float, bulk_minutes: int) -> int:
    if hydration_pct < FOLD_HYDRATION_THRESHOLD:
        return 0
    return min(MAX_FOLDS, bulk_minutes // 60)


def generate_schedule(
    result: FormulationResult,
    method: FermentationMethod,
    target_bake_time: datetime,
) -> list[ScheduleStep]:
    """Walk backward from ``target_bake_time`` and return numbered steps.

    The bake step ends exactly at ``target_bake_time``. Zero-length steps keep
    a one-minute slot so timestamps stay strictly increasing. Folds for high
    hydration doughs are spread evenly inside bulk fermentation and do not
    take a slot of their own. Naive datetimes are taken as UTC.
    """
    if target_bake_time.tzinfo is None:
        target_bake_time = target_bake_time.replace(tzinfo=timezone.utc)

    slots, bulk_index = _build_slots(result, method)

    starts: list[datetime] = [target_bake_time] * len(slots)
    cursor = target_bake_time
    for index in range(len(slots) - 1, -1, -1):
        cursor -= timedelta(minutes=max(slots[index].minutes, MIN_STEP_SEPARATION_MINUTES))
        starts[index] = cursor

    timeline: list[tuple[_Slot, datetime]] = []
    for index, slot in enumerate(slots):
        timeline.append((slot, starts[index]))
        if index == bulk_index:
            folds = _fold_count(result.hydration_pct, slot.minutes)
            interval = slot.minutes / (folds + 1) if folds else 0
            for i in range(1, folds + 1):
                fold_slot = _Slot(
                    StepKind.FOLD, f"Stretch and fold ({i}/{folds})", FOLD_MINUTES, slot.temperature_c
                )
                timeline.append((fold_slot, starts[index] + timedelta(minutes=interval * i)))

    steps = [
        ScheduleStep(
            step_number=number,
            kind=slot.kind,
            title=slot.title,
            scheduled_time=start,
            duration_minutes=slot.minutes,
            temperature_c=slot.temperature_c,
        )
        for number, (slot, start) in enumerate(timeline, start=1)
    ]
    logger.info(
        f"Generated {len(steps)} steps for {method.value}, "
        f"start {steps[0].scheduled_time.isoformat()} bake {target_bake_time.isoformat()}"
    )
    return steps


__all__ = ["StepKind", "ScheduleStep", "generate_schedule"]
