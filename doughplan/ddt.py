"""Desired dough temperature (DDT) water-temperature solver.

The classic three-factor formula::

    water = DDT x 3 - room - flour - friction

becomes four-factor when a preferment joins the mix::

    water = DDT x 4 - room - flour - preferment - friction

Friction is the heat the mixer adds, estimated as the mixer's friction
factor (°C per minute) times its typical mixing time.
"""

from __future__ import annotations

import logging
from typing import Optional

from .constants import VERY_HIGH_TEMPERATURE_THRESHOLD
from .models import DDTResult
from .styles import MixerType

logger = logging.getLogger(__name__)

MIN_WATER_TEMPERATURE = 0.0
MAX_WATER_TEMPERATURE = 35.0
COLD_WATER_THRESHOLD = 10.0


def friction_heat(mixer: MixerType) -> float:
    return mixer.friction_factor * mixer.typical_mixing_minutes


def calculate_water_temperature(
    target_dough_temp_c: float,
    room_temp_c: float,
    flour_temp_c: Optional[float] = None,
    preferment_temp_c: Optional[float] = None,
    mixer: Optional[MixerType] = None,
    use_preferment: bool = False,
) -> DDTResult:
    """Solve the water temperature that brings the dough to ``target_dough_temp_c``.

    Missing temperatures default to the room temperature and a missing mixer
    to hand kneading. The result is reported as computed, even when it is
    physically impractical; ``warnings`` flag those cases.
    """
    mixer = mixer or MixerType.HAND_KNEADING
    flour_temp = room_temp_c if flour_temp_c is None else flour_temp_c
    friction = friction_heat(mixer)

    if use_preferment:
        preferment_temp = room_temp_c if preferment_temp_c is None else preferment_temp_c
        water_temp = target_dough_temp_c * 4 - room_temp_c - flour_temp - preferment_temp - friction
        trace = (
            f"({target_dough_temp_c:g}°C × 4) - {room_temp_c:.1f}°C - {flour_temp:.1f}°C"
            f" - {preferment_temp:.1f}°C - {friction:.1f}°C = {water_temp:.1f}°C"
        )
    else:
        preferment_temp = None
        water_temp = target_dough_temp_c * 3 - room_temp_c - flour_temp - friction
        trace = (
            f"({target_dough_temp_c:g}°C × 3) - {room_temp_c:.1f}°C - {flour_temp:.1f}°C"
            f" - {friction:.1f}°C = {water_temp:.1f}°C"
        )

    warnings: list[str] = []
    recommendations: list[str] = []
    if water_temp < MIN_WATER_TEMPERATURE:
        warnings.append(
            f"Required water temperature {water_temp:.1f}°C is below freezing. "
            "Chill the flour or use ice water and shorten mixing."
        )
    elif water_temp > MAX_WATER_TEMPERATURE:
        warnings.append(
            f"Required water temperature {water_temp:.1f}°C is above {MAX_WATER_TEMPERATURE:g}°C "
            "and may harm the yeast. Warm the flour or the room instead."
        )
    elif water_temp < COLD_WATER_THRESHOLD:
        recommendations.append("Cold water: add the yeast to the flour, not to the water.")
    if room_temp_c > VERY_HIGH_TEMPERATURE_THRESHOLD:
        recommendations.append(
            "Warm room: consider a shorter fermentation or more time in the fridge."
        )

    for warning in warnings:
        logger.warning(warning)
    logger.debug(f"DDT: {trace}")

    return DDTResult(
        target_dough_temp_c=target_dough_temp_c,
        target_water_temp_c=round(water_temp, 1),
        room_temp_c=room_temp_c,
        flour_temp_c=flour_temp,
        preferment_temp_c=preferment_temp,
        mixer_type=mixer,
        friction_factor=mixer.friction_factor,
        friction_heat_c=round(friction, 2),
        mixing_minutes=mixer.typical_mixing_minutes,
        formula_trace=trace,
        warnings=warnings,
        recommendations=recommendations,
    )
