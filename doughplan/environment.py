"""Altitude, humidity and weather corrections applied before the kinetics model."""

from __future__ import annotations

import logging
import math
from typing import Optional

from pydantic import BaseModel

from .constants import (
    ALTITUDE_THRESHOLD_METERS,
    BAROMETRIC_SCALE_HEIGHT,
    BASE_HUMIDITY,
    BASE_PRESSURE_HPA,
    DEFAULT_ROOM_TEMPERATURE,
    FERMENTATION_CORRECTION_PER_1000M,
    HIGH_HUMIDITY_THRESHOLD,
    HUMIDITY_CORRECTION_FACTOR,
    LOW_HUMIDITY_THRESHOLD,
    LOW_TEMPERATURE_THRESHOLD,
    MAX_FERMENTATION_CORRECTION,
    MAX_FERMENTATION_HOURS,
    MAX_HYDRATION,
    MAX_HYDRATION_CORRECTION,
    MAX_YEAST_CORRECTION,
    MIN_FERMENTATION_CORRECTION,
    MIN_FERMENTATION_HOURS,
    MIN_HYDRATION,
    MIN_HYDRATION_CORRECTION,
    TEMP_CORRECTION_FACTOR,
    VERY_HIGH_TEMPERATURE_THRESHOLD,
    YEAST_CORRECTION_PER_1000M,
)
from .models import EnvironmentalCorrections
from .units import clamp

logger = logging.getLogger(__name__)

HIGH_ALTITUDE_METERS = 1000.0


class EnvironmentInput(BaseModel):
    hydration_pct: float
    room_temp_c: float = DEFAULT_ROOM_TEMPERATURE
    altitude_m: Optional[float] = None
    humidity_pct: Optional[float] = None
    weather_temp_c: Optional[float] = None
    weather_humidity_pct: Optional[float] = None

    @property
    def effective_humidity(self) -> float:
        if self.humidity_pct is not None:
            return self.humidity_pct
        if self.weather_humidity_pct is not None:
            return self.weather_humidity_pct
        return BASE_HUMIDITY


def hydration_correction(humidity_pct: float) -> float:
    return clamp(
        (humidity_pct - BASE_HUMIDITY) * HUMIDITY_CORRECTION_FACTOR,
        MIN_HYDRATION_CORRECTION,
        MAX_HYDRATION_CORRECTION,
    )


def yeast_correction(altitude_m: Optional[float]) -> float:
    """Percentage change to the yeast amount, never below -20 %."""
    if not altitude_m or altitude_m <= ALTITUDE_THRESHOLD_METERS:
        return 0.0
    return max(MAX_YEAST_CORRECTION, -YEAST_CORRECTION_PER_1000M * altitude_m / 1000.0)


def fermentation_correction(
    altitude_m: Optional[float], weather_temp_c: Optional[float]
) -> float:
    """Percentage change to the nominal fermentation duration.

    Negative values mean the dough ferments faster than nominal (thin air,
    warm weather), so the same clock time is worth more kinetic hours.
    """
    correction = 0.0
    if altitude_m and altitude_m > ALTITUDE_THRESHOLD_METERS:
        correction -= FERMENTATION_CORRECTION_PER_1000M * altitude_m / 1000.0
    if weather_temp_c is not None:
        correction -= (weather_temp_c - DEFAULT_ROOM_TEMPERATURE) * TEMP_CORRECTION_FACTOR
    return clamp(correction, MIN_FERMENTATION_CORRECTION, MAX_FERMENTATION_CORRECTION)


def estimated_pressure(altitude_m: Optional[float]) -> float:
    return BASE_PRESSURE_HPA * math.exp(-(altitude_m or 0.0) / BAROMETRIC_SCALE_HEIGHT)


def corrected_hydration(hydration_pct: float, corrections: EnvironmentalCorrections) -> float:
    return clamp(hydration_pct + corrections.hydration_adjustment, MIN_HYDRATION, MAX_HYDRATION)


def corrected_yeast(yeast_pct: float, corrections: EnvironmentalCorrections) -> float:
    return yeast_pct * (1 + corrections.yeast_adjustment_pct / 100.0)


def kinetic_hours(hours: float, corrections: EnvironmentalCorrections) -> float:
    """Nominal hours rescaled by the fermentation correction, kept within request bounds."""
    factor = 1 + corrections.fermentation_adjustment_pct / 100.0
    return clamp(hours / factor, MIN_FERMENTATION_HOURS, MAX_FERMENTATION_HOURS)


def _recommendations(humidity: float, altitude: float, room_temp: float) -> list[str]:
    tips: list[str] = []
    if humidity > HIGH_HUMIDITY_THRESHOLD:
        tips.append(
            "High air humidity: hydration raised slightly. Expect a softer dough and knead a little longer."
        )
    elif humidity < LOW_HUMIDITY_THRESHOLD:
        tips.append("Low air humidity: hydration lowered slightly. Keep the dough covered so it does not skin over.")

    if altitude > HIGH_ALTITUDE_METERS:
        tips.append(
            f"High altitude ({altitude:.0f} m): fermentation runs faster, yeast and time reduced."
        )
    elif altitude > ALTITUDE_THRESHOLD_METERS:
        tips.append(f"Moderate altitude ({altitude:.0f} m): small yeast and time correction.")

    if room_temp > VERY_HIGH_TEMPERATURE_THRESHOLD:
        tips.append(
            f"Warm room ({room_temp:.1f}°C): fermentation will be quick. Consider the fridge or less yeast."
        )
    elif room_temp < LOW_TEMPERATURE_THRESHOLD:
        tips.append(
            f"Cool room ({room_temp:.1f}°C): fermentation will be slow. Allow more time or a warmer spot."
        )

    if not tips:
        tips.append("Environmental conditions are optimal for fermentation.")
    return tips


def calculate_corrections(env: EnvironmentInput) -> EnvironmentalCorrections:
    """Compute every environmental adjustment for one request."""
    humidity = env.effective_humidity
    altitude = env.altitude_m or 0.0

    corrections = EnvironmentalCorrections(
        hydration_adjustment=hydration_correction(humidity),
        yeast_adjustment_pct=yeast_correction(env.altitude_m),
        fermentation_adjustment_pct=fermentation_correction(env.altitude_m, env.weather_temp_c),
        estimated_pressure_hpa=round(estimated_pressure(env.altitude_m), 2),
        effective_humidity_pct=humidity,
        recommendations=_recommendations(humidity, altitude, env.room_temp_c),
    )
    logger.debug(
        f"Environmental corrections humidity={humidity}% altitude={altitude}m: "
        f"hydration {corrections.hydration_adjustment:+.2f}, "
        f"yeast {corrections.yeast_adjustment_pct:+.2f}%, "
        f"fermentation {corrections.fermentation_adjustment_pct:+.2f}%"
    )
    return corrections


__all__ = [
    "EnvironmentInput",
    "calculate_corrections",
    "hydration_correction",
    "yeast_correction",
    "fermentation_correction",
    "estimated_pressure",
    "corrected_hydration",
    "corrected_yeast",
    "kinetic_hours",
]
