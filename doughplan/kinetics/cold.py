from __future__ import annotations

import math

from ..constants import BULK_FERMENTATION_COLD_HOURS, ROOM_HOURS_FOR_COLD
from ..models import FermentationMethod
from .base import FermentationStrategy, cold_activity, q10_factor

BASE_YEAST_PERCENTAGE = 0.15
BASE_EQUIVALENT_HOURS = 24.0
REFERENCE_TEMPERATURE = 22.0
ROOM_HOURS_DIVISOR = 6
LONG_FERMENTATION_HOURS = 48
VERY_LONG_FERMENTATION_HOURS = 72
LONG_FERMENTATION_FACTOR = 0.7
VERY_LONG_FERMENTATION_FACTOR = 0.8


class ColdFermentationStrategy(FermentationStrategy):
    """Short room lead-in, long fridge phase and a 2 h rest after the fridge.

    Fridge hours are converted to room-equivalent hours through
    :func:`~doughplan.kinetics.base.cold_activity`. Room temperature only
    affects the lead-in, hence the square root of the Q10 factor.
    """

    method = FermentationMethod.COLD_FERMENTATION
    min_percentage = 0.02
    max_percentage = 0.5

    def equivalent_hours(self, hours: float, fridge_temp_c: float) -> float:
        room_hours = min(ROOM_HOURS_FOR_COLD, math.floor(hours / ROOM_HOURS_DIVISOR))
        cold_hours = max(0.0, hours - room_hours - BULK_FERMENTATION_COLD_HOURS)
        return room_hours + cold_hours * cold_activity(fridge_temp_c) + BULK_FERMENTATION_COLD_HOURS

    def raw_percentage(self, hours: float, room_temp_c: float, fridge_temp_c: float) -> float:
        time_factor = BASE_EQUIVALENT_HOURS / self.equivalent_hours(hours, fridge_temp_c)
        temp_factor = q10_factor(room_temp_c, REFERENCE_TEMPERATURE)
        percentage = BASE_YEAST_PERCENTAGE * time_factor * math.sqrt(temp_factor)
        if hours > LONG_FERMENTATION_HOURS:
            percentage *= LONG_FERMENTATION_FACTOR
        if hours > VERY_LONG_FERMENTATION_HOURS:
            percentage *= VERY_LONG_FERMENTATION_FACTOR
        return percentage
