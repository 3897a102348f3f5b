from __future__ import annotations

from ..models import FermentationMethod
from .base import FermentationStrategy, q10_factor

BASE_YEAST_PERCENTAGE = 1.5
BASE_HOURS = 3.0
OPTIMAL_TEMPERATURE = 27.0
# Short ferments react more strongly to temperature.
SAME_DAY_TEMP_BASE_DIFF = 8.0
EXPRESS_HOURS = 2.0
EXPRESS_BOOST = 1.5


class SameDayStrategy(FermentationStrategy):
    method = FermentationMethod.SAME_DAY
    min_percentage = 0.5
    max_percentage = 3.0

    def raw_percentage(self, hours: float, room_temp_c: float, fridge_temp_c: float) -> float:
        time_factor = BASE_HOURS / max(1.0, hours)
        temp_factor = q10_factor(room_temp_c, OPTIMAL_TEMPERATURE, SAME_DAY_TEMP_BASE_DIFF)
        percentage = BASE_YEAST_PERCENTAGE * time_factor / temp_factor
        if hours < EXPRESS_HOURS:
            percentage *= EXPRESS_BOOST
        return percentage
