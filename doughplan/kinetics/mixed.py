from __future__ import annotations

import math

from ..constants import MIXED_BULK_RATIO, MIXED_COLD_RATIO
from ..models import FermentationMethod
from .base import FermentationStrategy, cold_activity, q10_factor

BASE_YEAST_PERCENTAGE = 0.25
BASE_EQUIVALENT_HOURS = 8.0
REFERENCE_TEMPERATURE = 24.0


class MixedFermentationStrategy(FermentationStrategy):
    """30 % of the time at room temperature, 70 % in the fridge."""

    method = FermentationMethod.MIXED
    min_percentage = 0.05
    max_percentage = 1.0

    def equivalent_hours(self, hours: float, fridge_temp_c: float) -> float:
        room_hours = math.floor(hours * MIXED_BULK_RATIO)
        cold_hours = math.floor(hours * MIXED_COLD_RATIO)
        return max(1.0, room_hours + cold_hours * cold_activity(fridge_temp_c))

    def raw_percentage(self, hours: float, room_temp_c: float, fridge_temp_c: float) -> float:
        time_factor = BASE_EQUIVALENT_HOURS / self.equivalent_hours(hours, fridge_temp_c)
        return BASE_YEAST_PERCENTAGE * time_factor / q10_factor(room_temp_c, REFERENCE_TEMPERATURE)
