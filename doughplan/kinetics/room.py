from __future__ import annotations

from ..models import FermentationMethod
from .base import FermentationStrategy, q10_factor

BASE_YEAST_PERCENTAGE = 0.5
BASE_HOURS = 6.0
OPTIMAL_TEMPERATURE = 27.0


class RoomTemperatureStrategy(FermentationStrategy):
    """Whole fermentation at room temperature; 0.5 % for 6 h at 27 °C."""

    method = FermentationMethod.ROOM_TEMPERATURE
    min_percentage = 0.05
    max_percentage = 3.0

    def raw_percentage(self, hours: float, room_temp_c: float, fridge_temp_c: float) -> float:
        time_factor = BASE_HOURS / hours
        return BASE_YEAST_PERCENTAGE * time_factor / q10_factor(room_temp_c, OPTIMAL_TEMPERATURE)
