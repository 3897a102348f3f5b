"""Base interface for fermentation kinetics strategies."""

from __future__ import annotations

import abc

from ..constants import (
    COLD_ACTIVITY_BASE,
    COLD_ACTIVITY_MULTIPLIER,
    Q10_FACTOR,
    TEMP_BASE_DIFF,
)
from ..models import FermentationMethod
from ..units import clamp


def q10_factor(temp_c: float, reference_c: float, base_diff: float = TEMP_BASE_DIFF) -> float:
    """Relative yeast activity at ``temp_c`` compared with ``reference_c``."""
    return Q10_FACTOR ** ((temp_c - reference_c) / base_diff)


def cold_activity(fridge_temp_c: float) -> float:
    """Share of room-temperature activity left in the fridge."""
    return COLD_ACTIVITY_BASE + fridge_temp_c * COLD_ACTIVITY_MULTIPLIER


class FermentationStrategy(metaclass=abc.ABCMeta):
    """Maps fermentation time and temperatures to a fresh-yeast percentage."""

    method: FermentationMethod
    min_percentage: float
    max_percentage: float

    @abc.abstractmethod
    def raw_percentage(self, hours: float, room_temp_c: float, fridge_temp_c: float) -> float:
        """Unclamped fresh-yeast % of flour."""
        raise NotImplementedError

    def yeast_percentage(self, hours: float, room_temp_c: float, fridge_temp_c: float) -> float:
        value = self.raw_percentage(hours, room_temp_c, fridge_temp_c)
        return clamp(value, self.min_percentage, self.max_percentage)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(method={self.method.value})"
