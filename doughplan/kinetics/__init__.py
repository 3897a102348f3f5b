"""Fermentation kinetics strategies keyed by fermentation method."""

from __future__ import annotations

import logging

from ..errors import UnsupportedMethod
from ..models import FermentationMethod
from .base import FermentationStrategy, cold_activity, q10_factor
from .cold import ColdFermentationStrategy
from .mixed import MixedFermentationStrategy
from .room import RoomTemperatureStrategy
from .same_day import SameDayStrategy

logger = logging.getLogger(__name__)

# Populated at import with the built-in strategies. Callers may register
# additional ones (or replace a built-in) with :func:`register_strategy`.
STRATEGIES: dict[FermentationMethod, FermentationStrategy] = {}


def register_strategy(strategy: FermentationStrategy) -> None:
    """Make ``strategy`` the handler for ``strategy.method``."""
    if strategy.method in STRATEGIES:
        logger.info(f"Replacing fermentation strategy for {strategy.method.value}")
    STRATEGIES[strategy.method] = strategy


def get_strategy(method: FermentationMethod) -> FermentationStrategy:
    try:
        return STRATEGIES[method]
    except KeyError:
        raise UnsupportedMethod(
            f"No fermentation strategy registered for {method}", method=str(method)
        ) from None


def yeast_percentage(
    method: FermentationMethod, hours: float, room_temp_c: float, fridge_temp_c: float
) -> float:
    """Fresh-yeast % of flour for ``method``."""
    return get_strategy(method).yeast_percentage(hours, room_temp_c, fridge_temp_c)


for _strategy in (
    RoomTemperatureStrategy(),
    ColdFermentationStrategy(),
    MixedFermentationStrategy(),
    SameDayStrategy(),
):
    register_strategy(_strategy)


__all__ = [
    "FermentationStrategy",
    "RoomTemperatureStrategy",
    "ColdFermentationStrategy",
    "MixedFermentationStrategy",
    "SameDayStrategy",
    "STRATEGIES",
    "register_strategy",
    "get_strategy",
    "yeast_percentage",
    "q10_factor",
    "cold_activity",
]
