"""Baker's-percentage arithmetic and mass rounding."""

from __future__ import annotations

from .constants import PERCENTAGE_BASE

MASS_PRECISION = 1
YEAST_PRECISION = 2


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def grams_from_percentage(flour_grams: float, percentage: float) -> float:
    """Mass of an ingredient given as a percentage of flour."""
    return flour_grams * percentage / PERCENTAGE_BASE


def percentage_of(part_grams: float, flour_grams: float) -> float:
    if flour_grams <= 0:
        return 0.0
    return part_grams / flour_grams * PERCENTAGE_BASE


def flour_for_total(total_grams: float, percentages: list[float], fixed_grams: float = 0.0) -> float:
    """Solve the flour mass so flour plus every percentage adds up to ``total_grams``.

    ``fixed_grams`` covers ingredients given as absolute masses (for example a
    sourdough starter) rather than as a share of flour.
    """
    denominator = PERCENTAGE_BASE + sum(percentages)
    return (total_grams - fixed_grams) * PERCENTAGE_BASE / denominator


def round_mass(grams: float) -> float:
    return round(grams, MASS_PRECISION)


def round_yeast(grams: float) -> float:
    return round(grams, YEAST_PRECISION)


def round_percentage(percentage: float, digits: int = 3) -> float:
    return round(percentage, digits)
