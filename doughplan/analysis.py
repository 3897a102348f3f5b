"""Advisory flour and water analysis. Never raises."""

from __future__ import annotations

from typing import Optional

from .models import FlourAnalysis, WaterAnalysis
from .styles import DoughStyle, get_style_profile


WEAK_FLOUR_W = 200
STRONG_FLOUR_W = 350
SHORT_FERMENTATION_HOURS = 12
LONG_FERMENTATION_HOURS = 24
LOW_PROTEIN_PCT = 11.0
HIGH_PROTEIN_PCT = 14.0
HIGH_HYDRATION_PCT = 65.0
HYDRATION_MARGIN = 5.0

SOFT_WATER_PPM = 50
HARD_WATER_PPM = 200
VERY_HARD_WATER_PPM = 300
ACIDIC_PH = 6.5
ALKALINE_PH = 8.0


def suggested_hydration_window(strength_w: int) -> tuple[float, float]:
    """Hydration range a flour of strength ``W`` absorbs comfortably."""
    return (
        55 + (strength_w - 200) * 0.05,
        65 + (strength_w - 200) * 0.08,
    )


def analyze_flour(
    style: DoughStyle,
    hydration_pct: float,
    fermentation_hours: float,
    strength_w: Optional[int] = None,
    protein_pct: Optional[float] = None,
) -> FlourAnalysis:
    warnings: list[str] = []
    recommendations: list[str] = []
    suggested_min = suggested_max = None

    if strength_w is not None:
        if strength_w < WEAK_FLOUR_W:
            warnings.append("Weak flour (W<200) may not hold up to a long fermentation.")
            if fermentation_hours > SHORT_FERMENTATION_HOURS:
                recommendations.append(
                    "Shorten fermentation to at most 12 h or use a stronger flour."
                )
        elif strength_w > STRONG_FLOUR_W:
            recommendations.append("Strong flour (W>350) suits 48-72 h fermentation.")
            if fermentation_hours < LONG_FERMENTATION_HOURS:
                recommendations.append("You can extend fermentation for deeper flavour.")

        suggested_min, suggested_max = suggested_hydration_window(strength_w)
        if hydration_pct < suggested_min - HYDRATION_MARGIN:
            recommendations.append(
                f"For W={strength_w} flour you can raise hydration to "
                f"{suggested_min:.0f}-{suggested_max:.0f}%."
            )
        elif hydration_pct > suggested_max + HYDRATION_MARGIN:
            warnings.append(
                f"Hydration {hydration_pct:.0f}% may be too high for W={strength_w} flour; "
                "the dough may be too sticky."
            )

    if protein_pct is not None:
        if protein_pct < LOW_PROTEIN_PCT and hydration_pct > HIGH_HYDRATION_PCT:
            warnings.append(
                f"Low-protein flour ({protein_pct:.1f}%) may struggle with "
                f"{hydration_pct:.0f}% hydration."
            )
        if protein_pct > HIGH_PROTEIN_PCT and style == DoughStyle.NEAPOLITAN:
            recommendations.append("High-protein flour: consider a longer autolyse (30-60 min).")

    if style == DoughStyle.NEAPOLITAN and strength_w is not None and not 250 <= strength_w <= 320:
        recommendations.append("Neapolitan dough works best with W=260-300 flour.")
    elif style == DoughStyle.NEW_YORK and protein_pct is not None and protein_pct < 12:
        recommendations.append("New York style wants high-gluten flour (12.5%+ protein).")

    profile = get_style_profile(style)
    if not profile.min_hydration <= hydration_pct <= profile.max_hydration:
        warnings.append(
            f"Hydration {hydration_pct:.1f}% is outside the usual "
            f"{profile.min_hydration:.0f}-{profile.max_hydration:.0f}% for {profile.display_name}."
        )

    return FlourAnalysis(
        strength_w=strength_w,
        protein_pct=protein_pct,
        suggested_min_hydration=suggested_min,
        suggested_max_hydration=suggested_max,
        warnings=warnings,
        recommendations=recommendations,
    )


def analyze_water(hardness_ppm: Optional[float] = None, ph: Optional[float] = None) -> WaterAnalysis:
    effects: list[str] = []
    recommendations: list[str] = []
    fermentation_modifier = 1.0
    gluten_modifier = 1.0

    if hardness_ppm is not None:
        if hardness_ppm < SOFT_WATER_PPM:
            effects.append("Very soft water: faster fermentation, weaker gluten.")
            fermentation_modifier *= 1.1
            gluten_modifier *= 0.95
            recommendations.append("Add a pinch of mineral salt or use harder water.")
        elif hardness_ppm > HARD_WATER_PPM:
            effects.append("Hard water: slower fermentation, stronger gluten.")
            fermentation_modifier *= 0.9
            gluten_modifier *= 1.05
            if hardness_ppm > VERY_HARD_WATER_PPM:
                recommendations.append("Very hard water can inhibit yeast. Consider filtering.")
        else:
            effects.append("Moderate water hardness, ideal for dough.")

    if ph is not None:
        if ph < ACIDIC_PH:
            effects.append("Acidic water (pH<6.5) may speed up fermentation.")
            fermentation_modifier *= 1.05
        elif ph > ALKALINE_PH:
            effects.append("Alkaline water (pH>8.0) may slow fermentation.")
            fermentation_modifier *= 0.95
            recommendations.append("Use lower-pH water or a few drops of lemon juice.")

    return WaterAnalysis(
        hardness_ppm=hardness_ppm,
        ph=ph,
        fermentation_modifier=round(fermentation_modifier, 2),
        gluten_modifier=round(gluten_modifier, 2),
        effects=effects,
        recommendations=recommendations,
    )
