"""Formulation engine: request in, absolute ingredient masses out."""

from __future__ import annotations

import logging

from . import kinetics
from .analysis import analyze_flour, analyze_water
from .constants import (
    FOLD_HYDRATION_THRESHOLD,
    HIGH_TEMPERATURE_THRESHOLD,
    MAX_ALTITUDE,
    MAX_BALL_WEIGHT,
    MAX_EXTRA_PERCENTAGE,
    MAX_FERMENTATION_HOURS,
    MAX_FRIDGE_TEMPERATURE,
    MAX_HYDRATION,
    MAX_OIL,
    MAX_ROOM_TEMPERATURE,
    MAX_SALT,
    MAX_SUGAR,
    MIN_BALL_WEIGHT,
    MIN_FERMENTATION_HOURS,
    MIN_FRIDGE_TEMPERATURE,
    MIN_HYDRATION,
    MIN_ROOM_TEMPERATURE,
    MIN_SALT,
)
from .ddt import calculate_water_temperature
from .environment import (
    EnvironmentInput,
    calculate_corrections,
    corrected_hydration,
    corrected_yeast,
    kinetic_hours,
)
from .errors import ImpossibleFormulation, InvalidPreferment, ValidationError
from .models import (
    BakerPercentages,
    EnvironmentalCorrections,
    FermentationMethod,
    FormulationRequest,
    FormulationResult,
    Ingredients,
    MainDough,
    PrefermentSpec,
    PrefermentSplit,
    YeastKind,
)
from .styles import DoughStyle, get_style_profile
from .units import (
    flour_for_total,
    grams_from_percentage,
    percentage_of,
    round_mass,
    round_percentage,
    round_yeast,
)

logger = logging.getLogger(__name__)

LOW_HYDRATION_TIP_THRESHOLD = 55.0


def _check_range(
    violations: dict[str, str], field: str, value: float | None, lower: float, upper: float
) -> None:
    if value is None:
        return
    if not lower <= value <= upper:
        violations[field] = f"must be between {lower:g} and {upper:g}, got {value:g}"


def validate_request(request: FormulationRequest) -> None:
    """Check absolute bounds, raising :class:`ValidationError` with every violation."""
    violations: dict[str, str] = {}
    _check_range(violations, "hydration_pct", request.hydration_pct, MIN_HYDRATION, MAX_HYDRATION)
    _check_range(violations, "salt_pct", request.salt_pct, MIN_SALT, MAX_SALT)
    _check_range(violations, "oil_pct", request.oil_pct, 0.0, MAX_OIL)
    _check_range(violations, "sugar_pct", request.sugar_pct, 0.0, MAX_SUGAR)
    _check_range(
        violations,
        "total_fermentation_hours",
        request.total_fermentation_hours,
        MIN_FERMENTATION_HOURS,
        MAX_FERMENTATION_HOURS,
    )
    _check_range(
        violations, "ball_weight_grams", request.ball_weight_grams, MIN_BALL_WEIGHT, MAX_BALL_WEIGHT
    )
    _check_range(
        violations, "room_temp_c", request.room_temp_c, MIN_ROOM_TEMPERATURE, MAX_ROOM_TEMPERATURE
    )
    _check_range(
        violations,
        "fridge_temp_c",
        request.fridge_temp_c,
        MIN_FRIDGE_TEMPERATURE,
        MAX_FRIDGE_TEMPERATURE,
    )
    _check_range(violations, "altitude_m", request.altitude_m, 0.0, MAX_ALTITUDE)
    _check_range(violations, "humidity_pct", request.humidity_pct, 0.0, 100.0)
    _check_range(violations, "weather_humidity_pct", request.weather_humidity_pct, 0.0, 100.0)

    if request.number_of_units < 1:
        violations["number_of_units"] = f"must be at least 1, got {request.number_of_units}"
    for extra in request.extras:
        _check_range(
            violations, f"extras.{extra.name}", extra.percentage, 0.0, MAX_EXTRA_PERCENTAGE
        )
    if request.yeast_pct_override is not None and request.yeast_pct_override <= 0:
        violations["yeast_pct_override"] = "must be positive"
    if request.yeast_kind == YeastKind.SOURDOUGH:
        if request.starter_grams is None:
            violations["starter_grams"] = "required for sourdough"
        elif request.starter_grams <= 0:
            violations["starter_grams"] = "must be positive"
    if request.autolyse_minutes is not None and request.autolyse_minutes < 0:
        violations["autolyse_minutes"] = "must not be negative"

    if violations:
        raise ValidationError(violations)


def _validate_preferment(preferment: PrefermentSpec) -> None:
    if not 0 < preferment.percentage < 100:
        raise InvalidPreferment(
            "Preferment percentage must be strictly between 0 and 100",
            percentage=preferment.percentage,
        )
    if preferment.hours <= 0:
        raise InvalidPreferment(
            "Preferment hours must be positive", hours=preferment.hours
        )


def resolve_fresh_yeast_percentage(
    request: FormulationRequest, hours: float, corrections: EnvironmentalCorrections
) -> float:
    """Fresh-yeast % of flour after the altitude correction."""
    if request.yeast_pct_override is not None:
        base = request.yeast_pct_override
    else:
        base = kinetics.yeast_percentage(
            request.fermentation_method, hours, request.room_temp_c, request.fridge_temp_c
        )
    return corrected_yeast(base, corrections)


def _split_preferment(
    preferment: PrefermentSpec, ingredients: Ingredients, yeast_kind: YeastKind
) -> tuple[PrefermentSplit, MainDough]:
    pf_flour = round_mass(grams_from_percentage(ingredients.flour, preferment.percentage))
    pf_water = round_mass(grams_from_percentage(pf_flour, preferment.type.hydration))
    factor = yeast_kind.conversion_factor or 0.0
    pf_yeast = round_yeast(
        grams_from_percentage(pf_flour, preferment.type.yeast_percentage) * factor
    )
    pf_yeast = min(pf_yeast, ingredients.yeast)

    main_flour = round(ingredients.flour - pf_flour, 2)
    main_water = round(ingredients.water - pf_water, 2)
    main_yeast = round(ingredients.yeast - pf_yeast, 2)
    negative = {
        name: value
        for name, value in (("flour", main_flour), ("water", main_water), ("yeast", main_yeast))
        if value < 0
    }
    if negative:
        raise ImpossibleFormulation(
            f"{preferment.type.value} at {preferment.percentage:g}% leaves a negative main dough",
            **{f"main_{name}": value for name, value in negative.items()},
        )

    split = PrefermentSplit(
        type=preferment.type,
        flour=pf_flour,
        water=pf_water,
        yeast=pf_yeast,
        hours=preferment.hours,
    )
    main = MainDough(
        flour=main_flour,
        water=main_water,
        salt=ingredients.salt,
        yeast=main_yeast,
        oil=ingredients.oil,
        sugar=ingredients.sugar,
        extras=dict(ingredients.extras),
    )
    return split, main


def _tips(request: FormulationRequest, hydration_pct: float) -> list[str]:
    tips: list[str] = []
    if hydration_pct >= FOLD_HYDRATION_THRESHOLD:
        tips.append("At 70%+ hydration use stretch-and-folds instead of intensive kneading.")
        tips.append("Wet your hands when balling to keep the dough from sticking.")
    if hydration_pct < LOW_HYDRATION_TIP_THRESHOLD:
        tips.append("Low hydration gives a stiffer dough, good for New York or thin crust.")
    if request.fermentation_method == FermentationMethod.COLD_FERMENTATION:
        tips.append("A long cold fermentation develops deeper flavour and better digestibility.")
        tips.append("Take the dough out of the fridge at least 2 hours before baking.")
    if request.style == DoughStyle.NEAPOLITAN:
        tips.append("Look for leopard spotting on the underside and a puffy, lightly charred rim.")
    if request.room_temp_c > HIGH_TEMPERATURE_THRESHOLD:
        tips.append("Above 26°C fermentation speeds up; shorten the time or use less yeast.")
    if request.yeast_kind == YeastKind.SOURDOUGH:
        tips.append("Use the starter at its peak, a few hours after feeding.")
    return tips


def compute_formulation(request: FormulationRequest) -> FormulationResult:
    """Turn baking parameters into absolute masses.

    Raises:
        ValidationError: a field is outside its absolute bounds.
        InvalidPreferment: preferment percentage not strictly between 0 and 100.
        ImpossibleFormulation: the inputs leave a negative ingredient mass.
        UnsupportedMethod: no kinetics strategy for the fermentation method.
    """
    validate_request(request)
    if request.preferment is not None:
        _validate_preferment(request.preferment)

    profile = get_style_profile(request.style)
    total = request.total_dough_grams

    corrections = calculate_corrections(
        EnvironmentInput(
            hydration_pct=request.hydration_pct,
            room_temp_c=request.room_temp_c,
            altitude_m=request.altitude_m,
            humidity_pct=request.humidity_pct,
            weather_temp_c=request.weather_temp_c,
            weather_humidity_pct=request.weather_humidity_pct,
        )
    )
    hydration = corrected_hydration(request.hydration_pct, corrections)
    hours = kinetic_hours(request.total_fermentation_hours, corrections)

    fixed_grams = 0.0
    if request.yeast_kind == YeastKind.SOURDOUGH:
        fresh_pct = 0.0
        yeast_pct = 0.0
        fixed_grams = request.starter_grams or 0.0
    else:
        fresh_pct = resolve_fresh_yeast_percentage(request, hours, corrections)
        yeast_pct = fresh_pct * request.yeast_kind.conversion_factor

    extra_pcts = {extra.name: extra.percentage for extra in request.extras}
    flour_raw = flour_for_total(
        total,
        [hydration, request.salt_pct, request.oil_pct, request.sugar_pct, yeast_pct]
        + list(extra_pcts.values()),
        fixed_grams=fixed_grams,
    )
    if flour_raw <= 0:
        raise ImpossibleFormulation(
            "Fixed ingredient masses exceed the total dough weight",
            total_dough_grams=total,
            fixed_grams=fixed_grams,
        )

    water = round_mass(grams_from_percentage(flour_raw, hydration))
    salt = round_mass(grams_from_percentage(flour_raw, request.salt_pct))
    oil = round_mass(grams_from_percentage(flour_raw, request.oil_pct))
    sugar = round_mass(grams_from_percentage(flour_raw, request.sugar_pct))
    if fixed_grams:
        yeast = round_mass(fixed_grams)
    else:
        yeast = round_yeast(grams_from_percentage(flour_raw, yeast_pct))
    extras = {
        name: round_mass(grams_from_percentage(flour_raw, pct)) for name, pct in extra_pcts.items()
    }
    # flour takes the rounding residue so the masses add up to the total
    flour = round(total - (water + salt + oil + sugar + yeast + sum(extras.values())), 2)

    ingredients = Ingredients(
        flour=flour, water=water, salt=salt, yeast=yeast, oil=oil, sugar=sugar, extras=extras
    )
    percentages = BakerPercentages(
        water=round_percentage(hydration),
        salt=round_percentage(request.salt_pct),
        yeast=round_percentage(percentage_of(yeast, flour) if fixed_grams else yeast_pct),
        oil=round_percentage(request.oil_pct),
        sugar=round_percentage(request.sugar_pct),
        extras={name: round_percentage(pct) for name, pct in extra_pcts.items()},
    )

    preferment_split = main_dough = None
    if request.preferment is not None:
        preferment_split, main_dough = _split_preferment(
            request.preferment, ingredients, request.yeast_kind
        )

    ddt = None
    if request.wants_ddt:
        ddt = calculate_water_temperature(
            target_dough_temp_c=profile.target_dough_temp_c,
            room_temp_c=request.room_temp_c,
            flour_temp_c=request.flour_temp_c,
            preferment_temp_c=request.preferment_temp_c,
            mixer=request.mixer_type,
            use_preferment=request.preferment is not None,
        )

    flour_analysis = analyze_flour(
        request.style,
        hydration,
        request.total_fermentation_hours,
        strength_w=request.flour_strength_w,
        protein_pct=request.flour_protein_pct,
    )
    water_analysis = analyze_water(request.water_hardness_ppm, request.water_ph)

    result = FormulationResult(
        total_dough_grams=total,
        ingredients=ingredients,
        percentages=percentages,
        preferment=preferment_split,
        main_dough=main_dough,
        ddt=ddt,
        environment=corrections,
        flour_analysis=flour_analysis,
        water_analysis=water_analysis,
        yeast_kind=request.yeast_kind,
        fresh_yeast_pct=round_percentage(fresh_pct, 4),
        kinetic_hours=round(hours, 3),
        tips=_tips(request, hydration),
        style=request.style,
        fermentation_method=request.fermentation_method,
        total_fermentation_hours=request.total_fermentation_hours,
        room_temp_c=request.room_temp_c,
        fridge_temp_c=request.fridge_temp_c,
        hydration_pct=hydration,
        number_of_units=request.number_of_units,
        ball_weight_grams=request.ball_weight_grams,
        autolyse_minutes=request.autolyse_minutes,
    )
    logger.info(
        f"Formulated {request.number_of_units}x{request.ball_weight_grams:g}g "
        f"{request.style.value}: flour={flour}g water={water}g yeast={yeast}g "
        f"({request.yeast_kind.value}, {request.fermentation_method.value} {hours:.1f}h)"
    )
    return result


__all__ = ["compute_formulation", "validate_request", "resolve_fresh_yeast_percentage"]
