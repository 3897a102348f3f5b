"""Tests for the formulation engine."""

import pytest

from doughplan import (
    DoughStyle,
    FermentationMethod,
    FormulationRequest,
    ImpossibleFormulation,
    InvalidPreferment,
    MixerType,
    PrefermentSpec,
    PrefermentType,
    ValidationError,
    YeastKind,
    compute_formulation,
)


def _scenario_a(**overrides) -> FormulationRequest:
    values = dict(
        style=DoughStyle.NEAPOLITAN,
        number_of_units=4,
        ball_weight_grams=250,
        hydration_pct=65,
        salt_pct=2.5,
        yeast_kind=YeastKind.FRESH,
        fermentation_method=FermentationMethod.ROOM_TEMPERATURE,
        total_fermentation_hours=8,
        room_temp_c=24,
    )
    values.update(overrides)
    return FormulationRequest(**values)


def test_scenario_a_room_temperature():
    result = compute_formulation(_scenario_a())
    yeast_pct = 0.5 * (6 / 8) / 2 ** ((24 - 27) / 10)
    flour = 1000 * 100 / (100 + 65 + 2.5 + yeast_pct)

    assert result.fresh_yeast_pct == pytest.approx(yeast_pct, abs=1e-4)
    assert result.total_dough_grams == 1000
    assert result.ingredients.flour == pytest.approx(flour, abs=0.2)
    assert result.ingredients.water == pytest.approx(flour * 0.65, abs=0.1)
    assert result.ingredients.yeast == pytest.approx(flour * yeast_pct / 100, abs=0.01)
    assert result.ingredients.total() == pytest.approx(1000, abs=0.5)
    assert result.percentages.flour == 100.0
    assert result.ddt is None
    assert result.preferment is None


def test_scenario_b_cold_uses_less_yeast():
    room = compute_formulation(_scenario_a())
    cold = compute_formulation(
        _scenario_a(
            fermentation_method=FermentationMethod.COLD_FERMENTATION,
            total_fermentation_hours=24,
            fridge_temp_c=4,
        )
    )
    assert cold.fresh_yeast_pct < room.fresh_yeast_pct


@pytest.mark.parametrize("style", list(DoughStyle))
@pytest.mark.parametrize("method", list(FermentationMethod))
def test_masses_sum_to_total(style, method):
    request = FormulationRequest.for_style(
        style,
        number_of_units=3,
        fermentation_method=method,
        yeast_kind=YeastKind.INSTANT_DRY,
        humidity_pct=75,
    )
    result = compute_formulation(request)
    assert result.ingredients.total() == pytest.approx(result.total_dough_grams, abs=0.5)


@pytest.mark.parametrize("hydration", [45.0, 95.0])
def test_hydration_bounds_accepted(hydration):
    result = compute_formulation(_scenario_a(hydration_pct=hydration))
    assert result.hydration_pct == hydration


@pytest.mark.parametrize("hydration", [44.99, 95.01])
def test_hydration_bounds_rejected(hydration):
    with pytest.raises(ValidationError) as exc_info:
        compute_formulation(_scenario_a(hydration_pct=hydration))
    assert "hydration_pct" in exc_info.value.violations


def test_validation_reports_every_violation():
    request = _scenario_a(
        salt_pct=6, number_of_units=0, fridge_temp_c=15, altitude_m=6000, total_fermentation_hours=200
    )
    with pytest.raises(ValidationError) as exc_info:
        compute_formulation(request)
    assert set(exc_info.value.violations) == {
        "salt_pct",
        "number_of_units",
        "fridge_temp_c",
        "altitude_m",
        "total_fermentation_hours",
    }
    assert exc_info.value.as_dict()["code"] == "VALIDATION_ERROR"


def test_style_range_only_warns():
    result = compute_formulation(_scenario_a(hydration_pct=80))
    assert any("outside the usual" in w for w in result.flour_analysis.warnings)


def test_dry_yeast_conversion():
    fresh = compute_formulation(_scenario_a())
    instant = compute_formulation(_scenario_a(yeast_kind=YeastKind.INSTANT_DRY))
    assert instant.fresh_yeast_pct == fresh.fresh_yeast_pct
    assert instant.percentages.yeast == pytest.approx(fresh.fresh_yeast_pct * 0.33, abs=1e-3)


def test_yeast_override_is_fresh_equivalent():
    result = compute_formulation(
        _scenario_a(yeast_pct_override=0.2, yeast_kind=YeastKind.ACTIVE_DRY)
    )
    assert result.fresh_yeast_pct == pytest.approx(0.2)
    assert result.percentages.yeast == pytest.approx(0.08)


def test_sourdough_requires_starter():
    with pytest.raises(ValidationError) as exc_info:
        compute_formulation(_scenario_a(yeast_kind=YeastKind.SOURDOUGH))
    assert "starter_grams" in exc_info.value.violations


def test_sourdough_uses_starter_mass():
    result = compute_formulation(_scenario_a(yeast_kind=YeastKind.SOURDOUGH, starter_grams=200))
    assert result.ingredients.yeast == 200
    assert result.fresh_yeast_pct == 0
    assert result.ingredients.total() == pytest.approx(1000, abs=0.5)
    assert result.ingredients.flour == pytest.approx(800 * 100 / 167.5, abs=0.2)


def test_starter_heavier_than_dough_is_impossible():
    with pytest.raises(ImpossibleFormulation):
        compute_formulation(_scenario_a(yeast_kind=YeastKind.SOURDOUGH, starter_grams=1200))


def test_altitude_and_humidity_corrections():
    base = compute_formulation(_scenario_a())
    high = compute_formulation(_scenario_a(altitude_m=1500, humidity_pct=80))
    assert high.hydration_pct == pytest.approx(66.5)
    assert high.environment.yeast_adjustment_pct == pytest.approx(-7.5)
    assert high.kinetic_hours == pytest.approx(8 / 0.88, abs=1e-3)
    assert high.fresh_yeast_pct < base.fresh_yeast_pct


def test_poolish_split():
    result = compute_formulation(
        _scenario_a(preferment=PrefermentSpec(type=PrefermentType.POOLISH, percentage=30, hours=12))
    )
    split = result.preferment
    main = result.main_dough
    assert split is not None and main is not None
    assert split.water == split.flour
    assert split.flour == pytest.approx(result.ingredients.flour * 0.3, abs=0.1)
    assert split.yeast <= result.ingredients.yeast
    assert main.flour + split.flour == pytest.approx(result.ingredients.flour)
    assert main.water + split.water == pytest.approx(result.ingredients.water)
    assert main.salt == result.ingredients.salt


def test_preferment_yeast_capped_at_total():
    result = compute_formulation(
        _scenario_a(
            fermentation_method=FermentationMethod.COLD_FERMENTATION,
            total_fermentation_hours=96,
            yeast_kind=YeastKind.INSTANT_DRY,
            preferment=PrefermentSpec(type=PrefermentType.BIGA, percentage=90),
            hydration_pct=60,
        )
    )
    assert result.preferment.yeast <= result.ingredients.yeast
    assert result.main_dough.yeast >= 0


@pytest.mark.parametrize("percentage", [0, -5, 100, 120])
def test_invalid_preferment_percentage(percentage):
    with pytest.raises(InvalidPreferment):
        compute_formulation(_scenario_a(preferment=PrefermentSpec(percentage=percentage)))


def test_preferment_wetter_than_dough_is_impossible():
    request = _scenario_a(
        hydration_pct=60,
        preferment=PrefermentSpec(type=PrefermentType.POOLISH, percentage=90),
    )
    with pytest.raises(ImpossibleFormulation) as exc_info:
        compute_formulation(request)
    assert "main_water" in exc_info.value.details


def test_ddt_runs_when_mixer_given():
    result = compute_formulation(_scenario_a(mixer_type=MixerType.SPIRAL_MIXER))
    assert result.ddt is not None
    # 24 × 3 - 24 - 24 - 0.9 × 6
    assert result.ddt.target_water_temp_c == pytest.approx(18.6)


def test_ddt_uses_four_factor_with_preferment():
    result = compute_formulation(
        _scenario_a(preferment=PrefermentSpec(), preferment_temp_c=18)
    )
    # 24 × 4 - 24 - 24 - 18 - 0.3 × 12
    assert result.ddt.target_water_temp_c == pytest.approx(26.4)


def test_extras_are_part_of_the_total():
    result = compute_formulation(
        _scenario_a(extras=[{"name": "semolina", "percentage": 5}])
    )
    assert "semolina" in result.ingredients.extras
    assert result.ingredients.total() == pytest.approx(1000, abs=0.5)


def test_extra_out_of_range():
    with pytest.raises(ValidationError) as exc_info:
        compute_formulation(_scenario_a(extras=[{"name": "malt", "percentage": 40}]))
    assert "extras.malt" in exc_info.value.violations


def test_result_is_frozen():
    result = compute_formulation(_scenario_a())
    with pytest.raises(Exception):
        result.total_dough_grams = 5
