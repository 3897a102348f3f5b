"""Tests for environmental corrections."""

import math

import pytest

from doughplan.environment import (
    EnvironmentInput,
    calculate_corrections,
    corrected_hydration,
    corrected_yeast,
    estimated_pressure,
    fermentation_correction,
    hydration_correction,
    kinetic_hours,
    yeast_correction,
)


def test_hydration_correction_is_clamped():
    assert hydration_correction(50) == 0
    assert hydration_correction(80) == pytest.approx(1.5)
    assert hydration_correction(0) == pytest.approx(-2.5)
    assert hydration_correction(200) == 3.0


def test_yeast_correction_only_above_threshold():
    assert yeast_correction(None) == 0
    assert yeast_correction(500) == 0
    assert yeast_correction(2000) == pytest.approx(-10.0)
    assert yeast_correction(5000) == -20.0


def test_fermentation_correction_combines_altitude_and_weather():
    assert fermentation_correction(1000, None) == pytest.approx(-8.0)
    assert fermentation_correction(None, 24) == pytest.approx(-10.0)
    assert fermentation_correction(1000, 24) == pytest.approx(-18.0)
    assert fermentation_correction(None, 40) == -30.0
    assert fermentation_correction(None, 5) == 50.0


def test_estimated_pressure():
    assert estimated_pressure(0) == pytest.approx(1013.25)
    assert estimated_pressure(8500) == pytest.approx(1013.25 / math.e)


def test_humidity_falls_back_to_weather_then_base():
    assert EnvironmentInput(hydration_pct=65, weather_humidity_pct=70).effective_humidity == 70
    assert EnvironmentInput(hydration_pct=65).effective_humidity == 50
    assert EnvironmentInput(
        hydration_pct=65, humidity_pct=40, weather_humidity_pct=70
    ).effective_humidity == 40


def test_corrections_applied_and_reclamped():
    corrections = calculate_corrections(
        EnvironmentInput(hydration_pct=94, humidity_pct=100, altitude_m=2000, weather_temp_c=16)
    )
    assert corrections.hydration_adjustment == 2.5
    assert corrected_hydration(94, corrections) == 95.0
    assert corrected_yeast(1.0, corrections) == pytest.approx(0.9)
    # -16 % altitude, +30 % cool weather
    assert corrections.fermentation_adjustment_pct == pytest.approx(14.0)
    assert kinetic_hours(8, corrections) == pytest.approx(8 / 1.14)


def test_kinetic_hours_stays_in_bounds():
    corrections = calculate_corrections(EnvironmentInput(hydration_pct=65, weather_temp_c=40))
    assert kinetic_hours(168, corrections) == 168.0


def test_recommendations():
    calm = calculate_corrections(EnvironmentInput(hydration_pct=65))
    assert calm.recommendations == ["Environmental conditions are optimal for fermentation."]

    harsh = calculate_corrections(
        EnvironmentInput(hydration_pct=65, humidity_pct=85, altitude_m=1500, room_temp_c=30)
    )
    text = " ".join(harsh.recommendations)
    assert "humidity" in text
    assert "High altitude" in text
    assert "Warm room" in text


def test_humidity_advice_follows_hydration_adjustment():
    humid = calculate_corrections(EnvironmentInput(hydration_pct=65, humidity_pct=85))
    assert humid.hydration_adjustment > 0
    assert any("hydration raised" in r for r in humid.recommendations)

    dry = calculate_corrections(EnvironmentInput(hydration_pct=65, humidity_pct=20))
    assert dry.hydration_adjustment < 0
    assert any("hydration lowered" in r for r in dry.recommendations)
