"""Dough style profiles and equipment tables."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .constants import DEFAULT_DOUGH_TEMPERATURE


class DoughStyle(str, Enum):
    NEAPOLITAN = "neapolitan"
    NEW_YORK = "new_york"
    ROMAN = "roman"
    DETROIT = "detroit"
    CHICAGO_DEEP_DISH = "chicago_deep_dish"
    SICILIAN = "sicilian"
    FOCACCIA = "focaccia"
    PIZZA_BIANCA = "pizza_bianca"
    GRANDMA = "grandma"
    PAN = "pan"
    THIN_CRUST = "thin_crust"
    TAVERN_STYLE = "tavern_style"
    PINSA_ROMANA = "pinsa_romana"
    CUSTOM = "custom"


class StyleProfile(BaseModel):
    """Defaults and recommended ranges for one dough style."""

    model_config = ConfigDict(frozen=True)

    display_name: str
    default_hydration: float
    min_hydration: float
    max_hydration: float
    default_ball_weight: int
    default_fermentation_hours: int
    default_salt: float
    default_oil: float
    default_sugar: float
    oven_temperature_c: int
    baking_seconds: int
    target_dough_temp_c: float = DEFAULT_DOUGH_TEMPERATURE


STYLE_PROFILES: dict[DoughStyle, StyleProfile] = {
    DoughStyle.NEAPOLITAN: StyleProfile(
        display_name="Neapolitan",
        default_hydration=65.0, min_hydration=60.0, max_hydration=70.0,
        default_ball_weight=250, default_fermentation_hours=24,
        default_salt=2.8, default_oil=0.0, default_sugar=0.0,
        oven_temperature_c=450, baking_seconds=90, target_dough_temp_c=24.0,
    ),
    DoughStyle.NEW_YORK: StyleProfile(
        display_name="New York",
        default_hydration=60.0, min_hydration=55.0, max_hydration=65.0,
        default_ball_weight=280, default_fermentation_hours=24,
        default_salt=2.5, default_oil=2.0, default_sugar=1.0,
        oven_temperature_c=290, baking_seconds=420, target_dough_temp_c=24.0,
    ),
    DoughStyle.ROMAN: StyleProfile(
        display_name="Roman (scrocchiarella)",
        default_hydration=70.0, min_hydration=65.0, max_hydration=80.0,
        default_ball_weight=220, default_fermentation_hours=48,
        default_salt=2.5, default_oil=3.0, default_sugar=0.0,
        oven_temperature_c=350, baking_seconds=180, target_dough_temp_c=23.0,
    ),
    DoughStyle.DETROIT: StyleProfile(
        display_name="Detroit",
        default_hydration=70.0, min_hydration=65.0, max_hydration=75.0,
        default_ball_weight=350, default_fermentation_hours=4,
        default_salt=2.5, default_oil=4.0, default_sugar=2.0,
        oven_temperature_c=250, baking_seconds=900, target_dough_temp_c=25.0,
    ),
    DoughStyle.CHICAGO_DEEP_DISH: StyleProfile(
        display_name="Chicago deep dish",
        default_hydration=55.0, min_hydration=50.0, max_hydration=60.0,
        default_ball_weight=400, default_fermentation_hours=24,
        default_salt=2.0, default_oil=5.0, default_sugar=1.0,
        oven_temperature_c=220, baking_seconds=1800,
    ),
    DoughStyle.SICILIAN: StyleProfile(
        display_name="Sicilian (sfincione)",
        default_hydration=65.0, min_hydration=60.0, max_hydration=70.0,
        default_ball_weight=350, default_fermentation_hours=12,
        default_salt=2.5, default_oil=3.0, default_sugar=0.0,
        oven_temperature_c=250, baking_seconds=1200, target_dough_temp_c=24.0,
    ),
    DoughStyle.FOCACCIA: StyleProfile(
        display_name="Focaccia",
        default_hydration=75.0, min_hydration=70.0, max_hydration=85.0,
        default_ball_weight=300, default_fermentation_hours=8,
        default_salt=2.5, default_oil=6.0, default_sugar=0.0,
        oven_temperature_c=220, baking_seconds=1500, target_dough_temp_c=25.0,
    ),
    DoughStyle.PIZZA_BIANCA: StyleProfile(
        display_name="Pizza bianca",
        default_hydration=80.0, min_hydration=75.0, max_hydration=85.0,
        default_ball_weight=280, default_fermentation_hours=72,
        default_salt=2.8, default_oil=4.0, default_sugar=0.0,
        oven_temperature_c=300, baking_seconds=420,
    ),
    DoughStyle.GRANDMA: StyleProfile(
        display_name="Grandma",
        default_hydration=60.0, min_hydration=55.0, max_hydration=65.0,
        default_ball_weight=300, default_fermentation_hours=6,
        default_salt=2.5, default_oil=3.0, default_sugar=1.0,
        oven_temperature_c=260, baking_seconds=900, target_dough_temp_c=24.0,
    ),
    DoughStyle.PAN: StyleProfile(
        display_name="Pan",
        default_hydration=65.0, min_hydration=60.0, max_hydration=70.0,
        default_ball_weight=320, default_fermentation_hours=8,
        default_salt=2.5, default_oil=4.0, default_sugar=2.0,
        oven_temperature_c=250, baking_seconds=1200, target_dough_temp_c=26.0,
    ),
    DoughStyle.THIN_CRUST: StyleProfile(
        display_name="Thin crust",
        default_hydration=55.0, min_hydration=50.0, max_hydration=60.0,
        default_ball_weight=200, default_fermentation_hours=6,
        default_salt=2.5, default_oil=2.0, default_sugar=1.0,
        oven_temperature_c=280, baking_seconds=480,
    ),
    DoughStyle.TAVERN_STYLE: StyleProfile(
        display_name="Tavern style",
        default_hydration=52.0, min_hydration=48.0, max_hydration=56.0,
        default_ball_weight=220, default_fermentation_hours=4,
        default_salt=2.5, default_oil=3.0, default_sugar=2.0,
        oven_temperature_c=260, baking_seconds=600,
    ),
    DoughStyle.PINSA_ROMANA: StyleProfile(
        display_name="Pinsa romana",
        default_hydration=80.0, min_hydration=75.0, max_hydration=85.0,
        default_ball_weight=260, default_fermentation_hours=72,
        default_salt=2.5, default_oil=2.0, default_sugar=0.0,
        oven_temperature_c=350, baking_seconds=240,
    ),
    DoughStyle.CUSTOM: StyleProfile(
        display_name="Custom",
        default_hydration=62.0, min_hydration=45.0, max_hydration=90.0,
        default_ball_weight=250, default_fermentation_hours=12,
        default_salt=2.5, default_oil=0.0, default_sugar=0.0,
        oven_temperature_c=250, baking_seconds=600,
    ),
}


def get_style_profile(style: DoughStyle) -> StyleProfile:
    return STYLE_PROFILES[style]


class MixerType(str, Enum):
    """Kneading method; drives the friction term of the DDT formula."""

    HAND_KNEADING = "hand_kneading"
    FORK_MIXER = "fork_mixer"
    STAND_MIXER_HOME = "stand_mixer_home"
    STAND_MIXER_PRO = "stand_mixer_pro"
    SPIRAL_MIXER = "spiral_mixer"

    @property
    def friction_factor(self) -> float:
        """Temperature rise in °C per minute of mixing."""
        return _MIXER_TABLE[self][0]

    @property
    def typical_mixing_minutes(self) -> int:
        return _MIXER_TABLE[self][1]


_MIXER_TABLE: dict[MixerType, tuple[float, int]] = {
    MixerType.HAND_KNEADING: (0.3, 12),
    MixerType.FORK_MIXER: (0.4, 15),
    MixerType.STAND_MIXER_HOME: (0.5, 10),
    MixerType.STAND_MIXER_PRO: (0.7, 8),
    MixerType.SPIRAL_MIXER: (0.9, 6),
}


__all__ = [
    "DoughStyle",
    "StyleProfile",
    "STYLE_PROFILES",
    "get_style_profile",
    "MixerType",
]
